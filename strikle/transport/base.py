from __future__ import annotations
from typing import List, Protocol

from strikle.engine import Entity


class Transport(Protocol):
    """Whatever carries a guess to the game. Feedback comes back separately."""

    async def send_guess(self, entity: Entity) -> None:
        ...


class RecordingTransport:
    """Keeps every guess it is asked to send; used by simulations and tests."""

    def __init__(self):
        self.sent: List[Entity] = []

    async def send_guess(self, entity: Entity) -> None:
        self.sent.append(entity)
