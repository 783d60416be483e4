"""
Error taxonomy for the solver.

Pure code (oracle, filter, selectors) raises only on broken input or misuse.
Degraded input (odd feedback shapes, contradictory feedback) is handled by the
fallbacks documented next to the code that applies them; the session
controller decides what ends a round.
"""


class StrikleError(Exception):
    """Base class for every error raised by this package."""


class MalformedEntityError(StrikleError):
    """An entity is missing a required attribute or carries a bad value."""


class NoCandidatesError(StrikleError):
    """A selector was asked for a guess with an empty candidate set."""


class FeedbackNormalizationError(StrikleError):
    """A raw feedback value matches none of the known wire shapes."""


class EmptyFilterResult(StrikleError):
    """Strict filtering left no candidate."""


class SelectorUnavailableError(StrikleError):
    """A selector cannot produce guesses right now (e.g. no model loaded)."""


class SessionError(StrikleError):
    """Round-fatal inconsistency detected by the session controller."""
