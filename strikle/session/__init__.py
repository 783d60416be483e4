from .controller import SessionController, Phase

__all__ = ["SessionController", "Phase"]
