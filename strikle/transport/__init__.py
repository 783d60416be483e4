from .normalize import GuessOutcome, normalize_result, normalize_feedback, extract_outcome
from .base import Transport, RecordingTransport

__all__ = [
    "GuessOutcome", "normalize_result", "normalize_feedback", "extract_outcome",
    "Transport", "RecordingTransport",
]
