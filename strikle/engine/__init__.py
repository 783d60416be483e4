from .entity import Entity, ALL_ATTRIBUTES, NUMERIC_THRESHOLDS, check_attributes
from .scoring import Result, Feedback, compare_attribute, complete_feedback, score, is_solved
from .constraints import drop_guess, filter_candidates, filter_report, matches
from .validation import validate_result, invalid_attributes
from .errors import (
    StrikleError,
    MalformedEntityError,
    NoCandidatesError,
    FeedbackNormalizationError,
    EmptyFilterResult,
    SelectorUnavailableError,
    SessionError,
)

__all__ = [
    "Entity", "ALL_ATTRIBUTES", "NUMERIC_THRESHOLDS", "check_attributes",
    "Result", "Feedback", "compare_attribute", "complete_feedback", "score", "is_solved",
    "drop_guess", "filter_candidates", "filter_report", "matches", "validate_result", "invalid_attributes",
    "StrikleError", "MalformedEntityError", "NoCandidatesError",
    "FeedbackNormalizationError", "EmptyFilterResult", "SelectorUnavailableError",
    "SessionError",
]
