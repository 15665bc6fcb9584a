"""Rule Violations — the tagged result every pure rule function returns on failure.

Invariants:
    - A violation is a JSON-safe dict: status, error_code (FailureKind value), message
    - Rule functions return a violation or None — never raise, never mutate
"""

from transcript_registry.core.domain_types import FailureKind


def violation(kind: FailureKind, message: str, **details: object) -> dict:
    """Construct a standard violation dict."""
    return {
        "status": "error",
        "error_code": kind.value,
        "message": message,
        **details,
    }
