"""Error Hierarchy — typed, categorized exceptions for all registry failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Codes are FailureKind values — one code per user-visible failure
    - Errors are raised BEFORE any state mutation: a raised call changed nothing
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with RegistryError base: FastAPI global handler catches all (ADR: uniform error shape)
    - Rule functions return violation dicts; error_from_violation() lifts the first one
      into the matching exception (ADR: pure rules, raising engine)
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from transcript_registry.core.domain_types import FailureKind, VALIDATION_FAILURES


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    CONFIGURATION = "configuration"
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    CAPACITY = "capacity"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DEPENDENCY = "dependency"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    operation: str | None = None
    caller: str | None = None
    transcript_id: int | None = None


class RegistryError(Exception):
    """Base exception for all registry errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "operation": self.context.operation,
                    "transcript_id": self.context.transcript_id,
                },
            }
        }


# ─── Configuration Errors (409) ─────────────────────────────────

class AlreadyConfiguredError(RegistryError):
    """Fee recipient already set — it can only be configured once."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Fee recipient is already configured",
            FailureKind.ALREADY_CONFIGURED.value, ErrorCategory.CONFIGURATION,
            ErrorSeverity.WARNING, context, 409,
        )


class NotConfiguredError(RegistryError):
    """Fee recipient not set yet — issuance and fee changes are blocked."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Fee recipient is not configured",
            FailureKind.NOT_CONFIGURED.value, ErrorCategory.CONFIGURATION,
            ErrorSeverity.WARNING, context, 409,
        )


# ─── Authorization Errors (403) ─────────────────────────────────

class UnauthorizedIssuerError(RegistryError):
    """Caller is not on the issuer allow-list."""
    def __init__(self, caller: str, context: ErrorContext | None = None):
        super().__init__(
            f"'{caller}' is not an authorized issuer",
            FailureKind.UNAUTHORIZED_ISSUER.value, ErrorCategory.AUTHORIZATION,
            ErrorSeverity.ERROR, context, 403,
        )
        self.caller = caller


class UnauthorizedError(RegistryError):
    """Caller does not hold the capability the operation requires."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message,
            FailureKind.UNAUTHORIZED.value, ErrorCategory.AUTHORIZATION,
            ErrorSeverity.ERROR, context, 403,
        )


# ─── Validation Errors (400) ────────────────────────────────────

class TranscriptValidationError(RegistryError):
    """A transcript field violated its constraint."""
    def __init__(
        self, kind: FailureKind, message: str, field: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, kind.value, ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.kind = kind
        self.field = field


# ─── Capacity / Lookup Errors ───────────────────────────────────

class MaxExceededError(RegistryError):
    """Identifier counter reached max_transcripts."""
    def __init__(self, max_transcripts: int, context: ErrorContext | None = None):
        super().__init__(
            f"Transcript limit reached ({max_transcripts})",
            FailureKind.MAX_EXCEEDED.value, ErrorCategory.CAPACITY,
            ErrorSeverity.ERROR, context, 409,
        )
        self.max_transcripts = max_transcripts


class TranscriptNotFoundError(RegistryError):
    """No transcript exists at the requested identifier."""
    def __init__(self, transcript_id: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.transcript_id = transcript_id
        super().__init__(
            f"Transcript {transcript_id} not found",
            FailureKind.NOT_FOUND.value, ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class LedgerTransferFailedError(RegistryError):
    """Ledger refused or failed the issuance fee transfer."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Ledger transfer failed: {message}",
            FailureKind.LEDGER_TRANSFER_FAILED.value, ErrorCategory.DEPENDENCY,
            ErrorSeverity.CRITICAL, context, 502,
        )


class DatabaseError(RegistryError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


# ─── Violation → Exception ──────────────────────────────────────

def error_from_violation(
    violation: dict, context: ErrorContext | None = None,
) -> RegistryError:
    """Lift a rule violation dict into its typed exception."""
    kind = FailureKind(violation["error_code"])
    message = violation.get("message", kind.value)
    if kind in VALIDATION_FAILURES:
        return TranscriptValidationError(
            kind, message, violation.get("field", ""), context,
        )
    if kind == FailureKind.ALREADY_CONFIGURED:
        return AlreadyConfiguredError(context)
    if kind == FailureKind.NOT_CONFIGURED:
        return NotConfiguredError(context)
    if kind == FailureKind.UNAUTHORIZED_ISSUER:
        return UnauthorizedIssuerError(violation.get("caller", ""), context)
    if kind == FailureKind.UNAUTHORIZED:
        return UnauthorizedError(message, context)
    if kind == FailureKind.MAX_EXCEEDED:
        return MaxExceededError(violation.get("max_transcripts", 0), context)
    if kind == FailureKind.NOT_FOUND:
        return TranscriptNotFoundError(violation.get("transcript_id", -1), context)
    return LedgerTransferFailedError(message, context)
