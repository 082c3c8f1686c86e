"""Error Hierarchy: typed, categorized exceptions for all expense tracker failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are expected control flow; infrastructure errors
      (500-level) are critical
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages: InternalError subclasses
      keep their detail in `detail`, never in the response

Design Decisions:
    - Single hierarchy with ExpenseTrackerError base: FastAPI global handler catches all
    - Authentication failures share one message per kind so the API is not an
      enumeration oracle (unknown email vs wrong password, bad vs expired token)
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ExpenseTrackerError(Exception):
    """Base exception for all expense tracker errors."""

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
            }
        }


# ─── Validation Errors (400) ────────────────────────────────────

class ValidationError(ExpenseTrackerError):
    """Caller supplied a value the domain rejects."""
    def __init__(
        self, message: str, field: str, code: str = "VALIDATION_ERROR",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field

    def to_response(self) -> dict:
        body = super().to_response()
        body["error"]["field"] = self.field
        return body


class InvalidCategoryError(ValidationError):
    def __init__(self, category: str, context: ErrorContext | None = None):
        super().__init__("Invalid category", "category", "INVALID_CATEGORY", context)
        self.rejected_category = category


class InvalidDateError(ValidationError):
    def __init__(self, value: str, context: ErrorContext | None = None):
        super().__init__(
            "Invalid date format, use YYYY-MM-DD", "date", "INVALID_DATE", context,
        )
        self.value = value


class InvalidAmountError(ValidationError):
    def __init__(self, message: str = "Amount must be a positive value with at most 2 decimals",
                 context: ErrorContext | None = None):
        super().__init__(message, "amount", "INVALID_AMOUNT", context)


class CredentialPolicyError(ValidationError):
    """Registration input outside the credential policy (name/password length, bcrypt limits)."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(message, field, "CREDENTIAL_POLICY", context)


# ─── Not Found (404) ────────────────────────────────────────────

class ResourceNotFoundError(ExpenseTrackerError):
    """Requested resource does not exist (or is not visible to the caller)."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ExpenseNotFoundError(ResourceNotFoundError):
    def __init__(self, expense_id: object, context: ErrorContext | None = None):
        super().__init__("Expense", str(expense_id), context)


class UserNotFoundError(ResourceNotFoundError):
    def __init__(self, user_id: object, context: ErrorContext | None = None):
        super().__init__("User", str(user_id), context)


# ─── Authentication (401) ───────────────────────────────────────

class AuthenticationError(ExpenseTrackerError):
    """Credentials or session token rejected."""
    def __init__(
        self, message: str, code: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class InvalidCredentialsError(AuthenticationError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__("Invalid email or password", "INVALID_CREDENTIALS", context)


class InvalidTokenError(AuthenticationError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__("Invalid or expired token", "INVALID_TOKEN", context)


# ─── Conflict (409) ─────────────────────────────────────────────

class ConflictError(ExpenseTrackerError):
    def __init__(self, message: str, code: str, context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class EmailAlreadyExistsError(ConflictError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__("Email already exists", "EMAIL_ALREADY_EXISTS", context)


# ─── Infrastructure Errors (500-level) ──────────────────────────

class InternalError(ExpenseTrackerError):
    """Unexpected failure. `detail` is for logs only."""
    def __init__(
        self, detail: str, code: str = "INTERNAL_ERROR",
        category: ErrorCategory = ErrorCategory.INTERNAL,
        context: ErrorContext | None = None, http_status: int = 500,
    ):
        super().__init__(
            "An unexpected error occurred", code, category,
            ErrorSeverity.CRITICAL, context, http_status,
        )
        self.detail = detail


class DatabaseError(InternalError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE, context, 503,
        )
        self.operation = operation
