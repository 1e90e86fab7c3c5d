"""Custom exception classes for the run engine."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from browser_runner.core.enums import ErrorCode, ErrorSeverity


class RunEngineError(Exception):
    """Base exception for the run engine.

    Carries the fields the error classifier needs so raising code decides the
    code and severity at the point the failure is understood best.
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    severity: ErrorSeverity = ErrorSeverity.HIGH

    def __init__(
        self,
        message: str,
        recoverable: bool = True,
        details: Optional[Dict[str, Any]] = None,
        code: Optional[ErrorCode] = None,
        severity: Optional[ErrorSeverity] = None,
        reference: Optional[str] = None,
    ):
        """
        Initialize run engine error.

        Args:
            message: Error message
            recoverable: Whether the error is recoverable with retry
            details: Additional error details
            code: Override for the class-level error code
            severity: Override for the class-level severity
            reference: Optional stable reference (e.g. "S001")
        """
        self.message = message
        self.recoverable = recoverable
        self.details = details or {}
        if code is not None:
            self.code = code
        if severity is not None:
            self.severity = severity
        self.reference = reference
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary."""
        return {
            "error": self.__class__.__name__,
            "code": self.code.value,
            "severity": self.severity.value,
            "reference": self.reference,
            "message": self.message,
            "recoverable": self.recoverable,
            "details": self.details,
            "timestamp": self.timestamp,
        }


# Validation Errors
class ValidationError(RunEngineError):
    """Run input is unusable; fatal for the run, no session impact."""

    code = ErrorCode.APPLICATION_ERROR
    severity = ErrorSeverity.CRITICAL

    def __init__(
        self,
        message: str = "Validation error",
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = dict(details or {})
        if field:
            details["field"] = field
        self.field = field
        super().__init__(message, recoverable=False, details=details)


class UnknownRunTypeError(ValidationError):
    """Run type has no matching page action."""

    def __init__(self, run_type: Any):
        self.run_type = run_type
        super().__init__(
            f"Unknown automation run type: {run_type}",
            field="type",
            details={"type": str(run_type)},
        )


class PayloadValidationError(ValidationError):
    """Run payload does not match the shape required by its type."""

    def __init__(self, run_type: str, errors: Any):
        super().__init__(
            f"Invalid payload for {run_type} run",
            field="payload",
            details={"type": run_type, "errors": errors},
        )


class CookieFormatError(ValidationError):
    """Stored cookie jar cannot be parsed."""

    def __init__(self, message: str = "Stored cookies are not a valid cookie list"):
        super().__init__(message, field="cookies")


class BrowserConfigNotFoundError(ValidationError):
    """Run references a browser config that does not exist."""

    def __init__(self, browser_config_id: Any):
        super().__init__(
            f"Browser config {browser_config_id} not found",
            field="browser_config_id",
            details={"browser_config_id": browser_config_id},
        )


class SessionUnavailableError(ValidationError):
    """Browser config session is not VALID; re-authentication is required."""

    def __init__(self, browser_config_id: Any, session_status: str):
        super().__init__(
            f"Browser session is {session_status}; re-authentication required",
            field="session_status",
            details={"browser_config_id": browser_config_id, "session_status": session_status},
        )


# Interaction Errors
class InteractionError(RunEngineError):
    """Page interaction failed in a way the site's markup explains."""

    code = ErrorCode.INTERNAL_ERROR
    severity = ErrorSeverity.HIGH


class ElementNotFoundError(InteractionError):
    """None of the controls an interaction can start from is on the page."""

    def __init__(
        self,
        message: str,
        selectors: List[str],
        details: Optional[Dict[str, Any]] = None,
    ):
        self.selectors = list(selectors)
        super().__init__(message, details={**(details or {}), "selectors": self.selectors})


class ActionNotApplicableError(InteractionError):
    """Action does not apply to the target (e.g. profile already connected)."""

    code = ErrorCode.NOT_APPLICABLE
    severity = ErrorSeverity.LOW

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, recoverable=False, details=details)


class ArchiveNotReadyError(InteractionError):
    """Requested data archive never became downloadable."""

    code = ErrorCode.EXTERNAL_ERROR
    severity = ErrorSeverity.MEDIUM

    def __init__(self, polls: int):
        super().__init__(
            f"Connections archive not ready after {polls} checks",
            details={"polls": polls},
        )


# Concurrency
class ConcurrentExecutionError(RunEngineError):
    """Two executions tried to drive the same browser session at once."""

    code = ErrorCode.CONCURRENT_EXECUTION
    severity = ErrorSeverity.HIGH

    def __init__(self, browser_config_id: Any):
        super().__init__(
            f"Browser config {browser_config_id} already has an active run; "
            "runs against one session must be serialized by the caller",
            recoverable=True,
            details={"browser_config_id": browser_config_id},
        )


class InvalidTransitionError(RunEngineError):
    """Run state machine transition is not allowed."""

    def __init__(self, run_id: Any, current: str, target: str):
        super().__init__(
            f"Run {run_id} cannot transition from {current} to {target}",
            recoverable=False,
            details={"run_id": run_id, "from": current, "to": target},
        )


# Configuration Errors
class ConfigurationError(RunEngineError):
    """Configuration error occurred."""

    code = ErrorCode.APPLICATION_ERROR
    severity = ErrorSeverity.HIGH

    def __init__(
        self,
        message: str = "Configuration error",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, recoverable=False, details=details)


# Database Errors
class DatabaseError(RunEngineError):
    """Base class for database-related errors."""

    def __init__(
        self,
        message: str = "Database error occurred",
        recoverable: bool = True,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, recoverable, details)


class DatabaseNotConnectedError(DatabaseError):
    """Raised when database operation attempted without connection."""

    def __init__(self):
        super().__init__(
            "Database connection is not established. Call connect() first.", recoverable=False
        )


class DatabasePoolTimeoutError(DatabaseError):
    """Raised when database connection pool is exhausted."""

    def __init__(self, timeout: float, pool_size: int):
        super().__init__(
            f"Database connection pool exhausted (timeout: {timeout}s, pool_size: {pool_size})",
            recoverable=True,
            details={"timeout": timeout, "pool_size": pool_size},
        )
