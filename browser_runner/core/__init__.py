"""Core infrastructure module."""

from .enums import (
    ConnectionStatus,
    ErrorCode,
    ErrorSeverity,
    RunStatus,
    RunTrigger,
    RunType,
    SessionStatus,
)
from .error_classifier import ClassifiedError, classify
from .exceptions import (
    ActionNotApplicableError,
    ArchiveNotReadyError,
    BrowserConfigNotFoundError,
    ConcurrentExecutionError,
    ConfigurationError,
    CookieFormatError,
    DatabaseError,
    DatabaseNotConnectedError,
    DatabasePoolTimeoutError,
    ElementNotFoundError,
    InteractionError,
    InvalidTransitionError,
    PayloadValidationError,
    RunEngineError,
    SessionUnavailableError,
    UnknownRunTypeError,
    ValidationError,
)
from .retry import with_retry

__all__ = [
    "ConnectionStatus",
    "ErrorCode",
    "ErrorSeverity",
    "RunStatus",
    "RunTrigger",
    "RunType",
    "SessionStatus",
    "ClassifiedError",
    "classify",
    "ActionNotApplicableError",
    "ArchiveNotReadyError",
    "BrowserConfigNotFoundError",
    "ConcurrentExecutionError",
    "ConfigurationError",
    "CookieFormatError",
    "DatabaseError",
    "DatabaseNotConnectedError",
    "DatabasePoolTimeoutError",
    "ElementNotFoundError",
    "InteractionError",
    "InvalidTransitionError",
    "PayloadValidationError",
    "RunEngineError",
    "SessionUnavailableError",
    "UnknownRunTypeError",
    "ValidationError",
    "with_retry",
]
