"""Map arbitrary failures onto classified, persistable errors.

``classify`` is pure: it never logs or raises, so the runner can call it from
its failure path and log once with the result.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from browser_runner.constants import (
    REDIRECT_LOOP_SIGNATURE,
    SESSION_INVALID_MESSAGE,
    SESSION_INVALID_REFERENCE,
)
from browser_runner.core.enums import ErrorCode, ErrorSeverity
from browser_runner.core.exceptions import RunEngineError


@dataclass(frozen=True)
class ClassifiedError:
    """Normalized failure record."""

    code: ErrorCode
    severity: ErrorSeverity
    message: str
    details: str = ""
    reference: Optional[str] = None
    source: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def invalidates_session(self) -> bool:
        """Whether this failure means the captured login session is dead."""
        return self.reference == SESSION_INVALID_REFERENCE

    @property
    def is_critical(self) -> bool:
        """Whether severity is critical."""
        return self.severity is ErrorSeverity.CRITICAL

    def to_dict(self) -> Dict[str, Any]:
        """Convert classified error to dictionary."""
        return {
            "code": self.code.value,
            "severity": self.severity.value,
            "reference": self.reference,
            "message": self.message,
            "details": self.details,
            "source": self.source,
        }


def _describe(raw: BaseException) -> str:
    text = str(raw).strip()
    return text or raw.__class__.__name__


def _classify_general(raw: Any) -> ClassifiedError:
    if isinstance(raw, RunEngineError):
        details = raw.message
        if raw.details:
            details = f"{raw.message}: {json.dumps(raw.details, default=str)}"
        return ClassifiedError(
            code=raw.code,
            severity=raw.severity,
            message=raw.message,
            details=details,
            reference=raw.reference,
            source=raw.__class__.__name__,
            extra=dict(raw.details),
        )

    if isinstance(raw, PlaywrightTimeoutError):
        text = _describe(raw)
        return ClassifiedError(
            code=ErrorCode.EXTERNAL_ERROR,
            severity=ErrorSeverity.MEDIUM,
            message=text.splitlines()[0],
            details=text,
            source="TimeoutError",
        )

    if isinstance(raw, PlaywrightError):
        text = _describe(raw)
        return ClassifiedError(
            code=ErrorCode.EXTERNAL_ERROR,
            severity=ErrorSeverity.MEDIUM,
            message=text.splitlines()[0],
            details=text,
            source=raw.__class__.__name__,
        )

    if isinstance(raw, BaseException):
        text = _describe(raw)
        return ClassifiedError(
            code=ErrorCode.INTERNAL_ERROR,
            severity=ErrorSeverity.HIGH,
            message=text.splitlines()[0],
            details=text,
            source=raw.__class__.__name__,
        )

    text = "" if raw is None else str(raw)
    return ClassifiedError(
        code=ErrorCode.UNKNOWN_ERROR,
        severity=ErrorSeverity.HIGH,
        message=text or "Unknown error",
        details=text,
        source=type(raw).__name__,
    )


def classify(raw: Any) -> ClassifiedError:
    """
    Classify a failure.

    A redirect-loop navigation failure anywhere in the message or details is
    the site's symptom of an invalidated login and is always classified as
    ``EXTERNAL_ERROR`` / ``S001`` / critical. Every other failure keeps its
    original message and details.

    Args:
        raw: Exception or any other value that signalled a failure

    Returns:
        Classified error
    """
    general = _classify_general(raw)

    if REDIRECT_LOOP_SIGNATURE in general.details or REDIRECT_LOOP_SIGNATURE in general.message:
        return ClassifiedError(
            code=ErrorCode.EXTERNAL_ERROR,
            severity=ErrorSeverity.CRITICAL,
            message=SESSION_INVALID_MESSAGE,
            details=general.details or general.message,
            reference=SESSION_INVALID_REFERENCE,
            source=general.source,
            extra=general.extra,
        )

    return general
