"""Centralized enum definitions for the run engine."""

from enum import Enum
from typing import List


class RunStatus(str, Enum):
    """Lifecycle states of a browser automation run."""

    SCHEDULED = "SCHEDULED"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"
    RETRYING = "RETRYING"
    PROCESSED = "PROCESSED"

    @classmethod
    def values(cls) -> List[str]:
        """Return list of all enum values."""
        return [e.value for e in cls]


class RunType(str, Enum):
    """Browser-driven action kinds a run can execute."""

    FIND_CONNECTIONS = "FIND_CONNECTIONS"
    SEND_CONNECTION_REQUEST = "SEND_CONNECTION_REQUEST"
    SEND_MESSAGE = "SEND_MESSAGE"
    FIND_COMPANY_PEOPLE = "FIND_COMPANY_PEOPLE"
    DOWNLOAD_CONNECTIONS = "DOWNLOAD_CONNECTIONS"
    GET_MESSAGES = "GET_MESSAGES"
    CHECK_CONNECTION_STATUS = "CHECK_CONNECTION_STATUS"
    GET_RECENT_POSTS = "GET_RECENT_POSTS"

    @classmethod
    def values(cls) -> List[str]:
        """Return list of all enum values."""
        return [e.value for e in cls]


class RunTrigger(str, Enum):
    """Who created a run."""

    MANUAL = "MANUAL"
    SCHEDULER = "SCHEDULER"


class SessionStatus(str, Enum):
    """Health of a captured browser session."""

    VALID = "VALID"
    INVALID = "INVALID"
    EXPIRED = "EXPIRED"

    @classmethod
    def values(cls) -> List[str]:
        """Return list of all enum values."""
        return [e.value for e in cls]


class ErrorCode(str, Enum):
    """Classified error codes persisted as a run error's type."""

    APPLICATION_ERROR = "APPLICATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    EXTERNAL_ERROR = "EXTERNAL_ERROR"
    NOT_APPLICABLE = "NOT_APPLICABLE"
    CONCURRENT_EXECUTION = "CONCURRENT_EXECUTION"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class ErrorSeverity(str, Enum):
    """Severity of a classified error."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ConnectionStatus(str, Enum):
    """Connection state between the session owner and a profile."""

    PENDING = "Pending"
    NOT_SENT = "Not Sent"
    ACCEPTED = "Accepted"
