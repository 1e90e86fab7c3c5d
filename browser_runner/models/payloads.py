"""Typed run payloads, discriminated by run type.

Payloads arrive as serialized JSON with camelCase keys; each run type maps to
exactly one model and a payload is rejected before dispatch if it does not fit.
"""

import json
from typing import Any, Dict, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from browser_runner.core.enums import RunType
from browser_runner.core.exceptions import PayloadValidationError


class RunPayload(BaseModel):
    """Base for all run payloads."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class ProfilePayload(RunPayload):
    """Payload naming a single profile."""

    profile_url: str = Field(min_length=1)

    @field_validator("profile_url")
    @classmethod
    def validate_profile_url(cls, v: str) -> str:
        """Require an absolute http(s) URL."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("profileUrl must be an absolute http(s) URL")
        return v


class SendConnectionRequestPayload(ProfilePayload):
    """Payload for SEND_CONNECTION_REQUEST."""

    message: Optional[str] = None
    dry_run: bool = False


class SendMessagePayload(ProfilePayload):
    """Payload for SEND_MESSAGE."""

    message: str = Field(min_length=1)
    dry_run: bool = False


class FindCompanyPeoplePayload(RunPayload):
    """Payload for FIND_COMPANY_PEOPLE."""

    company_name: str = Field(min_length=1)
    dry_run: bool = False

    @field_validator("company_name")
    @classmethod
    def strip_company_name(cls, v: str) -> str:
        """Strip surrounding whitespace and slashes."""
        v = v.strip().strip("/")
        if not v:
            raise ValueError("companyName must not be blank")
        return v


class FindConnectionsPayload(RunPayload):
    """Payload for FIND_CONNECTIONS."""

    max_results: Optional[int] = Field(default=None, ge=1)


class DownloadConnectionsPayload(RunPayload):
    """Payload for DOWNLOAD_CONNECTIONS."""

    dry_run: bool = False


AnyPayload = Union[
    ProfilePayload,
    SendConnectionRequestPayload,
    SendMessagePayload,
    FindCompanyPeoplePayload,
    FindConnectionsPayload,
    DownloadConnectionsPayload,
]

PAYLOAD_MODELS: Dict[RunType, Type[RunPayload]] = {
    RunType.FIND_CONNECTIONS: FindConnectionsPayload,
    RunType.SEND_CONNECTION_REQUEST: SendConnectionRequestPayload,
    RunType.SEND_MESSAGE: SendMessagePayload,
    RunType.FIND_COMPANY_PEOPLE: FindCompanyPeoplePayload,
    RunType.DOWNLOAD_CONNECTIONS: DownloadConnectionsPayload,
    RunType.GET_MESSAGES: ProfilePayload,
    RunType.CHECK_CONNECTION_STATUS: ProfilePayload,
    RunType.GET_RECENT_POSTS: ProfilePayload,
}


def parse_payload(run_type: RunType, raw: Union[str, bytes, Dict[str, Any], None]) -> RunPayload:
    """
    Deserialize and validate a run payload.

    Args:
        run_type: Run type selecting the payload model
        raw: Serialized JSON, an already-decoded dict, or None

    Returns:
        Validated payload model

    Raises:
        PayloadValidationError: If the payload is not JSON or does not fit the model
    """
    model = PAYLOAD_MODELS[run_type]

    if raw is None or raw == "":
        data: Any = {}
    elif isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise PayloadValidationError(run_type.value, f"payload is not valid JSON: {e}")
    else:
        data = raw

    if not isinstance(data, dict):
        raise PayloadValidationError(run_type.value, "payload must be a JSON object")

    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise PayloadValidationError(
            run_type.value,
            [{"loc": list(err["loc"]), "msg": err["msg"]} for err in e.errors()],
        )
