"""Tests for typed run payloads."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from browser_runner.core.enums import RunType
from browser_runner.core.exceptions import PayloadValidationError
from browser_runner.models.payloads import (
    PAYLOAD_MODELS,
    FindCompanyPeoplePayload,
    FindConnectionsPayload,
    SendConnectionRequestPayload,
    parse_payload,
)


class TestParsePayload:
    """Tests for parse_payload."""

    def test_every_run_type_has_a_model(self):
        """Test the payload table is exhaustive over run types."""
        assert set(PAYLOAD_MODELS) == set(RunType)

    def test_camel_case_keys(self):
        """Test camelCase JSON keys populate snake_case fields."""
        payload = parse_payload(
            RunType.SEND_CONNECTION_REQUEST,
            '{"profileUrl": "https://www.linkedin.com/in/jane", "message": "Hi", "dryRun": true}',
        )

        assert isinstance(payload, SendConnectionRequestPayload)
        assert payload.profile_url == "https://www.linkedin.com/in/jane"
        assert payload.message == "Hi"
        assert payload.dry_run is True

    def test_defaults(self):
        """Test optional fields default sensibly."""
        payload = parse_payload(
            RunType.SEND_CONNECTION_REQUEST, {"profileUrl": "https://www.linkedin.com/in/jane"}
        )

        assert payload.message is None
        assert payload.dry_run is False

    def test_empty_payload_for_type_without_required_fields(self):
        """Test FIND_CONNECTIONS accepts a missing payload."""
        payload = parse_payload(RunType.FIND_CONNECTIONS, None)

        assert isinstance(payload, FindConnectionsPayload)
        assert payload.max_results is None

    def test_missing_required_field(self):
        """Test a missing profileUrl is rejected with field details."""
        with pytest.raises(PayloadValidationError) as exc_info:
            parse_payload(RunType.SEND_MESSAGE, '{"message": "hello"}')

        errors = exc_info.value.details["errors"]
        assert any(error["loc"] == ["profileUrl"] for error in errors)

    def test_relative_profile_url_rejected(self):
        """Test profile URLs must be absolute."""
        with pytest.raises(PayloadValidationError):
            parse_payload(RunType.GET_MESSAGES, {"profileUrl": "/in/jane"})

    def test_invalid_json(self):
        """Test non-JSON payloads are rejected."""
        with pytest.raises(PayloadValidationError) as exc_info:
            parse_payload(RunType.GET_MESSAGES, "{not json")

        assert "not valid JSON" in str(exc_info.value.details["errors"])

    def test_non_object_json(self):
        """Test JSON arrays are rejected."""
        with pytest.raises(PayloadValidationError):
            parse_payload(RunType.GET_MESSAGES, "[1, 2]")

    def test_company_name_is_stripped(self):
        """Test company names lose surrounding whitespace and slashes."""
        payload = parse_payload(RunType.FIND_COMPANY_PEOPLE, {"companyName": " /acme-corp/ "})

        assert isinstance(payload, FindCompanyPeoplePayload)
        assert payload.company_name == "acme-corp"

    def test_max_results_must_be_positive(self):
        """Test maxResults below 1 is rejected."""
        with pytest.raises(PayloadValidationError):
            parse_payload(RunType.FIND_CONNECTIONS, {"maxResults": 0})

    def test_unknown_keys_ignored(self):
        """Test extra keys do not fail validation."""
        payload = parse_payload(RunType.DOWNLOAD_CONNECTIONS, {"dryRun": True, "extra": 1})

        assert payload.dry_run is True

    def test_validation_error_is_application_error(self):
        """Test payload errors classify as critical application errors."""
        with pytest.raises(PayloadValidationError) as exc_info:
            parse_payload(RunType.SEND_MESSAGE, {})

        assert exc_info.value.code.value == "APPLICATION_ERROR"
        assert exc_info.value.severity.value == "critical"
