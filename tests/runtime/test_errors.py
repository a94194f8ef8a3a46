"""
Unit tests for the error model.

Tests the error hierarchy, string and dict forms, and the classification of
API error payloads.
"""

import pytest

from wikiapi_client.runtime.errors import (
    AuthError,
    AuthFailure,
    ConfigurationError,
    DecodeError,
    ErrorCode,
    MissingCapabilityTokenError,
    NetworkError,
    ServerError,
    TransportError,
    UnauthorizedError,
    WikiApiError,
    error_from_response,
)


class TestWikiApiError:
    """Tests for the base error."""

    def test_message_and_code(self):
        """Test the string form starts with the code name."""
        err = WikiApiError("boom")
        assert str(err) == "[UNKNOWN] boom"
        assert err.message == "boom"
        assert err.code is ErrorCode.UNKNOWN

    def test_details_and_cause_in_string(self):
        """Test details and cause are appended."""
        cause = ValueError("bad value")
        err = WikiApiError("boom", details={"field": "limit"}, cause=cause)
        text = str(err)
        assert "Details: {'field': 'limit'}" in text
        assert "Caused by: bad value" in text

    def test_to_dict(self):
        """Test dict form carries the numeric code."""
        err = ConfigurationError("bad setup", details={"x": 1}, cause=KeyError("k"))
        result = err.to_dict()
        assert result["code"] == ErrorCode.CONFIGURATION.value
        assert result["message"] == "bad setup"
        assert result["details"] == {"x": 1}
        assert "cause" in result

    def test_to_dict_omits_empty_parts(self):
        """Test empty details and missing cause are left out."""
        assert WikiApiError("x").to_dict() == {"code": ErrorCode.UNKNOWN.value, "message": "x"}


class TestHierarchy:
    """Tests for the error taxonomy."""

    @pytest.mark.parametrize("cls", [UnauthorizedError, NetworkError])
    def test_transport_subclasses(self, cls):
        """Test transport failures share a base."""
        err = cls("failed")
        assert isinstance(err, TransportError)
        assert isinstance(err, WikiApiError)

    def test_server_error_fields(self):
        """Test server error keeps status and server code."""
        err = ServerError("Service unavailable", status=503, server_code="maxlag")
        assert isinstance(err, TransportError)
        assert err.status == 503
        assert err.server_code == "maxlag"
        assert err.code is ErrorCode.SERVER_ERROR

    def test_missing_token_is_configuration_error(self):
        """Test a missing capability token is a setup problem."""
        err = MissingCapabilityTokenError()
        assert isinstance(err, ConfigurationError)
        assert err.code is ErrorCode.MISSING_CAPABILITY_TOKEN

    def test_unauthorized_default_message(self):
        """Test unauthorized error default message."""
        assert UnauthorizedError().message == "Unauthorized"

    def test_decode_error_is_not_transport_error(self):
        """Test decoding failures stay outside the transport family."""
        assert not isinstance(DecodeError("bad body"), TransportError)


class TestAuthError:
    """Tests for authentication errors."""

    @pytest.mark.parametrize("reason,code", [
        (AuthFailure.INVALID_CREDENTIALS, ErrorCode.INVALID_CREDENTIALS),
        (AuthFailure.DIALECT_UNSUPPORTED, ErrorCode.DIALECT_UNSUPPORTED),
        (AuthFailure.TRANSPORT_FAILURE, ErrorCode.AUTH_TRANSPORT_FAILURE),
        (AuthFailure.RETRY_EXHAUSTED, ErrorCode.AUTH_RETRY_EXHAUSTED),
    ])
    def test_reason_maps_to_code(self, reason, code):
        """Test each failure reason has its own code."""
        err = AuthError("failed", reason)
        assert err.reason is reason
        assert err.code is code

    def test_default_reason(self):
        """Test invalid credentials is the default reason."""
        assert AuthError("failed").reason is AuthFailure.INVALID_CREDENTIALS


class TestErrorFromResponse:
    """Tests for error payload classification."""

    def test_no_error(self):
        """Test a regular response yields no error."""
        assert error_from_response({"query": {}}) is None

    def test_non_dict_response(self):
        """Test non-dict input yields no error."""
        assert error_from_response([]) is None

    @pytest.mark.parametrize("code", [
        "assertuserfailed", "assertbotfailed", "assertnameduserfailed", "badtoken", "notloggedin",
    ])
    def test_expired_login_codes(self, code):
        """Test expired-login codes map to UnauthorizedError."""
        err = error_from_response({"error": {"code": code, "info": "Please log in"}})
        assert isinstance(err, UnauthorizedError)
        assert err.message == "Please log in"
        assert err.details["server_code"] == code

    def test_other_code(self):
        """Test other codes map to ServerError."""
        err = error_from_response({"error": {"code": "maxlag", "info": "Waiting"}}, status=200)
        assert isinstance(err, ServerError)
        assert not isinstance(err, UnauthorizedError)
        assert err.server_code == "maxlag"
        assert err.status == 200

    def test_legacy_star_info(self):
        """Test the info text may live under '*'."""
        err = error_from_response({"error": {"code": "internal_api_error", "*": "Oops"}})
        assert err.message == "Oops"

    def test_non_dict_error(self):
        """Test a bare error string."""
        err = error_from_response({"error": "broken"}, status=500)
        assert isinstance(err, ServerError)
        assert err.status == 500
        assert err.message == "broken"
