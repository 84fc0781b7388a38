"""
Unit tests for error module.

Tests all custom exception classes and status code mapping.
"""

import pytest
from sprint_refresh.errors import (
    ReportRefreshError,
    ConfigurationError,
    ValidationError,
    RequestFailure,
    AuthenticationError,
    PermissionDeniedError,
    TransportFailure,
    ParseFailure,
    SprintNotFound,
    ReportBlockNotFound,
    map_status_code_to_error
)


class TestReportRefreshError:
    """Test base ReportRefreshError class."""

    def test_base_error_creation(self):
        """Test creating base error with message."""
        error = ReportRefreshError("Test error message")
        assert str(error) == "Test error message"
        assert error.status_code is None

    def test_base_error_with_status_code(self):
        """Test base error with status code."""
        error = ReportRefreshError("Test error", status_code=500)
        assert error.status_code == 500
        assert "[500]" in str(error)

    def test_to_dict(self):
        """Test dictionary form of the error."""
        error = ReportRefreshError("Boom", status_code=502, details={'a': 1})
        data = error.to_dict()
        assert data['error'] == 'ReportRefreshError'
        assert data['status_code'] == 502
        assert data['message'] == 'Boom'
        assert data['details'] == "{'a': 1}"


class TestConfigurationError:
    """Test ConfigurationError and ValidationError."""

    def test_configuration_error(self):
        error = ConfigurationError("AZURE_DEVOPS_PAT environment variable is required")
        assert isinstance(error, ReportRefreshError)
        assert "AZURE_DEVOPS_PAT" in str(error)
        assert error.status_code is None

    def test_validation_error_is_configuration_error(self):
        error = ValidationError("Iteration path cannot be empty")
        assert isinstance(error, ConfigurationError)


class TestRequestFailure:
    """Test RequestFailure (non-2xx responses)."""

    def test_carries_status_and_body(self):
        """Test that status code and raw body are kept."""
        error = RequestFailure(status_code=404, body='{"message": "not here"}')
        assert error.status_code == 404
        assert error.body == '{"message": "not here"}'
        assert "404" in str(error)
        assert "not here" in str(error)

    def test_authentication_error(self):
        """Test AuthenticationError (401)."""
        error = AuthenticationError(body="denied")
        assert isinstance(error, RequestFailure)
        assert error.status_code == 401
        assert error.body == "denied"
        assert "authentication failed" in str(error).lower()
        assert "AZURE_DEVOPS_PAT" in str(error)

    def test_permission_denied_error(self):
        """Test PermissionDeniedError (403)."""
        error = PermissionDeniedError()
        assert isinstance(error, RequestFailure)
        assert error.status_code == 403
        assert "permission denied" in str(error).lower()


class TestOtherErrors:
    """Test transport, parse and lookup errors."""

    def test_transport_failure(self):
        cause = ConnectionError("refused")
        error = TransportFailure("Could not reach Azure DevOps", original_error=cause)
        assert error.original_error is cause
        assert error.status_code is None

    def test_parse_failure_keeps_body(self):
        error = ParseFailure(body="<html>oops</html>")
        assert error.body == "<html>oops</html>"
        assert "oops" in str(error)

    def test_parse_failure_truncates_preview(self):
        error = ParseFailure(body="x" * 1000)
        assert len(str(error)) < 300
        assert len(error.body) == 1000

    def test_sprint_not_found(self):
        error = SprintNotFound("Sprint 99", available=["Sprint 1"])
        assert error.specifier == "Sprint 99"
        assert "Sprint 99" in str(error)
        assert error.details['available'] == ["Sprint 1"]

    def test_report_block_not_found(self):
        error = ReportBlockNotFound("Sprint 7")
        assert error.sprint_name == "Sprint 7"
        assert 'Sprint "Sprint 7" not found in HTML' in str(error)


class TestErrorMapping:
    """Test map_status_code_to_error."""

    @pytest.mark.parametrize("status_code,error_class", [
        (401, AuthenticationError),
        (403, PermissionDeniedError),
    ])
    def test_specific_mappings(self, status_code, error_class):
        error = map_status_code_to_error(status_code, body="b")
        assert type(error) is error_class
        assert error.body == "b"

    @pytest.mark.parametrize("status_code", [400, 404, 429, 500, 503])
    def test_generic_mapping(self, status_code):
        error = map_status_code_to_error(status_code, body="body text")
        assert type(error) is RequestFailure
        assert error.status_code == status_code
        assert error.body == "body text"
