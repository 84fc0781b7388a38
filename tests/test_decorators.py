"""
Unit tests for decorators module.

Tests error translation and execution logging.
"""

import logging

import pytest
import requests

from sprint_refresh.decorators import (
    handle_api_error,
    log_execution,
    api_operation
)
from sprint_refresh.errors import (
    ReportRefreshError,
    RequestFailure,
    TransportFailure
)


class TestHandleApiError:
    """Test handle_api_error decorator."""

    @pytest.mark.asyncio
    async def test_passes_result_through(self):
        @handle_api_error
        async def successful_function():
            return "success"

        assert await successful_function() == "success"

    @pytest.mark.asyncio
    async def test_refresh_errors_pass_through(self):
        """Test that our own errors are not wrapped."""
        @handle_api_error
        async def failing_function():
            raise RequestFailure(status_code=500, body="oops")

        with pytest.raises(RequestFailure) as exc_info:
            await failing_function()
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    @pytest.mark.parametrize("exception", [
        requests.exceptions.ConnectionError("refused"),
        requests.exceptions.Timeout("slow"),
        requests.exceptions.SSLError("bad cert"),
    ])
    async def test_requests_errors_become_transport_failures(self, exception):
        @handle_api_error
        async def failing_function():
            raise exception

        with pytest.raises(TransportFailure) as exc_info:
            await failing_function()
        assert exc_info.value.original_error is exception
        assert "failing_function" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_unexpected_errors_are_wrapped(self):
        @handle_api_error
        async def broken_function():
            raise KeyError("missing")

        with pytest.raises(ReportRefreshError) as exc_info:
            await broken_function()
        assert type(exc_info.value) is ReportRefreshError
        assert isinstance(exc_info.value.original_error, KeyError)

    @pytest.mark.asyncio
    async def test_called_once(self):
        """Test that failures are never retried."""
        call_count = 0

        @handle_api_error
        async def failing_function():
            nonlocal call_count
            call_count += 1
            raise requests.exceptions.ConnectionError("refused")

        with pytest.raises(TransportFailure):
            await failing_function()
        assert call_count == 1


class TestLogExecution:
    """Test log_execution decorator."""

    @pytest.mark.asyncio
    async def test_logs_entry_and_exit(self, caplog):
        @log_execution(level=logging.INFO)
        async def my_operation():
            return 42

        with caplog.at_level(logging.INFO, logger="sprint_refresh.decorators"):
            assert await my_operation() == 42

        assert "Calling my_operation" in caplog.text
        assert "my_operation completed successfully" in caplog.text

    @pytest.mark.asyncio
    async def test_logs_failure_and_reraises(self, caplog):
        @log_execution(level=logging.INFO)
        async def my_operation():
            raise ValueError("bad")

        with caplog.at_level(logging.INFO, logger="sprint_refresh.decorators"):
            with pytest.raises(ValueError):
                await my_operation()

        assert "my_operation failed with error: bad" in caplog.text


class TestApiOperationDecorator:
    """Test api_operation unified decorator."""

    @pytest.mark.asyncio
    async def test_operation_with_arguments(self):
        @api_operation()
        async def op_with_args(a, b, c=None):
            return f"{a}+{b}+{c}"

        assert await op_with_args(1, 2, c=3) == "1+2+3"

    @pytest.mark.asyncio
    async def test_operation_translates_errors(self):
        @api_operation()
        async def op():
            raise requests.exceptions.ConnectionError("down")

        with pytest.raises(TransportFailure):
            await op()

    def test_operation_preserves_function_name(self):
        @api_operation()
        async def my_operation():
            return "test"

        assert my_operation.__name__ == "my_operation"
