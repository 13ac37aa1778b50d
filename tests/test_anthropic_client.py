import asyncio
from unittest.mock import AsyncMock, patch

import pytest
import requests

from candidate_eval.services.anthropic_client import (
    RATE_LIMIT_MESSAGE,
    AnthropicClient,
    RetryState,
    message_text,
    next_retry_decision,
)
from candidate_eval.utils.exceptions import ConfigurationError, ResponseFormatError, UpstreamError, UpstreamRateLimitedError
from conftest import make_response, make_settings


def _client(sleep=None, **kwargs):
    return AnthropicClient(api_key="test-key", sleep=sleep or AsyncMock(), **kwargs)


class TestRetryPolicy:
    """Test cases for the pure retry decision function"""

    def test_success(self):
        assert next_retry_decision(200, {}, 0, 10).state == RetryState.SUCCEEDED

    @pytest.mark.parametrize("attempt, expected", [(0, 10.0), (1, 20.0), (2, 30.0)])
    def test_linear_backoff_without_header(self, attempt, expected):
        decision = next_retry_decision(429, {}, attempt, 10)
        assert decision.state == RetryState.WAITING
        assert decision.wait_seconds == expected

    def test_retry_after_header_wins(self):
        decision = next_retry_decision(429, {"Retry-After": "7"}, 2, 10)
        assert decision.wait_seconds == 7.0

    def test_unparsable_retry_after_falls_back(self):
        decision = next_retry_decision(429, {"retry-after": "soon"}, 0, 10)
        assert decision.wait_seconds == 10.0

    @pytest.mark.parametrize("status", [400, 401, 500, 529])
    def test_other_errors_are_terminal(self, status):
        assert next_retry_decision(status, {}, 0, 10).state == RetryState.FAILED_TERMINAL


class TestAnthropicClient:
    """Test cases for the retrying Messages API client"""

    @patch("candidate_eval.services.anthropic_client.requests.post")
    def test_success_returns_body_and_sends_headers(self, mock_post):
        mock_post.return_value = make_response(200, {"content": [{"type": "text", "text": "hi"}]})
        client = _client(model="claude-test")

        data = asyncio.run(client.create_message("PROMPT", 1024))

        assert data == {"content": [{"type": "text", "text": "hi"}]}
        _, kwargs = mock_post.call_args
        assert kwargs["headers"]["x-api-key"] == "test-key"
        assert kwargs["headers"]["anthropic-version"] == "2023-06-01"
        assert kwargs["headers"]["Content-Type"] == "application/json"
        assert kwargs["json"] == {
            "model": "claude-test",
            "max_tokens": 1024,
            "messages": [{"role": "user", "content": "PROMPT"}],
        }

    @patch("candidate_eval.services.anthropic_client.requests.post")
    def test_three_rate_limits_then_terminal_error(self, mock_post):
        mock_post.return_value = make_response(429, {"error": {"message": "slow down"}})
        sleep = AsyncMock()
        client = _client(sleep=sleep, backoff_unit=10.0)

        with pytest.raises(UpstreamRateLimitedError) as exc_info:
            asyncio.run(client.call_with_retry({"model": "m"}))

        assert exc_info.value.message == RATE_LIMIT_MESSAGE
        assert mock_post.call_count == 3
        assert [c.args[0] for c in sleep.await_args_list] == [10.0, 20.0, 30.0]

    @patch("candidate_eval.services.anthropic_client.requests.post")
    def test_explicit_attempt_limit_is_honoured(self, mock_post):
        mock_post.return_value = make_response(429, {})
        sleep = AsyncMock()

        with pytest.raises(UpstreamRateLimitedError):
            asyncio.run(_client(sleep=sleep).call_with_retry({}, max_attempts=1))
        assert mock_post.call_count == 1

        mock_post.reset_mock()
        with pytest.raises(UpstreamRateLimitedError):
            asyncio.run(_client(sleep=sleep).call_with_retry({}, max_attempts=0))
        mock_post.assert_not_called()

    @patch("candidate_eval.services.anthropic_client.requests.post")
    def test_rate_limit_then_success(self, mock_post):
        mock_post.side_effect = [
            make_response(429, {}, headers={"retry-after": "2"}),
            make_response(200, {"content": [{"text": "ok"}]}),
        ]
        sleep = AsyncMock()

        data = asyncio.run(_client(sleep=sleep).call_with_retry({}))

        assert data["content"][0]["text"] == "ok"
        sleep.assert_awaited_once_with(2.0)

    @patch("candidate_eval.services.anthropic_client.requests.post")
    def test_upstream_error_message_is_surfaced_without_retry(self, mock_post):
        mock_post.return_value = make_response(400, {"error": {"type": "invalid_request_error", "message": "bad image"}})
        sleep = AsyncMock()

        with pytest.raises(UpstreamError) as exc_info:
            asyncio.run(_client(sleep=sleep).call_with_retry({}))

        assert exc_info.value.message == "bad image"
        assert exc_info.value.details["status_code"] == 400
        assert mock_post.call_count == 1
        sleep.assert_not_awaited()

    @patch("candidate_eval.services.anthropic_client.requests.post")
    def test_upstream_error_without_message(self, mock_post):
        mock_post.return_value = make_response(503, ValueError("not json"))

        with pytest.raises(UpstreamError) as exc_info:
            asyncio.run(_client().call_with_retry({}))

        assert exc_info.value.message == "API Error (503)"

    @patch("candidate_eval.services.anthropic_client.requests.post")
    def test_transport_failure_is_not_retried(self, mock_post):
        mock_post.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(UpstreamError):
            asyncio.run(_client().call_with_retry({}))

        assert mock_post.call_count == 1

    def test_from_settings_requires_api_key(self):
        with pytest.raises(ConfigurationError) as exc_info:
            AnthropicClient.from_settings(make_settings(anthropic_api_key=None))
        assert exc_info.value.message == "API key not configured"

    def test_message_text(self):
        assert message_text({"content": [{"type": "text", "text": "hello"}]}) == "hello"
        with pytest.raises(ResponseFormatError):
            message_text({"content": []})
        with pytest.raises(ResponseFormatError):
            message_text({})
