"""
Anthropic Messages API client with bounded retry on rate limiting.

Only HTTP 429 is retried. Any other failure is raised on the first attempt.
"""
import asyncio
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Union

import requests

from candidate_eval.utils.config import Settings, require_anthropic_key
from candidate_eval.utils.exceptions import ResponseFormatError, UpstreamError, UpstreamRateLimitedError
from candidate_eval.utils.logging_config import get_logger, PerformanceMonitor

logger = get_logger(__name__)

RATE_LIMIT_MESSAGE = "Rate limit exceeded after retries. Please try again later."

_LEADING_INT = re.compile(r"^\s*(\d+)")


class RetryState(str, Enum):
    ATTEMPTING = "attempting"
    WAITING = "waiting"
    SUCCEEDED = "succeeded"
    FAILED_TERMINAL = "failed_terminal"


@dataclass
class RetryDecision:
    state: RetryState
    wait_seconds: float = 0.0


def retry_after_seconds(headers: Mapping[str, str]) -> Optional[int]:
    value = None
    for key, v in headers.items():
        if key.lower() == "retry-after":
            value = v
            break
    if value is None:
        return None
    m = _LEADING_INT.match(str(value))
    return int(m.group(1)) if m else None


def next_retry_decision(status: int, headers: Mapping[str, str], attempt: int, backoff_unit: float) -> RetryDecision:
    """Map one response to the next state of the retry loop. ``attempt`` is zero-based."""
    if 200 <= status < 300:
        return RetryDecision(RetryState.SUCCEEDED)
    if status == 429:
        advised = retry_after_seconds(headers)
        wait = advised if advised is not None else (attempt + 1) * backoff_unit
        return RetryDecision(RetryState.WAITING, float(wait))
    return RetryDecision(RetryState.FAILED_TERMINAL)


def upstream_error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return f"API Error ({response.status_code})"


def message_text(data: Dict[str, Any]) -> str:
    """Text of the first content block of a Messages API response."""
    content = data.get("content") if isinstance(data, dict) else None
    if not content or not isinstance(content[0], dict) or not isinstance(content[0].get("text"), str):
        raise ResponseFormatError("Invalid response format")
    return content[0]["text"]


class AnthropicClient:
    def __init__(
        self,
        api_key: str,
        api_url: str = "https://api.anthropic.com/v1/messages",
        api_version: str = "2023-06-01",
        model: str = "claude-sonnet-4-20250514",
        timeout: float = 120.0,
        max_retries: int = 3,
        backoff_unit: float = 10.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.api_version = api_version
        self.model = model
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_unit = backoff_unit
        self.sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnthropicClient":
        return cls(
            api_key=require_anthropic_key(settings),
            api_url=settings.anthropic_api_url,
            api_version=settings.anthropic_version,
            model=settings.anthropic_model,
            timeout=settings.anthropic_timeout_seconds,
            max_retries=settings.max_retries,
            backoff_unit=settings.retry_backoff_seconds,
        )

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": self.api_version,
        }

    def _post(self, body: Dict[str, Any]) -> requests.Response:
        try:
            return requests.post(self.api_url, json=body, headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamError(f"Failed to reach Anthropic API: {e}", service_name="anthropic", cause=e) from e

    async def call_with_retry(self, body: Dict[str, Any], max_attempts: Optional[int] = None) -> Dict[str, Any]:
        if max_attempts is None:
            max_attempts = self.max_retries

        attempt = 0
        state = RetryState.ATTEMPTING
        while state == RetryState.ATTEMPTING and attempt < max_attempts:
            with PerformanceMonitor(f"anthropic_call_attempt_{attempt + 1}", logger, threshold_ms=30000):
                response = await asyncio.to_thread(self._post, body)

            decision = next_retry_decision(response.status_code, response.headers, attempt, self.backoff_unit)
            if decision.state == RetryState.SUCCEEDED:
                return response.json()
            if decision.state == RetryState.FAILED_TERMINAL:
                message = upstream_error_message(response)
                logger.error(f"Anthropic API error {response.status_code}: {message}")
                raise UpstreamError(message, service_name="anthropic", status_code=response.status_code)

            logger.warning(
                f"Rate limited by Anthropic API (attempt {attempt + 1}/{max_attempts}), "
                f"waiting {decision.wait_seconds:.1f}s"
            )
            await self.sleep(decision.wait_seconds)
            # WAITING always leads back to another attempt
            state = RetryState.ATTEMPTING
            attempt += 1

        logger.error(f"Anthropic API still rate limited after {max_attempts} attempts")
        raise UpstreamRateLimitedError(RATE_LIMIT_MESSAGE, attempts=max_attempts)

    async def create_message(self, content: Union[str, List[Dict[str, Any]]], max_tokens: int) -> Dict[str, Any]:
        body = {
            "model": self.model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": content}],
        }
        return await self.call_with_retry(body)
