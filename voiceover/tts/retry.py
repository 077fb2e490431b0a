"""Retry policy for asynchronous provider calls.

Responsibilities:
- Classify provider failures as retryable or fatal.
- Re-invoke retryable calls with exponential or provider-suggested backoff.
- Translate terminal failures into user-facing narration errors.
"""

from __future__ import annotations

import asyncio
import math
import re
from collections.abc import Awaitable, Callable
from typing import TypeVar

from loguru import logger

from ..errors import (
    InvalidCredentialError,
    NarrationError,
    ProviderCallError,
    QuotaExceededError,
    RetriesExhaustedError,
)

_Result = TypeVar("_Result")

RETRYABLE = "retryable"
INVALID_CREDENTIAL = "invalid_credential"
QUOTA_EXCEEDED = "quota_exceeded"
FATAL = "fatal"

_RETRYABLE_FAILURE_KINDS = frozenset({"rate_limited", "unavailable", "timeout"})
_RETRYABLE_MESSAGE_TOKENS = ("503", "UNAVAILABLE", "overloaded", "429", "RESOURCE_EXHAUSTED")
_RETRY_HINT_PATTERN = re.compile(r"retry in ([\d.]+)s", re.IGNORECASE)

_CREDENTIAL_HINT = "Pass a valid Gemini API key via `--api-key`, config `api_key`, or `GEMINI_API_KEY`."
_QUOTA_HINT = "Check the provider plan and billing details, or retry later."
_RETRY_HINT = "The provider is busy; retry later or lower `--batch-size`."


def suggested_retry_delay_ms(message: str) -> int | None:
    """Return the provider-suggested wait from `retry in <seconds>s`, in milliseconds."""

    match = _RETRY_HINT_PATTERN.search(message)
    if match is None:
        return None
    try:
        seconds = float(match.group(1))
    except ValueError:
        return None
    return int(math.ceil(seconds * 1000))


def classify_failure(exc: BaseException) -> str:
    """Classify one failed attempt.

    Provider errors carrying a `failure_kind` are classified from that metadata;
    other exceptions are classified from well-known message signals.
    """

    if isinstance(exc, TimeoutError | asyncio.TimeoutError):
        return RETRYABLE

    failure_kind = getattr(exc, "failure_kind", None)
    if failure_kind == "invalid_api_key":
        return INVALID_CREDENTIAL
    if failure_kind == "quota_exhausted":
        return QUOTA_EXCEEDED
    if failure_kind in _RETRYABLE_FAILURE_KINDS:
        return RETRYABLE

    message = str(exc)
    if "api key not valid" in message.lower():
        return INVALID_CREDENTIAL
    if _is_quota_message(message) and suggested_retry_delay_ms(message) is None:
        return QUOTA_EXCEEDED
    if any(token in message for token in _RETRYABLE_MESSAGE_TOKENS):
        return RETRYABLE
    return FATAL


def _is_quota_message(message: str) -> bool:
    """Return whether a failure message names a quota or billing cutoff."""

    lowered = message.lower()
    return "quota" in lowered or "billing" in lowered


class RetryingInvoker:
    """Invoke an async operation with bounded, classified retries.

    Attributes:
        max_retries: Maximum number of attempts, counting the first one.
        initial_delay_ms: First backoff delay; doubled after every backoff wait.
        timeout_seconds: Optional per-attempt timeout; a timeout is retryable.
    """

    def __init__(
        self,
        max_retries: int = 3,
        initial_delay_ms: int = 2000,
        *,
        timeout_seconds: float | None = None,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        """Initialize retry budget, backoff base, and injectable sleeper."""

        if max_retries <= 0:
            raise ValueError("`max_retries` must be a positive integer.")
        self.max_retries = max_retries
        self.initial_delay_ms = initial_delay_ms
        self.timeout_seconds = timeout_seconds
        self._sleep = sleep

    async def invoke(self, operation: Callable[[], Awaitable[_Result]]) -> _Result:
        """Run `operation` until it succeeds, fails fatally, or exhausts retries."""

        delay_ms = self.initial_delay_ms
        attempt = 0
        while True:
            attempt += 1
            try:
                return await self._attempt(operation)
            except Exception as exc:
                failure = classify_failure(exc)
                if failure != RETRYABLE:
                    logger.error(
                        "Provider call failed with non-retryable error after {} attempt(s): {}",
                        attempt,
                        exc,
                    )
                    if isinstance(exc, NarrationError):
                        raise
                    raise self._fatal_error(failure, exc) from exc
                if attempt >= self.max_retries:
                    logger.error(
                        "Provider call failed after {} attempt(s): {}", attempt, exc
                    )
                    raise self._exhausted_error(exc, attempt) from exc

                wait_ms = suggested_retry_delay_ms(str(exc))
                if wait_ms is None:
                    wait_ms = delay_ms
                    delay_ms *= 2
                logger.warning(
                    "Provider call failed with retryable error: {}. "
                    "Retrying in {}s... (attempt {}/{})",
                    exc,
                    wait_ms / 1000,
                    attempt,
                    self.max_retries,
                )
                await self._sleep(wait_ms / 1000)

    async def _attempt(self, operation: Callable[[], Awaitable[_Result]]) -> _Result:
        """Run one attempt, bounded by the per-attempt timeout when configured."""

        if self.timeout_seconds is None:
            return await operation()
        return await asyncio.wait_for(operation(), timeout=self.timeout_seconds)

    @staticmethod
    def _fatal_error(failure: str, exc: Exception) -> NarrationError:
        """Translate a fatal classification into a user-facing error."""

        if failure == INVALID_CREDENTIAL:
            return InvalidCredentialError(
                f"The provider rejected the API key: {exc}", hint=_CREDENTIAL_HINT
            )
        if failure == QUOTA_EXCEEDED:
            return QuotaExceededError(
                f"Provider usage quota exceeded: {exc}", hint=_QUOTA_HINT
            )
        return ProviderCallError(f"Provider call failed: {exc}")

    @staticmethod
    def _exhausted_error(exc: Exception, attempts: int) -> NarrationError:
        """Translate a retryable failure that outlived the retry budget."""

        if _is_quota_message(str(exc)):
            return QuotaExceededError(
                f"Provider usage quota exceeded after {attempts} attempt(s): {exc}",
                hint=_QUOTA_HINT,
            )
        return RetriesExhaustedError(
            f"Provider call failed after {attempts} attempt(s): {exc}",
            attempts=attempts,
            hint=_RETRY_HINT,
        )
