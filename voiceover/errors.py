"""Domain exceptions for narration pipeline and CLI diagnostics.

Responsibilities:
- Provide one user-facing exception family for narration failures.
- Keep failure kinds stable so CLI rendering and tests can rely on them.
"""

from __future__ import annotations


class PipelineStageError(RuntimeError):
    """Raised when a specific pipeline stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped pipeline error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class NarrationError(RuntimeError):
    """Base class for classified narration failures surfaced to callers."""

    kind = "narration_error"

    def __init__(self, detail: str, *, hint: str | None = None) -> None:
        """Initialize a classified narration failure."""

        super().__init__(detail)
        self.detail = detail
        self.hint = hint


class RateLimitedError(NarrationError):
    """Raised when the provider keeps throttling or reporting overload."""

    kind = "rate_limited"


class RetriesExhaustedError(RateLimitedError):
    """Raised when a retryable failure persists for the whole retry budget."""

    kind = "retries_exhausted"

    def __init__(self, detail: str, *, attempts: int, hint: str | None = None) -> None:
        """Initialize with the number of attempts that were made."""

        super().__init__(detail, hint=hint)
        self.attempts = attempts


class InvalidCredentialError(NarrationError):
    """Raised when the provider rejects the configured API key."""

    kind = "invalid_credential"


class QuotaExceededError(NarrationError):
    """Raised when the provider reports billing or quota exhaustion."""

    kind = "quota_exceeded"


class ProviderCallError(NarrationError):
    """Raised for provider failures that match no known classification."""

    kind = "provider_error"


class AllContentFilteredError(NarrationError):
    """Raised when no chunk produced any audio samples."""

    kind = "all_content_filtered"


class BatchFailureError(NarrationError):
    """Raised when one chunk of a batch fails and aborts the whole run."""

    kind = "batch_failure"

    def __init__(
        self,
        *,
        batch_number: int,
        total_batches: int,
        cause: BaseException,
    ) -> None:
        """Initialize with the failed batch position and its underlying cause."""

        detail = (
            f"Audio batch {batch_number} of {total_batches} failed; "
            f"narration was aborted. Detail: {cause}"
        )
        super().__init__(detail, hint=getattr(cause, "hint", None))
        self.batch_number = batch_number
        self.total_batches = total_batches
        self.cause = cause
