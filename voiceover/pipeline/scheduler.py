"""Batch scheduling for chunk-level synthesis.

Responsibilities:
- Run chunk syntheses concurrently inside fixed-size batches.
- Advance strictly batch-by-batch and report human-readable progress.
- Abort the whole run on any failure; there is no partial-success mode.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence

from loguru import logger

from ..errors import AllContentFilteredError, BatchFailureError
from ..models.datatypes import SynthesisOutcome, TextChunk

SynthesizeFn = Callable[[TextChunk], Awaitable[SynthesisOutcome]]
ProgressFn = Callable[[str], None]


def _all_filtered_error() -> AllContentFilteredError:
    """Build the error reported when every chunk came back without audio."""

    return AllContentFilteredError(
        "No audio could be generated for any part of the text; it may have been "
        "fully blocked by content filters.",
        hint="Review the script text and try again.",
    )


class BatchScheduler:
    """Process chunks in sequential batches of concurrent syntheses."""

    def __init__(self, batch_size: int = 5) -> None:
        if batch_size <= 0:
            raise ValueError("`batch_size` must be a positive integer.")
        self.batch_size = batch_size

    def partition(self, chunks: Sequence[TextChunk]) -> list[list[TextChunk]]:
        """Split chunks into consecutive, non-overlapping ordered batches."""

        return [
            list(chunks[start : start + self.batch_size])
            for start in range(0, len(chunks), self.batch_size)
        ]

    async def run(
        self,
        chunks: Sequence[TextChunk],
        synthesize_fn: SynthesizeFn,
        on_progress: ProgressFn | None = None,
    ) -> list[SynthesisOutcome]:
        """Synthesize all chunks and return outcomes in chunk order.

        Raises:
            BatchFailureError: If any synthesis in a batch raised.
            AllContentFilteredError: If every outcome is empty.
        """

        report = on_progress or (lambda _message: None)
        if not chunks:
            return []

        if len(chunks) == 1:
            report("Generating audio...")
            outcome = await synthesize_fn(chunks[0])
            if outcome.is_empty:
                raise _all_filtered_error()
            return [outcome]

        batches = self.partition(chunks)
        total_batches = len(batches)
        report(f"Text split into {len(chunks)} parts. Processing in parallel...")

        slots: list[SynthesisOutcome | None] = [None] * len(chunks)
        offset = 0
        for batch_number, batch in enumerate(batches, start=1):
            first_part = offset + 1
            last_part = offset + len(batch)
            report(
                f"Processing batch {batch_number} of {total_batches}... "
                f"(parts {first_part} to {last_part})"
            )
            results = await asyncio.gather(
                *(synthesize_fn(chunk) for chunk in batch),
                return_exceptions=True,
            )
            for position, result in enumerate(results):
                if isinstance(result, asyncio.CancelledError):
                    raise result
                if isinstance(result, BaseException):
                    logger.error("Failed to process audio batch {}: {}", batch_number, result)
                    raise BatchFailureError(
                        batch_number=batch_number,
                        total_batches=total_batches,
                        cause=result,
                    ) from result
                slots[offset + position] = result
            offset += len(batch)

        outcomes = [outcome for outcome in slots if outcome is not None]
        if all(outcome.is_empty for outcome in outcomes):
            raise _all_filtered_error()
        return outcomes
