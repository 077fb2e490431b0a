"""TTS synthesizer interfaces and the Gemini-backed provider adapter.

Responsibilities:
- Define the async provider protocol for short-text speech synthesis.
- Turn one text chunk into one decoded `SynthesisOutcome`.
- Absorb filtered responses and missing sample-rate metadata locally.
"""

from __future__ import annotations

import asyncio
import re
from typing import Protocol

from loguru import logger

from ..audio.wav import decode_pcm16
from ..config import DEFAULT_SAMPLE_RATE, DEFAULT_TTS_MODEL
from ..models.datatypes import SpeechPayload, SynthesisOutcome, TextChunk
from ..providers.gemini_client import GeminiSpeechClient
from .retry import RetryingInvoker

_SAMPLE_RATE_PATTERN = re.compile(r"rate=(\d+)")


class SpeechProvider(Protocol):
    """Protocol for speech provider implementations."""

    async def synthesize_speech(
        self, text: str, voice_id: str, language_code: str
    ) -> SpeechPayload | None:
        """Return encoded audio for `text`, or `None` when no audio was produced."""


class GeminiSpeechProvider:
    """Async adapter running blocking Gemini client requests off the event loop.

    A worker thread cannot be cancelled, so the request timeout is enforced by
    the HTTP client and a timed-out request has finished when it fails.
    """

    bounds_own_timeout = True

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_TTS_MODEL,
        timeout_seconds: float = 120.0,
        client: GeminiSpeechClient | None = None,
    ) -> None:
        """Initialize the adapter with an explicitly injected API key."""

        self.model = model
        self.client = client or GeminiSpeechClient(
            api_key=api_key, timeout_seconds=timeout_seconds
        )

    async def synthesize_speech(
        self, text: str, voice_id: str, language_code: str
    ) -> SpeechPayload | None:
        """Run one blocking Gemini request in a worker thread."""

        return await asyncio.to_thread(
            self.client.synthesize_speech,
            model=self.model,
            voice=voice_id,
            language_code=language_code,
            text=text,
        )


def parse_sample_rate(mime_type: str) -> int | None:
    """Return the `rate=<hz>` parameter of a format descriptor, if present."""

    match = _SAMPLE_RATE_PATTERN.search(mime_type)
    if match is None:
        return None
    rate = int(match.group(1))
    return rate if rate > 0 else None


class ChunkSynthesizer:
    """Synthesize one chunk through the retrying invoker and decode its samples."""

    def __init__(
        self,
        provider: SpeechProvider,
        invoker: RetryingInvoker,
        default_sample_rate: int = DEFAULT_SAMPLE_RATE,
    ) -> None:
        self.provider = provider
        self.invoker = invoker
        self.default_sample_rate = default_sample_rate

    async def synthesize(
        self, chunk: TextChunk, voice_id: str, language_code: str
    ) -> SynthesisOutcome:
        """Return the decoded outcome for `chunk`.

        Blank chunks and responses without audio yield an empty outcome
        instead of raising, so one filtered sentence cannot abort a narration.
        """

        if not chunk.text.strip():
            return SynthesisOutcome(index=chunk.index, sample_rate=self.default_sample_rate)

        payload = await self.invoker.invoke(
            lambda: self.provider.synthesize_speech(chunk.text, voice_id, language_code)
        )

        if payload is None or not payload.audio or not payload.mime_type:
            logger.warning(
                "No audio returned for chunk {} ({!r}...); it may have been blocked "
                "by content filters. Skipping.",
                chunk.index,
                chunk.text[:50],
            )
            return SynthesisOutcome(index=chunk.index)

        sample_rate = parse_sample_rate(payload.mime_type)
        if sample_rate is None:
            logger.warning(
                "Sample rate not found in mime type {!r}; using default {} Hz.",
                payload.mime_type,
                self.default_sample_rate,
            )
            sample_rate = self.default_sample_rate

        samples = decode_pcm16(payload.audio)
        if not samples:
            return SynthesisOutcome(index=chunk.index)
        return SynthesisOutcome(index=chunk.index, samples=samples, sample_rate=sample_rate)
