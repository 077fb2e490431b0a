"""Shared pytest fixtures for the full Voiceover test suite."""

from __future__ import annotations

import asyncio
from array import array
import sys
from collections.abc import Callable

import pytest

from voiceover.models.datatypes import SpeechPayload


class ScriptedSpeechProvider:
    """Speech provider test double with per-text scripted behavior.

    `responses` maps a text to either a payload, `None` (filtered), or an
    exception instance to raise. Unknown texts return `samples_per_call`
    samples whose value encodes the call order.
    """

    def __init__(
        self,
        responses: dict[str, object] | None = None,
        *,
        samples_per_call: int = 4,
        sample_rate: int = 24000,
        delays: dict[str, float] | None = None,
    ) -> None:
        """Initialize scripted responses and call recording."""

        self.responses = dict(responses or {})
        self.samples_per_call = samples_per_call
        self.sample_rate = sample_rate
        self.delays = dict(delays or {})
        self.calls: list[tuple[str, str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def synthesize_speech(
        self, text: str, voice_id: str, language_code: str
    ) -> SpeechPayload | None:
        """Record the call, optionally wait, and return the scripted result."""

        self.calls.append((text, voice_id, language_code))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(text, 0.0))
            scripted = self.responses.get(text, ...)
            if isinstance(scripted, BaseException):
                raise scripted
            if scripted is not ...:
                return scripted
            return pcm_payload(
                [len(self.calls)] * self.samples_per_call, sample_rate=self.sample_rate
            )
        finally:
            self.in_flight -= 1


def pcm_payload(samples: list[int], sample_rate: int | None = 24000) -> SpeechPayload:
    """Build a Gemini-like L16 payload for the given samples."""

    mime_type = "audio/L16;codec=pcm"
    if sample_rate is not None:
        mime_type = f"{mime_type};rate={sample_rate}"
    data = array("h", samples)
    return SpeechPayload(audio=_little_endian(data), mime_type=mime_type)


def _little_endian(samples: array) -> bytes:
    """Serialize samples as little-endian bytes."""

    if sys.byteorder == "big":
        samples = array("h", samples)
        samples.byteswap()
    return samples.tobytes()


class SleepRecorder:
    """Async sleeper test double that records requested delays without waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def scripted_provider() -> Callable[..., ScriptedSpeechProvider]:
    """Provide a factory for scripted speech providers."""

    return ScriptedSpeechProvider


@pytest.fixture
def make_payload() -> Callable[..., SpeechPayload]:
    """Provide the L16 payload builder."""

    return pcm_payload


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    """Provide a fresh non-waiting sleeper."""

    return SleepRecorder()
