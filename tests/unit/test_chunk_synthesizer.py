"""Unit tests for chunk synthesis, decoding, and degraded-output handling."""

from __future__ import annotations

import asyncio

import pytest

from voiceover.errors import InvalidCredentialError
from voiceover.models.datatypes import SpeechPayload, TextChunk
from voiceover.tts.retry import RetryingInvoker
from voiceover.tts.synthesizer import ChunkSynthesizer, parse_sample_rate


def _synthesizer(provider, sleeper, default_sample_rate: int = 24000) -> ChunkSynthesizer:
    invoker = RetryingInvoker(max_retries=3, initial_delay_ms=10, sleep=sleeper)
    return ChunkSynthesizer(provider, invoker, default_sample_rate=default_sample_rate)


def test_parse_sample_rate_reads_rate_parameter() -> None:
    assert parse_sample_rate("audio/L16;codec=pcm;rate=24000") == 24000
    assert parse_sample_rate("audio/L16; rate=16000") == 16000
    assert parse_sample_rate("audio/L16;codec=pcm") is None


def test_synthesizer_decodes_samples_and_rate(
    scripted_provider, make_payload, sleep_recorder
) -> None:
    provider = scripted_provider({"Hello.": make_payload([1, -2, 32767, -32768], 22050)})

    outcome = asyncio.run(
        _synthesizer(provider, sleep_recorder).synthesize(
            TextChunk(index=3, text="Hello."), "Kore", "en-US"
        )
    )

    assert outcome.index == 3
    assert list(outcome.samples) == [1, -2, 32767, -32768]
    assert outcome.sample_rate == 22050
    assert provider.calls == [("Hello.", "Kore", "en-US")]


def test_synthesizer_skips_provider_for_blank_chunk(scripted_provider, sleep_recorder) -> None:
    provider = scripted_provider()

    outcome = asyncio.run(
        _synthesizer(provider, sleep_recorder, default_sample_rate=16000).synthesize(
            TextChunk(index=0, text="   "), "Kore", "en-US"
        )
    )

    assert outcome.is_empty
    assert outcome.sample_rate == 16000
    assert provider.calls == []


@pytest.mark.parametrize(
    "filtered",
    [None, SpeechPayload(audio=b"", mime_type="audio/L16;rate=24000"), SpeechPayload(b"\x01\x00", "")],
)
def test_synthesizer_returns_empty_outcome_for_filtered_response(
    scripted_provider, sleep_recorder, filtered
) -> None:
    """Responses without audio degrade to an empty outcome instead of raising."""

    provider = scripted_provider({"Blocked.": filtered})

    outcome = asyncio.run(
        _synthesizer(provider, sleep_recorder).synthesize(
            TextChunk(index=1, text="Blocked."), "Kore", "en-US"
        )
    )

    assert outcome.index == 1
    assert outcome.is_empty
    assert outcome.sample_rate is None


def test_synthesizer_falls_back_to_default_rate(
    scripted_provider, make_payload, sleep_recorder
) -> None:
    provider = scripted_provider({"Hi.": make_payload([5, 6], sample_rate=None)})

    outcome = asyncio.run(
        _synthesizer(provider, sleep_recorder, default_sample_rate=24000).synthesize(
            TextChunk(index=0, text="Hi."), "Puck", "pt-BR"
        )
    )

    assert list(outcome.samples) == [5, 6]
    assert outcome.sample_rate == 24000


def test_synthesizer_drops_trailing_odd_byte(scripted_provider, sleep_recorder) -> None:
    provider = scripted_provider(
        {"Odd.": SpeechPayload(audio=b"\x01\x00\x02\x00\x03", mime_type="audio/L16;rate=8000")}
    )

    outcome = asyncio.run(
        _synthesizer(provider, sleep_recorder).synthesize(
            TextChunk(index=0, text="Odd."), "Puck", "en-US"
        )
    )

    assert list(outcome.samples) == [1, 2]


def test_synthesizer_retries_through_invoker(
    scripted_provider, make_payload, sleep_recorder
) -> None:
    """Provider calls go through the invoker, so transient failures are retried."""

    class _OnceOverloaded:
        def __init__(self) -> None:
            self.attempts = 0

        async def synthesize_speech(self, text: str, voice_id: str, language_code: str):
            self.attempts += 1
            if self.attempts == 1:
                raise RuntimeError("503 The model is overloaded.")
            return make_payload([9])

    provider = _OnceOverloaded()

    outcome = asyncio.run(
        _synthesizer(provider, sleep_recorder).synthesize(
            TextChunk(index=0, text="Retry me."), "Kore", "en-US"
        )
    )

    assert list(outcome.samples) == [9]
    assert provider.attempts == 2
    assert sleep_recorder.delays == [0.01]


def test_synthesizer_propagates_fatal_errors(scripted_provider, sleep_recorder) -> None:
    provider = scripted_provider({"Key.": RuntimeError("API key not valid.")})

    with pytest.raises(InvalidCredentialError):
        asyncio.run(
            _synthesizer(provider, sleep_recorder).synthesize(
                TextChunk(index=0, text="Key."), "Kore", "en-US"
            )
        )

    assert len(provider.calls) == 1
