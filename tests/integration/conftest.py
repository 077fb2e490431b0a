"""Integration-test fixtures for deterministic Gemini provider behavior."""

from __future__ import annotations

import threading

import pytest

from voiceover.models.datatypes import SpeechPayload
from voiceover.providers.gemini_client import GeminiSpeechClient

FRAMES_PER_CALL = 2400


class GeminiCallRecorder:
    """Record mocked Gemini calls and serve scripted per-text results."""

    def __init__(self) -> None:
        self.calls: list[dict[str, object]] = []
        self.responses: dict[str, object] = {}
        self._lock = threading.Lock()

    def respond(self, client: GeminiSpeechClient, **kwargs: object) -> SpeechPayload | None:
        """Return silence for unknown texts, or the scripted payload/exception."""

        with self._lock:
            self.calls.append({"api_key": client.api_key, **kwargs})
        scripted = self.responses.get(str(kwargs["text"]), ...)
        if isinstance(scripted, BaseException):
            raise scripted
        if scripted is not ...:
            return scripted
        return SpeechPayload(
            audio=b"\x00\x00" * FRAMES_PER_CALL,
            mime_type="audio/L16;codec=pcm;rate=24000",
        )


@pytest.fixture(autouse=True)
def gemini_calls(monkeypatch: pytest.MonkeyPatch) -> GeminiCallRecorder:
    """Mock Gemini speech calls in integration tests to avoid network/key requirements."""

    recorder = GeminiCallRecorder()

    def _mock_synthesize_speech(self, **kwargs: object) -> SpeechPayload | None:
        return recorder.respond(self, **kwargs)

    monkeypatch.setattr(GeminiSpeechClient, "synthesize_speech", _mock_synthesize_speech)
    for env_key in (
        "GEMINI_API_KEY",
        "VOICEOVER_MODEL",
        "VOICEOVER_VOICE",
        "VOICEOVER_LANGUAGE",
        "VOICEOVER_CHAR_LIMIT",
        "VOICEOVER_BATCH_SIZE",
        "VOICEOVER_MAX_RETRIES",
        "VOICEOVER_INITIAL_DELAY_MS",
        "VOICEOVER_REQUEST_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(env_key, raising=False)
    return recorder
