"""Gemini HTTP client utilities for the TTS stage.

Responsibilities:
- Send minimal speech-generation requests to Gemini's REST API.
- Normalize inline audio extraction into `SpeechPayload` records.
- Raise actionable provider exceptions for pipeline-level error mapping.
"""

from __future__ import annotations

import base64
import binascii
import json
import re
import socket
from typing import Any

import requests

from ..models.datatypes import SpeechPayload


class GeminiProviderError(RuntimeError):
    """Raised when a Gemini provider request fails or returns malformed output."""

    def __init__(
        self,
        message: str,
        *,
        failure_kind: str = "unknown",
        status_code: int | None = None,
        provider_code: str | None = None,
    ) -> None:
        """Initialize provider error metadata for stage-aware diagnostics."""

        super().__init__(message)
        self.failure_kind = failure_kind
        self.status_code = status_code
        self.provider_code = provider_code


class GeminiSpeechClient:
    """Minimal requests-based Gemini client for AUDIO-modality generation."""

    _MAX_PROVIDER_MESSAGE_CHARS = 240
    _RETRY_HINT_PATTERN = re.compile(r"retry in ([\d.]+)s", re.IGNORECASE)

    def __init__(
        self,
        *,
        api_key: str | None,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout_seconds: float = 120.0,
    ) -> None:
        """Initialize Gemini HTTP client settings with an explicitly injected key."""

        self.api_key = api_key.strip() if isinstance(api_key, str) else ""
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    def synthesize_speech(
        self,
        *,
        model: str,
        voice: str,
        language_code: str,
        text: str,
    ) -> SpeechPayload | None:
        """Return inline audio for `text`, or `None` when the response has no audio.

        A response without inline audio usually means the content was filtered;
        this is reported as `None` rather than an error.
        """

        self._require_api_key()

        payload = {
            "contents": [{"parts": [{"text": text}]}],
            "generationConfig": {
                "responseModalities": ["AUDIO"],
                "speechConfig": {
                    "languageCode": language_code,
                    "voiceConfig": {"prebuiltVoiceConfig": {"voiceName": voice}},
                },
            },
        }
        raw_payload = self._post_json_bytes(
            endpoint_path=f"/models/{model}:generateContent",
            payload=payload,
        ).decode("utf-8")
        return self._extract_inline_audio(raw_payload)

    def _require_api_key(self) -> None:
        """Require API key presence before issuing Gemini requests."""

        if not self.api_key:
            raise GeminiProviderError(
                "Missing Gemini API key. Set `GEMINI_API_KEY` or use `--api-key`.",
                failure_kind="invalid_api_key",
            )

    def _post_json_bytes(self, *, endpoint_path: str, payload: dict[str, Any]) -> bytes:
        """Execute a Gemini JSON POST request and map failures consistently."""

        endpoint = f"{self.base_url}{endpoint_path}"
        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }
        try:
            response = requests.post(
                endpoint,
                headers=headers,
                json=payload,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            return bytes(response.content)
        except requests.HTTPError as exc:
            raise self._http_error_to_provider_error(exc) from exc
        except requests.RequestException as exc:
            failure_kind = self._classify_transport_failure(exc)
            if failure_kind == "timeout":
                detail = "Gemini request timed out."
            else:
                detail = f"Gemini request transport error: {self._short_message(str(exc))}"
            raise GeminiProviderError(detail, failure_kind=failure_kind) from exc
        except TimeoutError as exc:
            raise GeminiProviderError("Gemini request timed out.", failure_kind="timeout") from exc

    @staticmethod
    def _extract_inline_audio(raw_payload: str) -> SpeechPayload | None:
        """Extract the first inline audio part from a `generateContent` JSON payload."""

        try:
            payload = json.loads(raw_payload)
        except json.JSONDecodeError as exc:
            raise GeminiProviderError("Gemini returned invalid JSON payload.") from exc
        if not isinstance(payload, dict):
            raise GeminiProviderError("Gemini response root must be a JSON object.")

        candidates = payload.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            return None
        content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
            return None

        inline_data = parts[0].get("inlineData")
        if not isinstance(inline_data, dict):
            return None
        encoded = inline_data.get("data")
        mime_type = inline_data.get("mimeType")
        if not isinstance(encoded, str) or not encoded or not isinstance(mime_type, str):
            return None

        try:
            audio = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise GeminiProviderError("Gemini inline audio is not valid base64.") from exc
        return SpeechPayload(audio=audio, mime_type=mime_type)

    @staticmethod
    def _decode_error_body(exc: requests.HTTPError) -> str:
        """Decode an HTTP error body into a best-effort UTF-8 payload string."""

        response = exc.response
        if response is None:
            return ""
        return bytes(response.content).decode("utf-8", errors="replace").strip()

    @classmethod
    def _redact_sensitive_tokens(cls, text: str) -> str:
        """Redact API-key-like tokens from provider error content."""

        return re.sub(r"\bAIza[0-9A-Za-z_-]{20,}\b", "[redacted-key]", text)

    @classmethod
    def _short_message(cls, text: str) -> str:
        """Normalize and cap user-facing provider message length."""

        compact = " ".join(text.split())
        if len(compact) <= cls._MAX_PROVIDER_MESSAGE_CHARS:
            return compact
        return f"{compact[: cls._MAX_PROVIDER_MESSAGE_CHARS - 1]}..."

    @classmethod
    def _extract_provider_message(cls, body: str) -> tuple[str, str | None]:
        """Extract a concise provider message and optional provider status code."""

        if not body:
            return "", None

        try:
            payload = json.loads(body)
        except json.JSONDecodeError:
            return cls._short_message(cls._redact_sensitive_tokens(body)), None

        provider_code: str | None = None
        message: str | None = None
        if isinstance(payload, dict):
            error_payload = payload.get("error")
            if isinstance(error_payload, dict):
                status_value = error_payload.get("status")
                if isinstance(status_value, str) and status_value.strip():
                    provider_code = status_value.strip()
                message_value = error_payload.get("message")
                if isinstance(message_value, str) and message_value.strip():
                    message = message_value.strip()

        if message is None:
            message = body

        return cls._short_message(cls._redact_sensitive_tokens(message)), provider_code

    @classmethod
    def _classify_http_failure(
        cls,
        status_code: int,
        provider_message: str,
        provider_code: str | None,
    ) -> str:
        """Classify Gemini HTTP errors into deterministic diagnostic kinds."""

        message_lower = provider_message.lower()
        normalized_code = provider_code.upper() if provider_code is not None else ""

        if status_code in {401, 403} or "api key not valid" in message_lower:
            return "invalid_api_key"
        if status_code == 429 or normalized_code == "RESOURCE_EXHAUSTED":
            if "quota" in message_lower and not cls._RETRY_HINT_PATTERN.search(provider_message):
                return "quota_exhausted"
            return "rate_limited"
        if status_code == 503 or normalized_code == "UNAVAILABLE" or "overloaded" in message_lower:
            return "unavailable"
        if status_code in {408, 504} or "timeout" in message_lower or "timed out" in message_lower:
            return "timeout"
        return "http_error"

    @staticmethod
    def _classify_transport_failure(reason: object) -> str:
        """Classify network-layer failures into deterministic diagnostic kinds."""

        if isinstance(reason, TimeoutError | socket.timeout | requests.Timeout):
            return "timeout"
        return "transport"

    @classmethod
    def _http_error_to_provider_error(cls, exc: requests.HTTPError) -> GeminiProviderError:
        """Convert HTTP errors into normalized provider exceptions with metadata."""

        status_code = exc.response.status_code if exc.response is not None else 0
        body = cls._decode_error_body(exc)
        provider_message, provider_code = cls._extract_provider_message(body)
        failure_kind = cls._classify_http_failure(status_code, provider_message, provider_code)

        headline = {
            "invalid_api_key": "Gemini authentication failed",
            "quota_exhausted": "Gemini quota is exhausted for this project",
            "rate_limited": "Gemini rate limit reached",
            "unavailable": "Gemini service is unavailable or overloaded",
            "timeout": "Gemini request timed out",
        }.get(failure_kind, "Gemini request failed")

        status_label = f"HTTP {status_code}"
        if provider_code:
            status_label = f"{status_label} {provider_code}"
        if provider_message:
            detail = f"{headline} ({status_label}): {provider_message}"
        else:
            detail = f"{headline} ({status_label})."

        return GeminiProviderError(
            detail,
            failure_kind=failure_kind,
            status_code=status_code,
            provider_code=provider_code,
        )
