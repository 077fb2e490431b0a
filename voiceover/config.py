"""Configuration model and loaders for Voiceover.

Responsibilities:
- Define pipeline tuning values as an explicit, immutable dataclass.
- Define per-run narration settings (model, voice, language, credentials).
- Provide loader entry points for file- and environment-based configuration.

Key types:
- `PipelineConfig`: chunking, batching, retry and timeout settings.
- `NarrationSettings`: normalized runtime settings for one narration run.
- `ConfigLoader`: static construction helpers for `NarrationSettings`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .parsing import normalize_optional_string, parse_positive_float, parse_positive_int

CHUNK_CHAR_LIMIT = 2500
BATCH_SIZE = 5
MAX_RETRIES = 3
INITIAL_BACKOFF_MS = 2000
DEFAULT_SAMPLE_RATE = 24000
REQUEST_TIMEOUT_SECONDS = 120.0

DEFAULT_TTS_MODEL = "gemini-2.5-flash-preview-tts"
DEFAULT_VOICE = "Kore"
DEFAULT_LANGUAGE = "pt-BR"


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    """Tuning values for one narration pipeline run.

    Attributes:
        char_limit: Maximum characters per synthesis request.
        batch_size: Maximum number of concurrent in-flight requests.
        max_retries: Maximum attempts per provider call.
        initial_delay_ms: First exponential backoff delay in milliseconds.
        request_timeout_seconds: Per-attempt timeout; `None` disables it.
        default_sample_rate: Sample rate assumed when the provider omits one.
    """

    char_limit: int = CHUNK_CHAR_LIMIT
    batch_size: int = BATCH_SIZE
    max_retries: int = MAX_RETRIES
    initial_delay_ms: int = INITIAL_BACKOFF_MS
    request_timeout_seconds: float | None = REQUEST_TIMEOUT_SECONDS
    default_sample_rate: int = DEFAULT_SAMPLE_RATE

    def validate(self) -> None:
        """Validate tuning values before pipeline execution."""

        for field_name in ("char_limit", "batch_size", "max_retries", "default_sample_rate"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"`{field_name}` must be a positive integer.")
        if isinstance(self.initial_delay_ms, bool) or not isinstance(self.initial_delay_ms, int):
            raise ValueError("`initial_delay_ms` must be a non-negative integer.")
        if self.initial_delay_ms < 0:
            raise ValueError("`initial_delay_ms` must be a non-negative integer.")
        if self.request_timeout_seconds is not None and self.request_timeout_seconds <= 0:
            raise ValueError("`request_timeout_seconds` must be positive when set.")


@dataclass(slots=True)
class NarrationSettings:
    """Runtime settings for one narration command.

    Attributes:
        model: Speech model identifier.
        voice: Prebuilt voice identifier.
        language: BCP-47 language code.
        api_key: Provider API key; resolved once and injected into the client.
        pipeline: Pipeline tuning values.
    """

    model: str = DEFAULT_TTS_MODEL
    voice: str = DEFAULT_VOICE
    language: str = DEFAULT_LANGUAGE
    api_key: str | None = None
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)

    def validate(self) -> None:
        """Validate runtime settings values."""

        self._require_non_empty(self.model, "model")
        self._require_non_empty(self.voice, "voice")
        self._require_non_empty(self.language, "language")
        self.pipeline.validate()

    def with_overrides(self, **overrides: Any) -> NarrationSettings:
        """Return a copy with non-`None` top-level and pipeline overrides applied.

        Keys matching `PipelineConfig` fields are applied to the nested
        pipeline config; remaining keys are applied to the settings.
        """

        pipeline_fields = set(PipelineConfig.__dataclass_fields__)
        pipeline_changes = {
            key: value
            for key, value in overrides.items()
            if key in pipeline_fields and value is not None
        }
        settings_changes = {
            key: value
            for key, value in overrides.items()
            if key not in pipeline_fields and value is not None
        }
        pipeline = replace(self.pipeline, **pipeline_changes)
        return NarrationSettings(
            model=settings_changes.get("model", self.model),
            voice=settings_changes.get("voice", self.voice),
            language=settings_changes.get("language", self.language),
            api_key=settings_changes.get("api_key", self.api_key),
            pipeline=pipeline,
        )

    @staticmethod
    def _require_non_empty(value: str, field_name: str) -> None:
        """Validate that string fields are not empty."""

        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"`{field_name}` must be a non-empty string.")


class ConfigLoader:
    """Factory methods for creating `NarrationSettings` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "model",
            "voice",
            "language",
            "api_key",
            "char_limit",
            "batch_size",
            "max_retries",
            "initial_delay_ms",
            "request_timeout_seconds",
            "default_sample_rate",
        }
    )
    _INT_KEYS = ("char_limit", "batch_size", "max_retries", "default_sample_rate")
    _ENV_KEYS = {
        "VOICEOVER_MODEL": "model",
        "VOICEOVER_VOICE": "voice",
        "VOICEOVER_LANGUAGE": "language",
        "GEMINI_API_KEY": "api_key",
        "VOICEOVER_CHAR_LIMIT": "char_limit",
        "VOICEOVER_BATCH_SIZE": "batch_size",
        "VOICEOVER_MAX_RETRIES": "max_retries",
        "VOICEOVER_INITIAL_DELAY_MS": "initial_delay_ms",
        "VOICEOVER_REQUEST_TIMEOUT_SECONDS": "request_timeout_seconds",
    }

    @staticmethod
    def from_yaml(path: Path) -> NarrationSettings:
        """Create validated settings from a YAML file."""

        payload = ConfigLoader._yaml_payload(path)
        return ConfigLoader._build_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> NarrationSettings:
        """Create validated settings from environment variables."""

        payload = ConfigLoader._env_payload(os.environ if env is None else env)
        return ConfigLoader._build_from_mapping(payload, source_label="environment")

    @staticmethod
    def load(
        config_path: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> NarrationSettings:
        """Create validated settings with precedence `config file` > `env` > defaults."""

        payload: dict[str, Any] = dict(
            ConfigLoader._env_payload(os.environ if env is None else env)
        )
        source_label = "environment"
        if config_path is not None:
            # Blank file values leave environment values in place.
            payload.update(
                (key, value)
                for key, value in ConfigLoader._yaml_payload(config_path).items()
                if key not in ConfigLoader._SUPPORTED_YAML_KEYS
                or normalize_optional_string(value) is not None
            )
            source_label = f"YAML `{config_path}`"
        return ConfigLoader._build_from_mapping(payload, source_label=source_label)

    @staticmethod
    def _yaml_payload(path: Path) -> Mapping[str, Any]:
        """Parse YAML file text and enforce a mapping root payload."""

        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return payload

    @staticmethod
    def _env_payload(env_map: Mapping[str, str]) -> dict[str, str]:
        """Map recognized environment variables onto config keys."""

        payload: dict[str, str] = {}
        for env_key, field_name in ConfigLoader._ENV_KEYS.items():
            value = normalize_optional_string(env_map.get(env_key))
            if value is not None:
                payload[field_name] = value
        return payload

    @staticmethod
    def _build_from_mapping(payload: Mapping[str, Any], source_label: str) -> NarrationSettings:
        """Build validated settings from a normalized mapping payload."""

        unknown = sorted(str(key) for key in payload if key not in ConfigLoader._SUPPORTED_YAML_KEYS)
        if unknown:
            raise ValueError(f"{source_label} has unknown key(s): {', '.join(unknown)}.")

        overrides: dict[str, Any] = {}
        for key in ("model", "voice", "language", "api_key"):
            if key in payload:
                normalized = normalize_optional_string(payload[key])
                if normalized is None and key != "api_key":
                    raise ValueError(f"{source_label} key `{key}` must be a non-empty string.")
                overrides[key] = normalized
        for key in ConfigLoader._INT_KEYS:
            if key in payload:
                overrides[key] = parse_positive_int(payload[key], key)
        if "initial_delay_ms" in payload:
            raw_delay = payload["initial_delay_ms"]
            if str(raw_delay).strip() == "0":
                overrides["initial_delay_ms"] = 0
            else:
                overrides["initial_delay_ms"] = parse_positive_int(raw_delay, "initial_delay_ms")
        if "request_timeout_seconds" in payload:
            overrides["request_timeout_seconds"] = parse_positive_float(
                payload["request_timeout_seconds"], "request_timeout_seconds"
            )

        settings = NarrationSettings().with_overrides(**overrides)
        settings.validate()
        return settings
