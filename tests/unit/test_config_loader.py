"""Unit tests for pipeline config validation and YAML/environment loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from voiceover.config import (
    BATCH_SIZE,
    CHUNK_CHAR_LIMIT,
    ConfigLoader,
    INITIAL_BACKOFF_MS,
    MAX_RETRIES,
    NarrationSettings,
    PipelineConfig,
)


def test_pipeline_config_defaults_match_constants() -> None:
    config = PipelineConfig()

    assert config.char_limit == CHUNK_CHAR_LIMIT == 2500
    assert config.batch_size == BATCH_SIZE == 5
    assert config.max_retries == MAX_RETRIES == 3
    assert config.initial_delay_ms == INITIAL_BACKOFF_MS == 2000
    config.validate()


@pytest.mark.parametrize(
    "changes",
    [
        {"char_limit": 0},
        {"batch_size": -1},
        {"max_retries": 0},
        {"initial_delay_ms": -5},
        {"request_timeout_seconds": 0.0},
    ],
)
def test_pipeline_config_rejects_invalid_values(changes: dict[str, object]) -> None:
    with pytest.raises(ValueError):
        PipelineConfig(**changes).validate()


def test_settings_overrides_split_between_settings_and_pipeline() -> None:
    settings = NarrationSettings().with_overrides(voice="Puck", batch_size=2, model=None)

    assert settings.voice == "Puck"
    assert settings.model == NarrationSettings().model
    assert settings.pipeline.batch_size == 2
    assert settings.pipeline.char_limit == CHUNK_CHAR_LIMIT


def test_config_loader_from_yaml_normalizes_values(tmp_path: Path) -> None:
    config_path = tmp_path / "voiceover.yml"
    config_path.write_text(
        """
voice: " Charon "
language: " en-US "
api_key: " test-key "
char_limit: " 1200 "
batch_size: 3
max_retries: 4
initial_delay_ms: 0
request_timeout_seconds: "30.5"
""".strip(),
        encoding="utf-8",
    )

    settings = ConfigLoader.from_yaml(config_path)

    assert settings.voice == "Charon"
    assert settings.language == "en-US"
    assert settings.api_key == "test-key"
    assert settings.pipeline == PipelineConfig(
        char_limit=1200,
        batch_size=3,
        max_retries=4,
        initial_delay_ms=0,
        request_timeout_seconds=30.5,
    )


def test_config_loader_rejects_unknown_keys_and_bad_values(tmp_path: Path) -> None:
    unknown_path = tmp_path / "unknown.yml"
    unknown_path.write_text("voice: Kore\nspeed: 2\n", encoding="utf-8")
    with pytest.raises(ValueError, match=r"unknown key\(s\): speed"):
        ConfigLoader.from_yaml(unknown_path)

    invalid_path = tmp_path / "invalid.yml"
    invalid_path.write_text("batch_size: zero\n", encoding="utf-8")
    with pytest.raises(ValueError, match="batch_size"):
        ConfigLoader.from_yaml(invalid_path)

    list_path = tmp_path / "list.yml"
    list_path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError, match="top-level mapping"):
        ConfigLoader.from_yaml(list_path)


def test_config_loader_from_env_reads_prefixed_keys() -> None:
    settings = ConfigLoader.from_env(
        {
            "GEMINI_API_KEY": "env-key",
            "VOICEOVER_VOICE": "Fenrir",
            "VOICEOVER_BATCH_SIZE": "7",
            "UNRELATED": "ignored",
        }
    )

    assert settings.api_key == "env-key"
    assert settings.voice == "Fenrir"
    assert settings.pipeline.batch_size == 7


def test_config_loader_load_prefers_file_over_env(tmp_path: Path) -> None:
    config_path = tmp_path / "voiceover.yml"
    config_path.write_text("voice: Leda\n", encoding="utf-8")

    settings = ConfigLoader.load(
        config_path,
        env={"VOICEOVER_VOICE": "Fenrir", "GEMINI_API_KEY": "env-key"},
    )

    assert settings.voice == "Leda"
    assert settings.api_key == "env-key"


@pytest.mark.parametrize("blank_value", ["", '""', "'   '"])
def test_config_loader_load_keeps_env_key_when_file_key_is_blank(
    tmp_path: Path, blank_value: str
) -> None:
    """A blank `api_key` in the file must not erase the environment key."""

    config_path = tmp_path / "voiceover.yml"
    config_path.write_text(f"api_key: {blank_value}\nvoice: Leda\n", encoding="utf-8")

    settings = ConfigLoader.load(config_path, env={"GEMINI_API_KEY": "env-key"})

    assert settings.api_key == "env-key"
    assert settings.voice == "Leda"
