"""Command-line interface for Voiceover.

Responsibilities:
- Expose user-facing commands for narration and voice catalog listing.
- Convert CLI arguments into `NarrationSettings` and run the pipeline.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

import asyncio
import io
from pathlib import Path
from typing import Annotated
import wave

import typer

from .cli_rendering import (
    echo_language_list,
    echo_progress,
    echo_voice_list,
    exit_with_command_error,
)
from .config import ConfigLoader, NarrationSettings
from .errors import PipelineStageError
from .pipeline import NarrationPipeline
from .telemetry.logger import RunLogger
from .tts.synthesizer import GeminiSpeechProvider
from .tts.voices import AVAILABLE_VOICES, LANGUAGES, find_voice, is_supported_language

app = typer.Typer(
    name="voiceover",
    no_args_is_help=True,
    help="Voiceover CLI.",
)


def _resolve_settings(config_file: Path | None, **overrides: object) -> NarrationSettings:
    """Resolve effective settings: CLI overrides > config file > env > defaults."""

    try:
        settings = ConfigLoader.load(config_file).with_overrides(**overrides)
        settings.validate()
    except FileNotFoundError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Config file not found: `{config_file}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Invalid configuration: {exc}",
            hint="Fix config file, environment, or option values and rerun.",
        ) from exc

    voice = find_voice(settings.voice)
    if voice is None:
        raise PipelineStageError(
            stage="config",
            detail=f"Unknown voice `{settings.voice}`.",
            hint="Run `voiceover voices` to list available voices.",
        )
    if not is_supported_language(settings.language):
        raise PipelineStageError(
            stage="config",
            detail=f"Unsupported language code `{settings.language}`.",
            hint="Run `voiceover languages` to list supported language codes.",
        )
    if not settings.api_key:
        raise PipelineStageError(
            stage="config",
            detail="Missing Gemini API key.",
            hint="Set `GEMINI_API_KEY`, add `api_key` to the config file, or pass `--api-key`.",
        )
    return settings.with_overrides(voice=voice.provider_voice_id)


def _create_pipeline(settings: NarrationSettings) -> NarrationPipeline:
    """Build a Gemini-backed pipeline with the resolved key injected explicitly."""

    provider = GeminiSpeechProvider(
        api_key=settings.api_key,
        model=settings.model,
        timeout_seconds=settings.pipeline.request_timeout_seconds or 120.0,
    )
    return NarrationPipeline(provider, config=settings.pipeline, run_logger=RunLogger())


def _write_wav(out: Path, wav_bytes: bytes) -> float:
    """Write WAV bytes and return their duration in seconds."""

    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(wav_bytes)
    with wave.open(io.BytesIO(wav_bytes), "rb") as wav_file:
        return wav_file.getnframes() / float(wav_file.getframerate())


@app.command("narrate")
def narrate_command(
    script_file: Annotated[
        Path,
        typer.Argument(help="Path to a UTF-8 text file with the narration script."),
    ],
    out: Annotated[
        Path,
        typer.Option("--out", help="Output WAV path."),
    ] = Path("voiceover.wav"),
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML config file with command defaults."),
    ] = None,
    voice: Annotated[str | None, typer.Option("--voice", help="Prebuilt voice id.")] = None,
    language: Annotated[
        str | None, typer.Option("--language", help="Narration language code, e.g. `en-US`.")
    ] = None,
    model: Annotated[str | None, typer.Option("--model", help="TTS model id override.")] = None,
    api_key: Annotated[
        str | None,
        typer.Option("--api-key", help="Gemini API key override."),
    ] = None,
    char_limit: Annotated[
        int | None, typer.Option("--char-limit", help="Maximum characters per request.")
    ] = None,
    batch_size: Annotated[
        int | None, typer.Option("--batch-size", help="Maximum concurrent requests.")
    ] = None,
    max_retries: Annotated[
        int | None, typer.Option("--max-retries", help="Maximum attempts per request.")
    ] = None,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", help="Per-request timeout in seconds."),
    ] = None,
) -> None:
    """Narrate a script file into one WAV voice-over."""

    try:
        if not script_file.is_file():
            raise PipelineStageError(
                stage="input",
                detail=f"Script file not found: `{script_file}`.",
                hint="Pass an existing UTF-8 text file.",
            )
        text = script_file.read_text(encoding="utf-8")
        settings = _resolve_settings(
            config_file,
            voice=voice,
            language=language,
            model=model,
            api_key=api_key,
            char_limit=char_limit,
            batch_size=batch_size,
            max_retries=max_retries,
            request_timeout_seconds=timeout,
        )
        pipeline = _create_pipeline(settings)
        wav_bytes = asyncio.run(
            pipeline.synthesize_long_form(
                text,
                settings.voice,
                settings.language,
                on_progress=echo_progress,
            )
        )
        duration = _write_wav(out, wav_bytes)
    except Exception as exc:
        exit_with_command_error("narrate", exc)

    typer.echo(f"Voice-over: {out}")
    typer.echo(f"Duration (s): {duration:.2f}")


@app.command("sample")
def sample_command(
    out: Annotated[
        Path,
        typer.Option("--out", help="Output WAV path."),
    ] = Path("voice-sample.wav"),
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML config file with command defaults."),
    ] = None,
    voice: Annotated[str | None, typer.Option("--voice", help="Prebuilt voice id.")] = None,
    language: Annotated[
        str | None, typer.Option("--language", help="Narration language code, e.g. `en-US`.")
    ] = None,
    api_key: Annotated[
        str | None,
        typer.Option("--api-key", help="Gemini API key override."),
    ] = None,
) -> None:
    """Write a short demonstration sample of one voice."""

    try:
        settings = _resolve_settings(
            config_file,
            voice=voice,
            language=language,
            api_key=api_key,
        )
        pipeline = _create_pipeline(settings)
        wav_bytes = asyncio.run(pipeline.synthesize_sample(settings.voice, settings.language))
        duration = _write_wav(out, wav_bytes)
    except Exception as exc:
        exit_with_command_error("sample", exc)

    typer.echo(f"Voice sample: {out}")
    typer.echo(f"Duration (s): {duration:.2f}")


@app.command("voices")
def voices_command() -> None:
    """List prebuilt voices."""

    echo_voice_list(AVAILABLE_VOICES)


@app.command("languages")
def languages_command() -> None:
    """List supported narration language codes."""

    echo_language_list(LANGUAGES)


def main() -> None:
    """Run the Voiceover CLI."""

    app()


if __name__ == "__main__":
    main()
