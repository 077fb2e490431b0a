"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
narration progress, and catalog listings.
"""

from __future__ import annotations

from typing import NoReturn

import typer

from .errors import NarrationError, PipelineStageError
from .tts.voices import NarrationLanguage, VoiceProfile


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    hint: str | None = None
    if isinstance(exc, PipelineStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        hint = exc.hint
    elif isinstance(exc, NarrationError):
        typer.secho(
            f"{command_name} failed ({exc.kind}): {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        hint = exc.hint
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    if hint:
        typer.secho(f"Hint: {hint}", fg=typer.colors.YELLOW, err=True)
    raise typer.Exit(code=1) from exc


def echo_progress(message: str) -> None:
    """Print one narration progress line."""

    typer.echo(f"[progress] {message}")


def echo_voice_list(voices: tuple[VoiceProfile, ...]) -> None:
    """Print compact voice id/gender rows."""

    for voice in voices:
        typer.echo(f"{voice.provider_voice_id} ({voice.gender})")


def echo_language_list(languages: tuple[NarrationLanguage, ...]) -> None:
    """Print compact language code/name rows."""

    for language in languages:
        typer.echo(f"{language.code}\t{language.name}")
