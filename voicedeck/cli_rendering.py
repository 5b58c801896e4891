"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
engine notifications, voice picker rows and session status lines.
"""

from __future__ import annotations

from typing import NoReturn, Sequence

import typer

from .errors import SpeechStageError
from .models.datatypes import Voice
from .service.handle import INIT_FAILURE_MESSAGE
from .session import SessionSnapshot


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, SpeechStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_notification(message: str) -> None:
    """Show one engine lifecycle notification."""

    color = typer.colors.RED if message == INIT_FAILURE_MESSAGE else typer.colors.GREEN
    typer.secho(message, fg=color, err=True)


def format_voice_row(position: int, voice: Voice, selected: bool) -> str:
    """Render one picker row as `N. label [locale] (identifier)`."""

    marker = "*" if selected else " "
    locale = voice.locale_tag or "?"
    return f"{marker} {position}. {voice.label} [{locale}] ({voice.identifier})"


def echo_voice_list(voices: Sequence[Voice], selected: Voice | None) -> None:
    """Print the voice picker rows with 1-based positions."""

    if not voices:
        typer.echo("No voices available for the configured language.")
        return
    for position, voice in enumerate(voices, start=1):
        typer.echo(format_voice_row(position, voice, voice == selected))


def echo_session_status(snapshot: SessionSnapshot) -> None:
    """Print engine state, catalog size and selected voice."""

    typer.echo(f"Engine state: {snapshot.state.value}")
    typer.echo(f"Voices: {len(snapshot.voices)}")
    if snapshot.selected_voice is None:
        typer.echo("Selected voice: (none)")
        return
    position = snapshot.voices.index(snapshot.selected_voice) + 1
    typer.echo(f"Selected voice: {position}. {snapshot.selected_voice.label}")
