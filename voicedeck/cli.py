"""Command-line interface for voicedeck.

Responsibilities:
- Expose user-facing commands for listing voices and speaking text.
- Provide an interactive shell with a text prompt and a voice picker.
- Convert CLI arguments into `VoicedeckConfig` and own the session lifetime.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .cli_rendering import (
    echo_notification,
    echo_session_status,
    echo_voice_list,
    exit_with_command_error,
)
from .config import ConfigLoader, VoicedeckConfig
from .errors import SpeechStageError
from .models.datatypes import ServiceState
from .session import SpeechSession
from .telemetry.logger import configure_logging

app = typer.Typer(
    name="voicedeck",
    no_args_is_help=True,
    help="voicedeck CLI.",
)

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Path to a YAML config file."),
]
LanguageOption = Annotated[
    str | None,
    typer.Option("--language", help="Target language tag for the voice catalog."),
]
DriverOption = Annotated[
    str | None,
    typer.Option("--driver", help="Speech engine driver (pyttsx3, sapi5, nsss, espeak)."),
]

_SHELL_HELP = "Type text and press Enter to speak. Commands: :voices, :voice N, :status, :quit"


def _resolve_config(
    config_file: Path | None,
    language: str | None,
    driver: str | None,
) -> VoicedeckConfig:
    """Load file or environment config and apply explicit CLI overrides."""

    try:
        base = ConfigLoader.from_yaml(config_file) if config_file else ConfigLoader.from_env()
    except FileNotFoundError as exc:
        raise SpeechStageError(
            stage="config",
            detail=f"Config file not found: `{config_file}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise SpeechStageError(
            stage="config",
            detail=f"Invalid configuration: {exc}",
            hint="Fix config values or `VOICEDECK_*` variables and rerun.",
        ) from exc

    try:
        return base.with_overrides(target_language=language, engine_driver=driver)
    except ValueError as exc:
        raise SpeechStageError(
            stage="config",
            detail=f"Invalid command option: {exc}",
            hint="Check `--language` and `--driver` values.",
        ) from exc


def _open_session(
    config_file: Path | None,
    language: str | None,
    driver: str | None,
) -> SpeechSession:
    """Resolve config, configure logging and start a speech session."""

    config = _resolve_config(config_file, language, driver)
    configure_logging(level=config.log_level)
    return SpeechSession(config, notifier=echo_notification)


def _require_ready(session: SpeechSession) -> None:
    """Wait for the engine and raise a stage error unless it became ready."""

    session.wait_until_settled()
    state = session.handle.state
    if state is ServiceState.READY:
        return
    if state is ServiceState.FAILED:
        raise SpeechStageError(
            stage="engine",
            detail="The platform speech engine failed to initialize.",
            hint="Check that a speech driver (SAPI5, NSSpeechSynthesizer or eSpeak) is installed.",
        )
    raise SpeechStageError(
        stage="engine",
        detail=(
            "The platform speech engine did not become ready within "
            f"{session.config.ready_timeout_seconds:g}s (state: {state.value})."
        ),
        hint="Increase `ready_timeout_seconds` in the config file.",
    )


@app.command("voices")
def voices_command(
    config_file: ConfigOption = None,
    language: LanguageOption = None,
    driver: DriverOption = None,
) -> None:
    """List voices for the target language; `*` marks the active voice."""

    try:
        session = _open_session(config_file, language, driver)
    except Exception as exc:
        exit_with_command_error("voices", exc)

    with session:
        try:
            _require_ready(session)
        except Exception as exc:
            exit_with_command_error("voices", exc)
        snapshot = session.snapshot()

    echo_voice_list(snapshot.voices, snapshot.selected_voice)


@app.command("say")
def say_command(
    text: Annotated[str, typer.Argument(help="Text to speak.")],
    voice: Annotated[
        int | None,
        typer.Option("--voice", min=1, help="1-based voice position from `voicedeck voices`."),
    ] = None,
    config_file: ConfigOption = None,
    language: LanguageOption = None,
    driver: DriverOption = None,
) -> None:
    """Speak TEXT once and wait for playback to finish."""

    try:
        session = _open_session(config_file, language, driver)
    except Exception as exc:
        exit_with_command_error("say", exc)

    with session:
        try:
            _require_ready(session)
            if voice is not None:
                chosen = session.catalog.voice_at(voice)
                if chosen is None:
                    raise SpeechStageError(
                        stage="voice",
                        detail=(
                            f"Voice {voice} is not available; the catalog has "
                            f"{len(session.catalog)} voice(s)."
                        ),
                        hint="Run `voicedeck voices` to see valid positions.",
                    )
                session.select_voice(chosen)
        except Exception as exc:
            exit_with_command_error("say", exc)

        if not session.speak(text):
            typer.echo("Nothing to speak.")
            return
        if not session.wait_until_idle():
            typer.secho("Playback still running; stopping.", fg=typer.colors.YELLOW, err=True)


@app.command("shell")
def shell_command(
    config_file: ConfigOption = None,
    language: LanguageOption = None,
    driver: DriverOption = None,
) -> None:
    """Interactive prompt: speak lines of text and pick voices."""

    try:
        session = _open_session(config_file, language, driver)
    except Exception as exc:
        exit_with_command_error("shell", exc)

    with session:
        if not session.wait_until_settled() or not session.handle.is_ready:
            typer.secho(
                f"Speech is unavailable (engine state: {session.handle.state.value}).",
                fg=typer.colors.YELLOW,
                err=True,
            )
        typer.echo(_SHELL_HELP)
        while True:
            try:
                line = typer.prompt("", default="", show_default=False, prompt_suffix="> ")
            except typer.Abort:
                break
            if not _handle_shell_line(session, line.strip()):
                break


def _handle_shell_line(session: SpeechSession, line: str) -> bool:
    """Execute one shell line; return `False` when the shell should exit."""

    if line in (":quit", ":q"):
        return False
    if line == ":voices":
        snapshot = session.snapshot()
        echo_voice_list(snapshot.voices, snapshot.selected_voice)
        return True
    if line == ":status":
        echo_session_status(session.snapshot())
        return True
    if line.startswith(":voice"):
        _select_voice_from_shell(session, line[len(":voice"):].strip())
        return True
    if not line:
        return True
    if not session.handle.is_ready:
        typer.echo(f"Speech is unavailable (engine state: {session.handle.state.value}).")
        return True
    session.speak(line)
    return True


def _select_voice_from_shell(session: SpeechSession, argument: str) -> None:
    """Apply `:voice N` from the shell."""

    try:
        position = int(argument)
    except ValueError:
        typer.echo("Usage: :voice N")
        return
    voice = session.catalog.voice_at(position)
    if voice is None:
        typer.echo(f"No voice at position {position}.")
        return
    if session.select_voice(voice):
        typer.echo(f"Selected voice {position}: {voice.label}")
    else:
        typer.echo("Voice selection is unavailable until the engine is ready.")


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
