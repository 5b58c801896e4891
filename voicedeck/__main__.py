"""Module entrypoint for running voicedeck as ``python -m voicedeck``."""

from __future__ import annotations

from voicedeck.cli import main


if __name__ == "__main__":
    main()
