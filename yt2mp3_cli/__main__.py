"""
Main entry point for the yt2mp3-cli application.
This module handles top-level setup, exception handling, and CLI invocation.
"""

import asyncio
import logging
import os
import sys

import typer
from rich.console import Console

from yt2mp3_cli.cli.app import app
from yt2mp3_cli.cli.formatters import format_error_with_suggestions


def main() -> None:
    """Main entry point function. The process always exits with status 0."""
    if os.name == "nt":
        try:
            sys.stdout.reconfigure(encoding="utf-8")
            sys.stderr.reconfigure(encoding="utf-8")
        except (TypeError, AttributeError):
            pass

    log = logging.getLogger("yt2mp3_cli")
    console = Console()

    try:
        app(standalone_mode=False)
    except typer.Exit:
        pass
    except (typer.Abort, KeyboardInterrupt, asyncio.CancelledError):
        console.print("\n[yellow]⚠️  Operation cancelled by user.[/yellow]")
    except Exception as e:
        console.print()
        console.print(format_error_with_suggestions(e, {"type": "Unexpected"}))
        log.debug("Full traceback:", exc_info=True)
    sys.exit(0)


if __name__ == "__main__":
    main()
