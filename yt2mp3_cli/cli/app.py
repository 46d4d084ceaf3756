"""
Defines the command-line interface for the application using Typer.

Typer only collects the raw arguments; their grammar is handled by
`yt2mp3_cli.cli.args`.
"""

import asyncio
import logging
from typing import Sequence

import typer
from rich.console import Console
from rich.logging import RichHandler

from yt2mp3_cli.api.client import YouTubeClient
from yt2mp3_cli.core.download_manager import DownloadManager
from yt2mp3_cli.exceptions import BootstrapError, EmptyArgumentsError
from yt2mp3_cli.media import FFmpegBootstrapper, FFmpegConverter
from yt2mp3_cli.models.config import DownloadConfig

from .args import parse_args
from .formatters import print_help
from .reporter import Level, Reporter

console = Console(highlight=False)

logging.basicConfig(
    level="WARNING",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            markup=False,
        )
    ],
)
log = logging.getLogger("yt2mp3_cli")

app = typer.Typer(
    name="yt2mp3",
    help="Download YouTube videos and playlists. Run 'yt2mp3 -h' for the flags.",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


async def bootstrap_ffmpeg(reporter: Reporter) -> FFmpegConverter:
    """
    Makes sure ffmpeg is available before any remote work starts.

    Raises:
        BootstrapError: If ffmpeg is missing and cannot be installed.
    """
    bootstrapper = FFmpegBootstrapper()
    if not bootstrapper.is_present():
        reporter.alert(
            "FFMPEG is not present. ", Level.WARNING, newline=False, show_level=True
        )
        reporter.alert("We'll download it for you. Have a moment... ", newline=False)
        try:
            await bootstrapper.ensure()
        except BootstrapError as e:
            reporter.alert(f"FAILED ({e})", Level.ERROR)
            raise
        reporter.alert("DONE", Level.SUCCESS)
    return FFmpegConverter(bootstrapper.path)


async def _run_async(config: DownloadConfig, reporter: Reporter) -> None:
    try:
        converter = await bootstrap_ffmpeg(reporter)
    except BootstrapError:
        log.debug("Full traceback:", exc_info=True)
        reporter.alert(
            "Failed to download ffmpeg. Please try it by hand",
            Level.FATAL,
            show_level=True,
        )
        return

    manager = DownloadManager(config, YouTubeClient(), reporter, converter)
    await manager.run()


def run(tokens: Sequence[str], reporter: Reporter | None = None) -> None:
    """Parses the arguments and runs the requested action."""
    reporter = reporter or Reporter(console)

    try:
        parsed = parse_args(tokens)
    except EmptyArgumentsError as e:
        reporter.alert(str(e), Level.WARNING, show_level=True)
        return

    for warning in parsed.warnings:
        reporter.alert(warning, Level.WARNING, show_level=True)

    if parsed.help_requested:
        print_help(console=reporter.console)
        return

    if parsed.config.verbose:
        log.setLevel("DEBUG")
    log.debug(f"Configuration: {parsed.config!r}")

    asyncio.run(_run_async(parsed.config, reporter))


@app.command(
    context_settings={
        "allow_extra_args": True,
        "ignore_unknown_options": True,
        "help_option_names": [],
    }
)
def main_command(ctx: typer.Context):
    """Download YouTube videos and playlists."""
    run(list(ctx.args))
