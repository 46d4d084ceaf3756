"""
Functions for formatting and displaying data in the console using Rich.
"""

from typing import Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from yt2mp3_cli.models.media import PlaylistInfo, VideoInfo
from yt2mp3_cli.models.stats import DownloadStats
from yt2mp3_cli.utils.formatting import (
    format_clock,
    format_count,
    format_duration,
    format_size,
)


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "BootstrapError": [
            "• Check your internet connection.",
            "• Download ffmpeg by hand and place it in the working directory.",
        ],
        "RegexMatchError": [
            "• The URL or ID could not be recognised.",
            "• Use -u for full URLs and -i for bare IDs.",
        ],
        "VideoUnavailable": [
            "• The video may be private, removed, or region locked.",
        ],
        "AgeRestrictedError": [
            "• Age restricted videos cannot be fetched anonymously.",
        ],
        "ClientResponseError": [
            "• A network connection issue occurred.",
            "• Please try again in a few minutes.",
        ],
        "TranscodeError": [
            "• ffmpeg could not produce the requested format.",
            "• Check the value passed to -t (e.g. 'mp3', 'mp4', 'webm').",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -d for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    suggestion_text = Text("\n".join(suggestions))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(suggestion_text)

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def _info_table() -> Table:
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold blue", no_wrap=True)
    table.add_column()
    return table


def print_video_info(video: VideoInfo, console: Optional[Console] = None):
    """Displays the metadata of a single video."""
    console = console or Console()
    table = _info_table()
    table.add_row("Title:", Text(video.title))
    table.add_row("Author:", Text(video.author))
    table.add_row("Duration:", format_clock(video.duration))
    table.add_row("Likes:", Text(format_count(video.likes), style="green"))
    table.add_row("Views:", format_count(video.views))
    table.add_row("URL:", Text(video.url, style="dim"))

    content = Table.grid(padding=(1, 0))
    content.add_row(table)
    if video.description:
        content.add_row(Text("Description:", style="bold blue"))
        content.add_row(Text(video.description))

    console.print(
        Panel(
            content,
            title="[bold green]Video information[/bold green]",
            border_style="green",
            expand=False,
        )
    )


def print_playlist_info(playlist: PlaylistInfo, console: Optional[Console] = None):
    """Displays the metadata of a playlist."""
    console = console or Console()
    table = _info_table()
    table.add_row("Title:", Text(playlist.title))
    table.add_row("Author:", Text(playlist.author))
    table.add_row("URL:", Text(playlist.url, style="dim"))

    content = Table.grid(padding=(1, 0))
    content.add_row(table)
    if playlist.description:
        content.add_row(Text("Description:", style="bold blue"))
        content.add_row(Text(playlist.description))

    console.print(
        Panel(
            content,
            title="[bold green]Playlist information[/bold green]",
            border_style="green",
            expand=False,
        )
    )


HELP_SECTIONS = [
    ("Show help page", [("-h or 'help'", "Shows this page")]),
    (
        "Download type",
        [("-v", "Download a video"), ("-p", "Download a playlist")],
    ),
    (
        "Set video/playlist URL or ID",
        [
            ("-u [url]", "Specify playlist or video by URL"),
            ("-i [id]", "Specify playlist or video by ID"),
        ],
    ),
    ("Set output folder (optional)", [("-o [path]", "Specify output path")]),
    (
        "Set the media type of the stream you want to download",
        [
            ("-V", "Video-only stream"),
            ("-A", "Audio-only stream"),
            ("-M", "Muxed stream, video and audio"),
            (
                "-m [mediatype]",
                "Set by hand, accepting: 'v', 'video', 'm', 'muxed', 'a' and 'audio'",
            ),
        ],
    ),
    (
        "Other",
        [
            ("-I", "Don't download, but only show information"),
            ("-t [format]", "Convert to another format, like 'mp4', 'mp3', 'webm'"),
            ("-s", "Skip video if present in directory"),
            ("-P", "Enable parallel downloads for faster processing"),
            ("-w [count]", "Number of parallel downloads (default 4, max 32)"),
            ("-d", "Show debug output"),
        ],
    ),
]


def print_help(prog: str = "yt2mp3", console: Optional[Console] = None):
    """Displays the usage page."""
    console = console or Console()
    console.print("[bold]Usage:[/bold] ", end="")
    console.print(f"{prog} [arguments]", style="green", highlight=False)

    for title, rows in HELP_SECTIONS:
        console.print()
        console.print(title, style="bright_black")
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column(style="blue", no_wrap=True)
        table.add_column()
        for flag, description in rows:
            table.add_row(f"  {flag}", description)
        console.print(table)

    console.print()
    console.print("Protip", style="bright_black")
    console.print(
        "You can use multiple arguments at once, like to show info about a video"
        f" by id: [blue]{prog} -vIi dQw4w9WgXcQ[/blue]"
    )
    console.print(
        f"You can also write this as: [blue]{prog} -v -I -i dQw4w9WgXcQ[/blue]"
    )
    console.print(
        "Value flags in one group take the following arguments in order:"
        f" [blue]{prog} -pAPuo <url> ./music[/blue]"
    )


def print_summary_panel(
    stats: DownloadStats, duration_s: float, console: Optional[Console] = None
):
    """Displays the final summary of a download session."""
    console = console or Console()

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=16)
    stats_table.add_column(style="white", justify="left")

    stats_table.add_row(
        "✓ Downloaded:", f"[bold green]{stats.videos_downloaded}[/bold green]"
    )
    if stats.videos_skipped_exists > 0:
        stats_table.add_row(
            "○ Skipped:", f"[yellow]{stats.videos_skipped_exists} (exists)[/yellow]"
        )
    if stats.videos_failed > 0:
        stats_table.add_row("✗ Failed:", f"[bold red]{stats.videos_failed}[/bold red]")

    stats_table.add_row("", "")
    stats_table.add_row(
        "Total Size:", f"[cyan]{format_size(stats.total_size_downloaded)}[/cyan]"
    )
    stats_table.add_row("Time Elapsed:", f"[blue]{format_duration(duration_s)}[/blue]")

    border_color = "green" if stats.videos_failed == 0 else "yellow"
    console.print()
    console.print(
        Panel(
            stats_table,
            title="[bold]Download Complete![/bold]",
            border_style=border_color,
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )
