"""
Handles the processing of a single video, from stream selection to the file
on disk.
"""

import asyncio
import logging
from pathlib import Path

from yt2mp3_cli.api.client import YouTubeClient
from yt2mp3_cli.cli.reporter import CursorMark, Level, Reporter
from yt2mp3_cli.exceptions import StreamNotFoundError
from yt2mp3_cli.media import Downloader
from yt2mp3_cli.models.config import DownloadConfig
from yt2mp3_cli.models.media import VideoInfo
from yt2mp3_cli.models.stats import DownloadStats
from yt2mp3_cli.utils.formatting import format_clock
from yt2mp3_cli.utils.path import build_output_name

from .selection import select_variant

log = logging.getLogger(__name__)


class PathClaims:
    """
    Remembers which output paths are taken in this session so that two
    concurrent videos with the same name are not both written.
    """

    def __init__(self) -> None:
        self._claimed: set[Path] = set()
        self._lock = asyncio.Lock()

    async def claim(self, path: Path) -> bool:
        """Returns True if the caller may write `path`, False if it is taken."""
        async with self._lock:
            if path in self._claimed or await asyncio.to_thread(path.exists):
                return False
            self._claimed.add(path)
            return True

    async def release(self, path: Path) -> None:
        """Gives up a claim whose file was never written."""
        async with self._lock:
            self._claimed.discard(path)


class ItemProcessor:
    """Downloads one video according to the configuration."""

    def __init__(
        self,
        config: DownloadConfig,
        client: YouTubeClient,
        downloader: Downloader,
        stats: DownloadStats,
        reporter: Reporter,
        output_dir: Path,
    ):
        self.config = config
        self.client = client
        self.downloader = downloader
        self.stats = stats
        self.reporter = reporter
        self.output_dir = output_dir
        self.claims = PathClaims()

    def target_path(self, video: VideoInfo, container: str) -> Path:
        """The file a video is saved to, honouring the format override."""
        extension = self.config.target_format or container
        return self.output_dir / build_output_name(video.title, extension, video.id)

    def _finish_line(self, mark: CursorMark) -> None:
        # Parallel downloads print whole lines, there is no open line to rewrite
        if not self.config.parallel:
            self.reporter.restore_cursor(mark)

    async def process(self, video: VideoInfo) -> None:
        """
        Selects the best stream for the configured media type and saves it.

        Raises:
            StreamNotFoundError: If no stream of the requested type exists.
            Exception: Anything raised by the transfer or the conversion.
        """
        variants = await self.client.get_stream_variants(video)
        converting = self.config.target_format is not None

        self.reporter.alert(
            f"- Downloading {'(and converting) ' if converting else ''}"
            f"{video.title} ({format_clock(video.duration)})... ",
            newline=self.config.parallel,
        )
        mark = self.reporter.capture_cursor()

        variant = select_variant(variants, self.config.media_kind)
        if variant is None:
            self._finish_line(mark)
            raise StreamNotFoundError(
                f"Could not get stream information for '{video.title}'"
            )
        log.debug(f"Selected {variant.label} (itag {variant.itag}) for '{video.id}'")

        path = self.target_path(video, variant.container)
        claimed = self.config.skip_existing
        if claimed and not await self.claims.claim(path):
            self._finish_line(mark)
            self.reporter.alert(
                f"SKIPPED {video.title}" if self.config.parallel else "SKIPPED",
                Level.WARNING,
            )
            await self.stats.record_skipped()
            return

        try:
            size = await self.downloader.download(variant, path, convert=converting)
        except Exception:
            if claimed:
                await self.claims.release(path)
            self._finish_line(mark)
            raise

        self._finish_line(mark)
        self.reporter.alert(f"DONE {video.title}", Level.SUCCESS)
        await self.stats.record_downloaded(size)
