"""
The main orchestrator: resolves the configured video or playlist and hands
each video to the ItemProcessor.
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Optional

from yt2mp3_cli.api.client import YouTubeClient
from yt2mp3_cli.cli.formatters import (
    print_playlist_info,
    print_summary_panel,
    print_video_info,
)
from yt2mp3_cli.cli.reporter import Level, Reporter
from yt2mp3_cli.exceptions import UsageError
from yt2mp3_cli.media import Downloader, FFmpegConverter
from yt2mp3_cli.models.config import DownloadConfig, DownloadKind
from yt2mp3_cli.models.stats import DownloadStats
from yt2mp3_cli.utils.path import create_dir

from .item_processor import ItemProcessor

log = logging.getLogger(__name__)


class DownloadManager:
    """Orchestrates a whole run for one configuration."""

    def __init__(
        self,
        config: DownloadConfig,
        client: YouTubeClient,
        reporter: Reporter,
        converter: Optional[FFmpegConverter] = None,
    ):
        self.config = config
        self.client = client
        self.reporter = reporter
        self.stats = DownloadStats()
        self.output_dir = Path(config.output_dir) if config.output_dir else Path.cwd()
        self.processor = ItemProcessor(
            config,
            client,
            Downloader(client, converter),
            self.stats,
            reporter,
            self.output_dir,
        )

    def _report_error(self, error: Exception) -> None:
        self.reporter.alert(
            str(error) or type(error).__name__, Level.ERROR, show_level=True
        )
        log.debug("Full traceback:", exc_info=True)

    async def run(self) -> None:
        """
        Resolves and downloads (or describes) whatever the configuration points
        at. Errors are reported here and never propagate to the caller.
        """
        try:
            self.config.ensure_ready()
        except UsageError as e:
            self.reporter.alert(str(e), Level.ERROR)
            return

        start_time = time.monotonic()
        try:
            if self.config.download_kind == DownloadKind.PLAYLIST:
                downloading = await self._process_playlist()
            else:
                downloading = await self._process_video()
        except Exception as e:
            self._report_error(e)
            return

        if downloading:
            print_summary_panel(
                self.stats, time.monotonic() - start_time, self.reporter.console
            )

    async def _process_video(self) -> bool:
        video = await self.client.get_video(self.config.identifier)
        if self.config.show_info:
            print_video_info(video, self.reporter.console)
            return False

        create_dir(self.output_dir)
        try:
            await self.processor.process(video)
        except Exception as e:
            await self.stats.record_failed()
            self._report_error(e)
        return True

    async def _process_playlist(self) -> bool:
        playlist = await self.client.get_playlist(self.config.identifier)
        if self.config.show_info:
            print_playlist_info(playlist, self.reporter.console)
            return False

        create_dir(self.output_dir)
        self.reporter.alert(
            f'Downloading playlist "{playlist.title}". This could take a moment',
            Level.INFO,
        )

        if not self.config.parallel:
            async for url in self.client.iter_playlist_videos(playlist):
                await self._process_member(url)
            return True

        # The slot is taken before the task is created, so the playlist is
        # never read further ahead than the free workers.
        semaphore = asyncio.Semaphore(self.config.max_workers)
        tasks: set[asyncio.Task] = set()

        def _release(task: asyncio.Task) -> None:
            tasks.discard(task)
            semaphore.release()

        try:
            async for url in self.client.iter_playlist_videos(playlist):
                await semaphore.acquire()
                task = asyncio.create_task(self._process_member(url))
                tasks.add(task)
                task.add_done_callback(_release)
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            raise
        finally:
            if tasks:
                await asyncio.gather(*tasks, return_exceptions=True)
        return True

    async def _process_member(self, url: str) -> None:
        """Resolves and downloads one playlist member, isolating its failures."""
        try:
            video = await self.client.get_video(url)
            await self.processor.process(video)
        except Exception as e:
            await self.stats.record_failed()
            self._report_error(e)
