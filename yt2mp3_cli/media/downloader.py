"""
Handles the transfer of a chosen stream variant to disk, either as a direct
copy or through ffmpeg when another output format was requested.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Optional

from yt2mp3_cli.api.client import YouTubeClient
from yt2mp3_cli.models.media import StreamVariant

from .ffmpeg import FFmpegConverter

log = logging.getLogger(__name__)


class Downloader:
    """Writes stream variants to their final location."""

    def __init__(self, client: YouTubeClient, converter: Optional[FFmpegConverter]):
        self.client = client
        self.converter = converter

    async def download(
        self, variant: StreamVariant, destination: Path, convert: bool = False
    ) -> int:
        """
        Saves `variant` at `destination`.

        The stream is always fetched into a temporary file next to the target,
        which is only moved into place (or converted) once the transfer
        completed. A failed transfer leaves nothing at `destination`.

        Args:
            variant: The stream to fetch.
            destination: Final file path, its extension selects the ffmpeg format.
            convert: Run the stream through ffmpeg instead of copying it as is.

        Returns:
            The size of the final file in bytes.
        """
        if convert and self.converter is None:
            raise RuntimeError("A format conversion was requested without ffmpeg.")

        temp_path = destination.with_name(
            f"{destination.stem}.{variant.itag}.{variant.container}.tmp"
        )
        try:
            await self.client.download_stream(variant, temp_path)
            if convert:
                await self.converter.convert(temp_path, destination)
            else:
                await asyncio.to_thread(os.replace, temp_path, destination)
        finally:
            if await asyncio.to_thread(temp_path.exists):
                try:
                    os.remove(temp_path)
                except OSError as e:
                    log.debug(f"Could not remove temporary file '{temp_path}': {e}")
        return destination.stat().st_size if destination.exists() else 0
