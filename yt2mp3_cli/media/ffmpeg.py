"""
Makes sure an ffmpeg binary is available next to the working directory and
wraps the ffmpeg invocations used for format conversion.
"""

import asyncio
import io
import logging
import platform
import shlex
import zipfile
from pathlib import Path
from typing import Optional

import aiofiles
import aiohttp

from yt2mp3_cli.exceptions import BootstrapError, TranscodeError

log = logging.getLogger(__name__)

FFBINARIES_RELEASE = (
    "https://github.com/vot/ffbinaries-prebuilt/releases/download/v4.2.1/"
)

ARCHIVE_NAMES = {
    "Windows": "ffmpeg-4.2.1-win-64.zip",
    "Linux": "ffmpeg-4.2.1-linux-64.zip",
    "Darwin": "ffmpeg-4.2.1-osx-64.zip",
}

# Fastest x264/x265 preset, encoders without presets ignore it
CONVERSION_PRESET = "ultrafast"


def is_windows(system: Optional[str] = None) -> bool:
    return (system or platform.system()) == "Windows"


def ffmpeg_binary_name(system: Optional[str] = None) -> str:
    return "ffmpeg.exe" if is_windows(system) else "ffmpeg"


def ffmpeg_archive_url(system: Optional[str] = None) -> str:
    """Returns the prebuilt archive matching the host OS."""
    system = system or platform.system()
    try:
        return FFBINARIES_RELEASE + ARCHIVE_NAMES[system]
    except KeyError:
        raise BootstrapError(f"No prebuilt ffmpeg available for '{system}'") from None


class FFmpegBootstrapper:
    """Downloads and unpacks ffmpeg into a fixed location when it is missing."""

    def __init__(self, directory: Optional[Path] = None, system: Optional[str] = None):
        self.system = system or platform.system()
        self.directory = directory or Path.cwd()

    @property
    def path(self) -> Path:
        return self.directory / ffmpeg_binary_name(self.system)

    def is_present(self) -> bool:
        return self.path.is_file()

    async def ensure(self) -> Path:
        """
        Returns the path to the ffmpeg binary, fetching it first if necessary.

        Raises:
            BootstrapError: If fetching, unpacking, or fixing permissions fails.
        """
        if self.is_present():
            log.debug(f"ffmpeg found at {self.path}")
            return self.path

        url = ffmpeg_archive_url(self.system)
        log.debug(f"Fetching ffmpeg from {url}")
        try:
            archive = await self._fetch_archive(url)
            binary = self._extract(archive, ffmpeg_binary_name(self.system))
            async with aiofiles.open(self.path, "wb") as f:
                await f.write(binary)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise BootstrapError(f"Failed to download ffmpeg: {e}") from e
        except (zipfile.BadZipFile, KeyError) as e:
            raise BootstrapError(f"Failed to unpack ffmpeg: {e}") from e

        if not is_windows(self.system):
            await self._make_executable()
        return self.path

    async def _fetch_archive(self, url: str) -> bytes:
        timeout = aiohttp.ClientTimeout(total=None, sock_connect=15, sock_read=90)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(url, allow_redirects=True) as response:
                response.raise_for_status()
                return await response.read()

    @staticmethod
    def _extract(archive: bytes, entry_name: str) -> bytes:
        with zipfile.ZipFile(io.BytesIO(archive)) as zf:
            return zf.read(entry_name)

    async def _make_executable(self) -> None:
        try:
            proc = await asyncio.create_subprocess_exec(
                "/bin/bash",
                "-c",
                f"chmod +x {shlex.quote(str(self.path))}",
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            _, stderr = await proc.communicate()
        except OSError as e:
            raise BootstrapError(f"Failed to set permissions: {e}") from e
        if proc.returncode != 0:
            raise BootstrapError(
                f"Failed to set permissions: {stderr.decode(errors='replace').strip()}"
            )


class FFmpegConverter:
    """Converts a downloaded stream into another container or codec."""

    def __init__(self, ffmpeg_path: Path, preset: str = CONVERSION_PRESET):
        self.ffmpeg_path = ffmpeg_path
        self.preset = preset

    def build_command(self, source: Path, destination: Path) -> list[str]:
        # The output format follows the destination's extension
        return [
            str(self.ffmpeg_path),
            "-y",
            "-loglevel",
            "error",
            "-i",
            str(source),
            "-preset",
            self.preset,
            str(destination),
        ]

    async def convert(self, source: Path, destination: Path) -> None:
        """
        Runs ffmpeg on `source` and writes `destination`.

        Raises:
            TranscodeError: If ffmpeg cannot be started or exits with an error.
        """
        cmd = self.build_command(source, destination)
        log.debug("Running: " + " ".join(cmd))
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise TranscodeError(f"Could not start ffmpeg: {e}") from e
        _, stderr = await proc.communicate()
        if proc.returncode != 0:
            message = stderr.decode(errors="replace").strip().splitlines()
            raise TranscodeError(
                f"ffmpeg exited with code {proc.returncode}"
                + (f": {message[-1]}" if message else "")
            )
