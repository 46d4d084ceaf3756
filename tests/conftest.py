import asyncio
import io
from pathlib import Path
from typing import Optional

import pytest
from rich.console import Console

from yt2mp3_cli.cli.reporter import Reporter
from yt2mp3_cli.models.config import MediaKind
from yt2mp3_cli.models.media import PlaylistInfo, StreamVariant, VideoInfo


def make_variants() -> list[StreamVariant]:
    return [
        StreamVariant(18, MediaKind.MUXED, "mp4", bitrate=500_000, resolution=360),
        StreamVariant(22, MediaKind.MUXED, "mp4", bitrate=900_000, resolution=720),
        StreamVariant(137, MediaKind.VIDEO, "mp4", bitrate=4_000_000, resolution=1080),
        StreamVariant(248, MediaKind.VIDEO, "webm", bitrate=2_500_000, resolution=1080),
        StreamVariant(140, MediaKind.AUDIO, "m4a", bitrate=128_000),
        StreamVariant(251, MediaKind.AUDIO, "webm", bitrate=160_000),
    ]


class FakeClient:
    """In-memory stand-in for YouTubeClient."""

    def __init__(self, videos=None, members=None, variants=None, delay=0.0):
        self.videos: dict[str, VideoInfo] = videos or {}
        self.members: list[str] = members or []
        self.variants: dict[str, list[StreamVariant]] = variants or {}
        self.delay = delay
        self.transfer_error: Optional[Exception] = None
        self.transfers: list[Path] = []
        self.resolved: list[str] = []
        self.in_flight = 0
        self.peak_in_flight = 0

    async def get_video(self, reference: str) -> VideoInfo:
        self.resolved.append(reference)
        video = self.videos.get(reference)
        if video is None:
            raise RuntimeError(f"Video unavailable: {reference}")
        return video

    async def get_playlist(self, reference: str) -> PlaylistInfo:
        return PlaylistInfo(id=reference, title="Mix", author="Someone", url="")

    async def iter_playlist_videos(self, playlist):
        for url in self.members:
            yield url

    async def get_stream_variants(self, video: VideoInfo):
        return self.variants.get(video.id, make_variants())

    async def download_stream(self, variant: StreamVariant, destination: Path) -> int:
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            self.transfers.append(destination)
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.transfer_error is not None:
                destination.write_bytes(b"partial")
                raise self.transfer_error
            destination.write_bytes(b"x" * 10)
            return 10
        finally:
            self.in_flight -= 1


class FakeConverter:
    def __init__(self):
        self.calls: list[tuple[Path, Path]] = []

    async def convert(self, source: Path, destination: Path) -> None:
        self.calls.append((source, destination))
        destination.write_bytes(source.read_bytes())


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def reporter(output) -> Reporter:
    return Reporter(Console(file=output, width=200, color_system=None))


def video(video_id: str, title: str = None) -> VideoInfo:
    return VideoInfo(
        id=video_id,
        title=title or f"Video {video_id}",
        duration=185,
        url=f"https://www.youtube.com/watch?v={video_id}",
    )


def saved_files(directory: Path) -> list[str]:
    """Names of the files left in `directory`, sorted."""
    return sorted(p.name for p in directory.iterdir() if p.is_file())
