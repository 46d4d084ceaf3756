"""
Descriptors for the remote objects the application works with. They are
filled in by the API client so that the rest of the code never touches
pytubefix objects directly.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from .config import MediaKind


@dataclass
class VideoInfo:
    """Metadata of a single video."""

    id: str
    title: str
    author: str = "Unknown"
    duration: int = 0  # seconds
    views: int = 0
    likes: Optional[int] = None
    description: str = ""
    url: str = ""


@dataclass
class PlaylistInfo:
    """Metadata of a playlist. Its members are enumerated separately."""

    id: str
    title: str
    author: str = "Unknown"
    description: str = ""
    url: str = ""


@dataclass
class StreamVariant:
    """One concrete rendition of a video offered by the stream manifest."""

    itag: int
    kind: MediaKind
    container: str
    bitrate: int = 0  # bits per second
    resolution: Optional[int] = None  # height in pixels, None for audio
    handle: Any = field(default=None, repr=False, compare=False)

    @property
    def label(self) -> str:
        """Short human readable description, e.g. '720p mp4' or '160 kbps webm'."""
        if self.resolution:
            return f"{self.resolution}p {self.container}"
        return f"{self.bitrate // 1000} kbps {self.container}"
