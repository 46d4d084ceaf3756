"""
Data Models Layer.

This package contains the configuration model and the plain data structures
used throughout the application: remote descriptors and session statistics.
"""

from .config import DownloadConfig, DownloadKind, MediaKind
from .media import PlaylistInfo, StreamVariant, VideoInfo
from .stats import DownloadStats

__all__ = [
    "DownloadConfig",
    "DownloadKind",
    "DownloadStats",
    "MediaKind",
    "PlaylistInfo",
    "StreamVariant",
    "VideoInfo",
]
