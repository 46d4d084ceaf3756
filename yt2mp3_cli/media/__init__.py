"""
Media Processing Layer.

This package is responsible for all media file operations: writing streams to
disk, converting them with ffmpeg, and bootstrapping the ffmpeg binary.
"""

from .downloader import Downloader
from .ffmpeg import FFmpegBootstrapper, FFmpegConverter

__all__ = ["Downloader", "FFmpegBootstrapper", "FFmpegConverter"]
