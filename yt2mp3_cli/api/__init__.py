"""
YouTube API Layer.

This package handles all communication with YouTube through pytubefix.
"""

from .client import YouTubeClient

__all__ = ["YouTubeClient"]
