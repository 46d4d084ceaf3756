"""
Utilities for handling file paths, output names, and URL recognition.
"""

import re
from pathlib import Path

from pathvalidate import sanitize_filename

# Substrings that identify a link to a single video
_VIDEO_URL_PATTERN = re.compile(r"[?&]v=|youtu\.be/|/shorts/")


def is_video_url(token: str) -> bool:
    """Returns True if the token looks like a link to a single video."""
    return bool(_VIDEO_URL_PATTERN.search(token))


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)


def build_output_name(title: str, extension: str, fallback: str = "video") -> str:
    """
    Builds a file name from a video title and an extension, removing every
    character that is not allowed in file or path names on any platform.
    """
    stem = sanitize_filename(title, platform="universal").strip()
    if not stem:
        stem = sanitize_filename(fallback, platform="universal") or "video"
    return f"{stem}.{extension.lstrip('.')}"
