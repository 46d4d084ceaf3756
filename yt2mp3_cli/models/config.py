"""
Pydantic model for the per-invocation download configuration.
The argument parser fills it in token by token; the download manager consumes it.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from yt2mp3_cli.exceptions import MissingIdentifierError, MissingMediaKindError


class DownloadKind(str, Enum):
    """What the identifier points at."""

    VIDEO = "video"
    PLAYLIST = "playlist"


class MediaKind(str, Enum):
    """Which kind of stream to pick from a video's manifest."""

    VIDEO = "video"
    AUDIO = "audio"
    MUXED = "muxed"


# Accepted spellings for the `-m` flag
MEDIA_KIND_ALIASES = {
    "v": MediaKind.VIDEO,
    "video": MediaKind.VIDEO,
    "a": MediaKind.AUDIO,
    "audio": MediaKind.AUDIO,
    "m": MediaKind.MUXED,
    "muxed": MediaKind.MUXED,
}

MIN_WORKERS = 1
MAX_WORKERS = 32


def media_kind_from_name(name: str) -> Optional[MediaKind]:
    """Maps a user supplied media type name to a MediaKind, or None if unknown."""
    return MEDIA_KIND_ALIASES.get(name.strip().lower())


class DownloadConfig(BaseModel):
    """A validated configuration model for one run of the application."""

    download_kind: DownloadKind = DownloadKind.VIDEO
    media_kind: Optional[MediaKind] = None

    # Identifier, an ID takes precedence over a URL when both are given
    url: Optional[str] = None
    video_id: Optional[str] = None

    # Output
    output_dir: Optional[str] = None
    target_format: Optional[str] = None

    # Flags
    show_info: bool = False
    skip_existing: bool = False
    parallel: bool = False
    max_workers: int = 4
    verbose: bool = False

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    @field_validator("target_format")
    @classmethod
    def normalize_format(cls, v: Optional[str]) -> Optional[str]:
        """Stores the format as a bare, lower-case extension ('.MP3' -> 'mp3')."""
        if v is None:
            return None
        v = v.lstrip(".").lower()
        return v or None

    @field_validator("max_workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        """Ensures a reasonable number of workers."""
        if v < MIN_WORKERS or v > MAX_WORKERS:
            raise ValueError(
                f"Max workers must be between {MIN_WORKERS} and {MAX_WORKERS}."
            )
        return v

    @property
    def identifier(self) -> Optional[str]:
        """The reference handed to the client: the ID if present, else the URL."""
        return self.video_id or self.url

    def ensure_ready(self) -> None:
        """
        Checks that the configuration describes something that can be resolved.

        Raises:
            MissingIdentifierError: If neither a URL nor an ID was provided.
            MissingMediaKindError: If a download was requested without a media type.
        """
        if not self.identifier:
            raise MissingIdentifierError("No videoURL or videoID provided")
        if self.media_kind is None and not self.show_info:
            raise MissingMediaKindError(
                "No valid media type provided. Please enter -V for video or -A for"
                " audio"
            )
