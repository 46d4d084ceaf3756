"""
Picks the stream variant to download for a requested media kind.
"""

from typing import Iterable, Optional

from yt2mp3_cli.models.config import MediaKind
from yt2mp3_cli.models.media import StreamVariant


def _quality_key(variant: StreamVariant) -> tuple[int, int]:
    return (variant.resolution or 0, variant.bitrate)


def select_variant(
    variants: Iterable[StreamVariant], kind: MediaKind
) -> Optional[StreamVariant]:
    """
    Returns the best variant of the requested kind, or None if there is none.

    Audio-only variants are ranked by bitrate. Video-only and muxed variants
    are ranked by resolution, with bitrate breaking ties.
    """
    candidates = [v for v in variants if v.kind == kind]
    if not candidates:
        return None
    if kind == MediaKind.AUDIO:
        return max(candidates, key=lambda v: v.bitrate)
    return max(candidates, key=_quality_key)
