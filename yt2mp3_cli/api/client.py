"""
Async facade over the pytubefix client library.

pytubefix is synchronous, so every call that may touch the network runs in a
worker thread. The facade converts pytubefix objects into the descriptors from
`yt2mp3_cli.models.media` and keeps the raw stream object as the variant handle.
"""

import asyncio
import logging
import os
import re
from collections import OrderedDict
from pathlib import Path
from typing import Any, AsyncIterator, List, Optional

from pytubefix import Playlist, YouTube

from yt2mp3_cli.models.config import MAX_WORKERS, MediaKind
from yt2mp3_cli.models.media import PlaylistInfo, StreamVariant, VideoInfo

log = logging.getLogger(__name__)

_VIDEO_ID_PATTERN = re.compile(r"^[0-9A-Za-z_-]{11}$")


def video_url(reference: str) -> str:
    """Turns a bare video ID into a watch URL; URLs are returned unchanged."""
    if _VIDEO_ID_PATTERN.match(reference):
        return f"https://www.youtube.com/watch?v={reference}"
    return reference


def playlist_url(reference: str) -> str:
    """Turns a bare playlist ID into a playlist URL; URLs are returned unchanged."""
    if "/" not in reference and "=" not in reference:
        return f"https://www.youtube.com/playlist?list={reference}"
    return reference


def _parse_resolution(value: Optional[str]) -> Optional[int]:
    """'1080p' / '1080p60' -> 1080."""
    if not value:
        return None
    match = re.match(r"(\d+)", value)
    return int(match.group(1)) if match else None


def _stream_kind(stream: Any) -> MediaKind:
    if stream.is_progressive:
        return MediaKind.MUXED
    if stream.includes_video_track:
        return MediaKind.VIDEO
    return MediaKind.AUDIO


def to_variant(stream: Any) -> StreamVariant:
    """Converts a pytubefix Stream into a StreamVariant."""
    kind = _stream_kind(stream)
    return StreamVariant(
        itag=int(stream.itag),
        kind=kind,
        container=stream.subtype,
        bitrate=int(stream.bitrate or 0),
        resolution=(
            _parse_resolution(stream.resolution) if kind != MediaKind.AUDIO else None
        ),
        handle=stream,
    )


class YouTubeClient:
    """
    Async client for video metadata, playlist membership, stream manifests and
    stream transfers.
    """

    def __init__(self, max_cached_videos: int = MAX_WORKERS) -> None:
        # Keeps the most recent YouTube objects around so that resolving
        # streams after metadata does not fetch the watch page twice.
        self._videos: OrderedDict[str, YouTube] = OrderedDict()
        self._max_cached_videos = max_cached_videos

    async def _get_youtube(self, reference: str) -> YouTube:
        url = video_url(reference)
        if url in self._videos:
            self._videos.move_to_end(url)
            return self._videos[url]

        yt = await asyncio.to_thread(YouTube, url)
        self._videos[url] = yt

        # Evict oldest if over limit
        while len(self._videos) > self._max_cached_videos:
            self._videos.popitem(last=False)
        return yt

    async def get_video(self, reference: str) -> VideoInfo:
        """Resolves the metadata of a video from its URL or ID."""
        yt = await self._get_youtube(reference)
        return await asyncio.to_thread(self._video_info, yt)

    @staticmethod
    def _video_info(yt: YouTube) -> VideoInfo:
        # Each attribute may trigger a lazy page fetch inside pytubefix
        return VideoInfo(
            id=yt.video_id,
            title=yt.title or yt.video_id,
            author=yt.author or "Unknown",
            duration=int(yt.length or 0),
            views=int(yt.views or 0),
            likes=YouTubeClient._likes(yt),
            description=yt.description or "",
            url=yt.watch_url,
        )

    @staticmethod
    def _likes(yt: YouTube) -> Optional[int]:
        # Like counts are scraped from the page layout and often missing
        try:
            return int(yt.likes)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            log.debug(f"No like count for '{yt.video_id}': {e}")
            return None

    async def get_playlist(self, reference: str) -> PlaylistInfo:
        """Resolves the metadata of a playlist from its URL or ID."""
        playlist = await asyncio.to_thread(Playlist, playlist_url(reference))
        return await asyncio.to_thread(self._playlist_info, playlist)

    @staticmethod
    def _playlist_info(playlist: Playlist) -> PlaylistInfo:
        return PlaylistInfo(
            id=playlist.playlist_id,
            title=playlist.title or playlist.playlist_id,
            author=playlist.owner or "Unknown",
            description=playlist.description or "",
            url=playlist.playlist_url,
        )

    async def iter_playlist_videos(self, playlist: PlaylistInfo) -> AsyncIterator[str]:
        """
        Yields the watch URLs of a playlist's members. Pages are only fetched
        when the consumer asks for the next member.
        """
        source = await asyncio.to_thread(
            Playlist, playlist.url or playlist_url(playlist.id)
        )
        urls = iter(source.video_urls)
        sentinel = object()
        while True:
            url = await asyncio.to_thread(next, urls, sentinel)
            if url is sentinel:
                return
            yield url

    async def get_stream_variants(self, video: VideoInfo) -> List[StreamVariant]:
        """Resolves every stream variant offered for a video."""
        yt = await self._get_youtube(video.url or video.id)
        streams = await asyncio.to_thread(lambda: list(yt.streams))
        log.debug(f"{len(streams)} streams available for '{video.id}'")
        return [to_variant(s) for s in streams]

    async def download_stream(self, variant: StreamVariant, destination: Path) -> int:
        """
        Copies the bytes of a stream variant to `destination`.

        Returns:
            The size of the written file in bytes.
        """
        written = await asyncio.to_thread(
            variant.handle.download,
            output_path=str(destination.parent),
            filename=destination.name,
            skip_existing=False,
        )
        # pytubefix may adjust the name it was given
        if written and Path(written).resolve() != destination.resolve():
            await asyncio.to_thread(os.replace, written, destination)
        return destination.stat().st_size if destination.exists() else 0
