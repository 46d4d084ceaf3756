"""
Dataclass for tracking download session statistics.
"""

import asyncio
from dataclasses import dataclass, field


@dataclass
class DownloadStats:
    """Counts what happened to each video of a download session."""

    videos_downloaded: int = 0
    videos_skipped_exists: int = 0
    videos_failed: int = 0
    total_size_downloaded: int = 0
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    async def record_downloaded(self, size: int) -> None:
        async with self._lock:
            self.videos_downloaded += 1
            self.total_size_downloaded += size

    async def record_skipped(self) -> None:
        async with self._lock:
            self.videos_skipped_exists += 1

    async def record_failed(self) -> None:
        async with self._lock:
            self.videos_failed += 1

    @property
    def total(self) -> int:
        return self.videos_downloaded + self.videos_skipped_exists + self.videos_failed
