"""
Core application engine for orchestrating the download process.

This package contains the primary logic. The `DownloadManager` resolves the
requested video or playlist and delegates each video to the `ItemProcessor`,
which picks a stream and saves it.
"""
