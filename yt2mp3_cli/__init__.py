"""
yt2mp3-cli: download YouTube videos and playlists, optionally converting them
with ffmpeg.
"""

__version__ = "1.0.0"
