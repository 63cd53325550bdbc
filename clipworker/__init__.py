"""Clip / audio-extraction worker: download, ffmpeg, upload to storage."""

__version__ = "1.0.0"
