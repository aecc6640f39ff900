"""Audio source helpers."""

from .processing import (
    AudioInfo,
    guess_mime_type,
    is_url,
    probe_wav,
    suggest_playback_timeout,
)

__all__ = [
    "AudioInfo",
    "guess_mime_type",
    "is_url",
    "probe_wav",
    "suggest_playback_timeout",
]
