"""Audio source helpers.

Small functions for classifying audio sources and reading WAV headers.
Only probe_wav touches the filesystem.
"""

import mimetypes
import wave
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..constants import PLAYBACK_TIMEOUT_MARGIN

URL_SCHEMES = ("http://", "https://", "data:", "blob:", "file://")

# Types mimetypes does not know on every platform
_EXTRA_MIME_TYPES = {
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".ogg": "audio/ogg",
    ".oga": "audio/ogg",
    ".opus": "audio/ogg",
    ".webm": "audio/webm",
    ".m4a": "audio/mp4",
    ".aac": "audio/aac",
    ".flac": "audio/flac",
}


@dataclass(frozen=True)
class AudioInfo:
    """Header information from a WAV file."""

    sample_rate: int
    channels: int
    duration_s: float


def is_url(source: Union[str, Path]) -> bool:
    """Check whether a source is a URL rather than a local path.

    Example:
        >>> is_url("https://example.com/a.mp3")
        True
        >>> is_url("/tmp/a.mp3")
        False
    """
    if isinstance(source, Path):
        return False
    return source.lower().startswith(URL_SCHEMES)


def guess_mime_type(path: Union[str, Path]) -> str:
    """Guess the Content-Type to serve an audio file with.

    Falls back to application/octet-stream and lets the browser sniff.
    """
    suffix = Path(path).suffix.lower()
    if suffix in _EXTRA_MIME_TYPES:
        return _EXTRA_MIME_TYPES[suffix]
    mime, _ = mimetypes.guess_type(str(path))
    return mime or "application/octet-stream"


def probe_wav(path: Union[str, Path]) -> Optional[AudioInfo]:
    """Read sample rate, channels and duration from a WAV header.

    Args:
        path: Path to the audio file

    Returns:
        AudioInfo, or None if the file is not a readable WAV
    """
    path = Path(path)
    if path.suffix.lower() != ".wav" or not path.is_file():
        return None

    try:
        with wave.open(str(path), "rb") as wf:
            sample_rate = wf.getframerate()
            channels = wf.getnchannels()
            frames = wf.getnframes()
    except (wave.Error, EOFError):
        return None

    if sample_rate <= 0:
        return None

    return AudioInfo(
        sample_rate=sample_rate,
        channels=channels,
        duration_s=frames / sample_rate,
    )


def suggest_playback_timeout(
    path: Union[str, Path], margin: float = PLAYBACK_TIMEOUT_MARGIN
) -> Optional[float]:
    """Derive a playback deadline from a WAV file's duration.

    Returns None when the duration cannot be determined.
    """
    info = probe_wav(path)
    if info is None:
        return None
    return info.duration_s + margin
