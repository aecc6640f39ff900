"""Tests for audio source helpers."""

import wave
from pathlib import Path

import pytest

from webspeech_transcriber.audio.processing import (
    AudioInfo,
    guess_mime_type,
    is_url,
    probe_wav,
    suggest_playback_timeout,
)


def write_wav(path: Path, seconds: float, sample_rate: int = 16000, channels: int = 1) -> Path:
    """Write a silent 16-bit WAV file."""
    frames = int(seconds * sample_rate)
    with wave.open(str(path), "wb") as wf:
        wf.setnchannels(channels)
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(b"\x00\x00" * frames * channels)
    return path


class TestIsUrl:
    """Tests for is_url."""

    @pytest.mark.parametrize(
        "source",
        [
            "http://example.com/a.mp3",
            "https://example.com/a.mp3",
            "HTTPS://EXAMPLE.COM/A.MP3",
            "data:audio/wav;base64,AAAA",
            "blob:https://example.com/123",
            "file:///tmp/a.wav",
        ],
    )
    def test_urls(self, source):
        assert is_url(source) is True

    @pytest.mark.parametrize("source", ["/tmp/a.mp3", "a.mp3", "./clips/http.mp3", "C:\\a.wav"])
    def test_paths(self, source):
        assert is_url(source) is False

    def test_path_object(self):
        """Path objects are never URLs."""
        assert is_url(Path("https:/odd")) is False


class TestGuessMimeType:
    """Tests for guess_mime_type."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("clip.mp3", "audio/mpeg"),
            ("clip.WAV", "audio/wav"),
            ("clip.ogg", "audio/ogg"),
            ("clip.opus", "audio/ogg"),
            ("clip.webm", "audio/webm"),
            ("clip.m4a", "audio/mp4"),
            ("clip.flac", "audio/flac"),
        ],
    )
    def test_audio_types(self, name, expected):
        assert guess_mime_type(name) == expected

    def test_unknown_extension(self):
        """Unknown extensions fall back to octet-stream."""
        assert guess_mime_type("clip.zzzunknown") == "application/octet-stream"


class TestProbeWav:
    """Tests for probe_wav."""

    def test_reads_header(self, tmp_path):
        """Should read rate, channels and duration."""
        path = write_wav(tmp_path / "clip.wav", seconds=1.5, sample_rate=8000, channels=2)
        info = probe_wav(path)
        assert info == AudioInfo(sample_rate=8000, channels=2, duration_s=1.5)

    def test_accepts_string_path(self, tmp_path):
        path = write_wav(tmp_path / "clip.wav", seconds=0.5)
        info = probe_wav(str(path))
        assert info is not None
        assert info.duration_s == pytest.approx(0.5)

    def test_missing_file(self, tmp_path):
        assert probe_wav(tmp_path / "missing.wav") is None

    def test_not_wav_extension(self, tmp_path):
        path = tmp_path / "clip.mp3"
        path.write_bytes(b"ID3")
        assert probe_wav(path) is None

    def test_corrupt_wav(self, tmp_path):
        """Garbage with a .wav name should not raise."""
        path = tmp_path / "clip.wav"
        path.write_bytes(b"not a wav file at all")
        assert probe_wav(path) is None


class TestSuggestPlaybackTimeout:
    """Tests for suggest_playback_timeout."""

    def test_adds_margin(self, tmp_path):
        path = write_wav(tmp_path / "clip.wav", seconds=2.0)
        assert suggest_playback_timeout(path, margin=1.0) == pytest.approx(3.0)

    def test_unknown_duration(self, tmp_path):
        assert suggest_playback_timeout(tmp_path / "clip.mp3") is None
