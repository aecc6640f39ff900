"""Transcription module - thin orchestration layer."""

from .session import (
    PageSpeechRecognizer,
    SpeechRecognizer,
    WebSpeechSession,
    transcribe_file,
)

__all__ = [
    "PageSpeechRecognizer",
    "SpeechRecognizer",
    "WebSpeechSession",
    "transcribe_file",
]
