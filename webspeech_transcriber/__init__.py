"""Transcribe audio files with a browser's native Web Speech API."""

from .livetypes import (
    ExecutionError,
    InitializationError,
    NotInitializedError,
    PlaybackError,
    RecognitionError,
    SessionAlreadyActiveError,
    TranscriptionError,
    TranscriptionTimeoutError,
    WebSpeechError,
)
from .protocols.page import RecognitionConfig, TimeoutConfig
from .transcription.session import (
    PageSpeechRecognizer,
    SpeechRecognizer,
    WebSpeechSession,
    transcribe_file,
)
from .transport.browser_client import BrowserConfig

__version__ = "1.0.0"

__all__ = [
    "BrowserConfig",
    "ExecutionError",
    "InitializationError",
    "NotInitializedError",
    "PageSpeechRecognizer",
    "PlaybackError",
    "RecognitionConfig",
    "RecognitionError",
    "SessionAlreadyActiveError",
    "SpeechRecognizer",
    "TimeoutConfig",
    "TranscriptionError",
    "TranscriptionTimeoutError",
    "WebSpeechError",
    "WebSpeechSession",
    "transcribe_file",
]
