"""Pydantic models, enums and exceptions for the Web Speech transcriber."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class OutcomeStatus(str, Enum):
    """Status reported by the in-page routine."""

    OK = "ok"
    PLAYBACK_ERROR = "playback_error"
    RECOGNITION_ERROR = "recognition_error"
    TIMEOUT = "timeout"
    EXECUTION_ERROR = "execution_error"


class PageOutcome(BaseModel):
    """Envelope the recognition page resolves with for every call."""

    status: OutcomeStatus = Field(..., description="How the in-page routine ended")
    transcript: Optional[str] = Field(default=None, description="Recognized text on success")
    error: Optional[str] = Field(default=None, description="Error value reported by the page")
    stage: Optional[str] = Field(default=None, description="playback or recognition")
    code: Optional[int] = Field(default=None, description="MediaError code for playback failures")


# Exceptions
class WebSpeechError(Exception):
    """Base exception for all transcriber errors."""

    pass


class InitializationError(WebSpeechError):
    """Browser or page setup failed."""

    pass


class SessionAlreadyActiveError(InitializationError):
    """initialize() was called while a browser session is still live."""

    pass


class NotInitializedError(WebSpeechError):
    """A page operation was attempted before initialize() succeeded."""

    pass


class TranscriptionError(WebSpeechError):
    """Base exception for failures of a single transcription call."""

    pass


class PlaybackError(TranscriptionError):
    """The audio element failed to load or play."""

    error: Optional[str]
    code: Optional[int]

    def __init__(self, message: str, error: Optional[str] = None, code: Optional[int] = None):
        super().__init__(message)
        self.error = error
        self.code = code


class RecognitionError(TranscriptionError):
    """The native capability is unsupported or reported an error."""

    error: Optional[str]

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.error = error


class ExecutionError(TranscriptionError):
    """Any other fault while running the in-page routine."""

    pass


class TranscriptionTimeoutError(TranscriptionError):
    """A playback or recognition deadline expired."""

    stage: str

    def __init__(self, message: str, stage: str = "host"):
        super().__init__(message)
        self.stage = stage
