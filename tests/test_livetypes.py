"""Tests for livetypes module."""

import pytest
from pydantic import ValidationError

from webspeech_transcriber.livetypes import (
    ExecutionError,
    InitializationError,
    NotInitializedError,
    OutcomeStatus,
    PageOutcome,
    PlaybackError,
    RecognitionError,
    SessionAlreadyActiveError,
    TranscriptionError,
    TranscriptionTimeoutError,
    WebSpeechError,
)


class TestPageOutcome:
    """Tests for PageOutcome model."""

    def test_valid_outcome(self):
        """Should create valid outcome."""
        outcome = PageOutcome(status="ok", transcript="hello")
        assert outcome.status == OutcomeStatus.OK
        assert outcome.transcript == "hello"

    def test_defaults(self):
        """Optional fields should default to None."""
        outcome = PageOutcome(status="timeout")
        assert outcome.transcript is None
        assert outcome.error is None
        assert outcome.stage is None
        assert outcome.code is None

    def test_status_required(self):
        """Should require status."""
        with pytest.raises(ValidationError):
            PageOutcome()

    def test_invalid_status(self):
        """Should reject unknown statuses."""
        with pytest.raises(ValidationError):
            PageOutcome(status="unknown")

    def test_ignores_extra_fields(self):
        """Extra keys from the page should not break parsing."""
        outcome = PageOutcome.model_validate({"status": "ok", "transcript": "a", "debug": 1})
        assert outcome.transcript == "a"


class TestOutcomeStatus:
    """Tests for OutcomeStatus enum."""

    def test_values(self):
        """Values should match the strings the page sends."""
        assert OutcomeStatus.OK.value == "ok"
        assert OutcomeStatus.PLAYBACK_ERROR.value == "playback_error"
        assert OutcomeStatus.RECOGNITION_ERROR.value == "recognition_error"
        assert OutcomeStatus.TIMEOUT.value == "timeout"
        assert OutcomeStatus.EXECUTION_ERROR.value == "execution_error"


class TestExceptions:
    """Tests for exception classes."""

    def test_hierarchy(self):
        """All errors should derive from WebSpeechError."""
        for cls in (
            InitializationError,
            SessionAlreadyActiveError,
            NotInitializedError,
            PlaybackError,
            RecognitionError,
            ExecutionError,
            TranscriptionTimeoutError,
        ):
            assert issubclass(cls, WebSpeechError)

    def test_already_active_is_initialization_error(self):
        assert issubclass(SessionAlreadyActiveError, InitializationError)

    def test_call_failures_are_transcription_errors(self):
        for cls in (PlaybackError, RecognitionError, ExecutionError, TranscriptionTimeoutError):
            assert issubclass(cls, TranscriptionError)
        assert not issubclass(NotInitializedError, TranscriptionError)

    def test_playback_error_fields(self):
        """PlaybackError should carry error and code."""
        exc = PlaybackError("failed", error="Format error", code=4)
        assert str(exc) == "failed"
        assert exc.error == "Format error"
        assert exc.code == 4

    def test_playback_error_defaults(self):
        exc = PlaybackError("failed")
        assert exc.error is None
        assert exc.code is None

    def test_recognition_error_value(self):
        """RecognitionError should carry the capability's value."""
        exc = RecognitionError("failed", error="no-speech")
        assert exc.error == "no-speech"

    def test_timeout_stage(self):
        """Timeout should default to the host stage."""
        assert TranscriptionTimeoutError("late").stage == "host"
        assert TranscriptionTimeoutError("late", stage="playback").stage == "playback"
