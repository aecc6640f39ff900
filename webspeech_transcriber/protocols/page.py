"""Recognition page protocol.

Pure functions and data for:
- The script injected into the recognition page
- Recognition and timeout configuration sent across the page boundary
- Parsing the envelope the page resolves with

No I/O, no browser handles - just data transformations.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import ValidationError

from ..constants import (
    BRIDGE_NAME,
    DEFAULT_CONTINUOUS,
    DEFAULT_INTERIM_RESULTS,
    DEFAULT_LANGUAGE,
    DEFAULT_MAX_ALTERNATIVES,
    ENV_LANGUAGE,
    ENV_PLAYBACK_TIMEOUT,
    ENV_RECOGNITION_TIMEOUT,
    HOST_TIMEOUT_GRACE,
    NOT_SUPPORTED_MESSAGE,
)
from ..livetypes import (
    ExecutionError,
    OutcomeStatus,
    PageOutcome,
    PlaybackError,
    RecognitionError,
    TranscriptionTimeoutError,
)
from ..models import is_language_supported, is_valid_bcp47
from ..utils import env_seconds

logger = logging.getLogger(__name__)


MEDIA_ERROR_NAMES = {
    1: "MEDIA_ERR_ABORTED",
    2: "MEDIA_ERR_NETWORK",
    3: "MEDIA_ERR_DECODE",
    4: "MEDIA_ERR_SRC_NOT_SUPPORTED",
}


RECOGNITION_SCRIPT = """
(() => {
    const NOT_SUPPORTED = %(not_supported)s;

    function describeFailure(failure) {
        if (failure && failure.kind === "timeout") {
            return { status: "timeout", stage: failure.stage };
        }
        if (failure && failure.kind === "recognition") {
            return { status: "recognition_error", stage: "recognition", error: String(failure.error) };
        }
        const message = failure && failure.message ? failure.message : String(failure);
        return { status: "execution_error", error: message };
    }

    function recognizeOnce(options) {
        options = options || {};
        return new Promise((resolve, reject) => {
            const SpeechRecognition = window.SpeechRecognition || window.webkitSpeechRecognition;
            if (!SpeechRecognition) {
                reject({ kind: "recognition", error: NOT_SUPPORTED });
                return;
            }

            let recognition;
            let settled = false;
            let timer = null;
            const settle = (fn, value) => {
                if (settled) {
                    return;
                }
                settled = true;
                if (timer !== null) {
                    clearTimeout(timer);
                }
                fn(value);
            };

            try {
                recognition = new SpeechRecognition();
                recognition.continuous = Boolean(options.continuous);
                recognition.interimResults = Boolean(options.interimResults);
                recognition.lang = options.lang || "en-US";
                recognition.maxAlternatives = options.maxAlternatives || 1;
            } catch (error) {
                reject({ kind: "recognition", error: error && error.message ? error.message : String(error) });
                return;
            }

            recognition.onresult = (event) => {
                const start = event.resultIndex || 0;
                for (let i = start; i < event.results.length; i++) {
                    const result = event.results[i];
                    if (result.isFinal === false) {
                        continue;
                    }
                    settle(resolve, result[0].transcript);
                    if (options.continuous && typeof recognition.stop === "function") {
                        recognition.stop();
                    }
                    return;
                }
            };

            recognition.onerror = (event) => {
                const error = event && event.error !== undefined ? event.error : event;
                settle(reject, { kind: "recognition", error: String(error) });
            };

            recognition.onend = () => {
                settle(reject, { kind: "recognition", error: "no-speech" });
            };

            if (options.timeoutMs) {
                timer = setTimeout(() => {
                    settle(reject, { kind: "timeout", stage: "recognition" });
                    if (typeof recognition.abort === "function") {
                        recognition.abort();
                    }
                }, options.timeoutMs);
            }

            try {
                recognition.start();
            } catch (error) {
                settle(reject, { kind: "recognition", error: error && error.message ? error.message : String(error) });
            }
        });
    }

    function recognize(options) {
        return recognizeOnce(options).then(
            (transcript) => ({ status: "ok", transcript: transcript }),
            (failure) => describeFailure(failure)
        );
    }

    function playAndRecognize(src, options) {
        options = options || {};
        return new Promise((resolve) => {
            const audio = new Audio(src);
            let done = false;
            let timer = null;
            const finish = (outcome) => {
                if (done) {
                    return;
                }
                done = true;
                if (timer !== null) {
                    clearTimeout(timer);
                }
                audio.onended = null;
                audio.onerror = null;
                resolve(outcome);
            };

            audio.onended = () => {
                if (timer !== null) {
                    clearTimeout(timer);
                    timer = null;
                }
                recognize(options.recognition).then(finish, (failure) => finish(describeFailure(failure)));
            };

            audio.onerror = () => {
                const mediaError = audio.error;
                finish({
                    status: "playback_error",
                    stage: "playback",
                    code: mediaError ? mediaError.code : null,
                    error: mediaError && mediaError.message ? mediaError.message : null,
                });
            };

            if (options.playbackTimeoutMs) {
                timer = setTimeout(() => {
                    audio.pause();
                    finish({ status: "timeout", stage: "playback" });
                }, options.playbackTimeoutMs);
            }

            let played;
            try {
                played = audio.play();
            } catch (error) {
                finish({ status: "playback_error", stage: "playback", error: String(error) });
                return;
            }
            if (played && typeof played.catch === "function") {
                played.catch((error) => {
                    finish({
                        status: "playback_error",
                        stage: "playback",
                        error: error && error.message ? error.message : String(error),
                    });
                });
            }
        });
    }

    window.%(bridge)s = { recognizeOnce, recognize, playAndRecognize };
})();
""" % {"not_supported": '"%s"' % NOT_SUPPORTED_MESSAGE, "bridge": BRIDGE_NAME}


# Expressions evaluated by the host. Each resolves with a PageOutcome envelope.
BRIDGE_CHECK_EXPRESSION = f"() => typeof window.{BRIDGE_NAME}"
PLAY_AND_RECOGNIZE_EXPRESSION = (
    f"(args) => window.{BRIDGE_NAME}.playAndRecognize(args.src, args.options)"
)
RECOGNIZE_EXPRESSION = f"(options) => window.{BRIDGE_NAME}.recognize(options)"


def get_html_content() -> str:
    """Build the recognition page with the bridge script inlined."""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Speech Recognition</title>
</head>
<body>
    <script>
{RECOGNITION_SCRIPT}
    </script>
</body>
</html>
"""


@dataclass(frozen=True)
class RecognitionConfig:
    """Options for one native recognition session.

    Immutable - create a new instance to change values.
    """

    language: str = DEFAULT_LANGUAGE
    continuous: bool = DEFAULT_CONTINUOUS
    interim_results: bool = DEFAULT_INTERIM_RESULTS
    max_alternatives: int = DEFAULT_MAX_ALTERNATIVES

    def __post_init__(self) -> None:
        if not is_valid_bcp47(self.language):
            raise ValueError(f"Invalid BCP-47 language tag: {self.language!r}")
        if self.max_alternatives < 1:
            raise ValueError(
                f"max_alternatives must be at least 1, got {self.max_alternatives}"
            )
        if not is_language_supported(self.language):
            logger.warning(
                f"Language {self.language} is not in the known locale list; "
                "the browser may reject it"
            )

    @classmethod
    def from_env(cls) -> "RecognitionConfig":
        """Create config from environment variables."""
        return cls(language=os.getenv(ENV_LANGUAGE) or DEFAULT_LANGUAGE)

    def to_options(self, timeout: Optional[float] = None) -> dict[str, Any]:
        """Serialize for the page's recognizeOnce()."""
        options: dict[str, Any] = {
            "lang": self.language,
            "continuous": self.continuous,
            "interimResults": self.interim_results,
            "maxAlternatives": self.max_alternatives,
        }
        if timeout is not None:
            options["timeoutMs"] = seconds_to_ms(timeout)
        return options


@dataclass(frozen=True)
class TimeoutConfig:
    """Deadlines for the two waits of a transcription call.

    None means wait forever, matching the upstream behavior.
    """

    playback: Optional[float] = None
    recognition: Optional[float] = None
    grace: float = HOST_TIMEOUT_GRACE

    def __post_init__(self) -> None:
        for name in ("playback", "recognition"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(f"{name} timeout must be positive, got {value}")

    @classmethod
    def from_env(cls) -> "TimeoutConfig":
        """Create config from environment variables."""
        return cls(
            playback=env_seconds(ENV_PLAYBACK_TIMEOUT),
            recognition=env_seconds(ENV_RECOGNITION_TIMEOUT),
        )

    @property
    def host_deadline(self) -> Optional[float]:
        """Outer bound for the whole in-page call.

        Only set when both stages are bounded; an unbounded stage stays
        unbounded on the host side too.
        """
        if self.playback is None or self.recognition is None:
            return None
        return self.playback + self.recognition + self.grace

    @property
    def recognition_deadline(self) -> Optional[float]:
        """Outer bound for a recognition-only call."""
        if self.recognition is None:
            return None
        return self.recognition + self.grace


def seconds_to_ms(seconds: float) -> int:
    """Convert seconds to whole milliseconds for setTimeout."""
    return max(1, int(round(seconds * 1000)))


def build_play_options(
    recognition: RecognitionConfig, timeouts: TimeoutConfig
) -> dict[str, Any]:
    """Build the options argument for playAndRecognize()."""
    options: dict[str, Any] = {
        "recognition": recognition.to_options(timeouts.recognition),
    }
    if timeouts.playback is not None:
        options["playbackTimeoutMs"] = seconds_to_ms(timeouts.playback)
    return options


def describe_media_error(code: Optional[int], message: Optional[str]) -> str:
    """Format a MediaError code and message.

    Examples:
        >>> describe_media_error(4, "Format error")
        'MEDIA_ERR_SRC_NOT_SUPPORTED (4): Format error'
        >>> describe_media_error(None, None)
        'unknown media error'
    """
    if code is None:
        return message or "unknown media error"
    name = MEDIA_ERROR_NAMES.get(code, "MEDIA_ERR_UNKNOWN")
    if message:
        return f"{name} ({code}): {message}"
    return f"{name} ({code})"


def parse_page_outcome(raw: Any) -> PageOutcome:
    """Validate the envelope returned by the page.

    Raises:
        ExecutionError: If the page returned something that is not an envelope
    """
    if not isinstance(raw, dict):
        raise ExecutionError(f"Unexpected result from recognition page: {raw!r}")
    try:
        return PageOutcome.model_validate(raw)
    except ValidationError as e:
        raise ExecutionError(f"Malformed result from recognition page: {e}") from e


def outcome_to_transcript(outcome: PageOutcome) -> str:
    """Return the transcript or raise the error the outcome describes.

    Raises:
        PlaybackError: Audio failed to load or play
        RecognitionError: The capability is unsupported or reported an error
        TranscriptionTimeoutError: An in-page deadline expired
        ExecutionError: Any other in-page fault
    """
    if outcome.status == OutcomeStatus.OK:
        if outcome.transcript is None:
            raise ExecutionError("Recognition page reported success without a transcript")
        return outcome.transcript

    if outcome.status == OutcomeStatus.PLAYBACK_ERROR:
        detail = describe_media_error(outcome.code, outcome.error)
        raise PlaybackError(
            f"Audio playback failed: {detail}",
            error=outcome.error,
            code=outcome.code,
        )

    if outcome.status == OutcomeStatus.RECOGNITION_ERROR:
        raise RecognitionError(
            f"Speech recognition failed: {outcome.error}",
            error=outcome.error,
        )

    if outcome.status == OutcomeStatus.TIMEOUT:
        stage = outcome.stage or "unknown"
        raise TranscriptionTimeoutError(f"Timed out waiting for {stage}", stage=stage)

    raise ExecutionError(f"Recognition page failed: {outcome.error}")
