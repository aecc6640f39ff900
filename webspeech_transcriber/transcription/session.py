"""Web Speech session - orchestrates the browser page and recognition calls.

This is the thin orchestration layer that glues together:
- Browser lifecycle (transport)
- Recognition page protocol (script, options, result envelopes)
- Serving local audio files to the page
"""

import asyncio
import logging
import secrets
from pathlib import Path
from typing import Any, Optional, Protocol, Union
from urllib.parse import quote, unquote, urlparse
from urllib.request import url2pathname

from playwright.async_api import ConsoleMessage, Page, Route

from ..audio.processing import guess_mime_type, is_url
from ..constants import AUDIO_ROUTE_PREFIX, PAGE_LOAD_TIMEOUT, PAGE_ORIGIN, PAGE_URL
from ..livetypes import (
    ExecutionError,
    InitializationError,
    NotInitializedError,
    PlaybackError,
    SessionAlreadyActiveError,
    TranscriptionTimeoutError,
)
from ..protocols.page import (
    BRIDGE_CHECK_EXPRESSION,
    PLAY_AND_RECOGNIZE_EXPRESSION,
    RECOGNIZE_EXPRESSION,
    RecognitionConfig,
    TimeoutConfig,
    build_play_options,
    get_html_content,
    outcome_to_transcript,
    parse_page_outcome,
)
from ..transport.browser_client import BrowserClient, BrowserConfig
from ..utils import describe_source

logger = logging.getLogger(__name__)

AudioSource = Union[str, Path]


class SpeechRecognizer(Protocol):
    """Protocol for a one-shot speech recognition capability."""

    async def recognize_once(self) -> str:
        """Run one recognition session and return its transcript."""
        ...


async def evaluate_outcome(
    page: Page,
    expression: str,
    arg: Any,
    deadline: Optional[float],
) -> str:
    """Evaluate a bridge expression and turn its envelope into a transcript.

    Args:
        page: Page with the recognition bridge loaded
        expression: Bridge expression resolving with a PageOutcome envelope
        arg: Argument passed to the expression
        deadline: Host-side bound in seconds, or None to wait forever

    Raises:
        TranscriptionTimeoutError: The host-side deadline expired
        ExecutionError: Playwright or the page failed outside the envelope
    """
    try:
        if deadline is None:
            raw = await page.evaluate(expression, arg)
        else:
            raw = await asyncio.wait_for(page.evaluate(expression, arg), timeout=deadline)
    except asyncio.TimeoutError as e:
        raise TranscriptionTimeoutError(
            f"No result from recognition page within {deadline:.1f}s", stage="host"
        ) from e
    except Exception as e:
        raise ExecutionError(f"Failed to run recognition page: {e}") from e

    return outcome_to_transcript(parse_page_outcome(raw))


class PageSpeechRecognizer:
    """SpeechRecognizer backed by the recognition page of a session.

    Runs recognition without playback, e.g. when the browser's microphone is
    fed from a fake capture file.
    """

    def __init__(
        self,
        page: Page,
        config: RecognitionConfig,
        timeout: Optional[float] = None,
        lock: Optional[asyncio.Lock] = None,
    ):
        self._page = page
        self.config = config
        self.timeouts = TimeoutConfig(recognition=timeout)
        self._lock = lock or asyncio.Lock()

    async def recognize_once(self) -> str:
        async with self._lock:
            logger.info(f"Starting recognition ({self.config.language})")
            transcript = await evaluate_outcome(
                self._page,
                RECOGNIZE_EXPRESSION,
                self.config.to_options(self.timeouts.recognition),
                self.timeouts.recognition_deadline,
            )
        logger.info("Recognition finished", extra={"chars": len(transcript)})
        return transcript


class WebSpeechSession:
    """A browser page that plays audio and returns the Web Speech transcript.

    Handles:
    - Launching the browser and loading the recognition page
    - Serving local audio files to the page
    - Mapping page outcomes to exceptions

    Usage:
        async with WebSpeechSession(browser=BrowserConfig(headless=True)) as session:
            text = await session.transcribe("/path/to/audio.mp3")

    Calls on one session are serialized; the page has a single audio element
    and a single recognition grant.
    """

    def __init__(
        self,
        recognition: Optional[RecognitionConfig] = None,
        browser: Optional[BrowserConfig] = None,
        timeouts: Optional[TimeoutConfig] = None,
    ):
        self.recognition = recognition or RecognitionConfig()
        self.browser_config = browser or BrowserConfig()
        self.timeouts = timeouts or TimeoutConfig()

        self._client: Optional[BrowserClient] = None
        self._page: Optional[Page] = None
        self._recognizer: Optional[PageSpeechRecognizer] = None
        self._lock = asyncio.Lock()
        self._served: dict[str, Path] = {}

    @classmethod
    def from_env(cls) -> "WebSpeechSession":
        """Create a session with every config read from the environment."""
        return cls(
            recognition=RecognitionConfig.from_env(),
            browser=BrowserConfig.from_env(),
            timeouts=TimeoutConfig.from_env(),
        )

    @property
    def is_initialized(self) -> bool:
        return self._page is not None

    @property
    def page(self) -> Page:
        return self._require_page()

    @property
    def recognizer(self) -> PageSpeechRecognizer:
        """Recognition capability of the live page."""
        self._require_page()
        return self._recognizer

    async def __aenter__(self) -> "WebSpeechSession":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def initialize(self) -> None:
        """Start the browser and load the recognition page.

        Raises:
            SessionAlreadyActiveError: A session is already live; close() it first
            InitializationError: The browser or page could not be prepared
        """
        if self._client is not None:
            raise SessionAlreadyActiveError(
                "Browser already initialized. Call close() before initializing again."
            )

        client = BrowserClient(self.browser_config)
        try:
            page = await client.start()
            page.on("console", self._on_console)
            await page.route(f"{PAGE_ORIGIN}/**", self._handle_route)
            await page.goto(PAGE_URL, timeout=PAGE_LOAD_TIMEOUT * 1000)

            bridge_type = await page.evaluate(BRIDGE_CHECK_EXPRESSION)
            if bridge_type != "object":
                raise RuntimeError(f"recognition bridge missing from page (got {bridge_type!r})")
        except Exception as e:
            await client.close()
            raise InitializationError(f"Failed to build browser: {e}") from e

        self._client = client
        self._page = page
        self._recognizer = PageSpeechRecognizer(
            page,
            self.recognition,
            timeout=self.timeouts.recognition,
            lock=self._lock,
        )
        logger.info(
            "Recognition page ready",
            extra={"language": self.recognition.language},
        )

    async def transcribe(
        self,
        audio_path: AudioSource,
        timeouts: Optional[TimeoutConfig] = None,
    ) -> str:
        """Play audio in the page and return the recognized transcript.

        Args:
            audio_path: Local file path, or a URL the browser can load
            timeouts: Per-call deadlines, overriding the session's

        Returns:
            Transcript, verbatim

        Raises:
            NotInitializedError: initialize() has not succeeded
            PlaybackError: Audio could not be loaded or played
            RecognitionError: Recognition is unsupported or failed
            TranscriptionTimeoutError: A deadline expired
            ExecutionError: Any other fault running the page routine
        """
        page = self._require_page()
        timeouts = timeouts or self.timeouts

        async with self._lock:
            src, token = self._resolve_source(audio_path)
            logger.info(f"Transcribing {describe_source(src)}")
            try:
                transcript = await evaluate_outcome(
                    page,
                    PLAY_AND_RECOGNIZE_EXPRESSION,
                    {"src": src, "options": build_play_options(self.recognition, timeouts)},
                    timeouts.host_deadline,
                )
            except Exception as e:
                logger.warning(f"Transcription of {describe_source(src)} failed: {e}")
                raise
            finally:
                if token is not None:
                    self._served.pop(token, None)

        logger.info("Transcription finished", extra={"chars": len(transcript)})
        return transcript

    async def close(self) -> None:
        """Close the browser. Safe to call more than once."""
        client = self._client
        self._client = None
        self._page = None
        self._recognizer = None
        self._served.clear()

        if client is not None:
            await client.close()

    def _require_page(self) -> Page:
        if self._page is None:
            raise NotInitializedError("Browser not initialized. Call initialize() first.")
        return self._page

    def _resolve_source(self, audio_path: AudioSource) -> tuple[str, Optional[str]]:
        """Turn a path or URL into a src the page can load.

        Local files and file: URLs are registered under the page origin and
        served by _handle_route for the duration of one call.

        Returns:
            (src, token) - token is None for URLs passed through as-is
        """
        if is_url(audio_path):
            if not str(audio_path).lower().startswith("file://"):
                return str(audio_path), None
            # The https page origin may not load file: resources
            path = Path(url2pathname(urlparse(str(audio_path)).path)).resolve()
        else:
            path = Path(audio_path).expanduser().resolve()

        if not path.is_file():
            raise PlaybackError(f"Audio file not found: {path}", error="not-found")

        token = secrets.token_urlsafe(8)
        self._served[token] = path
        src = f"{PAGE_ORIGIN}{AUDIO_ROUTE_PREFIX}{token}/{quote(path.name)}"
        return src, token

    async def _handle_route(self, route: Route) -> None:
        """Serve the recognition page and registered audio files."""
        request_path = unquote(urlparse(route.request.url).path)

        if request_path in ("", "/"):
            await route.fulfill(
                status=200,
                content_type="text/html; charset=utf-8",
                body=get_html_content(),
            )
            return

        if request_path.startswith(AUDIO_ROUTE_PREFIX):
            token = request_path[len(AUDIO_ROUTE_PREFIX):].split("/", 1)[0]
            path = self._served.get(token)
            if path is not None:
                try:
                    body = await asyncio.to_thread(path.read_bytes)
                except OSError as e:
                    logger.warning(f"Cannot read audio file {path}: {e}")
                    await route.fulfill(status=404, content_type="text/plain", body="not found")
                    return
                await route.fulfill(
                    status=200,
                    content_type=guess_mime_type(path),
                    body=body,
                )
                return

        logger.debug(f"No content for {route.request.url}")
        await route.fulfill(status=404, content_type="text/plain", body="not found")

    def _on_console(self, message: ConsoleMessage) -> None:
        logger.debug(f"[page {message.type}] {message.text}")


async def transcribe_file(
    audio_path: AudioSource,
    recognition: Optional[RecognitionConfig] = None,
    browser: Optional[BrowserConfig] = None,
    timeouts: Optional[TimeoutConfig] = None,
) -> str:
    """Convenience function to transcribe one file in a fresh browser.

    Args:
        audio_path: Local file path or URL
        recognition: Recognition options (defaults from env if not provided)
        browser: Browser options (defaults from env if not provided)
        timeouts: Deadlines (defaults from env if not provided)

    Returns:
        Transcript text
    """
    session = WebSpeechSession(
        recognition=recognition or RecognitionConfig.from_env(),
        browser=browser or BrowserConfig.from_env(),
        timeouts=timeouts or TimeoutConfig.from_env(),
    )
    async with session:
        return await session.transcribe(audio_path)
