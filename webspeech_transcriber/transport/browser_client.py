"""Playwright browser client.

This module owns the browser process lifecycle: driver, browser, context and
the single page the transcriber uses. It separates browser I/O from the
recognition protocol.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    async_playwright,
)

from ..constants import (
    BASE_LAUNCH_ARGS,
    DEFAULT_HEADLESS,
    ENV_BROWSER_CHANNEL,
    ENV_FAKE_AUDIO_CAPTURE,
    ENV_HEADLESS,
    LAUNCH_TIMEOUT,
)
from ..utils import env_flag

logger = logging.getLogger(__name__)


def build_launch_args(
    extra_args: tuple[str, ...] = (),
    fake_audio_capture: Optional[str] = None,
) -> list[str]:
    """Build Chromium command-line flags.

    Args:
        extra_args: Flags appended after the defaults
        fake_audio_capture: WAV file Chromium feeds to its fake microphone

    Returns:
        List of flags, without duplicates, in order
    """
    args = list(BASE_LAUNCH_ARGS)
    if fake_audio_capture:
        audio_path = Path(fake_audio_capture).expanduser().resolve()
        args.extend(
            [
                "--use-fake-device-for-media-stream",
                f"--use-file-for-fake-audio-capture={audio_path}",
            ]
        )
    args.extend(extra_args)
    return list(dict.fromkeys(args))


@dataclass(frozen=True)
class BrowserConfig:
    """Configuration for launching the browser.

    Immutable - create a new instance to change values.
    """

    headless: bool = DEFAULT_HEADLESS
    channel: Optional[str] = None
    args: tuple[str, ...] = ()
    fake_audio_capture: Optional[str] = None
    launch_timeout: float = LAUNCH_TIMEOUT

    @property
    def launch_args(self) -> list[str]:
        return build_launch_args(self.args, self.fake_audio_capture)

    @classmethod
    def from_env(cls) -> "BrowserConfig":
        """Create config from environment variables."""
        return cls(
            headless=env_flag(ENV_HEADLESS, DEFAULT_HEADLESS),
            channel=os.getenv(ENV_BROWSER_CHANNEL) or None,
            fake_audio_capture=os.getenv(ENV_FAKE_AUDIO_CAPTURE) or None,
        )


class BrowserClient:
    """Owns one Playwright driver, Chromium browser, context and page.

    Usage:
        client = BrowserClient(BrowserConfig(headless=True))
        page = await client.start()
        try:
            await page.goto(...)
        finally:
            await client.close()
    """

    def __init__(self, config: BrowserConfig):
        """Initialize the client.

        Args:
            config: Browser launch configuration
        """
        self.config = config
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    @property
    def page(self) -> Optional[Page]:
        return self._page

    @property
    def is_running(self) -> bool:
        return self._page is not None

    async def start(self) -> Page:
        """Launch the browser and open its single page.

        Anything started before a failure is closed again.

        Returns:
            The page

        Raises:
            RuntimeError: If the client is already running
            playwright.async_api.Error: If launching fails
        """
        if self.is_running:
            raise RuntimeError("Browser client already started")

        launch_kwargs = {
            "headless": self.config.headless,
            "args": self.config.launch_args,
            "timeout": self.config.launch_timeout * 1000,
        }
        if self.config.channel:
            launch_kwargs["channel"] = self.config.channel

        logger.info(
            "Launching browser",
            extra={
                "headless": self.config.headless,
                "channel": self.config.channel or "chromium",
            },
        )

        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(**launch_kwargs)
            self._context = await self._browser.new_context(permissions=["microphone"])
            self._page = await self._context.new_page()
        except BaseException:
            await self.close()
            raise

        logger.info(f"Browser started (version {self._browser.version})")
        return self._page

    async def close(self) -> None:
        """Close page, context, browser and driver.

        Safe to call more than once. Errors while closing are logged.
        """
        page, context, browser, driver = (
            self._page,
            self._context,
            self._browser,
            self._playwright,
        )
        self._page = None
        self._context = None
        self._browser = None
        self._playwright = None

        for name, closer in (
            ("context", context.close if context else None),
            ("browser", browser.close if browser else None),
            ("driver", driver.stop if driver else None),
        ):
            if closer is None:
                continue
            try:
                await closer()
            except Exception as e:
                logger.warning(f"Error closing {name}: {e}")

        if page is not None or browser is not None:
            logger.info("Browser closed")
