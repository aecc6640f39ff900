"""Transport layer for the browser process."""

from .browser_client import BrowserClient, BrowserConfig, build_launch_args

__all__ = ["BrowserClient", "BrowserConfig", "build_launch_args"]
