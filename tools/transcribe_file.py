"""Transcribe audio files with the browser's Web Speech API.

Requirements:
    playwright install chromium   # or use --channel chrome

Usage:
    python tools/transcribe_file.py /path/to/clip.mp3 /path/to/other.wav \
        --language en-US \
        --recognition-timeout 15

Flags:
    --headless                  (headful by default; Chrome's recognizer
                                 usually needs a visible window)
    --channel chrome            (use an installed Google Chrome)
    --fake-mic /path/to/a.wav   (feed Chromium's fake microphone)
    --playback-timeout SECONDS  (derived from the WAV duration if omitted)
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from webspeech_transcriber.audio.processing import is_url, suggest_playback_timeout
from webspeech_transcriber.constants import DEFAULT_LANGUAGE
from webspeech_transcriber.livetypes import WebSpeechError
from webspeech_transcriber.protocols.page import RecognitionConfig, TimeoutConfig
from webspeech_transcriber.transcription.session import WebSpeechSession
from webspeech_transcriber.transport.browser_client import BrowserConfig


def _timeouts_for(
    source: str, playback: Optional[float], recognition: Optional[float]
) -> TimeoutConfig:
    if playback is None and not is_url(source):
        playback = suggest_playback_timeout(Path(source))
    return TimeoutConfig(playback=playback, recognition=recognition)


async def transcribe_all(args: argparse.Namespace) -> int:
    session = WebSpeechSession(
        recognition=RecognitionConfig(
            language=args.language,
            continuous=args.continuous,
        ),
        browser=BrowserConfig(
            headless=args.headless,
            channel=args.channel,
            fake_audio_capture=args.fake_mic,
        ),
    )

    failures = 0
    async with session:
        for source in args.audio:
            timeouts = _timeouts_for(source, args.playback_timeout, args.recognition_timeout)
            try:
                text = await session.transcribe(source, timeouts=timeouts)
            except WebSpeechError as exc:
                failures += 1
                print(f"[error] {source}: {type(exc).__name__}: {exc}", file=sys.stderr)
                continue
            print(f"{source}\t{text}")

    return 1 if failures else 0


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Transcribe audio with the browser's Web Speech API.")
    parser.add_argument("audio", nargs="+", help="Audio file paths or URLs.")
    parser.add_argument("--language", default=DEFAULT_LANGUAGE, help=f"BCP-47 tag (default: {DEFAULT_LANGUAGE}).")
    parser.add_argument("--continuous", action="store_true", help="Use continuous recognition.")
    parser.add_argument("--headless", action="store_true", help="Hide the browser (headful by default).")
    parser.add_argument("--channel", default=None, help="Playwright browser channel, e.g. 'chrome'.")
    parser.add_argument("--fake-mic", default=None, help="WAV file fed to the fake microphone.")
    parser.add_argument("--playback-timeout", type=float, default=None, help="Seconds to wait for playback.")
    parser.add_argument("--recognition-timeout", type=float, default=None, help="Seconds to wait for recognition.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log page console output.")
    return parser.parse_args(argv)


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    try:
        return asyncio.run(transcribe_all(args))
    except Exception as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
