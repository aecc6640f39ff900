"""Tests for the tools/transcribe_file.py script."""

import importlib.util
import logging
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest


TOOL_PATH = Path(__file__).resolve().parent.parent / "tools" / "transcribe_file.py"


@pytest.fixture
def tool():
    spec = importlib.util.spec_from_file_location("transcribe_file_tool", TOOL_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestMain:
    """Tests for the script entrypoint."""

    def test_logs_to_stdout(self, tool):
        """Logging should be configured on stdout with the package format."""
        with patch.object(tool.logging, "basicConfig") as basic_config, \
                patch.object(tool, "transcribe_all", MagicMock()), \
                patch.object(tool.asyncio, "run", return_value=0):
            assert tool.main(["clip.wav"]) == 0

        kwargs = basic_config.call_args.kwargs
        (handler,) = kwargs["handlers"]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stdout
        assert kwargs["level"] == logging.INFO
        assert kwargs["format"] == "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def test_verbose_logs_debug(self, tool):
        with patch.object(tool.logging, "basicConfig") as basic_config, \
                patch.object(tool, "transcribe_all", MagicMock()), \
                patch.object(tool.asyncio, "run", return_value=0):
            tool.main(["clip.wav", "-v"])

        assert basic_config.call_args.kwargs["level"] == logging.DEBUG

    def test_unexpected_error_returns_1(self, tool, capsys):
        with patch.object(tool.logging, "basicConfig"), \
                patch.object(tool, "transcribe_all", MagicMock()), \
                patch.object(tool.asyncio, "run", side_effect=RuntimeError("boom")):
            assert tool.main(["clip.wav"]) == 1

        assert "[error] boom" in capsys.readouterr().err


class TestTimeoutsFor:
    """Tests for per-file deadlines."""

    def test_url_keeps_given_values(self, tool):
        timeouts = tool._timeouts_for("https://example.com/a.mp3", None, 5.0)
        assert timeouts.playback is None
        assert timeouts.recognition == 5.0

    def test_explicit_playback_wins(self, tool, tmp_path):
        timeouts = tool._timeouts_for(str(tmp_path / "a.wav"), 3.0, None)
        assert timeouts.playback == 3.0

    def test_non_wav_file_unbounded(self, tool, tmp_path):
        audio = tmp_path / "a.mp3"
        audio.write_bytes(b"ID3")
        assert tool._timeouts_for(str(audio), None, None).playback is None
