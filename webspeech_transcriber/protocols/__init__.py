"""Protocol definitions for the recognition page."""

from .page import (
    RecognitionConfig,
    TimeoutConfig,
    build_play_options,
    describe_media_error,
    get_html_content,
    outcome_to_transcript,
    parse_page_outcome,
)

__all__ = [
    "RecognitionConfig",
    "TimeoutConfig",
    "build_play_options",
    "describe_media_error",
    "get_html_content",
    "outcome_to_transcript",
    "parse_page_outcome",
]
