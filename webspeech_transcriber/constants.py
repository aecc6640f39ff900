"""Constants for the Web Speech transcriber."""

# Virtual origin the recognition page and served audio live under.
# https keeps the page a secure context, which the speech API requires.
PAGE_ORIGIN = "https://webspeech.local"
PAGE_URL = f"{PAGE_ORIGIN}/"
AUDIO_ROUTE_PREFIX = "/audio/"

# Name of the object the injected script installs on window
BRIDGE_NAME = "webSpeechBridge"

NOT_SUPPORTED_MESSAGE = "Web Speech API is not supported in this browser."

# Recognition defaults
DEFAULT_LANGUAGE = "en-US"
DEFAULT_CONTINUOUS = False
DEFAULT_INTERIM_RESULTS = False
DEFAULT_MAX_ALTERNATIVES = 1

# Browser defaults (headful, like the upstream service)
DEFAULT_HEADLESS = False
LAUNCH_TIMEOUT = 30  # seconds
PAGE_LOAD_TIMEOUT = 15  # seconds

BASE_LAUNCH_ARGS = (
    "--autoplay-policy=no-user-gesture-required",
    "--use-fake-ui-for-media-stream",
)

# Extra time the host waits beyond the in-page deadlines
HOST_TIMEOUT_GRACE = 5.0  # seconds

# Added to a WAV's duration when deriving a playback deadline
PLAYBACK_TIMEOUT_MARGIN = 2.0  # seconds

# Environment variables
ENV_HEADLESS = "WEBSPEECH_HEADLESS"
ENV_BROWSER_CHANNEL = "WEBSPEECH_BROWSER_CHANNEL"
ENV_LANGUAGE = "WEBSPEECH_LANGUAGE"
ENV_PLAYBACK_TIMEOUT = "WEBSPEECH_PLAYBACK_TIMEOUT"
ENV_RECOGNITION_TIMEOUT = "WEBSPEECH_RECOGNITION_TIMEOUT"
ENV_FAKE_AUDIO_CAPTURE = "WEBSPEECH_FAKE_AUDIO_CAPTURE"
