"""
LatentChat configuration (Gemini + OpenAI edition)

Static settings only. Per-user state (active provider, API keys, selected
models) lives in config.json under the app-data dir, see store.py.
"""

APP_TITLE = "LatentChat"

# Window (frameless overlay)
WINDOW_GEOMETRY = "600x400"
DEFAULT_ALPHA = 0.92
TOGGLE_HOTKEY = "<Control-Shift-H>"

# Provider endpoints
GEMINI_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
OPENAI_ENDPOINT = "https://api.openai.com/v1/chat/completions"

HTTP_TIMEOUT_SECS = 60
USER_AGENT = f"{APP_TITLE}/1.3"

DEFAULT_PROVIDER = "google"
CONFIG_FILENAME = "config.json"

# Environment overrides
GOOGLE_API_KEY_ENV = "GOOGLE_API_KEY"
HOME_ENV = "LATENTCHAT_HOME"
LOG_LEVEL_ENV = "LATENTCHAT_LOG"

# Keyring entry written by 1.0 builds; read once on first run, never written
KEYRING_SERVICE = "LatentChat"
KEYRING_KEY = "google_api_key"

# Placeholder turn shown in the transcript; never sent to a provider
SEED_USER_TEXT = "Hello, I need help with some questions."
SEED_MODEL_TEXT = "Welcome to Latent Chat! How can I assist you?"

# Logging verbosity (INFO during setup; set to ERROR to reduce noise)
DEFAULT_LOG_LEVEL = "INFO"
