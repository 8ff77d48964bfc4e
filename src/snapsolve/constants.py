"""
Project-wide constants for snapsolve
"""  # noqa: D200, D212, D415

# ==============================================================================
# Provider Request Settings
# ==============================================================================

# Low temperature keeps the structured output close to deterministic
REQUEST_TEMPERATURE = 0.2
MAX_OUTPUT_TOKENS = 4000

# Transport settings for the provider SDK clients
REQUEST_TIMEOUT = 60.0  # seconds
MAX_RETRIES = 2

# ==============================================================================
# Defaults
# ==============================================================================

DEFAULT_PROVIDER = "openai"
DEFAULT_LANGUAGE = "python"

DEFAULT_MODELS = {
    "openai": "gpt-4o",
    "gemini": "gemini-2.0-flash",
}

# ==============================================================================
# Screenshot Queue
# ==============================================================================

MAX_QUEUED_SCREENSHOTS = 5
DEFAULT_IMAGE_MIME_TYPE = "image/png"

IMAGE_MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".gif": "image/gif",
}

# ==============================================================================
# Configuration Files
# ==============================================================================

ENV_PREFIX = "SNAPSOLVE_"
HOME_CONFIG_ENV_VAR = "SNAPSOLVE_CONFIG_HOME"
HOME_CONFIG_FILENAME = "snapsolve.toml"
