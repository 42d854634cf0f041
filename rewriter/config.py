"""
Rewriter Configuration

Module-specific settings for the rewrite service.
"""
import os
from pathlib import Path

from config import env_flag

# =========================
# API Settings
# =========================

# Gemini REST base URL (falls back to global config)
REWRITER_API_URL = os.getenv(
    "REWRITER_API_URL",
    os.getenv("GEMINI_API_URL", "https://generativelanguage.googleapis.com/v1beta")
)

REWRITER_CONNECTION_TIMEOUT = int(os.getenv("REWRITER_CONNECTION_TIMEOUT", os.getenv("LLM_TIMEOUT", "120")))
REWRITER_CONNECTION_POOL_LIMIT = int(os.getenv("REWRITER_CONNECTION_POOL_LIMIT", os.getenv("LLM_POOL_LIMIT", "10")))

# Header the editor plugin uses to send the user's API key
REWRITER_API_KEY_HEADER = "X-Api-Key"

# =========================
# Model Settings
# =========================

# Used when neither a session override nor a stored model exists
DEFAULT_MODEL_NAME = os.getenv("REWRITER_DEFAULT_MODEL", "gemini-2.0-flash")

# Retired default; resolving to it halts the rewrite and asks for a new model
DEPRECATED_MODEL_NAME = os.getenv("REWRITER_DEPRECATED_MODEL", "gemini-pro")

# Generation method a model must declare to be offered for selection
REWRITE_GENERATION_METHOD = "generateContent"

# Prefix the catalog puts in front of every model name
MODEL_NAME_PREFIX = "models/"

# Log the assembled request parts at debug level
REWRITER_DEBUG = env_flag("REWRITER_DEBUG", default=False)

# =========================
# Safety Settings
# =========================

HARM_CATEGORIES = [
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
]

# Rewrites must pass sample text through verbatim, so nothing is blocked
SAFETY_THRESHOLD = "BLOCK_NONE"

# =========================
# Settings Store
# =========================

# file | redis
REWRITER_SETTINGS_BACKEND = os.getenv("REWRITER_SETTINGS_BACKEND", "file")

REWRITER_SETTINGS_PATH = os.getenv(
    "REWRITER_SETTINGS_PATH",
    str(Path.home() / ".config" / "rewriter" / "settings.json")
)

# Redis hash holding the settings when the redis backend is used
REWRITER_SETTINGS_KEY = os.getenv("REWRITER_SETTINGS_KEY", "rewriter:settings")

# Section that every settings key lives under
SETTINGS_SECTION = "rewriter"
