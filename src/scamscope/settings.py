"""Static configuration for scamscope.

All user-editable settings (database, model, session, logging) live in a
single JSON file for quick edits without touching Python. Secrets such as
GEMINI_API_KEY stay in the environment (or a .env file).
"""

import json
import os

from dotenv import load_dotenv

from scamscope.core.config import DEFAULT_GEMINI_BASE_URL, DEFAULT_GEMINI_MODEL

load_dotenv()

# Relative paths (config.json, database, session, logs) resolve against
# SCAMSCOPE_HOME, or the working directory when it is unset.
HOME_DIR = os.path.abspath(os.getenv("SCAMSCOPE_HOME") or os.getcwd())

# config.json is optional; every key below has a default.
CONFIG_PATH = os.getenv("SCAMSCOPE_CONFIG", os.path.join(HOME_DIR, "config.json"))


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        return {}

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        loaded = json.load(handle)
    if not isinstance(loaded, dict):
        raise ValueError(f"Config root must be an object: {CONFIG_PATH}")
    return loaded


def resolve_path(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(HOME_DIR, path)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Where to store the SQLite conversation log.
_storage = _CONFIG.get("storage", {})
DB_PATH = resolve_path(_storage.get("db_path", "scamscope.db"))

# Anonymous identity is kept here between runs.
SESSION_PATH = resolve_path(_storage.get("session_path", ".scamscope-session.json"))

# Completion endpoint settings. The API key is read from the environment only.
_classifier = _CONFIG.get("classifier", {})
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = _classifier.get("model", DEFAULT_GEMINI_MODEL)
GEMINI_BASE_URL = _classifier.get("base_url", DEFAULT_GEMINI_BASE_URL)
# None keeps the transport default timeout.
_timeout = _classifier.get("timeout_seconds")
REQUEST_TIMEOUT_SECONDS = float(_timeout) if _timeout is not None else None

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
