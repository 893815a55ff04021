"""
Gemini API key and local configuration handling.

The key is looked up fresh on every call so that a key selected mid-session
takes effect on the next generation.
"""

import json
import os
import webbrowser
from typing import Optional

from ..config import (
    API_KEY_ENV_VARS,
    API_KEY_PAGE_URL,
    BILLING_DOCS_URL,
    CONFIG_PATH,
    DEFAULT_MODEL,
    REQUEST_TIMEOUT_SECONDS,
)
from ..logging_utils import log_info, log_warning


# =============================================================================
# Configuration Management
# =============================================================================

def load_config() -> dict:
    """
    Load configuration from ~/.banana_studio_config.json if present.

    Returns:
        Dictionary containing configuration, or empty dict if not found
        or unreadable.
    """
    if CONFIG_PATH.is_file():
        try:
            with CONFIG_PATH.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            log_warning(f"Could not read config {CONFIG_PATH}: {e}")
            return {}
        return data if isinstance(data, dict) else {}
    return {}


def save_config(config: dict) -> None:
    """
    Save configuration dictionary to CONFIG_PATH.

    Sets file permissions to 0o600 since the file holds an API key.

    Args:
        config: Configuration dictionary to save.
    """
    CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_PATH.write_text(json.dumps(config, indent=2), encoding="utf-8")
    try:
        os.chmod(CONFIG_PATH, 0o600)
    except OSError:
        pass  # Permissions may not be supported on all platforms


def get_api_key() -> str:
    """
    Return the current Gemini API key.

    Checks GEMINI_API_KEY, then API_KEY, then the config file. Returns an
    empty string when no key is configured; the service rejects the call
    and the failure is classified like any other.
    """
    for var in API_KEY_ENV_VARS:
        env_key = os.environ.get(var)
        if env_key:
            return env_key
    return str(load_config().get("api_key", "") or "")


def get_request_timeout() -> float:
    """Per-call timeout in seconds (config key "request_timeout")."""
    value = load_config().get("request_timeout", REQUEST_TIMEOUT_SECONDS)
    try:
        return float(value)
    except (TypeError, ValueError):
        log_warning(f"Ignoring invalid request_timeout in config: {value!r}")
        return float(REQUEST_TIMEOUT_SECONDS)


def get_default_model() -> str:
    """Model used when the caller does not pick one (config key "default_model")."""
    return str(load_config().get("default_model") or DEFAULT_MODEL)


def interactive_api_key_setup(open_browser: bool = True) -> Optional[str]:
    """
    Prompt the user for a (paid) Gemini API key and save it to config.

    Opens the API key page in the browser first, unless disabled.

    Returns:
        The API key entered, or None if the user entered nothing.
    """
    print("\nImage generation with the Gemini 3 Pro image model needs a paid API key.")
    print(f"Billing information: {BILLING_DOCS_URL}")

    if open_browser:
        try:
            webbrowser.open(API_KEY_PAGE_URL)
        except webbrowser.Error as e:
            print(f"Warning: could not open browser automatically: {e}")
            print(f"Please open this URL manually in your browser: {API_KEY_PAGE_URL}")

    api_key = input("\nPaste your Gemini API key here and press Enter:\n> ").strip()
    if not api_key:
        print("No API key entered.")
        return None

    config = load_config()
    config["api_key"] = api_key
    save_config(config)
    log_info(f"Saved API key to {CONFIG_PATH}")
    print(f"Saved API key to {CONFIG_PATH}.")
    for var in API_KEY_ENV_VARS:
        if os.environ.get(var):
            print(f"Note: {var} is set in your environment and takes precedence over the saved key.")
    return api_key
