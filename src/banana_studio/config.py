#!/usr/bin/env python3
"""
config.py

All global paths, constants, and static tables for Banana Studio.
"""

from pathlib import Path

# ═══════════════════════════════════════════════════════════════════════════════
# APPLICATION INFO
# ═══════════════════════════════════════════════════════════════════════════════
APP_NAME = "Banana Studio Pro"
APP_VERSION = "1.0.0"

# Local configuration file (API key and optional overrides)
CONFIG_PATH = Path.home() / ".banana_studio_config.json"

# Environment variables checked for the API key, in priority order
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")

# ═══════════════════════════════════════════════════════════════════════════════
# GEMINI API
# ═══════════════════════════════════════════════════════════════════════════════
GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"

# Nano Banana Pro - the only model that accepts an output image size
DEFAULT_MODEL = "gemini-3-pro-image-preview"

# Seconds before a single generateContent call is abandoned
REQUEST_TIMEOUT_SECONDS = 120

# Retry policy: total attempts, and the delay before the first retry.
# Each further retry doubles the delay (1s, 2s, 4s...).
MAX_ATTEMPTS = 3
BASE_RETRY_DELAY_MS = 1000

# HTTP statuses treated as transient infrastructure failures
TRANSIENT_STATUS_CODES = (500, 503)
QUOTA_STATUS_CODES = (429,)

# ═══════════════════════════════════════════════════════════════════════════════
# LINKS
# ═══════════════════════════════════════════════════════════════════════════════
API_KEY_PAGE_URL = "https://aistudio.google.com/app/apikey"
BILLING_DOCS_URL = "https://ai.google.dev/gemini-api/docs/billing"

# Default action/context clause for Style Remix when the user leaves it blank
DEFAULT_REMIX_ACTION = "A candid, high-end Instagram influencer shot."
