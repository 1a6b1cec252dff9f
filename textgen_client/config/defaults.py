"""textgen_client.config.defaults
==============================

Central place for small, stable default values used across the client and
its command-line entry point. Every value can be overridden via environment
variables, an external config file, or in-code overrides.

This module intentionally imports nothing from the rest of the package to
prevent circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

# ---- OpenAI-compatible API ----
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com"
OPENAI_DEFAULT_CHAT_MODEL = "gpt-3.5-turbo"
OPENAI_DEFAULT_SYSTEM_MESSAGE = None

# ---- Request parameter defaults ----
# Completion endpoint default mirrors the API's own default of 16 tokens.
COMPLETION_DEFAULT_MAX_TOKENS = 16
DEFAULT_TEMPERATURE = 1.0
IMAGE_DEFAULT_COUNT = 1

# ---- CLI defaults ----
CLI_DEFAULT_PROVIDER = "openai"

__all__ = [
    "OPENAI_DEFAULT_BASE_URL",
    "OPENAI_DEFAULT_CHAT_MODEL",
    "OPENAI_DEFAULT_SYSTEM_MESSAGE",
    "COMPLETION_DEFAULT_MAX_TOKENS",
    "DEFAULT_TEMPERATURE",
    "IMAGE_DEFAULT_COUNT",
    "CLI_DEFAULT_PROVIDER",
]
