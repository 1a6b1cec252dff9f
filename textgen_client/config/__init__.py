"""Unified configuration layer for the client.

Goals
-----
* Centralize defaults (base URL, chat model).
* Merge sources in a predictable order (later wins):
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) named by TEXTGEN_CONFIG_FILE
    3. Environment variables (after a one-time ``.env`` load)
    4. In-code overrides passed to the helper
* Provide a single call site: ``get_client_config(provider)``.
* Keep PyYAML optional (YAML files are read only when it is installed).

Environment Variable Conventions
--------------------------------
<PROVIDER>_API_KEY, <PROVIDER>_BASE_URL, <PROVIDER>_MODEL,
<PROVIDER>_ORGANIZATION, <PROVIDER>_SYSTEM_MESSAGE, e.g. OPENAI_BASE_URL.

External Config File (Optional)
-------------------------------
```
openai:
  model: gpt-4
  base_url: https://api.openai.com
  organization: org-123
```
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional
import json
import os

from .env import is_placeholder, resolve_provider_key
from .defaults import OPENAI_DEFAULT_BASE_URL, OPENAI_DEFAULT_CHAT_MODEL, OPENAI_DEFAULT_SYSTEM_MESSAGE

try:  # Optional YAML support
    import yaml  # type: ignore
except ImportError:  # pragma: no cover
    yaml = None  # type: ignore


CONFIG_FILE_ENV = "TEXTGEN_CONFIG_FILE"

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "openai": {
        "model": OPENAI_DEFAULT_CHAT_MODEL,
        "base_url": OPENAI_DEFAULT_BASE_URL,
        "system_message": OPENAI_DEFAULT_SYSTEM_MESSAGE,
    },
}

ENV_FIELD_MAP = {
    "model": "MODEL",
    "base_url": "BASE_URL",
    "organization": "ORGANIZATION",
    "system_message": "SYSTEM_MESSAGE",
}

_FILE_CACHE: Optional[Dict[str, Any]] = None
_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Lightweight .env loader.

    Parses KEY=VALUE lines, ignoring comments and blank lines. Existing
    environment variables win unless their current value is a placeholder.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    path = os.getenv("DOTENV_FILE", ".env")
    if not os.path.isfile(path):
        _DOTENV_LOADED = True
        return
    try:
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                k, v = line.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                    os.environ[k] = v
    finally:
        _DOTENV_LOADED = True


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv(CONFIG_FILE_ENV)
    if not path or not Path(path).exists():
        _FILE_CACHE = {}
        return _FILE_CACHE
    text = Path(path).read_text(encoding="utf-8")
    data: Any
    try:
        data = json.loads(text)
    except ValueError:
        data = {}
        if yaml is not None:  # pragma: no cover (depends on optional lib)
            try:
                data = yaml.safe_load(text) or {}
            except yaml.YAMLError:
                data = {}
    _FILE_CACHE = data if isinstance(data, dict) else {}
    return _FILE_CACHE


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = provider.upper()
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val is not None:
            out[field] = val
    key, _ = resolve_provider_key(provider)
    if key and not is_placeholder(key):
        out["api_key"] = key
    return out


def reset_config_cache() -> None:
    """Forget the cached config file and ``.env`` state (tests, reloads)."""
    global _FILE_CACHE, _DOTENV_LOADED
    _FILE_CACHE = None
    _DOTENV_LOADED = False


def get_client_config(provider: str = "openai", overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for ``provider``.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    ``None`` values in ``overrides`` are ignored.
    """
    _load_dotenv_once()
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}
    cfg |= DEFAULTS.get(name, {})
    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg
    cfg |= _env_overrides(name)
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    return cfg


def get_model(provider: str = "openai") -> Optional[str]:
    return get_client_config(provider).get("model")


__all__ = [
    "get_client_config",
    "get_model",
    "reset_config_cache",
    "DEFAULTS",
    "CONFIG_FILE_ENV",
]
