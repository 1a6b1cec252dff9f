"""HTTP transport helpers for the client layer."""

from .client import build_async_httpx_client, build_httpx_client, build_timeout

__all__ = ["build_httpx_client", "build_async_httpx_client", "build_timeout"]
