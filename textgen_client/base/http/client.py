"""HTTP client construction for the transport layer.

Purpose:
    Build ``httpx.Client`` / ``httpx.AsyncClient`` instances whose timeouts
    derive exclusively from :func:`get_timeout_config`, so no numeric literals
    are scattered across call sites.

Lifecycle:
    Each API client instance owns the HTTP clients it builds and closes them
    on ``close()``. Clients are never shared between API client instances;
    connection reuse beyond what a single ``httpx`` client does on its own is
    out of scope.

Timeout strategy:
    - ``purpose="request"``: connect timeout plus the single-shot HTTP timeout
      for reads.
    - ``purpose="stream"``: connect timeout plus the streaming idle timeout
      for reads. A server that stops sending bytes without closing the
      connection surfaces as ``httpx.ReadTimeout`` (a transport error).
"""

from __future__ import annotations

from typing import Dict, Optional

import httpx

from ..timeouts import get_timeout_config


def build_timeout(purpose: str) -> httpx.Timeout:
    """Return the ``httpx.Timeout`` used for ``purpose`` (``request``/``stream``)."""
    cfg = get_timeout_config()
    read = cfg.stream_timeout_seconds if purpose == "stream" else cfg.http_timeout_seconds
    return httpx.Timeout(read, connect=cfg.connect_timeout_seconds)


def build_httpx_client(
    base_url: Optional[str],
    *,
    headers: Optional[Dict[str, str]] = None,
    purpose: str = "request",
) -> httpx.Client:
    """Return a new synchronous ``httpx.Client`` for ``base_url``.

    Parameters:
        base_url: API base URL so callers can issue relative requests.
        headers: Default headers sent with every request.
        purpose: Timeout profile, ``"request"`` or ``"stream"``.
    """
    return httpx.Client(base_url=base_url or "", headers=headers, timeout=build_timeout(purpose))


def build_async_httpx_client(
    base_url: Optional[str],
    *,
    headers: Optional[Dict[str, str]] = None,
    purpose: str = "stream",
) -> httpx.AsyncClient:
    """Return a new ``httpx.AsyncClient``; see :func:`build_httpx_client`."""
    return httpx.AsyncClient(base_url=base_url or "", headers=headers, timeout=build_timeout(purpose))


__all__ = ["build_httpx_client", "build_async_httpx_client", "build_timeout"]
