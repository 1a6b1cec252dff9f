"""Non-streaming request helpers for the OpenAI client.

Encapsulates parameter validation, the JSON POST, and request lifecycle
logging so the client module stays focused on the public operations.
"""

from __future__ import annotations

import time
from typing import Any, Dict, Optional, Type

from pydantic import ValidationError

from ..base.errors import ErrorCode, ProviderError, to_provider_error
from ..base.logging import LogContext, normalized_log_event
from .endpoints import Endpoint
from .helpers import ResponseT, decode_response
from .params import RequestParams


def build_params(
    params_cls: Type[RequestParams],
    fields: Dict[str, Any],
    *,
    provider: str,
    model: Optional[str],
) -> RequestParams:
    """Validate ``fields`` into ``params_cls``; raise ``ProviderError(VALIDATION)``."""
    try:
        return params_cls(**fields)
    except ValidationError as exc:
        errors = exc.errors()
        first = errors[0] if errors else {}
        loc = ".".join(str(p) for p in first.get("loc", ())) or params_cls.__name__
        raise ProviderError(
            code=ErrorCode.VALIDATION,
            message=f"{loc}: {first.get('msg', 'invalid value')}",
            provider=provider,
            model=model,
            raw=exc,
        ) from exc


class OpenAIRequestMixin:
    """Mixin providing the request/decode cycle for JSON endpoints.

    Consumers must define ``provider_name``, ``_logger``, ``_client(purpose)``,
    ``_async_client(purpose)`` and ``_build_headers()``.
    """

    def _execute(
        self,
        endpoint: Endpoint,
        params: RequestParams,
        response_cls: Type[ResponseT],
        *,
        model: Optional[str],
    ) -> ResponseT:
        """POST ``params`` to ``endpoint`` and decode the body into ``response_cls``."""
        ctx = LogContext(provider=self.provider_name, model=model, endpoint=endpoint.path)
        normalized_log_event(self._logger, "request.start", ctx, phase="start", attempt=None, emitted=None, tokens=None)
        t0 = time.perf_counter()
        try:
            resp = self._client("request").request(
                endpoint.method, endpoint.path, json=params.to_payload(), headers=self._build_headers()
            )
            result = decode_response(
                response_cls,
                resp.content,
                provider=self.provider_name,
                model=model,
                status_code=resp.status_code,
            )
        except ProviderError as e:
            self._log_request_error(ctx, e, t0)
            raise
        except Exception as e:
            err = to_provider_error(e, provider=self.provider_name, model=model)
            self._log_request_error(ctx, err, t0)
            raise err from e
        self._log_request_end(ctx, result, resp.status_code, t0)
        return result

    async def _aexecute(
        self,
        endpoint: Endpoint,
        params: RequestParams,
        response_cls: Type[ResponseT],
        *,
        model: Optional[str],
    ) -> ResponseT:
        """Async counterpart of :meth:`_execute` over ``_async_client("request")``."""
        ctx = LogContext(provider=self.provider_name, model=model, endpoint=endpoint.path)
        normalized_log_event(self._logger, "request.start", ctx, phase="start", attempt=None, emitted=None, tokens=None)
        t0 = time.perf_counter()
        try:
            resp = await self._async_client("request").request(
                endpoint.method, endpoint.path, json=params.to_payload(), headers=self._build_headers()
            )
            result = decode_response(
                response_cls,
                resp.content,
                provider=self.provider_name,
                model=model,
                status_code=resp.status_code,
            )
        except ProviderError as e:
            self._log_request_error(ctx, e, t0)
            raise
        except Exception as e:
            err = to_provider_error(e, provider=self.provider_name, model=model)
            self._log_request_error(ctx, err, t0)
            raise err from e
        self._log_request_end(ctx, result, resp.status_code, t0)
        return result

    def _log_request_end(self, ctx: LogContext, result: Any, status_code: int, t0: float) -> None:
        usage = getattr(result, "usage", None)
        normalized_log_event(
            self._logger,
            "request.end",
            ctx,
            phase="finalize",
            attempt=None,
            emitted=True,
            tokens=usage.model_dump(exclude_none=True) if usage is not None else None,
            latency_ms=(time.perf_counter() - t0) * 1000.0,
            status_code=status_code,
        )

    def _log_request_error(self, ctx: LogContext, err: ProviderError, t0: float) -> None:
        normalized_log_event(
            self._logger,
            "request.error",
            ctx,
            phase="finalize",
            attempt=None,
            emitted=False,
            tokens=None,
            error_code=err.code.value,
            error=err.message,
            error_type=err.error_type,
            status_code=err.status_code,
            latency_ms=(time.perf_counter() - t0) * 1000.0,
        )


__all__ = ["build_params", "OpenAIRequestMixin"]
