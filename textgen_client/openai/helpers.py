"""Common helpers for the OpenAI client.

Purpose:
    Response decoding with error-envelope mapping, plus the header and
    message builders shared by the request and streaming paths.

Error mapping (non-streaming and streaming error bodies alike):
    1. Body decodes into the expected response model -> success.
    2. Body is an ``{"error": {"message", "type"}}`` envelope:
       ``invalid_request_error`` mentioning the maximum context length maps to
       ``CONTEXT_LENGTH``; any other envelope maps to ``SERVER_ERROR`` and
       keeps the server's ``type`` in ``error_type``.
    3. Otherwise the HTTP status decides when it is an error status, and
       ``DECODING`` is used for an undecodable success body.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from ..base.constants import CONTEXT_LENGTH_MARKER, INVALID_REQUEST_ERROR_TYPE
from ..base.errors import ErrorCode, ProviderError, is_retryable, status_to_code
from ..base.models import Message
from .responses import ErrorEnvelope

ResponseT = TypeVar("ResponseT", bound=BaseModel)

MessageLike = Union[Message, Mapping[str, Any]]


def parse_error_envelope(body: Union[bytes, str]) -> Optional[ErrorEnvelope]:
    """Return the error envelope carried by ``body``, or ``None``."""
    try:
        return ErrorEnvelope.model_validate_json(body)
    except ValidationError:
        return None


def error_from_body(
    body: Union[bytes, str],
    *,
    provider: str,
    model: Optional[str],
    status_code: Optional[int] = None,
    cause: Optional[Exception] = None,
) -> ProviderError:
    """Build the ``ProviderError`` describing an unusable response body."""
    envelope = parse_error_envelope(body) if body else None
    if envelope is not None:
        detail = envelope.error
        if detail.type == INVALID_REQUEST_ERROR_TYPE and CONTEXT_LENGTH_MARKER in detail.message:
            code = ErrorCode.CONTEXT_LENGTH
        else:
            code = ErrorCode.SERVER_ERROR
        return ProviderError(
            code=code,
            message=detail.message,
            provider=provider,
            model=model,
            raw=cause,
            error_type=detail.type,
            status_code=status_code,
        )
    if status_code is not None and status_code >= 400:
        code = status_to_code(status_code)
        return ProviderError(
            code=code,
            message=f"HTTP {status_code}",
            provider=provider,
            model=model,
            retryable=is_retryable(code),
            raw=cause,
            status_code=status_code,
        )
    return ProviderError(
        code=ErrorCode.DECODING,
        message=f"could not decode response: {cause}" if cause else "could not decode response",
        provider=provider,
        model=model,
        raw=cause,
        status_code=status_code,
    )


def decode_response(
    response_cls: Type[ResponseT],
    body: Union[bytes, str],
    *,
    provider: str,
    model: Optional[str],
    status_code: Optional[int] = None,
) -> ResponseT:
    """Decode ``body`` into ``response_cls`` or raise a mapped ``ProviderError``."""
    try:
        return response_cls.model_validate_json(body)
    except ValidationError as exc:
        raise error_from_body(body, provider=provider, model=model, status_code=status_code, cause=exc) from exc


def build_messages(messages: Iterable[MessageLike], system_message: Optional[str] = None) -> List[Dict[str, Any]]:
    """Translate messages to wire dicts, prepending ``system_message`` if no
    system message is present."""
    out = [m.to_dict() if isinstance(m, Message) else dict(m) for m in messages]
    if system_message and out and not any(m.get("role") == "system" for m in out):
        out.insert(0, {"role": "system", "content": system_message})
    return out


class OpenAICommonMixin:
    """Header builder shared by both transports.

    Consumers must define ``_api_key`` and ``_organization`` attributes.
    """

    def _build_headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        api_key: Optional[str] = getattr(self, "_api_key", None)
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        organization: Optional[str] = getattr(self, "_organization", None)
        if organization:
            headers["OpenAI-Organization"] = organization
        return headers


__all__ = [
    "ResponseT",
    "MessageLike",
    "parse_error_envelope",
    "error_from_body",
    "decode_response",
    "build_messages",
    "OpenAICommonMixin",
]
