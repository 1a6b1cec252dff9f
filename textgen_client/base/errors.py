"""Unified client error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``textgen_client.base.errors_parts`` to keep a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import ProviderError
from .errors_parts.classification import (
    classify_exception,
    is_retryable,
    status_to_code,
    to_provider_error,
)

__all__ = [
    "ErrorCode",
    "ProviderError",
    "classify_exception",
    "is_retryable",
    "status_to_code",
    "to_provider_error",
]
