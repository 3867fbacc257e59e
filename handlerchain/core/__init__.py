"""Chain executor, argument bundle and coded errors."""

from handlerchain.core.chain import Chain, process_middleware
from handlerchain.core.errors import (
    CodedError,
    ConfigError,
    ErrorCode,
    HandlerResolutionError,
    MiddlewareNextError,
    UnknownError,
    as_coded_error,
)
from handlerchain.core.models import Context, LastFn, Middleware, MiddlewareArgs, NextFn

__all__ = [
    "Chain",
    "CodedError",
    "ConfigError",
    "Context",
    "ErrorCode",
    "HandlerResolutionError",
    "LastFn",
    "Middleware",
    "MiddlewareArgs",
    "MiddlewareNextError",
    "NextFn",
    "UnknownError",
    "as_coded_error",
    "process_middleware",
]
