"""Coded error types raised by handlerchain.

Every error carries a stable ``code`` string so callers can tell a broken
chain contract apart from an ordinary handler failure without matching on
messages.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    """Machine-readable identifiers attached to every :class:`CodedError`."""

    MIDDLEWARE_NEXT_ERROR = "slack_bolt_middleware_next_error"
    UNKNOWN_ERROR = "slack_bolt_unknown_error"
    CONFIG_ERROR = "handlerchain_config_error"
    HANDLER_RESOLUTION_ERROR = "handlerchain_handler_resolution_error"


class CodedError(Exception):
    """Base class for errors that expose a stable ``code``."""

    code: ErrorCode = ErrorCode.UNKNOWN_ERROR

    def __init__(self, message: str = "", *, original: BaseException | None = None) -> None:
        super().__init__(message)
        self.original = original


class MiddlewareNextError(CodedError):
    """A handler called ``next()`` after the chain already advanced past it."""

    code = ErrorCode.MIDDLEWARE_NEXT_ERROR


class UnknownError(CodedError):
    """Wraps an exception that carries no code of its own."""

    code = ErrorCode.UNKNOWN_ERROR


class ConfigError(CodedError):
    code = ErrorCode.CONFIG_ERROR


class HandlerResolutionError(CodedError):
    code = ErrorCode.HANDLER_RESOLUTION_ERROR


def as_coded_error(error: BaseException) -> CodedError:
    """Return *error* if it is already coded, otherwise wrap it in :class:`UnknownError`."""
    if isinstance(error, CodedError):
        return error
    return UnknownError(str(error) or type(error).__name__, original=error)


__all__ = [
    "CodedError",
    "ConfigError",
    "ErrorCode",
    "HandlerResolutionError",
    "MiddlewareNextError",
    "UnknownError",
    "as_coded_error",
]
