"""handlerchain - sequential middleware chain executor."""

from handlerchain.core import (
    Chain,
    CodedError,
    ErrorCode,
    MiddlewareArgs,
    MiddlewareNextError,
    process_middleware,
)

__version__ = "0.1.0"
__logo__ = "⛓"

__all__ = [
    "Chain",
    "CodedError",
    "ErrorCode",
    "MiddlewareArgs",
    "MiddlewareNextError",
    "__version__",
    "process_middleware",
]
