"""Utility functions for handlerchain."""

import importlib
from typing import Any

from handlerchain.core.errors import HandlerResolutionError


def resolve_handler(path: str) -> Any:
    """Import ``package.module:attribute`` and return the callable it names.

    Dotted attributes after the colon are followed (``mod:Class.method``).
    """
    module_name, sep, attr_path = path.partition(":")
    if not sep or not module_name or not attr_path:
        raise HandlerResolutionError(f"expected 'module:attribute', got {path!r}")

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise HandlerResolutionError(f"cannot import {module_name!r}: {e}", original=e) from e

    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise HandlerResolutionError(f"{path!r}: no attribute {part!r}", original=e) from e

    if not callable(target):
        raise HandlerResolutionError(f"{path!r} is not callable")
    return target


def parse_pairs(items: list[str] | None) -> dict[str, str]:
    """Parse repeated ``key=value`` options into a dict."""
    result: dict[str, str] = {}
    for item in items or []:
        key, sep, value = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"expected key=value, got {item!r}")
        result[key] = value
    return result
