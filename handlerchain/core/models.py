"""Argument bundle and callable signatures for middleware chains."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

Context: TypeAlias = dict[str, Any]
"""Shared mutable state visible to every handler and the terminal handler."""

NextFn: TypeAlias = Callable[[], Awaitable[None]]
"""Advance capability bound to one handler's position in the chain."""

Middleware: TypeAlias = Callable[["MiddlewareArgs"], Awaitable[None] | None]
"""A handler: sync or async callable receiving one :class:`MiddlewareArgs`."""

LastFn: TypeAlias = Callable[[], Awaitable[None] | None]
"""Terminal handler run after the final middleware advances."""


@dataclass(frozen=True, slots=True, kw_only=True)
class MiddlewareArgs:
    """Everything one handler receives.

    Attributes:
        payload: Initial arguments supplied by the caller, passed through
            unmodified.  Item access on the bundle delegates here.
        context: Shared mutable mapping.  The same object is handed to every
            handler in the chain and to the terminal handler, so writes made
            upstream are visible downstream.
        client: Opaque client handle.
        logger: Opaque logger handle.
        next: Advance capability.  Calling it runs the next handler (or the
            terminal handler after the last one) and may succeed only once.
    """

    payload: Mapping[str, Any]
    context: Context
    client: Any
    logger: Any
    next: NextFn

    def __getitem__(self, key: str) -> Any:
        return self.payload[key]

    def __contains__(self, key: object) -> bool:
        return key in self.payload

    def __iter__(self) -> Iterator[str]:
        return iter(self.payload)

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)


__all__ = ["Context", "LastFn", "Middleware", "MiddlewareArgs", "NextFn"]
