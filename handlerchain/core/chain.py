"""Middleware chain executor.

Each handler receives a :class:`MiddlewareArgs` bundle and calls
``await args.next()`` to pass control on.  Not calling ``next()`` ends the
chain quietly; code placed after ``await args.next()`` runs once the rest of
the chain, terminal handler included, has finished.  The "after" halves
therefore unwind in reverse order, like nested ``with`` blocks.

Usage::

    chain = Chain([authorize, load_user, handle_event])
    context = await chain.run({"event": event}, client=client)

or, with explicit arguments::

    await process_middleware(handlers, initial_args, context, client, logger, last)
"""

from __future__ import annotations

import asyncio
import inspect
import time
from collections.abc import Awaitable, Generator, Iterable, Mapping
from typing import Any

from loguru import logger as _log

from handlerchain.core.errors import MiddlewareNextError
from handlerchain.core.models import Context, LastFn, Middleware, MiddlewareArgs
from handlerchain.telemetry.base import TelemetryPort

# Strong references for advance tasks that outlive the executor call.  The
# event loop only keeps weak references to tasks; entries are removed when the
# task finishes and no execution reads this set, so runs never share state.
_background: set[asyncio.Task[None]] = set()

# Nested next() calls allowed to start on the caller's stack.  Deeper steps
# go through the event loop so long chains do not hit the recursion limit.
_MAX_EAGER_DEPTH = 32


class _Advance:
    """Awaitable returned by ``next()``.

    The downstream step has already started (or, deep in a long chain, been
    scheduled) when this object is handed back.
    Awaiting it waits for the rest of the chain and re-raises its failure.
    """

    __slots__ = ("_task", "observed")

    def __init__(self, task: asyncio.Task[None]) -> None:
        self._task = task
        self.observed = False

    def __await__(self) -> Generator[Any, None, None]:
        self.observed = True
        return self._task.__await__()

    def keep_alive(self, telemetry: TelemetryPort | None = None) -> None:
        """Hold a reference until the step finishes and log any failure nobody awaited."""

        def report(task: asyncio.Task[None]) -> None:
            if task.cancelled():
                return
            error = task.exception()
            if error is None:
                return
            _log.opt(exception=error).error("un-awaited next() failed: {}", error)
            if telemetry is not None:
                telemetry.incr("chain_failures_total")

        if self._task.done():
            report(self._task)
            return
        _background.add(self._task)
        self._task.add_done_callback(_background.discard)
        self._task.add_done_callback(report)


async def _settle(result: Awaitable[None] | None) -> None:
    if inspect.isawaitable(result):
        await result


async def _noop() -> None:
    return None


def _describe(handler: Any) -> str:
    return getattr(handler, "__qualname__", None) or type(handler).__name__


async def process_middleware(
    middleware: Iterable[Middleware],
    initial_args: Mapping[str, Any],
    context: Context,
    client: Any,
    logger: Any,
    last: LastFn | None = None,
    *,
    telemetry: TelemetryPort | None = None,
    drain_unawaited: bool = True,
) -> None:
    """Run *middleware* in order, then *last*.

    Args:
        middleware: Ordered handlers.  Copied before the first one runs.
        initial_args: Caller arguments exposed as ``args.payload``.
        context: Shared mutable mapping handed to every handler.
        client: Opaque client handle passed through unchanged.
        logger: Opaque logger handle passed through unchanged.
        last: Terminal handler, sync or async.  Defaults to a no-op.
        telemetry: Optional metrics sink.
        drain_unawaited: Await ``next()`` results the handlers never awaited
            once the chain returns, so their failures reach the caller.
            When disabled they keep running and failures are logged at
            error level and counted as ``chain_failures_total``.

    Raises:
        MiddlewareNextError: A handler called ``next()`` more than once, or
            after a later handler already advanced.

    Any exception raised by a handler or by *last* propagates unchanged.
    """
    layers = tuple(middleware)
    finish = last or _noop

    if not layers:
        await _settle(finish())
        return

    loop = asyncio.get_running_loop()
    last_called_index = -1
    advances: list[_Advance] = []
    eager_depth = 0

    async def invoke(index: int) -> None:
        nonlocal last_called_index
        if last_called_index >= index:
            _log.warning(
                "next() called multiple times (handler {} tried to advance to {}, already at {})",
                index - 1,
                index,
                last_called_index,
            )
            if telemetry is not None:
                telemetry.incr("chain_next_errors_total")
            raise MiddlewareNextError("next() called multiple times")
        last_called_index = index

        if index >= len(layers):
            _log.debug("chain complete after {} handler(s), running terminal handler", len(layers))
            await _settle(finish())
            return

        handler = layers[index]
        args = MiddlewareArgs(
            payload=initial_args,
            context=context,
            client=client,
            logger=logger,
            next=lambda: advance(index + 1),
        )
        _log.debug("invoking handler {} ({})", index, _describe(handler))
        if telemetry is not None:
            telemetry.incr("chain_handlers_invoked_total")
        await _settle(handler(args))
        if last_called_index == index:
            _log.debug("chain halted at handler {} ({})", index, _describe(handler))

    def advance(index: int) -> _Advance:
        nonlocal eager_depth
        # Start eagerly: the next step runs up to its first suspension before
        # next() returns, so a handler that never awaits still keeps order.
        # Past _MAX_EAGER_DEPTH the step starts on the loop's next turn instead.
        if eager_depth >= _MAX_EAGER_DEPTH:
            task = loop.create_task(invoke(index))
        else:
            eager_depth += 1
            try:
                task = asyncio.eager_task_factory(loop, invoke(index))
            finally:
                eager_depth -= 1
        handle = _Advance(task)
        advances.append(handle)
        return handle

    started = time.perf_counter()
    try:
        await invoke(0)
        if drain_unawaited:
            position = 0
            while position < len(advances):
                handle = advances[position]
                position += 1
                if not handle.observed:
                    await handle
    except BaseException:
        if telemetry is not None:
            telemetry.incr("chain_failures_total")
            telemetry.incr("chain_runs_total", labels=(("outcome", "error"),))
        for handle in advances:
            if not handle.observed:
                handle.keep_alive()
        raise
    finally:
        if telemetry is not None:
            telemetry.timing("chain_run_duration_seconds", time.perf_counter() - started)

    if not drain_unawaited:
        for handle in advances:
            if not handle.observed:
                handle.keep_alive(telemetry)
    if telemetry is not None:
        telemetry.incr("chain_runs_total", labels=(("outcome", "ok"),))


class Chain:
    """Reusable ordered chain of handlers.

    The handler tuple is fixed at construction; every :meth:`run` starts a
    fresh, independent execution.
    """

    __slots__ = ("_layers", "_telemetry", "_drain_unawaited")

    def __init__(
        self,
        layers: Iterable[Middleware] = (),
        *,
        telemetry: TelemetryPort | None = None,
        drain_unawaited: bool = True,
    ) -> None:
        self._layers: tuple[Middleware, ...] = tuple(layers)
        self._telemetry = telemetry
        self._drain_unawaited = drain_unawaited

    def use(self, *handlers: Middleware) -> Chain:
        """Return a new chain with *handlers* appended."""
        return Chain(
            (*self._layers, *handlers),
            telemetry=self._telemetry,
            drain_unawaited=self._drain_unawaited,
        )

    async def run(
        self,
        initial_args: Mapping[str, Any] | None = None,
        *,
        context: Context | None = None,
        client: Any = None,
        logger: Any = None,
        last: LastFn | None = None,
    ) -> Context:
        """Execute the chain and return the (possibly mutated) context."""
        ctx: Context = {} if context is None else context
        await process_middleware(
            self._layers,
            initial_args or {},
            ctx,
            client,
            logger if logger is not None else _log.bind(component="handlerchain"),
            last,
            telemetry=self._telemetry,
            drain_unawaited=self._drain_unawaited,
        )
        return ctx

    def __len__(self) -> int:
        return len(self._layers)

    def __repr__(self) -> str:
        names = [_describe(m) for m in self._layers]
        return f"Chain({' → '.join(names)})"
