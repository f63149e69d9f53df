"""Dispatcher factory for hookforge hooks.

A DispatchFactory turns a CompileOptions snapshot into a callable for one
execution discipline. Strategies (series, bail, waterfall, ...) only describe
how taps are sequenced, in continuation-passing style; the factory adapts
that single description to all three disciplines:

- sync: the run completes before the dispatcher returns
- async: the run reports through a trailing ``callback(err, result)``
- promise: the run resolves an asyncio future the caller awaits
"""

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

from hookforge.core.types import (
    CallType,
    CompileOptions,
    HookArityError,
    HookError,
    Interceptor,
    Tap,
    TapCallbackError,
    TapType,
)

logger = logging.getLogger(__name__)

ErrorFn = Callable[[BaseException], None]
ResultFn = Callable[[Any], None]
DoneFn = Callable[[], None]


class Invocation:
    """Mutable per-call state shared by a strategy run.

    Attributes:
        taps: Taps in dispatch order
        interceptors: Interceptors in registration order
        args: Call arguments (waterfall strategies replace args[0])
        context: Per-call context dict, or None when nobody asked for one
    """

    __slots__ = ("taps", "interceptors", "args", "context")

    def __init__(
        self,
        taps: tuple[Tap, ...],
        interceptors: tuple[Interceptor, ...],
        args: list[Any],
        context: dict[str, Any] | None,
    ):
        self.taps = taps
        self.interceptors = interceptors
        self.args = args
        self.context = context


def trampoline(step: Callable[[], None]) -> Callable[[], None]:
    """Wrap ``step`` so re-entrant kicks run iteratively instead of recursing.

    Calling the returned function runs ``step``; if ``step`` (directly or
    through a synchronously completing tap) kicks again, the next run happens
    after the current one returns.
    """
    running = False
    pending = False

    def kick() -> None:
        nonlocal running, pending
        pending = True
        if running:
            return
        running = True
        try:
            while pending:
                pending = False
                step()
        finally:
            running = False

    return kick


class DispatchFactory:
    """Base compiler; subclasses implement ``content``."""

    #: Whether dispatchers require at least one hook argument
    requires_args = False

    def compile(self, options: CompileOptions) -> Callable[..., Any]:
        """Build a dispatcher for ``options.type``."""
        if self.requires_args and not options.args:
            raise HookError(f"{type(self).__name__} needs at least one hook argument")

        if options.type is CallType.SYNC:
            return self._build_sync(options)
        if options.type is CallType.ASYNC:
            return self._build_async(options)
        if options.type is CallType.PROMISE:
            return self._build_promise(options)
        raise HookError(f"Unknown call type: {options.type!r}")

    def content(
        self,
        inv: Invocation,
        on_error: ErrorFn,
        on_result: ResultFn,
        on_done: DoneFn,
    ) -> None:
        """Sequence the taps. Exactly one of the continuations must fire."""
        raise NotImplementedError("Subclasses must implement content()")

    # -------------------------------------------------------------------------
    # Disciplines
    # -------------------------------------------------------------------------

    def _build_sync(self, options: CompileOptions) -> Callable[..., Any]:
        arity = len(options.args)

        def dispatch(*args: Any) -> Any:
            _check_arity("call", arity, args)
            outcome: list[tuple[BaseException | None, Any]] = []
            self._run(options, list(args), lambda err=None, result=None: outcome.append((err, result)))
            if not outcome:
                raise HookError("Synchronous dispatch did not complete; a tap suspended")
            err, result = outcome[0]
            if err is not None:
                raise err
            return result

        return dispatch

    def _build_async(self, options: CompileOptions) -> Callable[..., Any]:
        arity = len(options.args)

        def dispatch(*args: Any) -> None:
            _check_arity("call_async", arity + 1, args)
            callback = args[-1]
            if not callable(callback):
                raise HookArityError("call_async() expects a callback as its last argument")
            self._run(options, list(args[:-1]), callback)

        return dispatch

    def _build_promise(self, options: CompileOptions) -> Callable[..., Any]:
        arity = len(options.args)

        async def run(args: list[Any]) -> Any:
            future = asyncio.get_running_loop().create_future()

            def settle(err: BaseException | None = None, result: Any = None) -> None:
                if future.done():
                    return
                if err is not None:
                    future.set_exception(err)
                else:
                    future.set_result(result)

            self._run(options, args, settle)
            return await future

        def dispatch(*args: Any) -> Any:
            _check_arity("promise", arity, args)
            return run(list(args))

        return dispatch

    # -------------------------------------------------------------------------
    # Shared run logic
    # -------------------------------------------------------------------------

    def _run(
        self,
        options: CompileOptions,
        args: list[Any],
        callback: Callable[..., Any],
    ) -> None:
        interceptors = options.interceptors
        needs_context = any(t.context for t in options.taps) or any(
            i.context for i in interceptors
        )
        inv = Invocation(options.taps, interceptors, args, {} if needs_context else None)

        for interceptor in interceptors:
            if interceptor.call is not None:
                interceptor.call(*_with_context(interceptor, inv), *inv.args)

        def on_error(err: BaseException) -> None:
            for interceptor in interceptors:
                if interceptor.error is not None:
                    interceptor.error(err)
            callback(err)

        def on_result(result: Any) -> None:
            for interceptor in interceptors:
                if interceptor.result is not None:
                    interceptor.result(result)
            callback(None, result)

        def on_done() -> None:
            for interceptor in interceptors:
                if interceptor.done is not None:
                    interceptor.done()
            callback()

        self.content(inv, on_error, on_result, on_done)

    def call_loop_interceptors(self, inv: Invocation) -> None:
        for interceptor in inv.interceptors:
            if interceptor.loop is not None:
                interceptor.loop(*_with_context(interceptor, inv), *inv.args)

    def invoke_tap(
        self,
        inv: Invocation,
        index: int,
        on_error: ErrorFn,
        on_result: ResultFn,
    ) -> None:
        """Run one tap and report its outcome through a continuation.

        A tap that completes without a value reports ``on_result(None)``.
        """
        tap = inv.taps[index]
        for interceptor in inv.interceptors:
            if interceptor.tap is not None:
                interceptor.tap(*_with_context(interceptor, inv), tap)

        call_args = [inv.context, *inv.args] if tap.context else list(inv.args)

        if tap.type is TapType.SYNC:
            try:
                result = tap.fn(*call_args)
            except Exception as exc:
                on_error(exc)
                return
            on_result(result)
        elif tap.type is TapType.ASYNC:
            self._invoke_callback_tap(tap, call_args, on_error, on_result)
        else:
            self._invoke_promise_tap(tap, call_args, on_error, on_result)

    def _invoke_callback_tap(
        self,
        tap: Tap,
        call_args: list[Any],
        on_error: ErrorFn,
        on_result: ResultFn,
    ) -> None:
        called = False

        def callback(err: Any = None, result: Any = None) -> None:
            nonlocal called
            if called:
                raise TapCallbackError(f"Tap {tap.name!r} called its callback more than once")
            called = True
            if err is None:
                on_result(result)
            elif isinstance(err, BaseException):
                on_error(err)
            else:
                on_error(TapCallbackError(f"Tap {tap.name!r} failed: {err!r}"))

        try:
            tap.fn(*call_args, callback)
        except Exception as exc:
            if called:
                raise
            called = True
            on_error(exc)

    def _invoke_promise_tap(
        self,
        tap: Tap,
        call_args: list[Any],
        on_error: ErrorFn,
        on_result: ResultFn,
    ) -> None:
        try:
            awaitable = tap.fn(*call_args)
        except Exception as exc:
            on_error(exc)
            return
        if not inspect.isawaitable(awaitable):
            on_error(
                TapCallbackError(
                    f"Tap function (tap_promise) {tap.name!r} did not return an awaitable"
                )
            )
            return
        try:
            future = asyncio.ensure_future(awaitable, loop=asyncio.get_running_loop())
        except RuntimeError as exc:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            on_error(exc)
            return

        def settle(fut: asyncio.Future) -> None:
            if fut.cancelled():
                on_error(asyncio.CancelledError(f"Tap {tap.name!r} was cancelled"))
                return
            exc = fut.exception()
            if exc is not None:
                on_error(exc)
            else:
                on_result(fut.result())

        future.add_done_callback(settle)


def _with_context(interceptor: Interceptor, inv: Invocation) -> tuple[Any, ...]:
    return (inv.context,) if interceptor.context else ()


def _check_arity(method: str, expected: int, args: tuple[Any, ...]) -> None:
    if len(args) != expected:
        raise HookArityError(
            f"{method}() takes {expected} positional arguments but {len(args)} were given"
        )
