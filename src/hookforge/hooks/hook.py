"""The Hook extension point.

A Hook keeps an ordered list of taps, an append-only list of interceptors,
and one lazily compiled dispatcher per execution discipline. Registering a
tap or an interceptor throws every compiled dispatcher away; the next call
through an entry point asks the compiler for a fresh one.

Usage:
    hook = SyncHook(["compilation"], name="build")

    @hook.tap("banner")
    def add_banner(compilation):
        ...

    hook.call(compilation)
"""

import logging
from collections import Counter
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from hookforge.core.types import (
    AbstractCompileError,
    CallType,
    CompileOptions,
    Compiler,
    Interceptor,
    InvalidTapArgumentsError,
    MissingTapNameError,
    Tap,
    TapType,
)

if TYPE_CHECKING:
    from hookforge.hooks.curried import CurriedHook

logger = logging.getLogger(__name__)

TapOptions = str | Mapping[str, Any]


# =============================================================================
# Dispatch slots
# =============================================================================


class Uncompiled:
    """Dispatch slot state: no dispatcher built since the last mutation."""

    def __repr__(self) -> str:
        return "Uncompiled"


UNCOMPILED = Uncompiled()


@dataclass(frozen=True)
class Compiled:
    """Dispatch slot state: a dispatcher valid for the current configuration."""

    dispatcher: Callable[..., Any]


DispatchSlot = Uncompiled | Compiled


# =============================================================================
# Hook
# =============================================================================


class Hook:
    """An extension point that plugins tap into.

    Args:
        args: Formal argument names every call passes to the taps
        compiler: Collaborator that turns a snapshot into a dispatcher
        name: Optional label used in messages and logs
    """

    def __init__(
        self,
        args: Sequence[str] | None = None,
        compiler: Compiler | None = None,
        name: str | None = None,
    ):
        self._args: tuple[str, ...] = tuple(args or ())
        self._compiler = compiler
        self.name = name
        self._taps: list[Tap] = []
        self._interceptors: list[Interceptor] = []
        self._slots: dict[CallType, DispatchSlot] = {}
        self._reset_compilation()

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def args(self) -> tuple[str, ...]:
        return self._args

    @property
    def taps(self) -> tuple[Tap, ...]:
        return tuple(self._taps)

    @property
    def interceptors(self) -> tuple[Interceptor, ...]:
        return tuple(self._interceptors)

    def is_used(self) -> bool:
        """Whether any plugin observes this hook."""
        return bool(self._taps) or bool(self._interceptors)

    def is_compiled(self, call_type: CallType) -> bool:
        """Whether the entry point for ``call_type`` holds a cached dispatcher."""
        return isinstance(self._slots[call_type], Compiled)

    def _label(self) -> str:
        return repr(self.name) if self.name else type(self).__name__

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r} taps={len(self._taps)}>"

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def tap(self, options: TapOptions, fn: Callable[..., Any] | None = None):
        """Register a synchronous tap.

        With ``fn`` omitted, returns a decorator that registers the
        decorated function.
        """
        return self._tap(TapType.SYNC, options, fn)

    def tap_async(self, options: TapOptions, fn: Callable[..., Any] | None = None):
        """Register a callback-style tap; ``fn`` receives a trailing callback."""
        return self._tap(TapType.ASYNC, options, fn)

    def tap_promise(self, options: TapOptions, fn: Callable[..., Any] | None = None):
        """Register a tap whose ``fn`` returns an awaitable."""
        return self._tap(TapType.PROMISE, options, fn)

    def _tap(self, tap_type: TapType, options: TapOptions, fn: Callable[..., Any] | None):
        method = _TAP_METHODS[tap_type]
        if isinstance(options, str):
            options = {"name": options}
        elif not isinstance(options, Mapping):
            raise InvalidTapArgumentsError(
                f"Invalid arguments to {method}(options, fn): "
                f"options must be a name or a mapping, got {type(options).__name__}"
            )
        name = options.get("name")
        if not isinstance(name, str) or name == "":
            raise MissingTapNameError(f"Missing name for {method}")

        if fn is None:
            def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
                self._register(Tap.from_options(options, tap_type, func))
                return func

            return decorator

        self._register(Tap.from_options(options, tap_type, fn))
        return None

    def _register(self, tap: Tap) -> None:
        tap = self._run_register_interceptors(tap)
        self._insert(tap)
        logger.debug(
            "Registered %s tap %r (stage %d) on %s",
            tap.type.value,
            tap.name,
            tap.stage,
            self._label(),
        )

    def _run_register_interceptors(self, tap: Tap) -> Tap:
        """Pass a new tap through every register interceptor in order."""
        for interceptor in self._interceptors:
            if interceptor.register is not None:
                tap = _apply_register(interceptor, tap)
        return tap

    def _insert(self, item: Tap) -> None:
        """Insert ``item`` honouring ``before`` targets, then stage, then order."""
        self._reset_compilation()
        before = set(item.before)
        stage = item.stage
        taps = self._taps
        # Every registered tap carrying a target name must end up after item
        pending = Counter(tap.name for tap in taps if tap.name in before)
        outstanding = sum(pending.values())
        unresolved = before.difference(pending)
        taps.append(item)
        i = len(taps) - 1
        while i > 0:
            i -= 1
            x = taps[i]
            taps[i + 1] = x
            if pending[x.name]:
                pending[x.name] -= 1
                outstanding -= 1
                continue
            if outstanding or unresolved:
                continue
            if x.stage > stage:
                continue
            i += 1
            break
        taps[i] = item
        if unresolved:
            logger.debug(
                "Tap %r on %s names unregistered before targets: %s",
                item.name,
                self._label(),
                ", ".join(sorted(unresolved)),
            )

    # -------------------------------------------------------------------------
    # Interceptors
    # -------------------------------------------------------------------------

    def intercept(self, interceptor: Interceptor | Mapping[str, Any]) -> None:
        """Add an interceptor and apply its register transform to existing taps."""
        if not isinstance(interceptor, Interceptor):
            if not isinstance(interceptor, Mapping):
                raise InvalidTapArgumentsError(
                    "Invalid arguments to intercept(interceptor): "
                    f"expected an Interceptor or mapping, got {type(interceptor).__name__}"
                )
            interceptor = Interceptor.from_dict(interceptor)

        taps = self._taps
        if interceptor.register is not None:
            taps = [_apply_register(interceptor, tap) for tap in taps]

        self._reset_compilation()
        self._interceptors.append(interceptor)
        self._taps[:] = taps
        logger.debug(
            "Added interceptor %s to %s (%d existing taps)",
            interceptor.name or "<anonymous>",
            self._label(),
            len(self._taps),
        )

    # -------------------------------------------------------------------------
    # Curried options
    # -------------------------------------------------------------------------

    def with_options(self, options: Mapping[str, Any]) -> "CurriedHook":
        """Return a view whose tap methods preset ``options``."""
        from hookforge.hooks.curried import CurriedHook

        return CurriedHook(self, options)

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def call(self, *args: Any) -> Any:
        """Run the hook synchronously and return the dispatcher's result."""
        return self._dispatcher(CallType.SYNC)(*args)

    def call_async(self, *args: Any) -> Any:
        """Run the hook; the last positional argument is ``callback(err, result)``."""
        return self._dispatcher(CallType.ASYNC)(*args)

    def promise(self, *args: Any) -> Any:
        """Run the hook and return an awaitable of its result."""
        return self._dispatcher(CallType.PROMISE)(*args)

    def _dispatcher(self, call_type: CallType) -> Callable[..., Any]:
        slot = self._slots[call_type]
        if isinstance(slot, Compiled):
            return slot.dispatcher
        dispatcher = self._create_call(call_type)
        self._slots[call_type] = Compiled(dispatcher)
        return dispatcher

    def _create_call(self, call_type: CallType) -> Callable[..., Any]:
        if self._compiler is None:
            raise AbstractCompileError(
                f"{type(self).__name__} has no compiler; "
                "pass one to the constructor or use a concrete hook kind"
            )
        logger.debug(
            "Compiling %s dispatcher for %s with %d taps and %d interceptors",
            call_type.value,
            self._label(),
            len(self._taps),
            len(self._interceptors),
        )
        return self._compiler.compile(
            CompileOptions(
                taps=tuple(self._taps),
                interceptors=tuple(self._interceptors),
                args=self._args,
                type=call_type,
            )
        )

    def _reset_compilation(self) -> None:
        for call_type in CallType:
            self._slots[call_type] = UNCOMPILED


_TAP_METHODS = {
    TapType.SYNC: "tap",
    TapType.ASYNC: "tap_async",
    TapType.PROMISE: "tap_promise",
}


def _apply_register(interceptor: Interceptor, tap: Tap) -> Tap:
    new_tap = interceptor.register(tap)
    if new_tap is None:
        return tap
    if not isinstance(new_tap, Tap):
        raise InvalidTapArgumentsError(
            f"Interceptor register() must return a Tap or None, got {type(new_tap).__name__}"
        )
    if new_tap.type is not tap.type:
        raise InvalidTapArgumentsError(
            f"Interceptor register() may not change the type of tap {tap.name!r} "
            f"from {tap.type.value} to {new_tap.type.value}"
        )
    if not isinstance(new_tap.name, str) or new_tap.name == "":
        raise InvalidTapArgumentsError(
            f"Interceptor register() returned a tap without a name for {tap.name!r}"
        )
    return new_tap
