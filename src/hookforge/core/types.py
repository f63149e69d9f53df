"""Hook system types for hookforge.

Defines the core data structures shared by hooks and compilers:
- Tap: a registered plugin callback with its ordering metadata
- Interceptor: cross-cutting observer/transformer of taps and calls
- CompileOptions: the snapshot a compiler builds a dispatcher from
- the HookError exception hierarchy
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Protocol


class TapType(Enum):
    """How a tap's callback signals completion."""

    SYNC = "sync"
    ASYNC = "async"  # trailing callback(err=None, result=None)
    PROMISE = "promise"  # returns an awaitable


class CallType(Enum):
    """Execution discipline of a hook entry point."""

    SYNC = "sync"
    ASYNC = "async"
    PROMISE = "promise"


# =============================================================================
# Errors
# =============================================================================


class HookError(Exception):
    """Base class for every error raised by hookforge."""
    pass


class InvalidTapArgumentsError(HookError, TypeError):
    """Registration options are malformed."""
    pass


class MissingTapNameError(HookError, ValueError):
    """Registration options lack a non-empty name."""
    pass


class AbstractCompileError(HookError, NotImplementedError):
    """A hook was invoked without a compiler to build its dispatcher."""
    pass


class InvalidHookArgsError(HookError, ValueError):
    """A hook kind was constructed with formal arguments it cannot use."""
    pass


class UnsupportedTapTypeError(HookError, TypeError):
    """The hook kind cannot run taps of the requested type."""
    pass


class UnsupportedCallError(HookError, TypeError):
    """The hook kind cannot be invoked through the requested entry point."""
    pass


class HookArityError(HookError, TypeError):
    """A dispatcher was called with the wrong number of arguments."""
    pass


class TapCallbackError(HookError):
    """A tap broke the completion protocol of its type."""
    pass


# =============================================================================
# Tap
# =============================================================================

_KNOWN_TAP_KEYS = frozenset({"name", "stage", "before", "context"})
_RESERVED_TAP_KEYS = frozenset({"type", "fn"})


def _normalize_before(before: Any) -> tuple[str, ...]:
    if before is None:
        return ()
    if isinstance(before, str):
        return (before,)
    if isinstance(before, Iterable) and not isinstance(before, Mapping):
        names = tuple(before)
        if all(isinstance(n, str) for n in names):
            return names
    raise InvalidTapArgumentsError(
        f"'before' must be a tap name or a list of tap names, got {before!r}"
    )


@dataclass(frozen=True)
class Tap:
    """A registered extension callback.

    Attributes:
        name: Identifier other taps can reference in ``before``
        type: How ``fn`` signals completion
        fn: The plugin callable
        stage: Ordering bucket, lower runs earlier
        before: Names of taps this one must run ahead of
        context: Whether ``fn`` receives the per-call context dict first
        extras: Any additional metadata attached by callers or interceptors
    """

    name: str
    type: TapType
    fn: Callable[..., Any]
    stage: int = 0
    before: tuple[str, ...] = ()
    context: bool = False
    extras: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extras", MappingProxyType(dict(self.extras)))

    @classmethod
    def from_options(
        cls,
        options: Mapping[str, Any],
        tap_type: TapType,
        fn: Callable[..., Any],
    ) -> "Tap":
        """Build a Tap from a registration options mapping.

        Known keys map to fields; everything else lands in ``extras``.
        """
        reserved = _RESERVED_TAP_KEYS.intersection(options)
        if reserved:
            raise InvalidTapArgumentsError(
                f"Tap options may not set {', '.join(sorted(reserved))}; "
                "use the matching tap method and pass the callback separately"
            )

        stage = options.get("stage", 0)
        if stage is None:
            stage = 0
        if isinstance(stage, bool) or not isinstance(stage, int):
            raise InvalidTapArgumentsError(
                f"'stage' must be an integer, got {stage!r}"
            )

        return cls(
            name=options["name"],
            type=tap_type,
            fn=fn,
            stage=stage,
            before=_normalize_before(options.get("before")),
            context=bool(options.get("context", False)),
            extras={k: v for k, v in options.items() if k not in _KNOWN_TAP_KEYS},
        )

    def replace(self, **changes: Any) -> "Tap":
        """Return a copy with the given fields changed."""
        if "before" in changes:
            changes["before"] = _normalize_before(changes["before"])
        return replace(self, **changes)

    def with_extras(self, **extras: Any) -> "Tap":
        """Return a copy with additional metadata merged into ``extras``."""
        return replace(self, extras={**self.extras, **extras})

    def to_dict(self) -> dict[str, Any]:
        """Export ordering metadata (the callback is omitted)."""
        return {
            "name": self.name,
            "type": self.type.value,
            "stage": self.stage,
            "before": list(self.before),
            "context": self.context,
            **dict(self.extras),
        }


# =============================================================================
# Interceptor
# =============================================================================


@dataclass(frozen=True)
class Interceptor:
    """Cross-cutting observer of a hook.

    ``register`` runs at registration time and may return a replacement Tap.
    The remaining callables are invoked by compiled dispatchers:

    Attributes:
        register: (tap) -> Tap | None
        call: (*args) at the start of every invocation
        tap: (tap) before each tap runs
        loop: (*args) at the start of every pass of a loop hook
        error: (exc) when the invocation fails
        result: (value) when the invocation produces a result
        done: () when the invocation finishes without a result
        context: Prepend the per-call context dict to call/tap/loop
        name: Label used in log output
    """

    register: Callable[[Tap], Tap | None] | None = None
    call: Callable[..., Any] | None = None
    tap: Callable[..., Any] | None = None
    loop: Callable[..., Any] | None = None
    error: Callable[[BaseException], Any] | None = None
    result: Callable[[Any], Any] | None = None
    done: Callable[[], Any] | None = None
    context: bool = False
    name: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Interceptor":
        """Create an Interceptor from a plain mapping of hook callables."""
        unknown = set(data) - {f for f in cls.__dataclass_fields__}
        if unknown:
            raise InvalidTapArgumentsError(
                f"Unknown interceptor fields: {', '.join(sorted(unknown))}"
            )
        return cls(**dict(data))


# =============================================================================
# Compiler contract
# =============================================================================


@dataclass(frozen=True)
class CompileOptions:
    """Snapshot of a hook handed to its compiler.

    Attributes:
        taps: Taps in dispatch order
        interceptors: Interceptors in registration order
        args: Formal argument names of the hook
        type: Discipline the dispatcher must implement
    """

    taps: tuple[Tap, ...]
    interceptors: tuple[Interceptor, ...]
    args: tuple[str, ...]
    type: CallType


class Compiler(Protocol):
    """Builds an executable dispatcher from a hook snapshot."""

    def compile(self, options: CompileOptions) -> Callable[..., Any]:
        ...
