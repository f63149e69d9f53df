"""Concrete hook kinds.

Each kind pairs Hook with a compiler strategy. Sync kinds only accept
synchronous taps but can still be invoked through any entry point; async
kinds accept every tap type but cannot be invoked through ``call``.
"""

from collections.abc import Callable, Sequence
from typing import Any

from hookforge.compilers import (
    BailFactory,
    DispatchFactory,
    LoopFactory,
    ParallelBailFactory,
    ParallelFactory,
    SeriesFactory,
    WaterfallFactory,
)
from hookforge.core.types import (
    InvalidHookArgsError,
    UnsupportedCallError,
    UnsupportedTapTypeError,
)
from hookforge.hooks.hook import Hook, TapOptions


class SyncKindHook(Hook):
    """Base for hooks whose taps must all be synchronous."""

    factory_class: type[DispatchFactory] = SeriesFactory

    def __init__(self, args: Sequence[str] | None = None, name: str | None = None):
        super().__init__(args, compiler=self.factory_class(), name=name)

    def tap_async(self, options: TapOptions, fn: Callable[..., Any] | None = None):
        raise UnsupportedTapTypeError(f"tap_async is not supported on a {type(self).__name__}")

    def tap_promise(self, options: TapOptions, fn: Callable[..., Any] | None = None):
        raise UnsupportedTapTypeError(f"tap_promise is not supported on a {type(self).__name__}")


class AsyncKindHook(Hook):
    """Base for hooks that can only be invoked asynchronously."""

    factory_class: type[DispatchFactory] = SeriesFactory

    def __init__(self, args: Sequence[str] | None = None, name: str | None = None):
        super().__init__(args, compiler=self.factory_class(), name=name)

    def call(self, *args: Any) -> Any:
        raise UnsupportedCallError(
            f"call is not supported on a {type(self).__name__}; use call_async or promise"
        )


class _WaterfallMixin:
    def __init__(self, args: Sequence[str] | None = None, name: str | None = None):
        if not args:
            raise InvalidHookArgsError("Waterfall hooks must have at least one argument")
        super().__init__(args, name=name)


class SyncHook(SyncKindHook):
    factory_class = SeriesFactory


class SyncBailHook(SyncKindHook):
    factory_class = BailFactory


class SyncWaterfallHook(_WaterfallMixin, SyncKindHook):
    factory_class = WaterfallFactory


class SyncLoopHook(SyncKindHook):
    factory_class = LoopFactory


class AsyncSeriesHook(AsyncKindHook):
    factory_class = SeriesFactory


class AsyncSeriesBailHook(AsyncKindHook):
    factory_class = BailFactory


class AsyncSeriesWaterfallHook(_WaterfallMixin, AsyncKindHook):
    factory_class = WaterfallFactory


class AsyncSeriesLoopHook(AsyncKindHook):
    factory_class = LoopFactory


class AsyncParallelHook(AsyncKindHook):
    factory_class = ParallelFactory


class AsyncParallelBailHook(AsyncKindHook):
    factory_class = ParallelBailFactory


HOOK_KINDS: dict[str, type[Hook]] = {
    cls.__name__: cls
    for cls in (
        SyncHook,
        SyncBailHook,
        SyncWaterfallHook,
        SyncLoopHook,
        AsyncSeriesHook,
        AsyncSeriesBailHook,
        AsyncSeriesWaterfallHook,
        AsyncSeriesLoopHook,
        AsyncParallelHook,
        AsyncParallelBailHook,
    )
}


def get_hook_kind(name: str) -> type[Hook]:
    """Look up a hook kind by class name.

    Raises:
        ValueError: If no kind has that name
    """
    if name not in HOOK_KINDS:
        raise ValueError(
            f"Unknown hook kind '{name}'. Available kinds: " + ", ".join(sorted(HOOK_KINDS))
        )
    return HOOK_KINDS[name]
