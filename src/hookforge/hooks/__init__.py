"""hookforge extension points.

Provides hooks that plugins tap into, with deterministic ordering
(stage, then ``before`` constraints, then registration order), interceptors,
and lazily compiled dispatch for three disciplines:
- call: synchronous
- call_async: callback-style, ``callback(err, result)`` as last argument
- promise: returns an awaitable

Usage:
    from hookforge.hooks import SyncWaterfallHook

    render = SyncWaterfallHook(["html"], name="render")

    @render.tap({"name": "minify", "stage": 10})
    def minify(html):
        return html.strip()

    output = render.call("  <p>hi</p>  ")
"""

from hookforge.core.types import (
    AbstractCompileError,
    CallType,
    CompileOptions,
    Compiler,
    HookArityError,
    HookError,
    InvalidHookArgsError,
    Interceptor,
    InvalidTapArgumentsError,
    MissingTapNameError,
    Tap,
    TapCallbackError,
    TapType,
    UnsupportedCallError,
    UnsupportedTapTypeError,
)
from hookforge.hooks.curried import CurriedHook
from hookforge.hooks.hook import UNCOMPILED, Compiled, Hook, Uncompiled
from hookforge.hooks.keyed import HookMap, HookMapInterceptor
from hookforge.hooks.kinds import (
    HOOK_KINDS,
    AsyncKindHook,
    AsyncParallelBailHook,
    AsyncParallelHook,
    AsyncSeriesBailHook,
    AsyncSeriesHook,
    AsyncSeriesLoopHook,
    AsyncSeriesWaterfallHook,
    SyncBailHook,
    SyncHook,
    SyncKindHook,
    SyncLoopHook,
    SyncWaterfallHook,
    get_hook_kind,
)
from hookforge.hooks.multi import MultiHook

__all__ = [
    "HOOK_KINDS",
    "UNCOMPILED",
    "AbstractCompileError",
    "AsyncKindHook",
    "AsyncParallelBailHook",
    "AsyncParallelHook",
    "AsyncSeriesBailHook",
    "AsyncSeriesHook",
    "AsyncSeriesLoopHook",
    "AsyncSeriesWaterfallHook",
    "CallType",
    "CompileOptions",
    "Compiled",
    "Compiler",
    "CurriedHook",
    "Hook",
    "HookArityError",
    "HookError",
    "HookMap",
    "HookMapInterceptor",
    "InvalidHookArgsError",
    "Interceptor",
    "InvalidTapArgumentsError",
    "MissingTapNameError",
    "MultiHook",
    "SyncBailHook",
    "SyncHook",
    "SyncKindHook",
    "SyncLoopHook",
    "SyncWaterfallHook",
    "Tap",
    "TapCallbackError",
    "TapType",
    "Uncompiled",
    "UnsupportedCallError",
    "UnsupportedTapTypeError",
    "get_hook_kind",
]
