"""Fan-out facade over several hooks."""

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from hookforge.core.types import Interceptor
from hookforge.hooks.hook import TapOptions


class MultiHook:
    """Registers every tap and interceptor on all of its hooks.

    Example:
        any_change = MultiHook([hooks.file_changed, hooks.dir_changed])
        any_change.tap("log", log_change)
    """

    def __init__(self, hooks: Sequence[Any], name: str | None = None):
        self.hooks = list(hooks)
        self.name = name

    def tap(self, options: TapOptions, fn: Callable[..., Any] | None = None):
        return self._fan_out("tap", options, fn)

    def tap_async(self, options: TapOptions, fn: Callable[..., Any] | None = None):
        return self._fan_out("tap_async", options, fn)

    def tap_promise(self, options: TapOptions, fn: Callable[..., Any] | None = None):
        return self._fan_out("tap_promise", options, fn)

    def _fan_out(self, method: str, options: TapOptions, fn: Callable[..., Any] | None):
        if fn is None:
            def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
                for hook in self.hooks:
                    getattr(hook, method)(options, func)
                return func

            return decorator

        for hook in self.hooks:
            getattr(hook, method)(options, fn)
        return None

    def is_used(self) -> bool:
        return any(hook.is_used() for hook in self.hooks)

    def intercept(self, interceptor: Interceptor | Mapping[str, Any]) -> None:
        for hook in self.hooks:
            hook.intercept(interceptor)

    def with_options(self, options: Mapping[str, Any]) -> "MultiHook":
        return MultiHook([hook.with_options(options) for hook in self.hooks], name=self.name)

    def __iter__(self):
        return iter(self.hooks)

    def __repr__(self) -> str:
        return f"<MultiHook {self.name!r} hooks={len(self.hooks)}>"
