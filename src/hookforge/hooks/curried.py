"""Curried-options view of a Hook.

``hook.with_options({"stage": 10})`` returns a CurriedHook whose tap methods
preset those options. The view always forwards to the root hook, so chaining
``with_options`` never builds a chain of views.
"""

from collections.abc import Callable, Mapping
from typing import Any

from hookforge.core.types import InvalidTapArgumentsError
from hookforge.hooks.hook import Hook, TapOptions


class CurriedHook:
    """A hook-like handle with preset registration options.

    Registration methods merge the preset with per-call options (per-call
    fields win) and forward to the root hook. Everything else is read from
    the root, so the view shares all of its state.
    """

    def __init__(self, base: "Hook | CurriedHook", options: Mapping[str, Any]):
        if not isinstance(options, Mapping):
            raise InvalidTapArgumentsError(
                f"with_options() expects a mapping, got {type(options).__name__}"
            )
        if isinstance(base, CurriedHook):
            # Presets applied earlier in the chain take precedence
            self._options = {**options, **base._options}
            self._root = base._root
        else:
            self._options = dict(options)
            self._root = base

    @property
    def root(self) -> Hook:
        return self._root

    @property
    def options(self) -> dict[str, Any]:
        return dict(self._options)

    def _merge(self, opt: TapOptions, method: str) -> dict[str, Any]:
        if isinstance(opt, str):
            opt = {"name": opt}
        elif not isinstance(opt, Mapping):
            raise InvalidTapArgumentsError(
                f"Invalid arguments to {method}(options, fn): "
                f"options must be a name or a mapping, got {type(opt).__name__}"
            )
        return {**self._options, **opt}

    def tap(self, options: TapOptions, fn: Callable[..., Any] | None = None):
        return self._root.tap(self._merge(options, "tap"), fn)

    def tap_async(self, options: TapOptions, fn: Callable[..., Any] | None = None):
        return self._root.tap_async(self._merge(options, "tap_async"), fn)

    def tap_promise(self, options: TapOptions, fn: Callable[..., Any] | None = None):
        return self._root.tap_promise(self._merge(options, "tap_promise"), fn)

    def with_options(self, options: Mapping[str, Any]) -> "CurriedHook":
        return CurriedHook(self, options)

    def __getattr__(self, name: str) -> Any:
        if name in ("_root", "_options"):
            raise AttributeError(name)
        return getattr(self._root, name)

    def __repr__(self) -> str:
        return f"<CurriedHook of {self._root!r} options={self._options!r}>"
