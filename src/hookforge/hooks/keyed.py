"""Keyed hook collection.

A HookMap lazily creates one hook per key, e.g. one hook per file extension:

    parsers = HookMap(lambda key: SyncBailHook(["source"]), name="parse")
    parsers.for_key(".yaml").tap("yaml", parse_yaml)
    result = parsers.for_key(".yaml").call(source)
"""

import logging
from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass
from typing import Any

from hookforge.core.types import InvalidTapArgumentsError
from hookforge.hooks.hook import Hook, TapOptions

logger = logging.getLogger(__name__)

HookFactory = Callable[[Hashable], Hook]


@dataclass(frozen=True)
class HookMapInterceptor:
    """Observer of hook creation in a HookMap.

    Attributes:
        factory: (key, hook) -> Hook, may wrap or replace the created hook
    """

    factory: Callable[[Hashable, Hook], Hook] | None = None


class HookMap:
    """Creates and memoizes one hook per key."""

    def __init__(self, factory: HookFactory, name: str | None = None):
        self._factory = factory
        self.name = name
        self._map: dict[Hashable, Hook] = {}
        self._interceptors: list[HookMapInterceptor] = []

    def get(self, key: Hashable) -> Hook | None:
        """Return the hook for ``key`` if one was created."""
        return self._map.get(key)

    def for_key(self, key: Hashable) -> Hook:
        """Return the hook for ``key``, creating it on first use."""
        hook = self._map.get(key)
        if hook is not None:
            return hook

        hook = self._factory(key)
        for interceptor in self._interceptors:
            if interceptor.factory is not None:
                hook = interceptor.factory(key, hook)
        self._map[key] = hook
        logger.debug("Created hook for key %r in %s", key, self.name or "HookMap")
        return hook

    def intercept(self, interceptor: HookMapInterceptor | Mapping[str, Any]) -> None:
        """Add an interceptor applied to hooks created from now on."""
        if isinstance(interceptor, Mapping):
            unknown = set(interceptor) - {"factory"}
            if unknown:
                raise InvalidTapArgumentsError(
                    f"Unknown HookMap interceptor fields: {', '.join(sorted(unknown))}"
                )
            interceptor = HookMapInterceptor(**interceptor)
        elif not isinstance(interceptor, HookMapInterceptor):
            raise InvalidTapArgumentsError(
                f"Expected a HookMapInterceptor or mapping, got {type(interceptor).__name__}"
            )
        self._interceptors.append(interceptor)

    def keys(self) -> list[Hashable]:
        return list(self._map)

    def tap(self, key: Hashable, options: TapOptions, fn: Callable[..., Any] | None = None):
        return self.for_key(key).tap(options, fn)

    def tap_async(self, key: Hashable, options: TapOptions, fn: Callable[..., Any] | None = None):
        return self.for_key(key).tap_async(options, fn)

    def tap_promise(self, key: Hashable, options: TapOptions, fn: Callable[..., Any] | None = None):
        return self.for_key(key).tap_promise(options, fn)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._map

    def __len__(self) -> int:
        return len(self._map)

    def __repr__(self) -> str:
        return f"<HookMap {self.name!r} keys={len(self._map)}>"
