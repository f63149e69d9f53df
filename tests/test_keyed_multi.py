"""Tests for HookMap and MultiHook."""

import pytest

from hookforge.hooks import (
    AsyncSeriesHook,
    HookMap,
    HookMapInterceptor,
    InvalidTapArgumentsError,
    MultiHook,
    SyncBailHook,
    SyncHook,
)


# =============================================================================
# HookMap
# =============================================================================


class TestHookMap:
    @pytest.fixture
    def parsers(self):
        return HookMap(lambda key: SyncBailHook(["source"], name=f"parse{key}"), name="parse")

    def test_for_key_creates_once(self, parsers):
        first = parsers.for_key(".yaml")
        assert parsers.for_key(".yaml") is first
        assert first.name == "parse.yaml"

    def test_get_does_not_create(self, parsers):
        assert parsers.get(".json") is None
        assert ".json" not in parsers
        assert len(parsers) == 0

    def test_keys_in_creation_order(self, parsers):
        parsers.for_key("b")
        parsers.for_key("a")
        assert parsers.keys() == ["b", "a"]

    def test_tap_through_map(self, parsers):
        parsers.tap(".yaml", "yaml", lambda source: {"parsed": source})
        assert parsers.for_key(".yaml").call("x: 1") == {"parsed": "x: 1"}
        assert parsers.get(".toml") is None

    def test_decorator_through_map(self, parsers):
        @parsers.tap(".ini", {"name": "ini", "stage": 1})
        def parse_ini(source):
            return source

        assert parsers.get(".ini").taps[0].fn is parse_ini

    def test_async_tap_methods(self):
        hooks = HookMap(lambda key: AsyncSeriesHook(["value"]))
        hooks.tap_async("k", "cb", lambda value, callback: callback())
        hooks.tap_promise("k", "p", lambda value: None)
        assert [t.name for t in hooks.get("k").taps] == ["cb", "p"]

    def test_interceptor_wraps_new_hooks(self, parsers):
        parsers.for_key("old")
        seen = []

        def factory(key, hook):
            seen.append(key)
            hook.tap({"name": "default", "stage": 100}, lambda source: "fallback")
            return hook

        parsers.intercept(HookMapInterceptor(factory=factory))
        created = parsers.for_key("new")

        assert seen == ["new"]
        assert created.call("text") == "fallback"
        assert parsers.get("old").taps == ()

    def test_interceptor_can_replace_hook(self, parsers):
        replacement = SyncBailHook(["source"], name="replacement")
        parsers.intercept({"factory": lambda key, hook: replacement})
        assert parsers.for_key("x") is replacement

    def test_interceptors_chain(self, parsers):
        order = []
        parsers.intercept({"factory": lambda key, hook: order.append(1) or hook})
        parsers.intercept({"factory": lambda key, hook: order.append(2) or hook})
        parsers.for_key("x")
        assert order == [1, 2]

    def test_invalid_interceptor(self, parsers):
        with pytest.raises(InvalidTapArgumentsError, match="Unknown HookMap interceptor fields"):
            parsers.intercept({"create": lambda key, hook: hook})
        with pytest.raises(InvalidTapArgumentsError):
            parsers.intercept("factory")


# =============================================================================
# MultiHook
# =============================================================================


class TestMultiHook:
    @pytest.fixture
    def hooks(self):
        return [SyncHook(["log"], name="one"), SyncHook(["log"], name="two")]

    def test_tap_registers_on_every_hook(self, hooks):
        multi = MultiHook(hooks)
        multi.tap("shared", lambda log: log.append("shared"))
        for hook in hooks:
            assert [t.name for t in hook.taps] == ["shared"]

    def test_decorator(self, hooks):
        multi = MultiHook(hooks)

        @multi.tap({"name": "deco"})
        def handler(log):
            log.append("deco")

        assert all(hook.taps[0].fn is handler for hook in hooks)

    def test_is_used(self, hooks):
        multi = MultiHook(hooks)
        assert not multi.is_used()
        hooks[1].tap("only", lambda log: None)
        assert multi.is_used()

    def test_intercept_reaches_every_hook(self, hooks):
        multi = MultiHook(hooks)
        multi.intercept({"register": lambda tap: tap.with_extras(multi=True)})
        hooks[0].tap("a", lambda log: None)
        hooks[1].tap("b", lambda log: None)
        assert hooks[0].taps[0].extras["multi"] is True
        assert hooks[1].taps[0].extras["multi"] is True

    def test_with_options(self, hooks):
        MultiHook(hooks).with_options({"stage": 7}).tap("x", lambda log: None)
        assert [hook.taps[0].stage for hook in hooks] == [7, 7]

    def test_async_tap_methods(self):
        hooks = [AsyncSeriesHook(["v"]), AsyncSeriesHook(["v"])]
        multi = MultiHook(hooks, name="async")
        multi.tap_async("cb", lambda v, callback: callback())
        multi.tap_promise("p", lambda v: None)
        assert all(len(hook.taps) == 2 for hook in hooks)

    def test_iterates_hooks(self, hooks):
        assert list(MultiHook(hooks)) == hooks
