"""Tests for curried hook views created with with_options."""

import pytest

from hookforge.hooks import (
    CurriedHook,
    InvalidTapArgumentsError,
    MissingTapNameError,
    SyncHook,
    TapType,
)


@pytest.fixture
def hook():
    return SyncHook(["value"], name="curried")


def noop(value):
    return None


class TestWithOptions:
    def test_preset_stage_is_applied(self, hook):
        hook.with_options({"stage": 5}).tap("x", noop)
        assert hook.taps[0].stage == 5

    def test_chained_presets_register_on_root(self, hook):
        view = hook.with_options({"stage": 5}).with_options({"stage": 5})
        view.tap("x", noop)
        assert view.root is hook
        assert [(t.name, t.stage) for t in hook.taps] == [("x", 5)]

    def test_chaining_does_not_nest_views(self, hook):
        view = hook.with_options({"stage": 1}).with_options({"before": "a"})
        assert isinstance(view, CurriedHook)
        assert view.root is hook
        assert view.options == {"stage": 1, "before": "a"}

    def test_earlier_preset_wins_on_conflict(self, hook):
        hook.with_options({"stage": 1}).with_options({"stage": 9}).tap("x", noop)
        assert hook.taps[0].stage == 1

    def test_call_options_override_preset(self, hook):
        hook.with_options({"stage": 5}).tap({"name": "x", "stage": -2}, noop)
        assert hook.taps[0].stage == -2

    def test_preset_name_used_when_missing(self, hook):
        hook.with_options({"name": "preset"}).tap({}, noop)
        assert hook.taps[0].name == "preset"

    def test_preset_extras_are_kept(self, hook):
        hook.with_options({"plugin": "banner"}).tap("x", noop)
        assert hook.taps[0].extras == {"plugin": "banner"}

    def test_preset_before(self, hook):
        hook.tap("a", noop)
        hook.with_options({"before": "a"}).tap("b", noop)
        assert [t.name for t in hook.taps] == ["b", "a"]

    def test_decorator_mode(self, hook):
        view = hook.with_options({"stage": 3})

        @view.tap("deco")
        def handler(value):
            return value

        assert hook.taps[0].fn is handler
        assert hook.taps[0].stage == 3

    def test_shares_root_state(self, hook):
        view = hook.with_options({"stage": 1})
        view.tap("x", lambda value: value)
        assert view.taps == hook.taps
        assert view.is_used()
        assert view.call(1) is None

    def test_intercept_through_view(self, hook):
        hook.with_options({}).intercept({"register": lambda tap: tap.with_extras(seen=True)})
        hook.tap("x", noop)
        assert hook.taps[0].extras["seen"] is True

    def test_view_of_async_tap_methods(self):
        from hookforge.hooks import AsyncSeriesHook

        hook = AsyncSeriesHook(["value"])
        view = hook.with_options({"stage": 2})
        view.tap_async("cb", lambda value, callback: callback())
        view.tap_promise("p", noop)
        assert [t.type for t in hook.taps] == [TapType.ASYNC, TapType.PROMISE]
        assert {t.stage for t in hook.taps} == {2}


class TestWithOptionsErrors:
    def test_non_mapping_preset(self, hook):
        with pytest.raises(InvalidTapArgumentsError):
            hook.with_options(["stage"])

    def test_invalid_call_options(self, hook):
        with pytest.raises(InvalidTapArgumentsError, match="tap_async"):
            hook.with_options({}).tap_async(42, noop)

    def test_missing_name_still_rejected(self, hook):
        with pytest.raises(MissingTapNameError):
            hook.with_options({"stage": 1}).tap({}, noop)
        assert hook.taps == ()
