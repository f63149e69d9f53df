"""Series strategies: taps run one after another in registration order."""

from collections.abc import Callable
from typing import Any

from hookforge.compilers.factory import (
    DispatchFactory,
    DoneFn,
    ErrorFn,
    Invocation,
    ResultFn,
    trampoline,
)

# (tap result, proceed) -> None; call proceed() to run the next tap
TapResultFn = Callable[[Any, Callable[[], None]], None]


class SeriesFactory(DispatchFactory):
    """Run every tap in order; the invocation has no result."""

    def content(
        self,
        inv: Invocation,
        on_error: ErrorFn,
        on_result: ResultFn,
        on_done: DoneFn,
    ) -> None:
        self.run_series(inv, on_error, lambda result, proceed: proceed(), on_done)

    def run_series(
        self,
        inv: Invocation,
        on_error: ErrorFn,
        on_tap_result: TapResultFn,
        on_done: DoneFn,
    ) -> None:
        """Drive taps in order until one stops the chain or all have run."""
        count = len(inv.taps)
        index = 0

        def step() -> None:
            nonlocal index
            if index >= count:
                on_done()
                return
            current = index
            index += 1
            self.invoke_tap(
                inv,
                current,
                on_error,
                lambda result: on_tap_result(result, advance),
            )

        advance = trampoline(step)
        advance()


class BailFactory(SeriesFactory):
    """Stop at the first tap that returns something other than None."""

    def content(self, inv, on_error, on_result, on_done):
        def on_tap_result(result: Any, proceed: Callable[[], None]) -> None:
            if result is not None:
                on_result(result)
            else:
                proceed()

        self.run_series(inv, on_error, on_tap_result, on_done)


class WaterfallFactory(SeriesFactory):
    """Thread the first argument through the taps.

    A tap returning something other than None replaces the first argument
    for the taps after it. The invocation's result is the final value.
    """

    requires_args = True

    def content(self, inv, on_error, on_result, on_done):
        def on_tap_result(result: Any, proceed: Callable[[], None]) -> None:
            if result is not None:
                inv.args[0] = result
            proceed()

        self.run_series(inv, on_error, on_tap_result, lambda: on_result(inv.args[0]))


class LoopFactory(SeriesFactory):
    """Restart from the first tap whenever a tap returns something other than None.

    The invocation finishes once a full pass returns only None.
    """

    def content(self, inv, on_error, on_result, on_done):
        def one_pass() -> None:
            self.call_loop_interceptors(inv)

            def on_tap_result(result: Any, proceed: Callable[[], None]) -> None:
                if result is not None:
                    again()
                else:
                    proceed()

            self.run_series(inv, on_error, on_tap_result, on_done)

        again = trampoline(one_pass)
        again()
