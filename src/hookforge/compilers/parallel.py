"""Parallel strategies: every tap is started before any of them finishes.

Only meaningful with callback or promise taps; synchronous taps simply
complete one after another while being started.
"""

from typing import Any

from hookforge.compilers.factory import DispatchFactory
from hookforge.compilers.series import SeriesFactory

_PENDING = object()


class ParallelFactory(SeriesFactory):
    """Finish when every tap has finished, or at the first error."""

    def content(self, inv, on_error, on_result, on_done):
        if len(inv.taps) <= 1:
            super().content(inv, on_error, on_result, on_done)
            return

        remaining = len(inv.taps)
        finished = False

        def fail(err: BaseException) -> None:
            nonlocal finished
            if finished:
                return
            finished = True
            on_error(err)

        def complete(_result: Any) -> None:
            nonlocal remaining, finished
            if finished:
                return
            remaining -= 1
            if remaining == 0:
                finished = True
                on_done()

        for index in range(len(inv.taps)):
            if finished:
                break
            self.invoke_tap(inv, index, fail, complete)


class ParallelBailFactory(DispatchFactory):
    """Start every tap; the earliest tap (by order) to error or return a value wins.

    A tap's outcome only counts once every tap ahead of it has finished
    without a value, so the result does not depend on completion timing.
    """

    def content(self, inv, on_error, on_result, on_done):
        count = len(inv.taps)
        if count == 0:
            on_done()
            return

        outcomes: list[Any] = [_PENDING] * count
        finished = False

        def settle(index: int, err: BaseException | None, result: Any) -> None:
            nonlocal finished
            if finished:
                return
            outcomes[index] = (err, result)
            for outcome in outcomes:
                if outcome is _PENDING:
                    return
                tap_err, tap_result = outcome
                if tap_err is not None:
                    finished = True
                    on_error(tap_err)
                    return
                if tap_result is not None:
                    finished = True
                    on_result(tap_result)
                    return
            finished = True
            on_done()

        for index in range(count):
            if finished:
                break
            self.invoke_tap(
                inv,
                index,
                lambda err, i=index: settle(i, err, None),
                lambda result, i=index: settle(i, None, result),
            )
