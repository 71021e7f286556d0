"""Progress reporting for multi-stage receipt processing."""

from __future__ import annotations

from collections.abc import Callable

ProgressCallback = Callable[[float], None]


class ProgressReporter:
    """Emit a non-decreasing progress value between 0.0 and 1.0.

    Values go to the callback on the thread that drives the pipeline, one
    stage at a time. A value lower than the last one emitted is ignored, so
    observers always see a monotonic sequence ending in 1.0 on success.
    """

    def __init__(self, callback: ProgressCallback | None = None) -> None:
        self._callback = callback
        self._value = 0.0
        self._started = False

    @property
    def value(self) -> float:
        return self._value

    def start(self) -> None:
        if self._started:
            return
        self._started = True
        self._emit(0.0)

    def report(self, value: float) -> None:
        value = min(1.0, max(0.0, value))
        if self._started and value < self._value:
            return
        self._started = True
        self._value = value
        self._emit(value)

    def finish(self) -> None:
        self.report(1.0)

    def _emit(self, value: float) -> None:
        if self._callback is not None:
            self._callback(value)


def as_reporter(progress: ProgressReporter | ProgressCallback | None) -> ProgressReporter:
    """Accept either a reporter or a bare callback from callers."""
    if isinstance(progress, ProgressReporter):
        return progress
    return ProgressReporter(progress)
