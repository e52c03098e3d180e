"""Repeater service: run a callback on a timed cadence on the asyncio event loop."""

import asyncio
import inspect
import logging
import time
import uuid
from collections.abc import Awaitable, Callable, Mapping
from datetime import UTC, datetime
from functools import partial
from types import MethodType
from typing import Any

from task_repeater.models.repeater import (
    AbortSignal,
    InvalidArgumentError,
    RepeaterOptions,
    RepeaterView,
    TickContext,
)
from task_repeater.utils.events import EventEmitter

logger = logging.getLogger(__name__)

RepeaterCallback = Callable[..., Any]


class Repeater(EventEmitter):
    """Run a callback repeatedly, waiting `interval` milliseconds after each run completes.

    The first run is scheduled `delay` milliseconds after construction, so a repeater must be
    created while an event loop is running. Only one run is ever in flight: the next run is
    scheduled once the previous one has finished.

    Events:
        run: a run is starting, with its TickContext.
        error: the callback (or a run listener) raised, with the exception.
        abort: abort() was called for the first time.
        aborted: the abort sequence has finished and no run is in flight.
    """

    def __init__(
        self,
        callback: RepeaterCallback | None = None,
        options: RepeaterOptions | Mapping[str, Any] | float | None = None,
        *,
        name: str | None = None,
    ) -> None:
        super().__init__()

        if callback is None:
            err_msg = "Callback must be provided"
            raise InvalidArgumentError(err_msg)
        if not callable(callback):
            err_msg = f"Callback must be callable, got {type(callback).__name__}"
            raise InvalidArgumentError(err_msg)
        if options is None:
            err_msg = "Options must be provided"
            raise InvalidArgumentError(err_msg)

        self.options = RepeaterOptions.from_value(options)
        if self.options.context is not None:
            callback = MethodType(callback, self.options.context)
        self._callback = callback

        self.id = uuid.uuid4().hex
        self.name = name or getattr(callback, "__name__", type(callback).__name__)

        self._aborted = False
        self._signal = AbortSignal(lambda: self._aborted)
        self._tick_count = 0
        self._last_run_time: float | None = None  # Monotonic seconds, used for deltas
        self._last_run_at: datetime | None = None

        self._loop = asyncio.get_running_loop()
        self._timer: asyncio.TimerHandle | None = None
        self._run_task: asyncio.Task[None] | None = None
        self._run_done: asyncio.Event | None = None
        self._abort_task: asyncio.Task[None] | None = None

        self._schedule(self.options.delay)

    def __repr__(self) -> str:
        return f"<Repeater {self.name!r} id={self.id} ticks={self._tick_count} aborted={self._aborted}>"

    @property
    def aborted(self) -> bool:
        """Whether abort() has been called."""
        return self._aborted

    @property
    def tick_count(self) -> int:
        """Number of runs started so far."""
        return self._tick_count

    @property
    def interval(self) -> float:
        """Milliseconds between the end of a run and the start of the next."""
        return self.options.interval

    @property
    def delay(self) -> float:
        """Milliseconds before the first run."""
        return self.options.delay

    @property
    def last_run_at(self) -> datetime | None:
        """Wall-clock start of the most recent run."""
        return self._last_run_at

    @property
    def is_running(self) -> bool:
        """Whether a run is in flight."""
        return self._run_done is not None and not self._run_done.is_set()

    def abort(self) -> asyncio.Future[None]:
        """Prevent all future runs and wait for the current run (if any) to end.

        The abort flag is set and the `abort` event emitted before this returns. The returned future
        resolves once `aborted` has been emitted. Calling this again returns a future for the same
        abort sequence.
        """
        if self._abort_task is None:
            # Set the flag first so that no more runs are scheduled
            self._aborted = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._abort_task = self._loop.create_task(self._finish_abort())
            logger.debug("Abort requested for repeater %r", self.name)
            self.emit("abort")

        # Each caller gets its own future, so cancelling one wait leaves the abort sequence intact
        return asyncio.shield(self._abort_task)

    def get_status(self) -> RepeaterView:
        return RepeaterView(
            id=self.id,
            name=self.name,
            interval_ms=self.interval,
            delay_ms=self.delay,
            tick_count=self._tick_count,
            last_run_at=self._last_run_at,
            running=self.is_running,
            aborted=self._aborted,
        )

    async def _finish_abort(self) -> None:
        if self._run_done is not None:
            # A run is in progress, wait for it to complete
            await self._run_done.wait()
        logger.debug("Repeater %r aborted after %d runs", self.name, self._tick_count)
        self.emit("aborted")

    def _schedule(self, delay_ms: float) -> None:
        """Arm the timer for the next run."""
        self._timer = self._loop.call_later(delay_ms / 1000, self._start_run)

    def _start_run(self) -> None:
        self._timer = None
        if self._aborted:
            return
        # Keep a reference to the task so it is not garbage collected mid-run
        self._run_task = self._loop.create_task(self._run())

    async def _run(self) -> None:
        # The abort may have been requested between the timer firing and this task starting
        if self._aborted:
            return

        now = time.monotonic()
        delta = (now - self._last_run_time) * 1000 if self._last_run_time is not None else None
        self._last_run_time = now
        self._last_run_at = datetime.now(UTC)
        self._tick_count += 1

        run_done = asyncio.Event()
        self._run_done = run_done
        context = TickContext(
            count=self._tick_count,
            delta=delta,
            signal=self._signal,
            abort=partial(self._abort_from_run, run_done),
        )
        logger.debug("Starting run %d of repeater %r", context.count, self.name)

        try:
            self.emit("run", context)
            result = self._callback(context)
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError as e:
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                # The run itself is cancelled (event loop shutdown), release waiting aborts but don't re-arm
                run_done.set()
                raise
            # Something the callback awaited was cancelled, not the run itself
            self._report_error(e, context)
        except Exception as e:  # noqa: BLE001 # Callback errors are reported, never propagated
            self._report_error(e, context)

        self._complete_run(run_done)

    def _abort_from_run(self, run_done: asyncio.Event) -> Awaitable[None]:
        """Abort from inside the callback without waiting for the callback itself to return."""
        aborting = self.abort()
        run_done.set()
        return aborting

    def _report_error(self, error: BaseException, context: TickContext) -> None:
        if not self.listener_count("error"):
            logger.error("Exception in run %d of repeater %r", context.count, self.name, exc_info=error)
            return
        try:
            self.emit("error", error)
        except Exception:
            logger.exception("Error listener of repeater %r failed", self.name)

    def _complete_run(self, run_done: asyncio.Event) -> None:
        run_done.set()
        if self._aborted:
            return
        self._schedule(self.options.interval)
