# seatwatch/services/scheduler.py
"""
Runs the seat check immediately, then once per interval until either the
max runtime is reached or the process is interrupted (SIGINT / SIGTERM).

    STARTING ──first check──▶ RUNNING ──max runtime / signal──▶ STOPPED

Both ways out are graceful and return exit status 0. A check that raises
is logged and the scheduler simply waits for the next tick.
"""

import asyncio
import signal
import time
from enum import Enum
from typing import Awaitable, Callable, Optional

from seatwatch.utils.clock import format_duration, format_local
from seatwatch.utils.logger import get_logger

logger = get_logger(__name__)

_STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class RunnerState(str, Enum):
    STARTING = "starting"
    RUNNING = "running"
    STOPPED = "stopped"


class MonitorScheduler:
    def __init__(
        self,
        check: Callable[[], Awaitable[object]],
        interval_seconds: float,
        max_runtime_seconds: float,
        tz_name: str = "Asia/Taipei",
        target_car: str = "",
        clock: Callable[[], float] = time.monotonic,
    ):
        self._check = check
        self.interval_seconds = interval_seconds
        self.max_runtime_seconds = max_runtime_seconds
        self.tz_name = tz_name
        self.target_car = target_car
        self._clock = clock

        self.state = RunnerState.STARTING
        self.check_count = 0
        self.started_at: Optional[float] = None
        self.stop_reason: Optional[str] = None
        self._stop_event = asyncio.Event()
        self._signals_installed = []

    # ── Public API ──────────────────────────────────────────────────────────
    def request_stop(self):
        """Ask the loop to stop before the next tick. Safe to call from a signal handler."""
        self._stop_event.set()

    def elapsed(self) -> float:
        return 0.0 if self.started_at is None else self._clock() - self.started_at

    async def run(self, handle_signals: bool = True) -> int:
        self.started_at = self._clock()
        self._log_banner()
        if handle_signals:
            self._install_signal_handlers()

        try:
            await self._run_cycle()
            self.state = RunnerState.RUNNING
            next_tick = self._clock() + self.interval_seconds

            while True:
                if await self._wait_until(next_tick):
                    self._stop("interrupt")
                    return 0

                if self.elapsed() >= self.max_runtime_seconds:
                    self._stop("max_runtime")
                    return 0

                await self._run_cycle()
                next_tick = self._next_tick_after(next_tick)
        finally:
            self._remove_signal_handlers()

    # ── Internals ───────────────────────────────────────────────────────────
    async def _run_cycle(self):
        try:
            await self._check()
        except Exception as e:
            logger.error(f"❌ Check #{self.check_count + 1} crashed: {e}", exc_info=True)
        finally:
            self.check_count += 1

    async def _wait_until(self, deadline: float) -> bool:
        """Sleep until `deadline`. Returns True if a stop was requested instead."""
        if self._stop_event.is_set():
            return True
        timeout = max(0.0, deadline - self._clock())
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=timeout)
            return True
        except asyncio.TimeoutError:
            return False

    def _next_tick_after(self, tick: float) -> float:
        """Fixed-rate schedule; ticks already in the past are skipped, never run back-to-back."""
        next_tick = tick + self.interval_seconds
        now = self._clock()
        skipped = 0
        while next_tick <= now:
            next_tick += self.interval_seconds
            skipped += 1
        if skipped:
            logger.warning(f"⏱  Check overran the interval — skipped {skipped} tick(s)")
        return next_tick

    def _stop(self, reason: str):
        self.state = RunnerState.STOPPED
        self.stop_reason = reason
        logger.info("=" * 40)
        if reason == "max_runtime":
            logger.info("⏰ Max runtime reached — exiting gracefully")
        else:
            logger.info("🛑 Interrupt received — stopping monitor")
        logger.info(f"📊 Total checks: {self.check_count}")
        logger.info(f"📅 End time: {format_local(self.tz_name)}")
        logger.info("=" * 40)

    def _log_banner(self):
        logger.info("=" * 40)
        logger.info("🚀 Seat monitor starting")
        logger.info(f"📅 Start time: {format_local(self.tz_name)}")
        if self.target_car:
            logger.info(f"🚂 Target car: {self.target_car}")
        logger.info(f"⏱️  Check interval: {format_duration(self.interval_seconds)}")
        logger.info(f"⏳ Max runtime: {format_duration(self.max_runtime_seconds)}")
        logger.info("=" * 40)

    def _install_signal_handlers(self):
        loop = asyncio.get_running_loop()
        for sig in _STOP_SIGNALS:
            try:
                loop.add_signal_handler(sig, self.request_stop)
            except NotImplementedError:
                # Windows event loops: fall back to a plain handler that hops onto the loop
                signal.signal(sig, lambda *_: loop.call_soon_threadsafe(self.request_stop))
            except (RuntimeError, ValueError):
                logger.debug(f"Cannot install handler for {sig!r} outside the main thread")
                continue
            self._signals_installed.append(sig)

    def _remove_signal_handlers(self):
        loop = asyncio.get_running_loop()
        for sig in self._signals_installed:
            try:
                loop.remove_signal_handler(sig)
            except NotImplementedError:
                signal.signal(sig, signal.default_int_handler if sig == signal.SIGINT else signal.SIG_DFL)
        self._signals_installed = []
