"""Fixed-interval scheduler — one reconciliation pass per tick.

Passes never overlap. When a pass outlasts its tick the missed ticks are
dropped and the next pass starts on the following tick boundary.
"""

from __future__ import annotations

import threading
import time
from pathlib import Path
from typing import Callable, Optional

from rulesync.log import get_logger
from rulesync.reconciler import Outcome, Reconciler
from rulesync.source.base import RuleSource

logger = get_logger(__name__)


class Scheduler:
    """Drive a Reconciler every *interval* seconds until stopped.

    Parameters:
        reconciler: Runs each pass.
        source: Where the passes fetch rules from.
        local_path: Rule file kept in sync.
        interval: Seconds between the starts of consecutive passes.
        clock: Monotonic time source (injectable for tests).
        stop_event: Set to end the loop; also used for the inter-tick sleep.
        max_passes: Stop after this many passes (``None`` = run forever).
    """

    def __init__(
        self,
        reconciler: Reconciler,
        source: RuleSource,
        local_path: Path,
        interval: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        stop_event: Optional[threading.Event] = None,
        max_passes: Optional[int] = None,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.reconciler = reconciler
        self.source = source
        self.local_path = local_path
        self.interval = interval
        self.max_passes = max_passes
        self._clock = clock
        self._stop = stop_event or threading.Event()
        self.passes = 0
        self.skipped_ticks = 0
        self.last_outcome: Optional[Outcome] = None

    def stop(self) -> None:
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def run_once(self) -> Optional[Outcome]:
        """Run one pass. Never raises; a crashed pass returns None."""
        self.passes += 1
        logger.debug("pass_started", number=self.passes, path=str(self.local_path))
        try:
            outcome = self.reconciler.reconcile(self.source, self.local_path)
        except Exception as exc:
            logger.exception("pass_crashed", number=self.passes, error=str(exc))
            self.last_outcome = None
            return None
        logger.info(
            "pass_finished",
            number=self.passes,
            outcome=outcome.kind.value,
            changes=outcome.diff.total if outcome.diff is not None else 0,
            duration_ms=outcome.duration_ms,
        )
        self.last_outcome = outcome
        return outcome

    def run(self) -> None:
        """Loop until :meth:`stop` is called or ``max_passes`` is reached."""
        logger.info("scheduler_started", interval=self.interval, path=str(self.local_path))
        next_tick = self._clock()
        while not self._stop.is_set():
            self.run_once()
            if self.max_passes is not None and self.passes >= self.max_passes:
                break

            next_tick += self.interval
            now = self._clock()
            if now >= next_tick:
                missed = int((now - next_tick) // self.interval) + 1
                self.skipped_ticks += missed
                logger.warning("tick_skipped", missed=missed, overrun_s=round(now - next_tick, 3))
                next_tick += missed * self.interval
            self._stop.wait(next_tick - now)
        logger.info("scheduler_stopped", passes=self.passes)
