# -*- coding: utf-8 -*-
"""
core/mover.py

This module defines the MoverLoop, the background worker that keeps the
workstation awake by nudging the mouse pointer at a fixed interval.

Key Features:
- One movement per elapsed interval, strictly serialized.
- Cooperative cancellation through a shared threading.Event; the loop waits
  on "next tick or cancellation", whichever comes first.
- A single-use completion signal so the owner can block until the loop has
  fully stopped.
- Pointer failures are logged and skipped; they never stop the loop.
"""
import enum
import logging
import sys
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, TextIO

from utils.i18n import _
from .pointer import Pointer, PointerError
from .service_interface import ServiceInterface


class ConfigurationError(ValueError):
    """Raised when the mover configuration is outside its allowed range."""


class MoverState(enum.Enum):
    """Lifecycle of a MoverLoop. STOPPED is terminal."""
    RUNNING = "RUNNING"
    STOPPED = "STOPPED"


@dataclass(frozen=True)
class MoverConfig:
    """Immutable settings for the mover loop, validated on construction."""
    interval: int = 30
    distance: int = 1
    verbose: bool = False

    def __post_init__(self):
        if self.interval < 1:
            raise ConfigurationError(
                _('config_interval_too_small').format(value=self.interval))
        if self.distance < 1:
            raise ConfigurationError(
                _('config_distance_too_small').format(value=self.distance))


class MoverLoop(ServiceInterface):
    """
    Moves the pointer by (distance, distance) once per interval until the
    cancellation event is set.

    The loop is the only writer of its move counter, so the counter needs no
    locking. The loop is single-use: once it has stopped it cannot be run
    again.
    """

    def __init__(self,
                 config: MoverConfig,
                 pointer: Pointer,
                 cancel_event: threading.Event,
                 *,
                 clock: Callable[[], float] = time.monotonic,
                 progress_stream: Optional[TextIO] = None):
        self.config = config
        self.pointer = pointer
        self.cancel_event = cancel_event
        self.logger = logging.getLogger(__name__)
        self.move_count = 0
        self.state: Optional[MoverState] = None
        self._clock = clock
        self._progress_stream = progress_stream
        self._done = threading.Event()
        self._run_lock = threading.Lock()

    @property
    def done(self) -> bool:
        """True once the loop has stopped and signalled completion."""
        return self._done.is_set()

    def tick(self) -> bool:
        """
        Performs a single movement relative to the current pointer position.

        Returns:
            bool: True if the pointer was moved, False if the pointer
                  primitive failed. A failed tick leaves the counter
                  untouched.
        """
        distance = self.config.distance
        try:
            x, y = self.pointer.get_position()
            self.logger.debug(_('mover_current_position').format(x=x, y=y))

            new_x, new_y = x + distance, y + distance
            self.pointer.set_position(new_x, new_y)
            self.logger.debug(_('mover_moved_to').format(x=new_x, y=new_y))
        except PointerError as e:
            self.logger.error(_('mover_move_failed').format(error=str(e)),
                              exc_info=True)
            return False

        self.move_count += 1
        if self.config.verbose:
            self.logger.info(
                _('mover_move_logged').format(count=self.move_count,
                                              x=new_x,
                                              y=new_y))
        else:
            stream = self._progress_stream or sys.stdout
            stream.write('.')
            stream.flush()
        return True

    def run(self) -> int:
        """
        Runs the loop until cancellation is observed.

        Ticks fire on a fixed-rate schedule, the first one `interval` seconds
        after start. If a tick overruns its slot the next tick fires
        immediately and the schedule restarts from there; missed slots are
        dropped rather than replayed.

        Returns:
            int: The number of completed movements.

        Raises:
            RuntimeError: If the loop has already been started.
        """
        # Never released: a loop runs at most once.
        if not self._run_lock.acquire(blocking=False):
            raise RuntimeError(_('mover_already_started'))

        self.state = MoverState.RUNNING
        interval = self.config.interval
        self.logger.info(
            _('mover_started').format(interval=interval,
                                      distance=self.config.distance))
        try:
            next_tick = self._clock() + interval
            while True:
                timeout = min(max(0.0, next_tick - self._clock()),
                              threading.TIMEOUT_MAX)
                if self.cancel_event.wait(timeout):
                    break
                if self._clock() < next_tick:
                    # Clamped wait ended before the tick was due.
                    continue
                self.tick()

                next_tick += interval
                now = self._clock()
                if next_tick < now:
                    next_tick = now

            if self.config.verbose:
                self.logger.info(
                    _('mover_cancelled').format(count=self.move_count))
            return self.move_count
        finally:
            self.state = MoverState.STOPPED
            self._done.set()

    def wait_done(self, timeout: Optional[float] = None) -> bool:
        """
        Blocks until the loop has stopped.

        Returns:
            bool: True if the loop signalled completion within the timeout.
        """
        return self._done.wait(timeout)

    # --- ServiceInterface ---

    def start(self):
        """Runs the loop on the calling thread until it is cancelled."""
        self.run()

    def stop(self):
        """Requests cancellation and waits for the loop to finish its tick."""
        self.cancel_event.set()
        if self.state is not None:
            self.wait_done()
