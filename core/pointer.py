# -*- coding: utf-8 -*-
"""
core/pointer.py

Thin wrapper around the platform pointer primitive. The mover only needs two
operations, reading the current cursor position and moving the cursor to an
absolute position, so this module exposes exactly those and normalises every
failure of the underlying library into a single PointerError.
"""
import abc
import logging
from typing import Tuple

logger = logging.getLogger(__name__)


class PointerError(RuntimeError):
    """Raised when the pointer position cannot be read or set."""


class Pointer(abc.ABC):
    """Abstract pointer capability used by the mover loop."""

    @abc.abstractmethod
    def get_position(self) -> Tuple[int, int]:
        """Returns the current (x, y) cursor position."""

    @abc.abstractmethod
    def set_position(self, x: int, y: int) -> None:
        """Moves the cursor to the absolute position (x, y)."""


class PyAutoGUIPointer(Pointer):
    """
    Pointer backed by pyautogui.

    pyautogui sleeps for ``PAUSE`` seconds after every call by default; the
    mover issues two calls per tick and has its own timer, so the pause is
    disabled here. The fail-safe (moving the cursor into a screen corner
    aborts automation) stays enabled unless explicitly turned off.
    """

    def __init__(self, failsafe: bool = True):
        try:
            import pyautogui
        except Exception as e:
            # pyautogui connects to the display server at import time
            raise PointerError(f"pyautogui could not be loaded: {e}") from e

        self._pyautogui = pyautogui
        self._pyautogui.PAUSE = 0
        self._pyautogui.FAILSAFE = failsafe
        logger.debug(f"pyautogui pointer ready (failsafe={failsafe}).")

    def get_position(self) -> Tuple[int, int]:
        try:
            x, y = self._pyautogui.position()
        except Exception as e:
            raise PointerError(f"Unable to read pointer position: {e}") from e
        return int(x), int(y)

    def set_position(self, x: int, y: int) -> None:
        try:
            self._pyautogui.moveTo(x, y)
        except Exception as e:
            raise PointerError(
                f"Unable to move pointer to ({x}, {y}): {e}") from e
