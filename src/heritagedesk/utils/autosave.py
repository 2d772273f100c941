"""
Auto-save indicator - Tracks the editor's "saving / saved" status label.

The indicator never writes anything: it only reports "saving" until the
configured delay has passed since the last edit, then "saved".

Features:
- Dirty tracking driven by draft mutations
- Injectable clock for deterministic tests
- Status callbacks for UI updates
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from .config import config

logger = logging.getLogger("HeritageDesk")


class SaveStatus:
    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"


@dataclass
class SaveState:
    """Snapshot of the indicator shown next to the editor title."""

    status: str = SaveStatus.IDLE
    message: str = ""
    last_change: float | None = None
    last_saved_at: str = ""


class AutoSaveIndicator:
    """
    Local timer behind the "auto-saved" label.

    Call mark_dirty() after every draft mutation and poll() from the UI loop;
    the status flips to "saved" once `delay` seconds pass without an edit.
    """

    def __init__(
        self,
        delay: float | None = None,
        clock: Callable[[], float] = time.monotonic,
        initial_status: str = SaveStatus.SAVED,
    ) -> None:
        """
        Initialize the indicator.

        Args:
            delay: Seconds of inactivity before reporting "saved" (None = config)
            clock: Monotonic time source
            initial_status: Status shown before the first edit
        """
        self.delay = delay if delay is not None else config.autosave_delay
        self._clock = clock
        message = "All changes saved" if initial_status == SaveStatus.SAVED else ""
        self.state = SaveState(status=initial_status, message=message)
        self._status_callback: Callable[[SaveState], None] | None = None

    def set_status_callback(self, callback: Callable[[SaveState], None]) -> None:
        """
        Set a callback for status changes.

        Args:
            callback: Function(state) called whenever the status changes
        """
        self._status_callback = callback

    def _notify(self) -> None:
        if self._status_callback:
            self._status_callback(self.state)

    def mark_dirty(self) -> None:
        """Record an edit and switch to "saving"."""
        self.state.last_change = self._clock()
        if self.state.status != SaveStatus.SAVING:
            self.state.status = SaveStatus.SAVING
            self.state.message = "Saving changes..."
            self._notify()

    def mark_saved(self, message: str = "All changes saved") -> None:
        """Force the "saved" status, e.g. right after hydration."""
        self.state.status = SaveStatus.SAVED
        self.state.message = message
        self.state.last_change = None
        self._notify()

    def poll(self) -> str:
        """
        Advance the indicator.

        Returns:
            Current status after applying the elapsed time
        """
        if self.state.status == SaveStatus.SAVING and self.state.last_change is not None:
            if self._clock() - self.state.last_change >= self.delay:
                self.state.last_saved_at = datetime.now().strftime("%H:%M:%S")
                self.state.status = SaveStatus.SAVED
                self.state.message = f"Auto-saved at {self.state.last_saved_at}"
                logger.debug(self.state.message)
                self._notify()
        return self.state.status

    @property
    def status(self) -> str:
        return self.poll()
