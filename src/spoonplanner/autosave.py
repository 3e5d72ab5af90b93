import logging
from typing import Callable

from PySide6.QtCore import QObject, QTimer, Signal

AUTOSAVE_DELAY_MS = 2000


class AutoSaver(QObject):
    """
    Debounced saving: every `schedule()` restarts a single-shot timer, so only
    the state after `delay_ms` of quiet is written. Failures of the timed save
    are logged and reported through `error`; they never raise.
    """
    saved = Signal()
    error = Signal(str)

    def __init__(self, save_fn: Callable[[], None], delay_ms: int = AUTOSAVE_DELAY_MS, parent=None):
        super().__init__(parent)
        self.save_fn = save_fn
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(delay_ms)
        self._timer.timeout.connect(self._on_timeout)

    @property
    def delay_ms(self) -> int:
        return self._timer.interval()

    def is_pending(self) -> bool:
        return self._timer.isActive()

    def schedule(self):
        self._timer.start()

    def cancel(self):
        self._timer.stop()

    def save_now(self):
        """Save immediately, bypassing the debounce. Errors propagate to the caller."""
        self.cancel()
        self.save_fn()
        self.saved.emit()

    def _on_timeout(self):
        try:
            self.save_fn()
        except Exception as e:
            logging.error(f"[SpoonPlanner] Auto-save failed: {e}")
            self.error.emit(str(e))
            return
        logging.info("[SpoonPlanner] Auto-saved timetable entries")
        self.saved.emit()
