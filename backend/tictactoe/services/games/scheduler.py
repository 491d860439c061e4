"""Delayed single-shot callbacks for table controllers.

Schedulers know nothing about games; the controller wraps every callback with
an epoch check so a timer that outlives a reset or resize does nothing.
"""

import heapq
import itertools
from typing import Callable, List, Tuple

from tictactoe import socketio


class BackgroundScheduler:
    """Runs each callback on a Socket.IO background task after ``delay``."""

    def __init__(self, app):
        self.app = app

    def call_later(self, delay: float, callback: Callable[[], None], label: str = '') -> None:
        app = self.app
        app.logger.info(f"[timer-set] {label} delay={delay}s")

        def _worker():
            socketio.sleep(delay)
            with app.app_context():
                app.logger.info(f"[timer-fire] {label}")
                callback()

        socketio.start_background_task(_worker)


class ManualScheduler:
    """Queues callbacks until ``run_pending`` is called.

    Used while TESTING so tests decide exactly when timers fire.
    """

    def __init__(self):
        self._clock = 0.0
        self._counter = itertools.count()
        self._queue: List[Tuple[float, int, str, Callable[[], None]]] = []

    def call_later(self, delay: float, callback: Callable[[], None], label: str = '') -> None:
        heapq.heappush(self._queue, (self._clock + delay, next(self._counter), label, callback))

    @property
    def pending(self) -> List[str]:
        return [label for _, _, label, _ in sorted(self._queue)]

    def run_pending(self) -> int:
        """Fire everything queued so far in due order; returns how many fired.

        Callbacks scheduled while running wait for the next call.
        """
        batch = sorted(self._queue)
        self._queue = []
        for due, _, _, callback in batch:
            self._clock = max(self._clock, due)
            callback()
        return len(batch)


def make_scheduler(app):
    if app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        return ManualScheduler()
    return BackgroundScheduler(app)
