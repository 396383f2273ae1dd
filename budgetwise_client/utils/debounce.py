# budgetwise_client/utils/debounce.py

import threading

from ..config import SEARCH_DEBOUNCE_SECONDS


class Debouncer:
    """Runs `func` once `interval` seconds have passed since the last call.

    A call made while one is pending replaces it. Work that already ran is
    never undone, only the waiting call is dropped.
    """

    def __init__(self, func, interval=SEARCH_DEBOUNCE_SECONDS, timer_factory=threading.Timer):
        self.func = func
        self.interval = interval
        self.timer_factory = timer_factory
        self._timer = None
        self._generation = 0
        self._lock = threading.Lock()

    def __call__(self, *args, **kwargs):
        with self._lock:
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
            self._timer = self.timer_factory(self.interval, self._fire,
                                             args=(self._generation, args, kwargs))
            self._timer.daemon = True
            self._timer.start()

    def _fire(self, generation, args, kwargs):
        with self._lock:
            # a newer call superseded this one after the timer had already fired
            if generation != self._generation:
                return
            self._timer = None
        self.func(*args, **kwargs)

    @property
    def pending(self):
        return self._timer is not None

    def flush(self, *args, **kwargs):
        """Cancel any wait and run right now."""
        self.cancel()
        self.func(*args, **kwargs)

    def cancel(self):
        with self._lock:
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
