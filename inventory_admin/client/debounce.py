import logging
import threading
from .api import ApiError

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Call `func` once calls have stopped for `delay` seconds.

    Every call cancels the pending timer and schedules a new one with the
    latest arguments. A timer that was superseded while already firing does
    nothing.
    """

    def __init__(self, delay, func):
        self.delay = delay
        self.func = func
        self._timer = None
        self._generation = 0
        self._lock = threading.Lock()

    def __call__(self, *args, **kwargs):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._timer = threading.Timer(self.delay, self._fire, (self._generation, args, kwargs))
            self._timer.daemon = True
            self._timer.start()

    def _fire(self, generation, args, kwargs):
        with self._lock:
            if generation != self._generation:
                return
            self._timer = None
        self.func(*args, **kwargs)

    def cancel(self):
        with self._lock:
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    @property
    def pending(self):
        return self._timer is not None


class SkuAvailabilityChecker:
    """Debounced check of an item SKU against the server while it is typed"""

    def __init__(self, client, on_result, delay=0.5):
        self.client = client
        self.on_result = on_result
        self.debouncer = Debouncer(delay, self._check)

    def update(self, sku, exclude=None):
        sku = (sku or '').strip()
        if not sku:
            self.debouncer.cancel()
            self.on_result(None)
            return
        self.debouncer(sku, exclude)

    def _check(self, sku, exclude=None):
        params = {'sku': sku}
        if exclude:
            params['exclude'] = exclude
        try:
            result = self.client.get('inventory/items/check-sku', params=params)
        except ApiError as e:
            logger.warning(f"SKU check for {sku} failed: {e.message}")
            result = {'sku': sku, 'available': None, 'error': e.message}
        self.on_result(result)
