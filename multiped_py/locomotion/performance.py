import time
from collections import deque

import numpy as np

MAX_ALERTS = 50


class PerformanceMonitor:
    """
    Rolling record of tick timing, stability margin and IK residuals.
    """

    def __init__(self, window=100, alert_threshold_ms=1.0, stability_alert_threshold=10.0, clock=time.perf_counter):
        if window < 1:
            raise ValueError("window must be >= 1")
        self.window = window
        self.alert_threshold_ms = alert_threshold_ms
        self.stability_alert_threshold = stability_alert_threshold
        self._clock = clock
        self.reset()

    def reset(self):
        self.tick_times_ms = deque(maxlen=self.window)
        self.margins = deque(maxlen=self.window)
        self.residuals = deque(maxlen=self.window)
        self.alerts = deque(maxlen=MAX_ALERTS)
        self.tick_count = 0
        self.unstable_ticks = 0
        self._started = None

    def begin_tick(self):
        self._started = self._clock()

    def record_tick(self, margin, worst_residual, is_stable, elapsed_ms=None):
        if elapsed_ms is None:
            elapsed_ms = 0.0 if self._started is None else (self._clock() - self._started) * 1000.0
        self._started = None
        self.tick_count += 1
        self.tick_times_ms.append(elapsed_ms)
        self.margins.append(margin)
        self.residuals.append(worst_residual)
        if not is_stable:
            self.unstable_ticks += 1
        if elapsed_ms > self.alert_threshold_ms:
            self.alerts.append(f"tick {self.tick_count}: computation took {elapsed_ms:.3f} ms")
        if margin < self.stability_alert_threshold:
            self.alerts.append(f"tick {self.tick_count}: stability margin {margin:.2f} below "
                               f"{self.stability_alert_threshold:.2f}")

    @staticmethod
    def _summary(values):
        if not values:
            return {"mean": 0.0, "min": 0.0, "max": 0.0}
        data = np.array(values, dtype=float)
        return {"mean": float(data.mean()), "min": float(data.min()), "max": float(data.max())}

    def statistics(self):
        return {
            "ticks": self.tick_count,
            "unstable_ticks": self.unstable_ticks,
            "tick_time_ms": self._summary(self.tick_times_ms),
            "stability_margin": self._summary(self.margins),
            "ik_residual": self._summary(self.residuals),
            "alerts": len(self.alerts),
        }
