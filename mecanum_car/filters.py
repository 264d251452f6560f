"""Small signal filters for encoder counts, speeds and controller outputs."""

from __future__ import annotations


def _truncating_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


class TrimmedMeanFilter:
    """Sliding-window mean with the largest and smallest sample removed.

    The window starts filled with zeros. With ``integer=True`` the mean is
    an integer, truncated toward zero.
    """

    def __init__(self, size: int, integer: bool = False) -> None:
        if size <= 2:
            raise ValueError("trimmed mean needs a window larger than 2")
        self.size = size
        self.integer = integer
        self._buffer: list[float] = [0] * size
        self._index = 0

    def update(self, value: float) -> float:
        """Add a sample and return the trimmed mean of the window."""
        self._buffer[self._index] = value
        self._index = (self._index + 1) % self.size
        total = sum(self._buffer) - max(self._buffer) - min(self._buffer)
        if self.integer:
            return _truncating_div(int(total), self.size - 2)
        return total / (self.size - 2)


class MedianFilter:
    """Sliding-window median; the window starts filled with zeros."""

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError("median window must hold at least one sample")
        self.size = size
        self._buffer = [0.0] * size
        self._index = 0

    def update(self, value: float) -> float:
        """Add a sample and return the upper median of the window."""
        self._buffer[self._index] = value
        self._index = (self._index + 1) % self.size
        return sorted(self._buffer)[self.size // 2]


class KalmanFilter:
    """Scalar Kalman filter with a constant-state model."""

    def __init__(
        self,
        q: float = 0.05,
        r: float = 0.3,
        p: float = 0.5,
        k: float = 0.0,
        x: float = 0.0,
    ) -> None:
        self.q = q
        self.r = r
        self.p = p
        self.k = k
        self.x = x

    def update(self, measurement: float) -> float:
        """Fold in one measurement and return the new state estimate."""
        self.p += self.q
        self.k = self.p / (self.p + self.r)
        self.x += self.k * (measurement - self.x)
        self.p = (1 - self.k) * self.p
        return self.x


class LowPassFilter:
    """First-order low-pass filter: y = alpha * x + (1 - alpha) * y_prev."""

    def __init__(self, alpha: float = 0.5) -> None:
        self.alpha = alpha
        self.value = 0.0

    def update(self, value: float) -> float:
        self.value = self.alpha * value + (1.0 - self.alpha) * self.value
        return self.value


class RampFilter:
    """Limits how fast the output may change, in units per second."""

    def __init__(self, max_change_rate: float = 0.5) -> None:
        self.max_change_rate = max_change_rate
        self.value = 0.0

    def update(self, value: float, dt: float) -> float:
        max_change = self.max_change_rate * dt
        change = value - self.value
        if abs(change) > max_change:
            change = max_change if change >= 0 else -max_change
        self.value += change
        return self.value