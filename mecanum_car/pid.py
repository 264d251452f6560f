"""Incremental (velocity-form) PID controller."""

from __future__ import annotations


class PIDController:
    """PID controller that accumulates output increments.

    Each call to :meth:`compute` adds a proportional, integral and
    derivative increment to the previous output. The result is clamped
    to the configured output limits.
    """

    DEFAULT_MIN_OUTPUT = -0.5
    DEFAULT_MAX_OUTPUT = 0.5

    def __init__(self, kp: float = 0.0, ki: float = 0.0, kd: float = 0.0) -> None:
        self.kp = kp
        self.ki = ki
        self.kd = kd
        self.min_output = self.DEFAULT_MIN_OUTPUT
        self.max_output = self.DEFAULT_MAX_OUTPUT
        self._prev_error = 0.0
        self._prev_prev_error = 0.0
        self._prev_output = 0.0

    def set_params(self, kp: float, ki: float, kd: float) -> None:
        """Set all three gains at once."""
        self.kp = kp
        self.ki = ki
        self.kd = kd

    def set_output_limits(self, min_output: float, max_output: float) -> None:
        """Set the range the output is clamped to."""
        self.min_output = min_output
        self.max_output = max_output

    def compute(self, setpoint: float, measurement: float, dt: float) -> float:
        """Advance the controller by one step of length ``dt`` and return its output."""
        error = setpoint - measurement
        dp = self.kp * (error - self._prev_error)
        di = self.ki * error * dt
        dd = self.kd * (error - 2 * self._prev_error + self._prev_prev_error) / dt

        self._prev_prev_error = self._prev_error
        self._prev_error = error

        output = self._prev_output + dp + di + dd
        output = max(self.min_output, min(output, self.max_output))
        self._prev_output = output
        return output

    def reset(self) -> None:
        """Forget the error history and the accumulated output."""
        self._prev_error = 0.0
        self._prev_prev_error = 0.0
        self._prev_output = 0.0