"""A DC wheel motor with encoder feedback, direction pins and PID speed control."""

from __future__ import annotations

import math
from enum import IntEnum

from .filters import TrimmedMeanFilter
from .pid import PIDController

_PI = 3.1415926


class Direction(IntEnum):
    FORWARD = 1
    REVERSE = -1
    STOP = 0


class PwmChannel:
    """A PWM output: an auto-reload period and a compare value."""

    def __init__(self, period: int) -> None:
        self.period = period
        self.compare = 0
        self.running = False

    def start(self) -> None:
        self.running = True


class Encoder:
    """A quadrature encoder counter."""

    def __init__(self, count: int = 0) -> None:
        self.count = count
        self.running = False

    def start(self) -> None:
        self.running = True


class DirectionPins:
    """The two H-bridge direction pins of a motor."""

    def __init__(self) -> None:
        self.pin1 = False
        self.pin2 = False

    def write(self, pin1: bool, pin2: bool) -> None:
        self.pin1 = pin1
        self.pin2 = pin2


_PIN_LEVELS = {
    Direction.FORWARD: (True, False),
    Direction.REVERSE: (False, True),
    Direction.STOP: (False, False),
}


class WheelMotor:
    """One wheel: drives its PWM and pins, and measures speed from its encoder."""

    WHEEL_RADIUS = 0.0485
    WHEEL_DN = 0.097
    REDUCTION_RATIO = 30
    PULSES_PER_ROUND = 11
    GEAR_OUTPUT_MAX_RPM = 180.0
    MIN_OUTPUT = 0.07
    MAX_DUTY_RATIO = 0.4
    COUNT_FILTER_SIZE = 4

    def __init__(
        self,
        motor_id: int,
        pwm: PwmChannel | None = None,
        encoder: Encoder | None = None,
        pins: DirectionPins | None = None,
    ) -> None:
        self.motor_id = motor_id
        self.pwm = pwm
        self.encoder = encoder
        self.pins = pins
        self.direction = Direction.STOP
        self.duty_cycle = 0
        self.linear_speed = 0.0
        self.target_speed = 0.0
        self.sample_time = 0.01
        self.max_rpm = 320.0
        self.pid = PIDController(0.5, 0.1, 0.01)
        self.pid.set_output_limits(-1.0, 1.0)
        self._last_count = 0
        self._current_count = 0
        self._count_filter = TrimmedMeanFilter(self.COUNT_FILTER_SIZE, integer=True)

    @property
    def kp(self) -> float:
        return self.pid.kp

    @kp.setter
    def kp(self, value: float) -> None:
        self.pid.kp = value

    @property
    def ki(self) -> float:
        return self.pid.ki

    @ki.setter
    def ki(self, value: float) -> None:
        self.pid.ki = value

    @property
    def kd(self) -> float:
        return self.pid.kd

    @kd.setter
    def kd(self, value: float) -> None:
        self.pid.kd = value

    def _pwm_period(self) -> int:
        return self.pwm.period if self.pwm is not None else 0

    def set_duty_cycle(self, pwm_value: int) -> None:
        """Set the raw PWM compare value."""
        self.duty_cycle = pwm_value
        if self.pwm is not None:
            self.pwm.compare = pwm_value

    def update_encoder(self) -> None:
        """Latch the encoder's current count."""
        if self.encoder is not None:
            self._current_count = self.encoder.count

    def calculate_linear_speed(self) -> float:
        """Compute wheel speed in m/s from the counts since the last call."""
        count_diff = abs(self._current_count - self._last_count)
        self._last_count = self._current_count
        filtered = self._count_filter.update(count_diff) * int(self.direction)
        motor_revolutions = filtered / (self.PULSES_PER_ROUND * 4)
        wheel_revolutions = motor_revolutions / self.REDUCTION_RATIO
        self.linear_speed = wheel_revolutions * _PI * self.WHEEL_DN / self.sample_time
        return self.linear_speed

    def set_direction(self, direction: Direction) -> None:
        """Set the rotation direction and drive the pins to match."""
        self.direction = Direction(direction)
        if self.pins is not None:
            self.pins.write(*_PIN_LEVELS[self.direction])

    def set_linear_speed(self, target_speed: float) -> None:
        """Drive open-loop: map a speed in m/s to a direction and a duty cycle."""
        if target_speed > 0:
            self.set_direction(Direction.FORWARD)
        elif target_speed < 0:
            self.set_direction(Direction.REVERSE)
            target_speed = -target_speed
        else:
            self.set_direction(Direction.STOP)

        target_rps = target_speed / (2.0 * _PI * self.WHEEL_RADIUS)
        duty = min(max(target_rps * 60.0 / self.max_rpm, 0.0), 1.0)
        self.set_duty_cycle(int(duty * self._pwm_period()))

    def set_target_speed(self, target_speed: float) -> None:
        """Set the speed in m/s the closed-loop control aims for."""
        self.target_speed = target_speed

    def update_speed_control(self, dt: float) -> None:
        """Run one closed-loop step: measure, compute PID, drive the motor."""
        current_speed = self.calculate_linear_speed()
        output = self.pid.compute(self.target_speed, current_speed, dt)

        if output > 0:
            self.set_direction(Direction.FORWARD)
        elif output < 0:
            self.set_direction(Direction.REVERSE)
            output = -output
        else:
            self.set_direction(Direction.STOP)

        if 0 < output < self.MIN_OUTPUT:
            output = self.MIN_OUTPUT
        clamped = min(max(output, 0.0), self.MAX_DUTY_RATIO)
        self.set_duty_cycle(int(clamped * self._pwm_period()))

    def set_pid_params(self, kp: float, ki: float, kd: float) -> None:
        self.pid.set_params(kp, ki, kd)

    def reset_encoder(self) -> None:
        """Zero the encoder, keeping the last count as the reference."""
        self._last_count = self._current_count
        if self.encoder is not None:
            self.encoder.count = 0
        self._current_count = 0

    def init(self) -> None:
        """Start the encoder and PWM and bring the motor to a stop."""
        if self.encoder is not None:
            self.encoder.start()
        self._current_count = 0
        self._last_count = 0
        if self.pwm is not None:
            self.pwm.start()
        if self.pins is not None:
            self.set_direction(Direction.STOP)


__all__ = ["Direction", "PwmChannel", "Encoder", "DirectionPins", "WheelMotor", "math"][:5]