"""The car application: four mecanum wheels, JSON commands and a 1 ms timer."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Optional, TextIO

from .chassis import ChassisController
from .uart import ReceiveMode, Uart
from .wheel_motor import DirectionPins, Encoder, PwmChannel, WheelMotor

CONTROL_PERIOD = 0.01
TICKS_PER_ENCODER_UPDATE = 10
TICKS_PER_CONTROL_UPDATE = 10
DEFAULT_PID = (0.5, 0.1, 0.01)
DEFAULT_TARGET_SPEED = 0.2
STOP_ID = 5

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_int(value: float) -> int:
    """Truncate toward zero and saturate to the 32-bit integer range."""
    if value != value:  # NaN
        return 0
    if value >= _INT_MAX:
        return _INT_MAX
    if value <= _INT_MIN:
        return _INT_MIN
    return int(value)


class Car:
    """A four-wheel mecanum car driven by JSON commands over a serial link."""

    def __init__(self, pwm_period: int = 1000, output: Optional[TextIO] = None) -> None:
        self.output = output
        self.left_front = WheelMotor(1, PwmChannel(pwm_period), Encoder(), DirectionPins())
        self.right_front = WheelMotor(2, PwmChannel(pwm_period), Encoder(), DirectionPins())
        self.left_rear = WheelMotor(3, PwmChannel(pwm_period), Encoder(), DirectionPins())
        self.right_rear = WheelMotor(4, PwmChannel(pwm_period), Encoder(), DirectionPins())
        self.chassis = ChassisController(
            self.left_front, self.right_front, self.left_rear, self.right_rear
        )
        self.uart = Uart(None)
        self._encoder_ticks = 0
        self._control_ticks = 0

    @property
    def wheels(self) -> tuple[WheelMotor, WheelMotor, WheelMotor, WheelMotor]:
        return self.chassis.wheels

    def _wheel_by_id(self, motor_id: int) -> Optional[WheelMotor]:
        return next((w for w in self.wheels if w.motor_id == motor_id), None)

    def _emit(self, text: str) -> None:
        stream = self.output if self.output is not None else sys.stdout
        stream.write(text)

    def init(self) -> None:
        """Set up the serial link and start the wheels with their default tuning."""
        self.uart.set_rx_callback(self.handle_json)
        self.uart.set_receive_mode(ReceiveMode.IT)
        self._emit("UART2: Application initialized. RxCallback:JsonDataCallback. Mode:IT\n")
        for wheel in self.wheels:
            wheel.init()
        for wheel in self.wheels:
            wheel.set_pid_params(*DEFAULT_PID)
        for wheel in self.wheels:
            wheel.set_target_speed(DEFAULT_TARGET_SPEED)

    def handle_json(self, text: str) -> None:
        """Apply one JSON command: gains or target speed for a wheel, or stop."""
        try:
            root = json.loads(text)
        except ValueError:
            self._emit("Error: Failed to parse JSON\n")
            return

        id_value = root.get("ID") if isinstance(root, dict) else None
        if not _is_number(id_value):
            self._emit("Error: Missing or invalid ID\n")
            return

        motor_id = _to_int(id_value)
        self._emit(f"Parsed ID: {motor_id}\n")
        wheel = self._wheel_by_id(motor_id)

        def number(key: str) -> Optional[float]:
            value = root.get(key)
            return float(value) if _is_number(value) else None

        p, i, d, target = number("P"), number("I"), number("D"), number("TargetSpeed")

        if motor_id == STOP_ID and p is not None:
            self.chassis.stop()

        for label, gain, attr in (("P", p, "kp"), ("I", i, "ki"), ("D", d, "kd")):
            if gain is None:
                continue
            self._emit(f"Set {label}: {_to_int(gain * 1000)}\n")
            if wheel is not None:
                setattr(wheel, attr, gain)

        if target is not None and wheel is not None:
            wheel.set_target_speed(target)

    def control_update(self) -> None:
        """Run one fixed-period chassis control step."""
        self.chassis.update(CONTROL_PERIOD)

    def tick(self) -> None:
        """Advance the 1 ms timer: latch encoders and run control every 10 ms."""
        self._encoder_ticks += 1
        self._control_ticks += 1
        if self._encoder_ticks >= TICKS_PER_ENCODER_UPDATE:
            self._encoder_ticks = 0
            for wheel in self.wheels:
                wheel.update_encoder()
        if self._control_ticks >= TICKS_PER_CONTROL_UPDATE:
            self._control_ticks = 0
            self.control_update()

    def speed_observation(self) -> str:
        """Write and return the wheel speeds in mm/s as one comma-separated line."""
        line = ",".join(str(_to_int(w.linear_speed * 1000)) for w in self.wheels) + "\n"
        self._emit(line)
        return line


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="mecanum-car", description="Run the mecanum car control loop."
    )
    parser.add_argument("--ticks", type=int, default=1000, help="1 ms timer ticks to run")
    parser.add_argument("--pwm-period", type=int, default=1000, help="PWM auto-reload value")
    parser.add_argument(
        "--command", action="append", default=[], help="JSON command to send before running"
    )
    args = parser.parse_args(argv)
    if args.ticks < 0:
        parser.error("--ticks must not be negative")

    car = Car(args.pwm_period)
    car.init()
    for command in args.command:
        car.uart.receive(command.encode("utf-8"))
    for count in range(1, args.ticks + 1):
        car.tick()
        if count % TICKS_PER_CONTROL_UPDATE == 0:
            car.speed_observation()
    return 0


if __name__ == "__main__":
    sys.exit(main())