"""Mecanum-wheel chassis kinematics on top of four wheel motors."""

from __future__ import annotations

from .wheel_motor import WheelMotor


class ChassisController:
    """Turns a body velocity into target speeds for four mecanum wheels.

    ``vx`` is sideways speed (positive to the right), ``vy`` is forward
    speed and ``omega`` is the rotation rate (positive clockwise).
    """

    def __init__(
        self,
        left_front: WheelMotor,
        right_front: WheelMotor,
        left_rear: WheelMotor,
        right_rear: WheelMotor,
    ) -> None:
        self.left_front = left_front
        self.right_front = right_front
        self.left_rear = left_rear
        self.right_rear = right_rear
        self.vx = 0.0
        self.vy = 0.0
        self.omega = 0.0
        self.wheel_base_x = 0.1
        self.wheel_base_y = 0.1

    @property
    def wheels(self) -> tuple[WheelMotor, WheelMotor, WheelMotor, WheelMotor]:
        """The wheels in the order left front, right front, left rear, right rear."""
        return (self.left_front, self.right_front, self.left_rear, self.right_rear)

    def set_velocity(self, vx: float, vy: float, omega: float) -> None:
        """Set the body velocity and give each wheel its target speed."""
        self.vx = vx
        self.vy = vy
        self.omega = omega

        turn = omega * (self.wheel_base_x + self.wheel_base_y)
        self.left_front.set_target_speed(vy + vx - turn)
        self.right_front.set_target_speed(vy - vx + turn)
        self.left_rear.set_target_speed(vy - vx - turn)
        self.right_rear.set_target_speed(vy + vx + turn)

    def move_forward(self, speed: float) -> None:
        self.set_velocity(0.0, speed, 0.0)

    def move_backward(self, speed: float) -> None:
        self.set_velocity(0.0, -speed, 0.0)

    def move_left(self, speed: float) -> None:
        self.set_velocity(-speed, 0.0, 0.0)

    def move_right(self, speed: float) -> None:
        self.set_velocity(speed, 0.0, 0.0)

    def rotate(self, angular_speed: float) -> None:
        """Spin in place; positive is clockwise."""
        self.set_velocity(0.0, 0.0, angular_speed)

    def stop(self) -> None:
        self.set_velocity(0.0, 0.0, 0.0)

    def update(self, dt: float) -> None:
        """Run one speed-control step on every wheel."""
        for wheel in self.wheels:
            wheel.update_speed_control(dt)