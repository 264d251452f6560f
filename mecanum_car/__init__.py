"""Wheel speed PID, signal filters, mecanum chassis kinematics, JSON command framing and a simulated car."""

__version__ = "0.1.0"
__all__ = ["pid", "filters", "wheel_motor", "chassis", "uart", "app"]