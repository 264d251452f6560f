# mecanum_car

Control logic for a four-wheel mecanum-drive car, simulated in software. The package has
these parts:

- `mecanum_car.pid.PIDController` is an incremental (velocity-form) PID controller. Its
  output is clamped to limits that default to -0.5 and 0.5 and are changed with
  `set_output_limits`.
- `mecanum_car.filters` holds `TrimmedMeanFilter`, `MedianFilter`, `KalmanFilter`,
  `LowPassFilter` and `RampFilter`.
- `mecanum_car.wheel_motor.WheelMotor` models one wheel. `calculate_linear_speed` turns
  encoder counts into a linear speed in m/s. `update_speed_control` runs one PID step and
  uses the result to set the direction pins and the PWM compare value. The duty is held
  between 7 % and 40 % whenever the output is not zero. `PwmChannel`, `Encoder` and
  `DirectionPins` are plain objects that take the place of the timer and GPIO hardware.
- `mecanum_car.chassis.ChassisController` does the mecanum inverse kinematics. It has
  `set_velocity(vx, vy, omega)`, `move_forward`, `move_backward`, `move_left`,
  `move_right`, `rotate`, `stop` and `update(dt)`.
- `mecanum_car.uart` has two classes. `JsonFrameAssembler` cuts `{...}` frames out of a
  byte stream by counting braces and drops any frame longer than 127 bytes. `Uart` passes
  received bytes to an assembler and writes outgoing data to a transport object, which can
  be any object with a `write(bytes)` method. When sending fails it raises `UartError`.
- `mecanum_car.app.Car` is the whole car: four wheels, a chassis and a `Uart`.
  - `handle_json` applies a JSON command.
  - `tick` advances a 1 ms timer. Every tenth tick latches the encoders and runs
    `control_update`, which is a 10 ms chassis control step.
  - `speed_observation` writes the four wheel speeds in mm/s as one comma-separated line.

## Installation

```
pip install .
```

## Example

```python
from mecanum_car.app import Car

car = Car()
car.init()                      # default PID gains 0.5/0.1/0.01, target speed 0.2 m/s
car.handle_json('{"ID": 1, "P": 0.8, "I": 0.05, "D": 0.01}')
car.handle_json('{"ID": 2, "TargetSpeed": 0.3}')
for _ in range(10):
    car.tick()                  # ten 1 ms ticks make one 10 ms control step
car.speed_observation()         # writes "lf,rf,lr,rr" speeds in mm/s
```

You can also send commands through the serial link as raw bytes. They go through the frame
assembler first:

```python
car.uart.receive(b'noise{"ID": 3, "TargetSpeed": -0.1}')
```

## JSON commands

Every command carries a numeric `ID`. IDs 1 to 4 name the wheels: left-front, right-front,
left-rear and right-rear. A command may also carry:

- `P`, `I` and `D`, which set that wheel's gains. For each one, the line
  `Set P: <value × 1000>` is written (with `I` or `D` in place of `P` as the case may be).
- `TargetSpeed`, which sets that wheel's target speed in m/s.

A command with `ID` 5 and a numeric `P` stops the chassis.

If a command cannot be parsed, `Error: Failed to parse JSON` is written. If it has no
numeric ID, `Error: Missing or invalid ID` is written.

## Command line

```
mecanum-car --ticks 1000 --pwm-period 1000 --command '{"ID": 1, "TargetSpeed": 0.3}'
```

This builds a `Car` and initialises it. It passes each `--command` to the car's serial link
in the order given. It then runs the given number of 1 ms ticks and prints a line of wheel
speeds after every tenth tick. The defaults are 1000 ticks and a PWM period of 1000.

## What it does not do

The package drives no hardware. Motors, encoders and pins are in-memory stand-ins, and
nothing moves the encoder counts unless you set `Encoder.count` yourself. The car's `Uart`
has no transport attached, so it opens no serial port. Commands reach it only through
`--command`, `Uart.receive` or `Car.handle_json`. Reading commands from standard input or a
real serial device is not provided.

## Tests

```
pip install .[test]
pytest
```