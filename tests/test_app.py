import io

import pytest

from mecanum_car.app import Car, main
from mecanum_car.uart import ReceiveMode
from mecanum_car.wheel_motor import Direction


@pytest.fixture
def car():
    out = io.StringIO()
    c = Car(1000, out)
    c.init()
    return c


def test_init_sets_defaults(car):
    for wheel in car.wheels:
        assert (wheel.kp, wheel.ki, wheel.kd) == (0.5, 0.1, 0.01)
        assert wheel.target_speed == 0.2
        assert wheel.encoder.running
        assert wheel.pwm.running
    assert car.uart.receive_mode == ReceiveMode.IT
    assert "Mode:IT" in car.output.getvalue()


def test_set_p_for_left_front(car):
    car.handle_json('{"ID":1,"P":0.5}')
    text = car.output.getvalue()
    assert "Parsed ID: 1" in text
    assert "Set P: 500" in text
    assert car.left_front.kp == 0.5


def test_set_i_and_d_for_left_rear(car):
    car.handle_json('{"ID":3,"I":0.25,"D":0.75}')
    assert car.left_rear.ki == 0.25
    assert car.left_rear.kd == 0.75
    assert car.right_rear.ki == 0.1
    text = car.output.getvalue()
    assert "Set I: 250" in text
    assert "Set D: 750" in text


def test_target_speed_for_right_rear(car):
    car.handle_json('{"ID":4,"TargetSpeed":-0.3}')
    assert car.right_rear.target_speed == -0.3
    assert car.left_front.target_speed == 0.2


def test_id_five_with_p_stops_chassis(car):
    car.handle_json('{"ID":5,"P":1}')
    assert [w.target_speed for w in car.wheels] == [0.0, 0.0, 0.0, 0.0]
    assert all(w.kp == 0.5 for w in car.wheels)


def test_id_five_without_p_does_not_stop(car):
    car.handle_json('{"ID":5}')
    assert all(w.target_speed == 0.2 for w in car.wheels)


def test_bad_json_reported(car):
    car.handle_json("{not json")
    assert "Error: Failed to parse JSON" in car.output.getvalue()


@pytest.mark.parametrize("text", ['{"P":1}', '{"ID":"1"}', '{"ID":true}', "[1]"])
def test_missing_or_invalid_id(car, text):
    car.handle_json(text)
    assert "Error: Missing or invalid ID" in car.output.getvalue()
    assert all(w.kp == 0.5 for w in car.wheels)


def test_commands_arrive_through_uart(car):
    car.uart.receive(b'noise{"ID":2,"TargetSpeed":0.4}tail')
    assert car.right_front.target_speed == 0.4


def test_control_runs_every_ten_ticks(car):
    for _ in range(9):
        car.tick()
    assert all(w.direction == Direction.STOP for w in car.wheels)
    assert all(w.duty_cycle == 0 for w in car.wheels)
    car.tick()
    for wheel in car.wheels:
        assert wheel.direction == Direction.FORWARD
        assert 0 < wheel.duty_cycle <= 0.4 * wheel.pwm.period


def test_speed_observation_line(car):
    line = car.speed_observation()
    assert line == "0,0,0,0\n"
    assert car.output.getvalue().endswith(line)


def test_main_prints_observations(capsys):
    assert main(["--ticks", "20", "--command", '{"ID":2,"P":0.5}']) == 0
    out = capsys.readouterr().out
    assert "Parsed ID: 2" in out
    assert out.count("0,0,0,0\n") == 2


def test_main_rejects_negative_ticks():
    with pytest.raises(SystemExit):
        main(["--ticks", "-1"])