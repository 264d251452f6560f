import pytest

from mecanum_car.filters import (
    KalmanFilter,
    LowPassFilter,
    MedianFilter,
    RampFilter,
    TrimmedMeanFilter,
)


@pytest.mark.parametrize("size", [0, 1, 2])
def test_trimmed_mean_rejects_small_window(size):
    with pytest.raises(ValueError):
        TrimmedMeanFilter(size)


def test_trimmed_mean_constant_input_settles():
    f = TrimmedMeanFilter(4)
    results = [f.update(7.5) for _ in range(4)]
    assert results[-1] == pytest.approx(7.5)


def test_trimmed_mean_discards_single_outlier():
    f = TrimmedMeanFilter(4, integer=True)
    for _ in range(4):
        f.update(10)
    assert f.update(1000) == 10


def test_trimmed_mean_integer_truncates_toward_zero():
    f = TrimmedMeanFilter(4, integer=True)
    f.update(3)
    assert f.update(4) == 1
    g = TrimmedMeanFilter(4, integer=True)
    g.update(-3)
    assert g.update(-4) == -1


def test_trimmed_mean_float_keeps_fraction():
    f = TrimmedMeanFilter(4)
    f.update(3)
    assert f.update(4) == pytest.approx(1.5)


def test_median_of_constant_window():
    f = MedianFilter(5)
    for _ in range(5):
        out = f.update(2.0)
    assert out == 2.0


def test_median_ignores_spike():
    f = MedianFilter(5)
    for _ in range(5):
        f.update(1.0)
    assert f.update(99.0) == 1.0


def test_median_rejects_empty_window():
    with pytest.raises(ValueError):
        MedianFilter(0)


def test_kalman_converges_and_shrinks_uncertainty():
    f = KalmanFilter()
    initial_p = f.p
    estimates = [f.update(1.0) for _ in range(50)]
    assert all(0.0 < e <= 1.0 for e in estimates)
    assert estimates == sorted(estimates)
    assert estimates[-1] == pytest.approx(1.0, abs=1e-3)
    assert f.p < initial_p
    assert 0.0 < f.k < 1.0


def test_kalman_defaults():
    f = KalmanFilter()
    assert (f.q, f.r, f.p, f.k, f.x) == (0.05, 0.3, 0.5, 0.0, 0.0)


def test_low_pass_extremes():
    passthrough = LowPassFilter(1.0)
    assert passthrough.update(3.0) == 3.0
    frozen = LowPassFilter(0.0)
    assert frozen.update(3.0) == 0.0


def test_low_pass_moves_towards_input():
    f = LowPassFilter()
    first = f.update(2.0)
    second = f.update(2.0)
    assert 0.0 < first < second < 2.0


def test_ramp_limits_rate():
    f = RampFilter(0.5)
    dt = 0.01
    out = f.update(10.0, dt)
    assert out == pytest.approx(0.5 * dt)
    back = f.update(-10.0, dt)
    assert back == pytest.approx(0.0)


def test_ramp_passes_small_change():
    f = RampFilter(0.5)
    assert f.update(0.1, 1.0) == pytest.approx(0.1)