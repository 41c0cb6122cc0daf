import pytest

from vzporedni.clock import Measurement, main, measure


def test_measure_monotonic_covers_duration():
    result = measure(0.05)
    assert result.monotonic_elapsed >= 0.05
    assert result.end_monotonic_ns >= result.start_monotonic_ns


def test_measure_wall_close_to_monotonic():
    result = measure(0.05)
    assert abs(result.wall_elapsed - result.monotonic_elapsed) < 0.05


def test_measure_zero_duration():
    result = measure(0)
    assert result.monotonic_elapsed >= 0


def test_measure_negative_duration():
    with pytest.raises(ValueError):
        measure(-1)


def test_measurement_properties():
    m = Measurement(start_ns=0, end_ns=2_000_000_000,
                    start_monotonic_ns=1_000_000_000, end_monotonic_ns=2_000_000_000)
    assert m.wall_elapsed == 2.0
    assert m.monotonic_elapsed == 1.0


def test_main_prints_both_clocks(capsys):
    assert main(["--warmup", "0", "--duration", "0.01"]) == 0
    out = capsys.readouterr().out
    assert "Time start:" in out
    assert "Time elapsed (wall-clock):" in out
    assert "Time elapsed (monotonic) :" in out