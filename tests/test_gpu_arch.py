import pytest

from vzporedni.gpu_arch import arch_name, cores_per_sm


@pytest.mark.parametrize(
    "major, minor, name",
    [(3, 0, "Kepler"), (7, 5, "Turing"), (8, 6, "Ampere"), (8, 9, "Ada"), (9, 0, "Hopper")],
)
def test_known_architectures(major, minor, name):
    assert arch_name(major, minor) == name


def test_unknown_architecture_falls_back_to_newest(capsys):
    assert arch_name(9, 9) == arch_name(9, 0)
    assert "undefined" in capsys.readouterr().out


def test_known_architecture_prints_nothing(capsys):
    arch_name(8, 0)
    cores_per_sm(8, 0)
    assert capsys.readouterr().out == ""


def test_known_core_counts():
    assert cores_per_sm(3, 5) == 192
    assert cores_per_sm(6, 0) == 64
    assert cores_per_sm(8, 6) == 128


def test_unknown_core_count_falls_back_to_newest(capsys):
    assert cores_per_sm(2, 0) == cores_per_sm(9, 0)
    assert "Cores/SM" in capsys.readouterr().out


def test_cores_only_version_has_no_own_arch_name(capsys):
    assert cores_per_sm(8, 7) == cores_per_sm(8, 6)
    assert arch_name(8, 7) == arch_name(9, 0)
    assert "MapSMtoArchName" in capsys.readouterr().out