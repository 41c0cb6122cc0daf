"""GPU architecture names and cores per multiprocessor by compute capability."""

from __future__ import annotations

_ARCH_NAMES: dict[int, str] = {
    0x30: "Kepler",
    0x32: "Kepler",
    0x35: "Kepler",
    0x37: "Kepler",
    0x50: "Maxwell",
    0x52: "Maxwell",
    0x53: "Maxwell",
    0x60: "Pascal",
    0x61: "Pascal",
    0x62: "Pascal",
    0x70: "Volta",
    0x72: "Xavier",
    0x75: "Turing",
    0x80: "Ampere",
    0x86: "Ampere",
    0x89: "Ada",
    0x90: "Hopper",
}

_CORES_PER_SM: dict[int, int] = {
    0x30: 192,
    0x32: 192,
    0x35: 192,
    0x37: 192,
    0x50: 128,
    0x52: 128,
    0x53: 128,
    0x60: 64,
    0x61: 128,
    0x62: 128,
    0x70: 64,
    0x72: 64,
    0x75: 64,
    0x80: 64,
    0x86: 128,
    0x87: 128,
    0x89: 128,
    0x90: 128,
}


def _sm(major: int, minor: int) -> int:
    return (major << 4) + minor


def arch_name(major: int, minor: int) -> str:
    """Architecture name for compute capability ``major.minor``.

    An unknown version falls back to the newest known architecture.
    """
    name = _ARCH_NAMES.get(_sm(major, minor))
    if name is None:
        name = list(_ARCH_NAMES.values())[-1]
        print(f"MapSMtoArchName for SM {major}.{minor} is undefined. Default to use {name}")
    return name


def cores_per_sm(major: int, minor: int) -> int:
    """Number of cores per multiprocessor for compute capability ``major.minor``.

    An unknown version falls back to the newest known architecture.
    """
    cores = _CORES_PER_SM.get(_sm(major, minor))
    if cores is None:
        cores = list(_CORES_PER_SM.values())[-1]
        print(f"  MapSMtoCores for SM {major}.{minor} is undefined. "
              f"Default to use {cores} Cores/SM")
    return cores