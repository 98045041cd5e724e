"""Sound driver frequency tables: pulse divider, noise and frequency direction."""

from __future__ import annotations

from enum import IntFlag

PSG_FREQUENCY_TABLE = (
    0x06AE, 0x064E, 0x05F4, 0x059E,
    0x054E, 0x0501, 0x04B9, 0x0476,
    0x0436, 0x03F9, 0x03C0, 0x038A,
    0x0000, 0x07F2, 0x0780, 0x0714,
)
"""Divider values per note; playback rate = 1.79 MHz / ((n + 1) * 16)."""

NOISE_FREQUENCY_TABLE = tuple((index, 0x00) for index in range(16))
"""Noise register pairs: period index in the low bits, length load of zero."""

INCREASING = 0x80
DECREASING = 0x00


class SoundGenerator(IntFlag):
    """Expansion sound chips that can be enabled alongside the built-in APU."""

    FDS = 1
    VRC7 = 2
    VRC6 = 4
    N106 = 8
    FME7 = 16
    MMC5 = 32


_EXPANSION_CHANNELS = (
    (SoundGenerator.FDS, INCREASING, 1),
    (SoundGenerator.VRC7, INCREASING, 6),
    (SoundGenerator.VRC6, DECREASING, 3),
    (SoundGenerator.N106, INCREASING, 8),
    (SoundGenerator.FME7, DECREASING, 3),
    (SoundGenerator.MMC5, DECREASING, 2),
)
_BUILTIN_CHANNELS = 5


def psg_frequency(index: int) -> int:
    """The divider value for note index 0 to 15."""
    if not 0 <= index < len(PSG_FREQUENCY_TABLE):
        raise ValueError(f"note index out of range: {index}")
    return PSG_FREQUENCY_TABLE[index]


def noise_frequency(index: int) -> tuple[int, int]:
    """The two noise register bytes for noise index 0 to 15."""
    if not 0 <= index < len(NOISE_FREQUENCY_TABLE):
        raise ValueError(f"noise index out of range: {index}")
    return NOISE_FREQUENCY_TABLE[index]


def freq_vector_table(generators: SoundGenerator = SoundGenerator(0)) -> bytes:
    """Two bytes per channel: ``0x80`` where pitch rises with the raw value.

    The built-in channels come first, then each enabled expansion chip in
    the driver's channel order.
    """
    out = bytearray(bytes([DECREASING, 0]) * _BUILTIN_CHANNELS)
    for chip, direction, count in _EXPANSION_CHANNELS:
        if generators & chip:
            out += bytes([direction, 0]) * count
    return bytes(out)