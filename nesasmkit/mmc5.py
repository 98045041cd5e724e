"""MMC5 expansion sound: divider values and register writes for its two pulse channels."""

from __future__ import annotations

from dataclasses import dataclass

from .freqdata import psg_frequency

REG_STATUS = 0x5015
REG_CTRL = 0x5000
REG_FREQ_L = 0x5002
REG_FREQ_H = 0x5003
CHANNEL_STRIDE = 4
CHANNELS = 2

HWENV_MASK = 0x30
"""Length-counter halt and constant-volume bits of the control register."""

DUTY_ENVELOPE_END = 0xFF
OCTAVE_ADJUST = 2

Write = tuple[int, int]


def mmc5_init_writes() -> list[Write]:
    """Register writes that enable both MMC5 pulse channels."""
    return [(REG_STATUS, 0x03)]


def mmc5_frequency(note: int) -> int:
    """The 16-bit divider for a note byte: octave in the high nibble, note index in the low."""
    if not 0 <= note <= 0xFF:
        raise ValueError(f"note out of range: {note}")
    value = psg_frequency(note & 0x0F)
    shift = (note >> 4) - OCTAVE_ADJUST
    if shift < 0:
        raise ValueError(f"octave too low for MMC5: {note >> 4}")
    return (value >> shift) & 0xFFFF


@dataclass
class Mmc5Channel:
    """Register state of one MMC5 pulse channel.

    ``register_low`` holds the volume nibble, ``register_high`` the duty
    and envelope bits of the control register.
    """

    channel: int = 0
    register_low: int = 0
    register_high: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.channel < CHANNELS:
            raise ValueError(f"MMC5 channel out of range: {self.channel}")

    def _address(self, register: int) -> int:
        return register + self.channel * CHANNEL_STRIDE

    def control_value(self) -> int:
        """The byte written to the control register: duty bits with volume."""
        return (self.register_low | self.register_high) & 0xFF

    def set_duty(self, duty: int, hw_envelope: int = 0) -> int:
        """Select a duty cycle directly; return the control value written.

        ``hw_envelope`` holds the hardware envelope bits set by the envelope
        command; the control register gets their complement.
        """
        envelope = (hw_envelope & HWENV_MASK) ^ HWENV_MASK
        self.register_high = (envelope | (duty << 6)) & 0xFF
        return self.control_value()

    def set_volume(self, volume: int) -> int:
        """Set the volume nibble; return the control value written."""
        self.register_low = volume & 0x0F
        return self.control_value()

    def apply_duty_envelope(self, value: int) -> int:
        """Apply one duty envelope step; return the control value written."""
        if value == DUTY_ENVELOPE_END:
            raise ValueError("duty envelope end marker is not a step")
        self.register_high = (((value << 6) & 0xFF) | HWENV_MASK) & 0xFF
        return self.control_value()

    def key_on_writes(self, frequency: int) -> list[Write]:
        """Register writes for a key-on: control, then divider low and high."""
        if not 0 <= frequency <= 0xFFFF:
            raise ValueError(f"frequency out of range: {frequency}")
        return [
            (self._address(REG_CTRL), self.control_value()),
            (self._address(REG_FREQ_L), frequency & 0xFF),
            (self._address(REG_FREQ_H), (frequency >> 8) & 0xFF),
        ]

    def rest_writes(self) -> list[Write]:
        """Register writes for a rest: the control register without volume."""
        return [(self._address(REG_CTRL), self.register_high & 0xFF)]