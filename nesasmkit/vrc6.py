"""VRC6 expansion sound: divider values and register writes for its three channels."""

from __future__ import annotations

from dataclasses import dataclass

REG_PRESCALER = 0x9003
CHANNELS = 3
SAW_CHANNEL = 2

BOARD_351951 = 0
"""VRC6a board: divider low byte at ``base+1``, high bits at ``base+2``."""
BOARD_351949A = 1
"""VRC6b board: the two divider registers are swapped."""

CHANNEL_ENABLE = 0x80
PULSE_CTRL_MASK = 0x7F
PULSE_MUTE_MASK = 0x70
PULSE_VOLUME_MASK = 0x0F
SAW_RATE_MASK = 0x3F
OCTAVE_ADJUST = 1

PULSE_FREQUENCY_TABLE = (
    0x0D5C, 0x0C9D, 0x0BE7, 0x0B3C,
    0x0A9B, 0x0A02, 0x0973, 0x08EB,
    0x086B, 0x07F2, 0x0780, 0x0714,
    0x0000, 0x0FE4, 0x0EFF, 0x0E28,
)
SAW_FREQUENCY_TABLE = (
    0x0F45, 0x0E6A, 0x0D9B, 0x0CD7,
    0x0C1F, 0x0B71, 0x0ACC, 0x0A31,
    0x099F, 0x0914, 0x0892, 0x0817,
    0x0000, 0x0000, 0x0000, 0x0000,
)

Write = tuple[int, int]


def vrc6_init_writes() -> list[Write]:
    """Register writes that start the master clock with both prescalers."""
    return [(REG_PRESCALER, 0x00)]


def vrc6_frequency(note: int, saw: bool = False) -> int:
    """The divider for a note byte: octave in the high nibble, note index in the low.

    The sawtooth channel uses its own table, since it needs twice the
    divider rate of the pulse channels for the same pitch.
    """
    if not 0 <= note <= 0xFF:
        raise ValueError(f"note out of range: {note}")
    table = SAW_FREQUENCY_TABLE if saw else PULSE_FREQUENCY_TABLE
    shift = (note >> 4) - OCTAVE_ADJUST
    if shift < 0:
        raise ValueError(f"octave too low for VRC6: {note >> 4}")
    return (table[note & 0x0F] >> shift) & 0xFFFF


def vrc6_base_address(channel: int) -> int:
    """The register base of a channel: ``$9000``, ``$A000`` or ``$B000``."""
    if not 0 <= channel < CHANNELS:
        raise ValueError(f"VRC6 channel out of range: {channel}")
    return (0x09 + channel) << 12


@dataclass
class Vrc6Channel:
    """Register state of one VRC6 channel (0 and 1 pulse, 2 sawtooth).

    ``register_low`` holds the volume (or the sawtooth accumulator rate),
    ``register_high`` the duty bits of a pulse channel.
    """

    channel: int = 0
    board_type: int = BOARD_351951
    register_low: int = 0
    register_high: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.channel < CHANNELS:
            raise ValueError(f"VRC6 channel out of range: {self.channel}")
        if self.board_type not in (BOARD_351951, BOARD_351949A):
            raise ValueError(f"unknown VRC6 board type: {self.board_type}")

    @property
    def is_saw(self) -> bool:
        return self.channel == SAW_CHANNEL

    @property
    def base_address(self) -> int:
        return vrc6_base_address(self.channel)

    def _freq_registers(self) -> tuple[int, int]:
        if self.board_type == BOARD_351949A:
            return 2, 1
        return 1, 2

    def control_value(self) -> int:
        """The byte written to the control register at the base address."""
        if self.is_saw:
            return self.register_low & SAW_RATE_MASK
        return (self.register_low | self.register_high) & PULSE_CTRL_MASK

    def mute_value(self) -> int:
        """The control byte that silences the channel, keeping the duty bits."""
        if self.is_saw:
            return 0
        return (self.register_low | self.register_high) & PULSE_MUTE_MASK

    def set_duty(self, duty: int) -> int:
        """Select a duty cycle from a tone byte; return the control value written."""
        self.register_high = (duty << 4) & 0xFF
        return self.control_value()

    def set_volume(self, volume: int) -> int:
        """Set the volume (sawtooth: accumulator rate); return the control value."""
        mask = SAW_RATE_MASK if self.is_saw else PULSE_VOLUME_MASK
        self.register_low = volume & mask
        return self.control_value()

    def frequency_writes(self, frequency: int) -> list[Write]:
        """Register writes for the divider: low byte, then high bits with enable."""
        if not 0 <= frequency <= 0xFFFF:
            raise ValueError(f"frequency out of range: {frequency}")
        low_reg, high_reg = self._freq_registers()
        base = self.base_address
        return [
            (base + low_reg, frequency & 0xFF),
            (base + high_reg, ((frequency >> 8) | CHANNEL_ENABLE) & 0xFF),
        ]