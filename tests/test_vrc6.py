import pytest

from nesasmkit.vrc6 import (
    BOARD_351949A,
    PULSE_FREQUENCY_TABLE,
    SAW_FREQUENCY_TABLE,
    Vrc6Channel,
    vrc6_base_address,
    vrc6_frequency,
    vrc6_init_writes,
)


def test_init_writes_prescaler():
    assert vrc6_init_writes() == [(0x9003, 0)]


@pytest.mark.parametrize(
    "channel, address", [(0, 0x9000), (1, 0xA000), (2, 0xB000)]
)
def test_base_address(channel, address):
    assert vrc6_base_address(channel) == address


@pytest.mark.parametrize("channel", [-1, 3])
def test_base_address_out_of_range(channel):
    with pytest.raises(ValueError):
        vrc6_base_address(channel)


def test_frequency_first_octave_is_table_value():
    assert vrc6_frequency(0x10) == 0x0D5C
    assert vrc6_frequency(0x10, saw=True) == 0x0F45


def test_frequency_second_octave_matches_psg_table():
    assert vrc6_frequency(0x20) == 0x06AE


@pytest.mark.parametrize("note", [0x11, 0x15, 0x1B, 0x23, 0x38])
@pytest.mark.parametrize("saw", [False, True])
def test_frequency_halves_per_octave(note, saw):
    assert vrc6_frequency(note + 0x10, saw) == vrc6_frequency(note, saw) >> 1


def test_frequency_uses_low_nibble_index():
    for index in range(16):
        assert vrc6_frequency(0x10 | index) == PULSE_FREQUENCY_TABLE[index]
        assert vrc6_frequency(0x10 | index, True) == SAW_FREQUENCY_TABLE[index]


@pytest.mark.parametrize("note", [0x00, 0x05, -1, 0x100])
def test_frequency_rejects_bad_notes(note):
    with pytest.raises(ValueError):
        vrc6_frequency(note)


def test_channel_rejects_bad_index_and_board():
    with pytest.raises(ValueError):
        Vrc6Channel(channel=3)
    with pytest.raises(ValueError):
        Vrc6Channel(board_type=7)


def test_pulse_control_combines_duty_and_volume():
    ch = Vrc6Channel(channel=0)
    ch.set_duty(0x87)
    value = ch.set_volume(0x8F)
    assert value == ch.control_value()
    assert value & 0x0F == 0x0F
    assert value & 0x70 == ch.register_high & 0x70
    assert value & 0x80 == 0


def test_pulse_mute_keeps_duty_drops_volume():
    ch = Vrc6Channel(channel=1)
    ch.set_duty(0x85)
    ch.set_volume(0x89)
    assert ch.mute_value() == ch.control_value() & 0x70
    assert ch.mute_value() & 0x0F == 0


def test_saw_volume_uses_six_bits_and_mutes_to_zero():
    ch = Vrc6Channel(channel=2)
    value = ch.set_volume(0xFF)
    assert value == 0x3F
    assert ch.mute_value() == 0


def test_saw_ignores_duty():
    ch = Vrc6Channel(channel=2)
    ch.set_volume(0x8A)
    before = ch.control_value()
    assert ch.set_duty(0x87) == before


def test_frequency_writes_default_board():
    ch = Vrc6Channel(channel=1)
    writes = ch.frequency_writes(0x0D5C)
    assert writes == [(0xA001, 0x5C), (0xA002, 0x8D)]


def test_frequency_writes_swapped_board():
    normal = Vrc6Channel(channel=0).frequency_writes(0x0FE4)
    swapped = Vrc6Channel(channel=0, board_type=BOARD_351949A).frequency_writes(0x0FE4)
    assert [v for _, v in normal] == [v for _, v in swapped]
    assert [a for a, _ in swapped] == [0x9002, 0x9001]


def test_frequency_writes_always_enable_channel():
    ch = Vrc6Channel(channel=2)
    for note in (0x10, 0x25, 0x4B):
        (_, low), (_, high) = ch.frequency_writes(vrc6_frequency(note, saw=True))
        assert high & 0x80
        assert ((high & 0x7F) << 8 | low) == vrc6_frequency(note, saw=True)


def test_frequency_writes_reject_out_of_range():
    with pytest.raises(ValueError):
        Vrc6Channel().frequency_writes(0x10000)