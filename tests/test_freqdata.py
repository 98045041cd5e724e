import pytest

from nesasmkit.freqdata import (
    SoundGenerator,
    freq_vector_table,
    noise_frequency,
    psg_frequency,
)

ALL = (
    SoundGenerator.FDS
    | SoundGenerator.VRC7
    | SoundGenerator.VRC6
    | SoundGenerator.N106
    | SoundGenerator.FME7
    | SoundGenerator.MMC5
)


def test_psg_table_values():
    assert psg_frequency(0) == 0x06AE
    assert psg_frequency(11) == 0x038A
    assert psg_frequency(12) == 0x0000
    assert psg_frequency(13) == 0x07F2
    assert psg_frequency(15) == 0x0714


def test_psg_scale_descends_within_octave():
    values = [psg_frequency(i) for i in range(12)]
    assert values == sorted(values, reverse=True)


@pytest.mark.parametrize("index", [-1, 16])
def test_psg_out_of_range(index):
    with pytest.raises(ValueError):
        psg_frequency(index)


def test_noise_table():
    for index in range(16):
        assert noise_frequency(index) == (index, 0)
    with pytest.raises(ValueError):
        noise_frequency(16)


def test_vector_builtin_only():
    assert freq_vector_table() == bytes(10)


def test_vector_fds_is_increasing():
    table = freq_vector_table(SoundGenerator.FDS)
    assert table[:10] == bytes(10)
    assert table[10:] == b"\x80\x00"


def test_vector_order_of_chips():
    table = freq_vector_table(SoundGenerator.VRC7 | SoundGenerator.VRC6)
    extra = table[10:]
    assert extra[::2] == bytes([0x80] * 6 + [0x00] * 3)


def test_vector_all_chips_invariants():
    table = freq_vector_table(ALL)
    assert all(b == 0 for b in table[1::2])
    assert set(table[::2]) <= {0x00, 0x80}
    single = sum(
        len(freq_vector_table(chip)) - 10 for chip in SoundGenerator
    )
    assert len(table) == 10 + single


def test_vector_n106_channels_increase():
    table = freq_vector_table(SoundGenerator.N106)
    assert table[10::2] == bytes([0x80] * 8)


def test_vector_fme7_and_mmc5_decrease():
    table = freq_vector_table(SoundGenerator.FME7 | SoundGenerator.MMC5)
    assert table[10:] == bytes(10)