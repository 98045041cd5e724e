import pytest

from nesasmkit.defs import TileFormat
from nesasmkit.diagnostics import AssemblerError
from nesasmkit.ines import HEADER_ID, InesHeader, defchr, pack_8x8_tile


def test_header_layout():
    header = InesHeader()
    header.set_prg(2)
    header.set_chr(1)
    data = header.to_bytes()
    assert len(data) == 16
    assert data[:4] == b"NES\x1a"
    assert data[:4] == HEADER_ID
    assert data[4] == 2
    assert data[5] == 1
    assert data[8:] == bytes(8)


@pytest.mark.parametrize("setter", ["set_prg", "set_chr"])
@pytest.mark.parametrize("value", [-1, 65])
def test_bank_range(setter, value):
    with pytest.raises(AssemblerError):
        getattr(InesHeader(), setter)(value)


def test_bank_limits_accepted():
    header = InesHeader()
    header.set_prg(64)
    header.set_chr(0)
    assert header.to_bytes()[4:6] == bytes([64, 0])


def test_mapper_split_into_nibbles():
    header = InesHeader()
    header.set_mapper(0x12)
    data = header.to_bytes()
    assert data[6] >> 4 == 0x2
    assert data[7] == 0x10


def test_mirroring_keeps_mapper():
    header = InesHeader()
    header.set_mapper(0x45)
    header.set_mirroring(1)
    data = header.to_bytes()
    assert data[6] & 0x0F == 1
    assert data[6] >> 4 == 0x5
    assert data[7] == 0x40


def test_mapper_and_mirror_range():
    header = InesHeader()
    with pytest.raises(AssemblerError):
        header.set_mapper(256)
    with pytest.raises(AssemblerError):
        header.set_mirroring(16)


def test_packed_planes():
    tile = pack_8x8_tile([0x11111111] * 4 + [0x22222222] * 4, TileFormat.PACKED)
    assert len(tile) == 16
    assert tile[:4] == b"\xff" * 4
    assert tile[4:8] == bytes(4)
    assert tile[8:12] == bytes(4)
    assert tile[12:] == b"\xff" * 4


def test_packed_bad_color():
    with pytest.raises(AssemblerError):
        pack_8x8_tile([0x4] + [0] * 7, TileFormat.PACKED)


def test_chunky_matches_packed():
    pixels = [0] * 64
    pixels[0] = 1
    pixels[8 + 7] = 2
    chunky = pack_8x8_tile(pixels, TileFormat.CHUNKY, 8)
    packed = pack_8x8_tile([0x10000000, 0x00000002] + [0] * 6, TileFormat.PACKED)
    assert chunky == packed
    assert chunky[0] == 0x80


def test_chunky_line_offset():
    wide = [0] * 128
    for row in range(8):
        wide[row * 16] = 3
    tile = pack_8x8_tile(wide, TileFormat.CHUNKY, 16)
    assert all(b == 0x80 for b in tile)


def test_defchr():
    rows = [0x33333333] * 8
    assert defchr(rows) == b"\xff" * 16
    with pytest.raises(AssemblerError):
        defchr([0] * 7)