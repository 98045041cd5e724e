"""PC-Engine machine support: ROM header, tile, sprite, palette and BAT encoding."""

from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple

from .defs import ABS, ABS_X, IMM, ZP, ZP_X, Directive, TileFormat
from .diagnostics import AssemblerError

ASM_NAME = "PCEAS"
ASM_TITLE = "PC-Engine Assembler (v2.51)"
ROM_EXTENSION = ".pce"
INCLUDE_ENV = "PCE_INCLUDE"
ZP_LIMIT = 0xD8
RAM_LIMIT = 0x2000
RAM_BASE = 0x2000
RAM_PAGE = 1
RAM_BANK = 0xF8

HEADER_SIZE = 512
TILE_8X8_SIZE = 32
TILE_16X16_SIZE = 128
SPRITE_SIZE = 128
VRAM_LIMIT = 0x7F00


class Opcode(NamedTuple):
    """An entry of the instruction table; ``handler`` is the operand class number."""

    name: str
    handler: int
    flags: int
    value: int
    type_idx: int


def _ops(rows: Sequence[tuple[str, int, int, int, int]]) -> tuple[Opcode, ...]:
    return tuple(Opcode(*row) for row in rows)


PCE_INSTRUCTIONS = _ops(
    [("BBR", 10, 0, 0x0F, 0)]
    + [(f"BBR{n}", 5, 0, 0x0F + 0x10 * n, 0) for n in range(8)]
    + [("BBS", 10, 0, 0x8F, 0)]
    + [(f"BBS{n}", 5, 0, 0x8F + 0x10 * n, 0) for n in range(8)]
    + [
        ("BRA", 2, 0, 0x80, 0),
        ("BSR", 2, 0, 0x44, 0),
        ("CLA", 1, 0, 0x62, 0),
        ("CLX", 1, 0, 0x82, 0),
        ("CLY", 1, 0, 0xC2, 0),
        ("CSH", 1, 0, 0xD4, 0),
        ("CSL", 1, 0, 0x54, 0),
        ("PHX", 1, 0, 0xDA, 0),
        ("PHY", 1, 0, 0x5A, 0),
        ("PLX", 1, 0, 0xFA, 0),
        ("PLY", 1, 0, 0x7A, 0),
        ("RMB", 9, 0, 0x07, 0),
    ]
    + [(f"RMB{n}", 4, ZP, 0x03 + 0x10 * n, 0) for n in range(8)]
    + [
        ("SAX", 1, 0, 0x22, 0),
        ("SAY", 1, 0, 0x42, 0),
        ("SET", 1, 0, 0xF4, 0),
        ("SMB", 9, 0, 0x87, 0),
    ]
    + [(f"SMB{n}", 4, ZP, 0x83 + 0x10 * n, 0) for n in range(8)]
    + [
        ("ST0", 4, IMM, 0x03, 1),
        ("ST1", 4, IMM, 0x13, 1),
        ("ST2", 4, IMM, 0x23, 1),
        ("STZ", 4, ZP | ZP_X | ABS | ABS_X, 0x00, 0x05),
        ("SXY", 1, 0, 0x02, 0),
        ("TAI", 6, 0, 0xF3, 0),
        ("TAM", 8, 0, 0x53, 0),
    ]
    + [(f"TAM{n}", 3, 0, 0x53, 1 << n) for n in range(8)]
    + [
        ("TDD", 6, 0, 0xC3, 0),
        ("TIA", 6, 0, 0xE3, 0),
        ("TII", 6, 0, 0x73, 0),
        ("TIN", 6, 0, 0xD3, 0),
        ("TMA", 8, 0, 0x43, 0),
    ]
    + [(f"TMA{n}", 3, 0, 0x43, 1 << n) for n in range(8)]
    + [
        ("TRB", 4, ZP | ABS, 0x10, 0),
        ("TSB", 4, ZP | ABS, 0x00, 0),
        ("TST", 7, 0, 0x00, 0),
    ]
)

_PSEUDO_BASE = {
    "DEFCHR": (Directive.DEFCHR, 0),
    "DEFPAL": (Directive.DEFPAL, 0),
    "DEFSPR": (Directive.DEFSPR, 0),
    "INCBAT": (Directive.INCBAT, 0xD5),
    "INCSPR": (Directive.INCSPR, 0xEA),
    "INCPAL": (Directive.INCPAL, 0xF8),
    "INCTILE": (Directive.INCTILE, 0xEA),
    "INCMAP": (Directive.INCMAP, 0xD5),
    "MML": (Directive.MML, 0),
    "PAL": (Directive.PAL, 0),
    "VRAM": (Directive.VRAM, 0),
}

PCE_PSEUDOS: dict[str, tuple[Directive, int]] = {
    **_PSEUDO_BASE,
    **{"." + name: entry for name, entry in _PSEUDO_BASE.items()},
}


def header_bytes(banks: int) -> bytes:
    """The 512-byte ROM header: the bank count followed by zeros."""
    return bytes([banks & 0xFF]) + bytes(HEADER_SIZE - 1)


def _set_planes(buffer: bytearray, offsets: Sequence[int], pixel: int, mask: int) -> None:
    for plane, offset in enumerate(offsets):
        if pixel & (1 << plane):
            buffer[offset] |= mask


def pack_8x8_tile(
    data: Sequence[int],
    tile_format: TileFormat = TileFormat.PACKED,
    line_offset: int = 8,
) -> bytes:
    """Encode an 8x8 tile into the 32-byte four-plane format.

    ``CHUNKY`` data holds one pixel per item, rows ``line_offset`` apart.
    ``PACKED`` data holds eight row values of eight 4-bit pixels each.
    """
    buffer = bytearray(TILE_8X8_SIZE)
    if tile_format == TileFormat.CHUNKY:
        for row in range(8):
            base = row * line_offset
            cnt = 2 * row
            for bit in range(8):
                _set_planes(buffer, (cnt, cnt + 1, cnt + 16, cnt + 17),
                            data[base + (bit ^ 0x07)], 1 << bit)
    elif tile_format == TileFormat.PACKED:
        for row, pixels in enumerate(data[:8]):
            cnt = 2 * row
            for bit in range(8):
                _set_planes(buffer, (cnt, cnt + 1, cnt + 16, cnt + 17),
                            pixels, 1 << bit)
                pixels >>= 4
    else:
        raise AssemblerError(
            "Internal error: unsupported format passed to 'pack_8x8_tile'!"
        )
    return bytes(buffer)


def pack_16x16_tile(data: Sequence[int], line_offset: int = 16) -> bytes:
    """Encode a 16x16 background tile from chunky pixels into 128 bytes."""
    buffer = bytearray(TILE_16X16_SIZE)
    cnt = 0
    for row in range(16):
        base = row * line_offset
        for bit in range(8):
            mask = 1 << bit
            _set_planes(buffer, (cnt, cnt + 1, cnt + 16, cnt + 17),
                        data[base + (bit ^ 0x07)], mask)
            _set_planes(buffer, (cnt + 32, cnt + 33, cnt + 48, cnt + 49),
                        data[base + ((bit + 8) ^ 0x07)], mask)
        if row == 7:
            cnt += 48
        cnt += 2
    return bytes(buffer)


def pack_16x16_sprite(
    data: Sequence[int],
    tile_format: TileFormat = TileFormat.CHUNKY,
    line_offset: int = 16,
) -> bytes:
    """Encode a 16x16 sprite into the 128-byte four-plane format.

    ``CHUNKY`` data holds one pixel per item, rows ``line_offset`` apart.
    ``PACKED`` data holds 32 values: for each row the left eight pixels,
    then the right eight, 4 bits per pixel.
    """
    buffer = bytearray(SPRITE_SIZE)
    if tile_format == TileFormat.CHUNKY:
        for row in range(16):
            base = row * line_offset
            cnt = 2 * row
            for bit in range(8):
                _set_planes(buffer, (cnt, cnt + 32, cnt + 64, cnt + 96),
                            data[base + (bit ^ 0x0F)], 1 << bit)
            for bit in range(8):
                _set_planes(buffer, (cnt + 1, cnt + 33, cnt + 65, cnt + 97),
                            data[base + (bit ^ 0x07)], 1 << bit)
    elif tile_format == TileFormat.PACKED:
        for row in range(16):
            cnt = 2 * row
            left = data[cnt]
            for bit in range(8):
                _set_planes(buffer, (cnt + 1, cnt + 33, cnt + 65, cnt + 97),
                            left, 1 << bit)
                left >>= 4
            right = data[cnt + 1]
            for bit in range(8):
                _set_planes(buffer, (cnt, cnt + 32, cnt + 64, cnt + 96),
                            right, 1 << bit)
                right >>= 4
    else:
        raise AssemblerError(
            "Internal error: unsupported format passed to 'pack_16x16_sprite'!"
        )
    return bytes(buffer)


def defpal_color(value: int) -> int:
    """Convert a ``0x0RGB`` colour of ``.defpal`` to the 9-bit GRB hardware word."""
    r = (value >> 8) & 0x7
    g = (value >> 4) & 0x7
    b = value & 0x7
    return (g << 6) + (r << 3) + b


def incpal(
    palette: Sequence[Sequence[int]],
    start: int | None = None,
    count: int | None = None,
) -> bytes:
    """Convert RGB palette entries into little-endian hardware colour words.

    ``start`` and ``count`` are in sub-palettes of 16 colours, as in the
    ``.incpal`` directive. Without ``start`` the whole palette is taken;
    with ``start`` alone one sub-palette is taken.
    """
    if start is None:
        first, number = 0, len(palette)
    else:
        first = start << 4
        number = 16 if count is None else count << 4
    if first + number > 256 or number == 0:
        raise AssemblerError("Palette index out of range!")

    out = bytearray()
    for index in range(first, first + number):
        r, g, b = palette[index] if index < len(palette) else (0, 0, 0)
        word = ((r & 0xE0) >> 2) | ((g & 0xE0) << 1) | ((b & 0xE0) >> 5)
        out += word.to_bytes(2, "little")
    return bytes(out)


def build_bat(
    pixels: Sequence[int],
    width: int,
    x: int,
    y: int,
    w: int,
    h: int,
    base: int,
) -> bytes:
    """Build a block attribute table for ``w`` x ``h`` 8x8 tiles of an image.

    ``pixels`` is the image, one byte per pixel, ``width`` pixels per row;
    ``base`` is the VRAM address of the first tile. Each entry holds the tile
    number and the sub-palette (high nibble of the pixel colour index).
    """
    tile = base >> 4
    mixed = False
    out = bytearray()
    for row in range(h):
        for col in range(w):
            origin = (x + col * 8) + (y + row * 8) * width
            ref = pixels[origin] & 0xF0
            for line in range(8):
                start = origin + line * width
                if any((p & 0xF0) != ref for p in pixels[start:start + 8]):
                    mixed = True
            entry = (tile & 0xFFF) | (ref << 8)
            out += (entry & 0xFFFF).to_bytes(2, "little")
            tile += 1
    if mixed:
        raise AssemblerError("Invalid color index found!")
    return bytes(out)