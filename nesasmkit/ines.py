"""iNES header generation and NES tile encoding."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .defs import TileFormat
from .diagnostics import AssemblerError

ASM_NAME = "NESASM"
ASM_TITLE = "NES Assembler (v2.51)"
ROM_EXTENSION = ".nes"
INCLUDE_ENV = "NES_INCLUDE"
ZP_LIMIT = 0x100
RAM_LIMIT = 0x800

HEADER_ID = b"NES\x1a"
HEADER_SIZE = 16
TILE_SIZE = 16


@dataclass
class InesHeader:
    """The 16-byte iNES ROM header built from the ``.ines*`` directives."""

    prg: int = 0
    chr: int = 0
    mapper_low: int = 0
    mapper_high: int = 0

    def set_prg(self, value: int) -> None:
        """Set the number of 16 KiB PRG banks (``.inesprg``)."""
        if not 0 <= value <= 64:
            raise AssemblerError("Prg bank value out of range!")
        self.prg = value

    def set_chr(self, value: int) -> None:
        """Set the number of 8 KiB CHR banks (``.ineschr``)."""
        if not 0 <= value <= 64:
            raise AssemblerError("Prg bank value out of range!")
        self.chr = value

    def set_mapper(self, value: int) -> None:
        """Set the mapper number (``.inesmap``)."""
        if not 0 <= value <= 255:
            raise AssemblerError("Mapper value out of range!")
        self.mapper_low = (self.mapper_low & 0x0F) | ((value & 0x0F) << 4)
        self.mapper_high = value & 0xF0

    def set_mirroring(self, value: int) -> None:
        """Set the mirroring and flag nibble (``.inesmir``)."""
        if not 0 <= value <= 15:
            raise AssemblerError("Mirror value out of range!")
        self.mapper_low = (self.mapper_low & 0xF0) | (value & 0x0F)

    def to_bytes(self) -> bytes:
        """The header as written at the start of the ROM file."""
        return (
            HEADER_ID
            + bytes([self.prg & 0xFF, self.chr & 0xFF,
                     self.mapper_low & 0xFF, self.mapper_high & 0xFF])
            + bytes(8)
        )


def pack_8x8_tile(
    data: Sequence[int],
    tile_format: TileFormat = TileFormat.PACKED,
    line_offset: int = 8,
) -> bytes:
    """Encode an 8x8 tile into the NES two-plane 16-byte format.

    ``CHUNKY`` data holds one pixel per byte, rows ``line_offset`` apart.
    ``PACKED`` data holds eight row values of eight 4-bit pixels each.
    """
    buffer = bytearray(TILE_SIZE)
    if tile_format == TileFormat.CHUNKY:
        for row in range(8):
            base = row * line_offset
            for bit in range(8):
                pixel = data[base + (bit ^ 0x07)]
                if pixel & 0x01:
                    buffer[row] |= 1 << bit
                if pixel & 0x02:
                    buffer[row + 8] |= 1 << bit
    elif tile_format == TileFormat.PACKED:
        bad_pixels = 0
        for row, pixels in enumerate(data[:8]):
            for bit in range(8):
                if pixels & 0x0C:
                    bad_pixels += 1
                if pixels & 0x01:
                    buffer[row] |= 1 << bit
                if pixels & 0x02:
                    buffer[row + 8] |= 1 << bit
                pixels >>= 4
        if bad_pixels:
            raise AssemblerError("Incorrect pixel color index!")
    else:
        raise AssemblerError(
            "Internal error: unsupported format passed to 'pack_8x8_tile'!"
        )
    return bytes(buffer)


def defchr(rows: Sequence[int]) -> bytes:
    """Encode the eight packed rows of a ``.defchr`` directive."""
    if len(rows) != 8:
        raise AssemblerError("Syntax error!")
    return pack_8x8_tile(rows, TileFormat.PACKED)