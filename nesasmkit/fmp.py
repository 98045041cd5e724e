"""Reading the map layer of Mappy FMP files (``.incmap`` source maps)."""

from __future__ import annotations

from .diagnostics import FatalAssemblerError


class FmpError(FatalAssemblerError):
    """An FMP file could not be read."""


def _be32(data: bytes, offset: int) -> int:
    return int.from_bytes(data[offset:offset + 4], "big")


def load_fmp(data: bytes, required: bool = True) -> bytes | None:
    """Return the BODY chunk converted to one tile index byte per map cell.

    When the header is not an FMP header, raise FmpError if ``required``,
    otherwise return None. A file with no BODY chunk gives empty bytes.
    """
    data = bytes(data)
    header = data[:12]
    if len(header) < 12 or header[:4] != b"FORM" or header[8:12] != b"FMAP":
        if required:
            raise FmpError("Invalid FMP format!")
        return None

    remaining = _be32(header, 4) - 4
    pos = 12
    while remaining > 0:
        chunk = data[pos:pos + 8]
        if len(chunk) < 8:
            raise FmpError("Truncated FMP chunk!")
        size = _be32(chunk, 4)
        pos += 8
        remaining -= 8 + size
        if remaining < 0:
            break
        if chunk[:4] == b"BODY":
            body = data[pos:pos + size]
            if len(body) < size:
                raise FmpError("Truncated FMP chunk!")
            words = (
                int.from_bytes(body[i:i + 2], "little")
                for i in range(0, size - 1, 2)
            )
            return bytes(((word >> 5) - 1) & 0xFF for word in words)
        pos += size
    return b""