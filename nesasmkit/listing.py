"""Building listing-file lines."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .defs import RESERVED_BANK, SFIELD


def hexcon(num: int, digits: int) -> str:
    """Format the low hex digits of a number in upper case."""
    mask = (1 << (4 * digits)) - 1
    return f"{num & mask:0{digits}X}"


def blank_line() -> str:
    """A cleared listing line."""
    return " " * SFIELD


def _overlay(line: str, index: int, text: str) -> str:
    end = index + len(text)
    line = line.ljust(end)
    return line[:index] + text + line[end:]


def load_location(
    line: str, offset: int, bank: int, page: int, pos: bool = False
) -> str:
    """Write a location into a listing line.

    Without ``pos`` the ``BB:AAAA`` address goes at column 7; with it a bare
    four-digit value goes at column 16.
    """
    if pos:
        return _overlay(line, 16, hexcon(offset, 4))
    bank_text = "--" if bank >= RESERVED_BANK else hexcon(bank, 2)
    address = offset + (page << 13)
    return _overlay(line, 7, f"{bank_text}:{hexcon(address, 4)}")


def data_lines(
    line: str,
    data: Iterable[int],
    start: int,
    bank: int,
    page: int,
    data_size: int,
) -> Iterator[str]:
    """Yield listing lines showing ``data_size`` bytes per line."""
    line = load_location(line, start, bank, page)
    location = start
    count = 0
    for byte in data:
        text = "--" if bank >= RESERVED_BANK else hexcon(byte, 2)
        line = _overlay(line, 16 + 3 * count, text)
        location += 1
        count += 1
        if count == data_size:
            count = 0
            yield line
            line = load_location(blank_line(), location, bank, page)
    if count:
        yield line