"""ROM image storage and S-record output."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from .defs import BANK_SIZE, RESERVED_BANK, ROM_BANKS, Section
from .diagnostics import FatalAssemblerError

FREE = 0xFF


class Rom:
    """The banked ROM image together with the assembler's location counter."""

    def __init__(self, rom_limit: int = ROM_BANKS * BANK_SIZE) -> None:
        if rom_limit > ROM_BANKS * BANK_SIZE:
            raise ValueError("rom limit larger than the ROM image")
        self.data = bytearray([FREE]) * (ROM_BANKS * BANK_SIZE)
        self.usage = bytearray([FREE]) * (ROM_BANKS * BANK_SIZE)
        self.rom_limit = rom_limit
        self.bank = 0
        self.loccnt = 0
        self.page = 0
        self.section = Section.CODE
        self.max_bank = 0
        self.last_pass = True

    def _index(self, offset: int) -> int:
        return self.bank * BANK_SIZE + offset

    def _tag(self) -> int:
        return (int(self.section) + (self.page << 5)) & 0xFF

    def put_byte(self, offset: int, data: int) -> None:
        """Store one byte in the current bank."""
        if self.bank >= RESERVED_BANK or offset >= BANK_SIZE:
            return
        index = self._index(offset)
        self.data[index] = data & 0xFF
        self.usage[index] = self._tag()
        self.max_bank = max(self.max_bank, self.bank)

    def put_word(self, offset: int, data: int) -> None:
        """Store a little-endian word in the current bank."""
        if self.bank >= RESERVED_BANK or offset >= BANK_SIZE - 1:
            return
        index = self._index(offset)
        self.data[index] = data & 0xFF
        self.data[index + 1] = (data >> 8) & 0xFF
        self.usage[index] = self.usage[index + 1] = self._tag()
        self.max_bank = max(self.max_bank, self.bank)

    def put_buffer(self, data: bytes | None, size: int | None = None) -> None:
        """Copy a buffer (zeros when ``data`` is None) at the location counter."""
        if size is None:
            size = 0 if data is None else len(data)
        if size == 0:
            return

        if self.bank >= RESERVED_BANK:
            if self.loccnt + size > BANK_SIZE - 1:
                raise FatalAssemblerError("PROC overflow!")
        else:
            if self.loccnt + size + (self.bank << 13) > self.rom_limit:
                raise FatalAssemblerError("ROM overflow!")
            if self.last_pass:
                start = self._index(self.loccnt)
                chunk = bytes(size) if data is None else bytes(data[:size])
                self.data[start:start + size] = chunk.ljust(size, b"\0")
                self.usage[start:start + size] = bytes([self._tag()]) * size

        self.bank += (self.loccnt + size) >> 13
        self.loccnt = (self.loccnt + size) & 0x1FFF

        if self.bank < RESERVED_BANK and self.bank > self.max_bank:
            self.max_bank = self.bank if self.loccnt else self.bank - 1

    def srec_lines(self, base: int) -> Iterator[str]:
        """Yield the S-record lines for every used byte of the image."""
        for bank in range(self.max_bank + 1):
            bank_start = bank * BANK_SIZE
            count = 0
            pos = 0
            for offset in range(BANK_SIZE):
                dump = False
                if self.usage[bank_start + offset] != FREE:
                    if count == 0:
                        pos = offset
                    count += 1
                    if count == 32:
                        dump = True
                elif count:
                    dump = True
                if offset == BANK_SIZE - 1 and count:
                    dump = True

                if dump:
                    addr = base + (bank << 13) + pos
                    chunk = self.data[bank_start + pos:bank_start + pos + count]
                    checksum = (
                        count + ((addr >> 16) & 0xFF) + ((addr >> 8) & 0xFF)
                        + (addr & 0xFF) + 4 + sum(chunk)
                    )
                    yield (
                        f"S2{count + 4:02X}{addr & 0xFFFFFF:06X}"
                        f"{chunk.hex().upper()}{~checksum & 0xFF:02X}"
                    )
                    pos += count
                    count = 0

        addr = (self.usage[0] >> 5) << 13
        checksum = ((addr >> 8) & 0xFF) + (addr & 0xFF) + 4
        yield f"S804{addr:06X}{~checksum & 0xFF:02X}"

    def write_srec(self, stem: str, ext: str, base: int) -> Path:
        """Write the S-record file ``stem.ext`` and return its path."""
        if ext == "mx":
            print("writing mx file... ", end="", flush=True)
        else:
            print("writing s-record file... ", end="", flush=True)
        path = Path(f"{stem}.{ext}")
        *records, start = self.srec_lines(base)
        with path.open("w") as fp:
            for record in records:
                fp.write(record + "\n")
            fp.write(start)
        print("OK")
        return path