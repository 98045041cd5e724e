# nesasmkit

Building blocks of a 6502 assembler targeting the NES and the PC-Engine:
ROM image storage, listing lines, S-record output, ROM headers, tile and
palette encoders, a music macro language compiler, macro-call handling, and
models of the register writes made by the NES, MMC5 and VRC6 sound drivers.

The package is a library; it has no dependencies outside the standard library.

## Modules

- `nesasmkit.defs` – shared constants (`RESERVED_BANK`, `BANK_SIZE`,
  addressing-mode flags, `OPVALTAB`, …) and the enumerations `Section`,
  `ArgType`, `TileFormat`, `SymbolType` and `Directive`.
  `directive_for(name)` maps a name such as `".db"` or `"incbin"` to its
  `Directive` and raises `ValueError` for an unknown name;
  `Directive.keyword` gives the dotted spelling.
- `nesasmkit.diagnostics` – `AssemblerError`, `FatalAssemblerError` and
  `Diagnostics`. `Diagnostics.warning/error/fatal(message, line, line_number)`
  print the line with its number stamped in, followed by the message, to a
  stream (standard output by default); `error` records the error, `fatal`
  also sets `stop_pass` and raises `FatalAssemblerError`.
- `nesasmkit.listing` – listing-line helpers: `hexcon(num, digits)`,
  `blank_line()`, `load_location(line, offset, bank, page, pos)` and the
  generator `data_lines(line, data, start, bank, page, data_size)`.
- `nesasmkit.rom` – `Rom`, the 128-bank ROM image with its location counter.
  `put_byte`, `put_word` and `put_buffer` store data (`put_buffer` advances
  the counter across banks and raises `FatalAssemblerError` on
  `"ROM overflow!"` or `"PROC overflow!"`); `srec_lines(base)` yields
  Motorola S2/S8 records of every used byte; `write_srec(stem, ext, base)`
  writes them to `stem.ext`, prints a status message and returns the path.
- `nesasmkit.ines` – `InesHeader` with `set_prg`, `set_chr`, `set_mapper`,
  `set_mirroring` (range-checked, raising `AssemblerError`) and `to_bytes()`
  for the 16-byte iNES header; `pack_8x8_tile` for the NES two-plane tile
  format and `defchr(rows)` for eight packed rows.
- `nesasmkit.pce` – PC-Engine support: `header_bytes(banks)`, the encoders
  `pack_8x8_tile`, `pack_16x16_tile` and `pack_16x16_sprite`,
  `defpal_color(value)`, `incpal(palette, start, count)` and
  `build_bat(pixels, width, x, y, w, h, base)`, plus the tables
  `PCE_INSTRUCTIONS` and `PCE_PSEUDOS`.
- `nesasmkit.mml` – `MmlCompiler` with `start()`, `parse(text)`, `stop()` and
  `compile(strings)`, producing the byte stream described by `SoundCommand`.
  Bad input raises `MmlError`.
- `nesasmkit.fmp` – `load_fmp(data, required)` returns the BODY chunk of an
  FMP map as one tile-index byte per cell; bad files raise `FmpError`, or
  give `None` when `required` is false and the header is not FMP.
- `nesasmkit.macro` – `MacroTable` (`install`, `lookup`), `macro_hash`,
  `split_macro_args(text)` for the nine arguments of a macro call, and
  `macro_arg_type(arg, symbol_lookup)` returning an `ArgType`. Errors raise
  `MacroError`.
- `nesasmkit.freqdata` – `psg_frequency(index)`, `noise_frequency(index)`
  and `freq_vector_table(generators)`, where `generators` is a combination
  of `SoundGenerator` flags.
- `nesasmkit.mmc5` – `mmc5_init_writes()`, `mmc5_frequency(note)` and
  `Mmc5Channel` (`set_duty`, `set_volume`, `apply_duty_envelope`,
  `control_value`, `key_on_writes`, `rest_writes`). Writes are
  `(address, value)` pairs.
- `nesasmkit.vrc6` – `vrc6_init_writes()`, `vrc6_frequency(note, saw)`,
  `vrc6_base_address(channel)` and `Vrc6Channel` (`set_duty`, `set_volume`,
  `control_value`, `mute_value`, `frequency_writes`), for either board type.

## Example

```python
from nesasmkit.ines import InesHeader
from nesasmkit.mml import MmlCompiler
from nesasmkit.mmc5 import mmc5_frequency
from nesasmkit.rom import Rom

header = InesHeader()
header.set_prg(2)
header.set_chr(1)
header.set_mapper(4)
header.set_mirroring(1)
rom_header = header.to_bytes()          # 16 bytes starting with b"NES\x1a"

song = MmlCompiler().compile(["T120O4L8CDEFG"])   # MML has no spaces

rom = Rom()
rom.put_buffer(b"\xa9\x00\x60")
records = list(rom.srec_lines(0))

divider = mmc5_frequency(0x39)          # octave 3, note A -> 0x01FC
```

## What the package does not do

There is no command-line assembler here: nothing reads assembly source files,
evaluates expressions, resolves symbols or encodes 6502 instructions, and
nothing loads PCX images or writes a finished `.nes`/`.pce` ROM file. The
modules give the pieces such a tool is built from. The sound-chip modules
compute register values; they do not play sound.

## Installing and testing

```
pip install .
pip install .[test]
pytest
```