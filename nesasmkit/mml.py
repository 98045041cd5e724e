"""Compiler for the music macro language of the ``.mml`` directive."""

from __future__ import annotations

from collections.abc import Iterable
from enum import IntEnum

from .diagnostics import AssemblerError


class SoundCommand(IntEnum):
    """Byte codes of the compiled sound stream."""

    STOP = 0
    OFF = 1
    ON = 2
    VOLUME = 3
    FREQ = 4
    DURATION = 5
    NOISE_FREQ = 6
    NOISE_OFF = 7
    LFO_FREQ = 8
    LFO_CTRL = 9
    WAVE_SINE = 20
    WAVE_SAW = 21
    WAVE_SQR = 22
    WAVE_DATA = 30


_TONES = {"A": 10, "B": 12, "C": 1, "D": 3, "E": 5, "F": 6, "G": 8}
_FREQUENCIES = (
    0x001EDD,
    0x0020B3, 0x0022A6,
    0x0024B5, 0x0026E3,
    0x002933,
    0x002BA6, 0x002E40,
    0x003100, 0x0033E8,
    0x003700, 0x003A45,
    0x003DBA,
    0x004166,
)
_LENGTHS = frozenset({1, 2, 3, 4, 6, 8, 12, 16, 24, 32, 48, 64, 96})
_MAX_COMMAND = 7


class MmlError(AssemblerError):
    """An error in an MML string."""


class _Reader:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def next(self) -> str:
        c = self.peek()
        self.pos += 1
        return c

    def value(self) -> int:
        result = 0
        while self.peek().isdigit():
            if result > 65535:
                return -1
            result = result * 10 + int(self.next())
        return result

    def length(self) -> int:
        n = self.value()
        return n if n in _LENGTHS else 0


class MmlCompiler:
    """Turns MML strings into a sound command stream, keeping state between strings."""

    def __init__(self, capacity: int = 8192) -> None:
        self.capacity = capacity
        self.start()

    def start(self) -> bytes:
        """Reset the state and return the stream prologue."""
        self.wave = 0
        self.sound_off = True
        self.wave_pending = False
        self.octave = 4
        self.volume = 15
        self.length = 4
        self.tempo = 128
        self.timebase = 60
        self.ticks_high = 0
        self.ticks_low = 0
        self.remaining = self.capacity - 1
        return bytes([SoundCommand.OFF])

    def stop(self) -> bytes:
        """The stream epilogue."""
        return bytes([SoundCommand.STOP])

    def _duration(self, length: int) -> int:
        ticks = 0xC00000 // length
        if self.timebase == 0:
            mask = 0xFF
            self.ticks_high = ticks >> 8
            self.ticks_low = (ticks & 0xFF) + self.ticks_low
        else:
            mask = 0xFFFFFF
            tmp = ((256 - self.tempo) * self.timebase * ticks * 8) & 0xFFFFFFFF
            self.ticks_high = tmp >> 24
            self.ticks_low = (tmp & 0xFFFFFF) + self.ticks_low
        if self.ticks_low > mask:
            self.ticks_low &= mask
            self.ticks_high += 1
        if self.ticks_high == 0:
            self.ticks_high = 1
        return (self.ticks_high - 1) & 0xFF

    def _note_length(self, reader: _Reader, default: int) -> int:
        length = (reader.length() << 8) if reader.peek().isdigit() else default
        if reader.peek() == ".":
            length = (length * 0xC0) >> 8
            reader.next()
        if not length:
            raise MmlError("Incorrect note length!")
        return length

    def parse(self, text: str) -> bytes:
        """Compile one MML string and return the commands it produces."""
        reader = _Reader(text)
        out = bytearray()
        while reader.pos < len(text):
            if self.remaining < _MAX_COMMAND:
                raise MmlError("Internal error: MML buffer too small!")
            before = len(out)
            c = reader.next()
            if c == "O":
                self.octave = reader.value()
                if not 1 <= self.octave <= 7:
                    raise MmlError("Incorrect octave!")
            elif c == "V":
                self.volume = reader.value()
                if not 0 <= self.volume <= 15:
                    raise MmlError("Incorrect volume!")
                out += bytes([SoundCommand.VOLUME,
                              ((self.volume << 4) + self.volume) & 0xFF])
            elif c == "T":
                self.tempo = reader.value()
                if not 32 <= self.tempo <= 256:
                    raise MmlError("Incorrect tempo!")
            elif c == "L":
                self.length = reader.length()
                if not self.length:
                    raise MmlError("Incorrect note length!")
            elif c in _TONES:
                tone = _TONES[c]
                if reader.peek() in ("#", "+"):
                    tone += 1
                    reader.next()
                elif reader.peek() == "-":
                    tone -= 1
                    reader.next()
                length = self._note_length(reader, self.length << 8)
                freq = _FREQUENCIES[tone] << (self.octave - 1)
                value = (((3580000 * 16) // freq) + 1) >> 1
                out += bytes([SoundCommand.FREQ, value & 0xFF, (value >> 8) & 0xFF])
                if self.wave_pending:
                    self.wave_pending = False
                    self.sound_off = False
                    out.append(SoundCommand.WAVE_SINE + self.wave - 1)
                elif self.sound_off:
                    self.sound_off = False
                    out.append(SoundCommand.ON)
                out += bytes([SoundCommand.DURATION, self._duration(length)])
            elif c == "R":
                length = self._note_length(reader, 0x0400)
                out += bytes([SoundCommand.OFF, SoundCommand.DURATION,
                              self._duration(length)])
                self.sound_off = True
            elif c == "W":
                self.wave = reader.value()
                self.wave_pending = True
                if not 1 <= self.wave <= 3:
                    raise MmlError("Incorrect waveform!")
            else:
                raise MmlError("Syntax error!")
            self.remaining -= len(out) - before
        return bytes(out)

    def compile(self, strings: Iterable[str]) -> bytes:
        """Compile a whole ``.mml`` directive: prologue, strings, epilogue."""
        out = bytearray(self.start())
        for text in strings:
            out += self.parse(text)
        out += self.stop()
        return bytes(out)