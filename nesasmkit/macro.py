"""Macro definitions: the macro table, argument splitting and argument typing."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from .defs import RESERVED_BANK, SBOLSZ, ArgType, SymbolType
from .diagnostics import AssemblerError

MAX_ARGS = 9
MAX_ARG_LENGTH = 80
MAX_NAME_LENGTH = 31
HASH_SIZE = 256


class MacroError(AssemblerError):
    """An error in a macro definition or a macro call."""


@dataclass
class Macro:
    """A macro definition and the source lines of its body."""

    name: str
    lines: list[str] = field(default_factory=list)


def _wrap32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def macro_hash(name: str) -> int:
    """The 8-bit hash of a macro name used to pick its table bucket."""
    h = 0
    for ch in name:
        c = ord(ch)
        h = _wrap32(h + c)
        h = _wrap32((h << 3) + (h >> 5) + c)
    return h & 0xFF


def _is_word_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch == "_")


def _call_name(text: str) -> str | None:
    """The macro name at the start of ``text``, or None if it is not valid."""
    name: list[str] = []
    for ch in text:
        if ch in " \t;":
            break
        if not _is_word_char(ch):
            return None
        if not name and ch.isdigit():
            return None
        if len(name) == MAX_NAME_LENGTH:
            return None
        name.append(ch)
    return "".join(name)


class MacroTable:
    """Macros defined so far, kept in hash buckets with the newest first."""

    def __init__(self) -> None:
        self._buckets: list[list[Macro]] = [[] for _ in range(HASH_SIZE)]

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._buckets)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.lookup(name) is not None

    def install(self, name: str) -> Macro:
        """Define a new, empty macro and return it."""
        if not name:
            raise MacroError("No name for this macro!")
        if "." in name:
            raise MacroError("Invalid macro name!")
        bucket = self._buckets[macro_hash(name)]
        if any(macro.name == name for macro in bucket):
            raise MacroError("Macro already defined!")
        macro = Macro(name)
        bucket.insert(0, macro)
        return macro

    def lookup(self, name: str) -> Macro | None:
        """Find the macro called at the start of ``name``; None if there is none."""
        key = _call_name(name)
        if key is None:
            return None
        for macro in self._buckets[macro_hash(key)]:
            if macro.name == key:
                return macro
        return None


def split_macro_args(text: str) -> list[str]:
    """Split the operand field of a macro call into its nine arguments.

    Arguments are separated by commas outside brackets; ``"..."`` strings keep
    their quotes and ``{...}`` groups lose their braces. A lone ``x`` or ``y``
    (or ``x++``/``y++``) is joined to the argument before it. A ``\\`` at the
    end of a line continues the arguments on the next line of ``text``.
    """
    lines = text.split("\n")
    line_no = 0
    line = lines[0]
    args = [""] * MAX_ARGS
    arg = 0
    ip = 0

    def at(i: int) -> str:
        return line[i] if i < len(line) else "\0"

    while True:
        while at(ip).isspace():
            ip += 1
        c = at(ip)
        ip += 1

        if c == ",":
            arg += 1
            if arg == MAX_ARGS:
                raise MacroError("Too many arguments for a macro!")
            continue

        if c in ("{", '"'):
            close = "}" if c == "{" else '"'
            buf = ['"'] if close == '"' else []
            while True:
                t = at(ip)
                ip += 1
                if t == "\0":
                    raise MacroError("Unterminated string!")
                if len(buf) == MAX_ARG_LENGTH:
                    raise MacroError("String too long, max. 80 characters!")
                if t == close:
                    break
                buf.append(t)
            if close == '"':
                buf.append('"')
            while at(ip).isspace():
                ip += 1
            if at(ip) not in ("\0", ",", ";"):
                raise MacroError("Syntax error!")
            args[arg] = "".join(buf)
            continue

        if c in (";", "\0"):
            return args

        if c == "\\":
            i = ip
            while at(i).isspace():
                i += 1
            if at(i) in (";", "\0"):
                line_no += 1
                if line_no >= len(lines):
                    raise MacroError("Unterminated continuation line!")
                line = lines[line_no]
                ip = 0
                continue

        out: list[str] = []
        consumed = 0
        pending_space = False
        level = 0
        while c != "\0":
            if c == ",":
                if level == 0:
                    break
            elif c in "([":
                level += 1
            elif c in ")]":
                if level:
                    level -= 1
            elif c == ";":
                break
            if pending_space:
                if c != " ":
                    out.extend(" " * (consumed - len(out)))
                    out.append(c)
                    pending_space = False
            elif c == " ":
                pending_space = True
            else:
                out.append(c)
            if len(out) >= MAX_ARG_LENGTH:
                raise MacroError(
                    "Macro argument string too long, max. 80 characters!"
                )
            consumed += 1
            c = at(ip)
            ip += 1
        ip -= 1

        value = "".join(out)
        args[arg] = value
        if value and arg and value[0].lower() in ("x", "y"):
            if value.lower() in ("x++", "y++") or len(value) == 1:
                arg -= 1
                if len(args[arg]) > MAX_ARG_LENGTH - 5:
                    raise MacroError(
                        "Macro argument string too long, max. 80 characters!"
                    )
                args[arg] += "," + value
                args[arg + 1] = ""


def macro_arg_type(arg: str, symbol_lookup: Callable[[str], Any]) -> ArgType:
    """Classify a macro argument by its addressing kind.

    ``symbol_lookup`` takes a symbol name and returns None or an object with
    ``type`` and ``bank`` attributes. The symbol name examined is the text
    after the argument's first character.
    """
    arg = arg.lstrip()
    if not arg:
        return ArgType.NO_ARG
    first = arg[0].upper()
    rest = arg[1:]
    if first == '"':
        return ArgType.STRING
    if first == "#":
        return ArgType.IMM
    if first == "[":
        return ArgType.INDIRECT
    if first in ("A", "X", "Y") and not rest:
        return ArgType.REG

    i = 0
    c = "\0"
    while i < SBOLSZ:
        c = rest[i] if i < len(rest) else "\0"
        if i == 0 and c.isascii() and c.isdigit():
            break
        if not _is_word_char(c) and c != ".":
            break
        i += 1

    if i == 0 or c != "\0":
        return ArgType.ABS

    sym = symbol_lookup(rest[:i])
    if sym is None:
        return ArgType.LABEL
    if sym.type in (SymbolType.UNDEF, SymbolType.IFUNDEF):
        return ArgType.LABEL
    if sym.bank == RESERVED_BANK:
        return ArgType.ABS
    return ArgType.LABEL