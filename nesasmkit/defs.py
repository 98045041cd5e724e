"""Shared constants and enumerations used throughout the assembler."""

from enum import IntEnum

PATH_SEPARATOR = "/"

MACHINE_PCE = 0
MACHINE_NES = 1

RESERVED_BANK = 0xF0
PROC_BANK = 0xF1
GROUP_BANK = 0xF2

LAST_CH_POS = 158
SFIELD = 26
SBOLSZ = 32

BANK_SIZE = 0x2000
ROM_BANKS = 128

OPT_LIST = 0
OPT_MACRO = 1
OPT_WARNING = 2
OPT_OPTIMIZE = 3

FIRST_PASS = 0
LAST_PASS = 1

PSEUDO = 0x0008000
CLASS1 = 0x0010000
CLASS2 = 0x0020000
CLASS3 = 0x0040000
CLASS5 = 0x0080000
CLASS6 = 0x0100000
CLASS7 = 0x0200000
CLASS8 = 0x0400000
CLASS9 = 0x0800000
CLASS10 = 0x1000000
ACC = 0x0000001
IMM = 0x0000002
ZP = 0x0000004
ZP_X = 0x0000008
ZP_Y = 0x0000010
ZP_IND = 0x0000020
ZP_IND_X = 0x0000040
ZP_IND_Y = 0x0000080
ABS = 0x0000100
ABS_X = 0x0000200
ABS_Y = 0x0000400
ABS_IND = 0x0000800
ABS_IND_X = 0x0001000

OPVALTAB = (
    # CPX CPY LDX LDY
    (0x08, 0x08, 0x04, 0x14, 0x14, 0x11, 0x00, 0x10,
     0x0C, 0x1C, 0x18, 0x2C, 0x3C, 0x00, 0x00, 0x00),
    # ST0 ST1 ST2 TAM TMA
    (0x00, 0x00, 0x04, 0x14, 0x14, 0x00, 0x00, 0x00,
     0x0C, 0x1C, 0x1C, 0x00, 0x00, 0x00, 0x00, 0x00),
    # BIT
    (0x00, 0x89, 0x24, 0x34, 0x00, 0x00, 0x00, 0x00,
     0x2C, 0x3C, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00),
    # DEC
    (0x3A, 0x00, 0xC6, 0xD6, 0x00, 0x00, 0x00, 0x00,
     0xCE, 0xDE, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00),
    # INC
    (0x1A, 0x00, 0xE6, 0xF6, 0x00, 0x00, 0x00, 0x00,
     0xEE, 0xFE, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00),
    # STZ
    (0x00, 0x00, 0x64, 0x74, 0x00, 0x00, 0x00, 0x00,
     0x9C, 0x9E, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00),
)


class Section(IntEnum):
    """Memory sections an assembled byte can belong to."""

    ZP = 0
    BSS = 1
    CODE = 2
    DATA = 3


class ArgType(IntEnum):
    """Addressing kinds of a macro argument."""

    NO_ARG = 0
    REG = 1
    IMM = 2
    ABS = 3
    INDIRECT = 4
    STRING = 5
    LABEL = 6


class TileFormat(IntEnum):
    """Input layouts accepted by the tile encoders."""

    CHUNKY = 1
    PACKED = 2


class SymbolType(IntEnum):
    """Kinds of entries in the symbol table."""

    UNDEF = 1
    IFUNDEF = 2
    MDEF = 3
    DEFABS = 4
    MACRO = 5
    FUNC = 6


_SPECIAL_KEYWORDS = {"PGROUP": "procgroup", "ENDPG": "endprocgroup"}


class Directive(IntEnum):
    """Assembler directives."""

    DB = 0
    DW = 1
    DS = 2
    EQU = 3
    ORG = 4
    PAGE = 5
    BANK = 6
    INCBIN = 7
    INCLUDE = 8
    INCCHR = 9
    INCSPR = 10
    INCPAL = 11
    INCBAT = 12
    MACRO = 13
    ENDM = 14
    LIST = 15
    MLIST = 16
    NOLIST = 17
    NOMLIST = 18
    RSSET = 19
    RS = 20
    IF = 21
    ELSE = 22
    ENDIF = 23
    FAIL = 24
    ZP = 25
    BSS = 26
    CODE = 27
    DATA = 28
    DEFCHR = 29
    FUNC = 30
    IFDEF = 31
    IFNDEF = 32
    VRAM = 33
    PAL = 34
    DEFPAL = 35
    DEFSPR = 36
    INESPRG = 37
    INESCHR = 38
    INESMAP = 39
    INESMIR = 40
    OPT = 41
    INCTILE = 42
    INCMAP = 43
    MML = 44
    PROC = 45
    ENDP = 46
    PGROUP = 47
    ENDPG = 48
    CALL = 49

    @property
    def keyword(self) -> str:
        """The directive as written in source, with its leading dot."""
        return "." + _SPECIAL_KEYWORDS.get(self.name, self.name.lower())


_BY_KEYWORD = {d.keyword[1:]: d for d in Directive}


def directive_for(name: str) -> Directive:
    """Look up a directive by name, with or without the leading dot."""
    key = name.strip().lower()
    if key.startswith("."):
        key = key[1:]
    try:
        return _BY_KEYWORD[key]
    except KeyError:
        raise ValueError(f"unknown directive: {name!r}") from None