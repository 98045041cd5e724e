"""Assembler building blocks for NES and PC-Engine ROMs and sound-chip register helpers."""

__version__ = "0.1.0"

__all__ = [
    "defs",
    "diagnostics",
    "listing",
    "rom",
    "ines",
    "mml",
    "fmp",
    "pce",
    "macro",
    "freqdata",
    "mmc5",
    "vrc6",
]