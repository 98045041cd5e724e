"""Error and warning reporting for the assembler."""

from __future__ import annotations

import sys
from typing import TextIO


class AssemblerError(Exception):
    """An error found while assembling a source line."""

    def __init__(self, message: str, line_number: int = 0) -> None:
        super().__init__(message)
        self.message = message
        self.line_number = line_number


class FatalAssemblerError(AssemblerError):
    """An error that stops the current pass."""


class Diagnostics:
    """Collects errors and prints them next to the offending listing line."""

    def __init__(
        self,
        stream: TextIO | None = None,
        file_number: int = 0,
        file_name: str = "",
    ) -> None:
        self.stream = stream
        self.file_number = file_number
        self.file_name = file_name
        self.errors: list[AssemblerError] = []
        self.stop_pass = False
        self._reported_file: int | None = None

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def _out(self) -> TextIO:
        return self.stream if self.stream is not None else sys.stdout

    def warning(self, message: str, line: str, line_number: int) -> str:
        """Print a message under the listing line; return the stamped line."""
        chars = list(line.ljust(5))
        index = 4
        number = line_number
        while number and index >= 0:
            chars[index] = str(number % 10)
            index -= 1
            number //= 10
        stamped = "".join(chars)

        out = self._out()
        if self._reported_file != self.file_number:
            self._reported_file = self.file_number
            out.write(f"#[{self.file_number}]   {self.file_name}\n")
        out.write(f"{stamped}\n")
        out.write(f"       {message}\n")
        return stamped

    def error(self, message: str, line: str, line_number: int) -> AssemblerError:
        """Report and record an error; assembly goes on."""
        self.warning(message, line, line_number)
        err = AssemblerError(message, line_number)
        self.errors.append(err)
        return err

    def fatal(self, message: str, line: str, line_number: int) -> None:
        """Report and record an error, then stop the pass by raising it."""
        self.warning(message, line, line_number)
        err = FatalAssemblerError(message, line_number)
        self.errors.append(err)
        self.stop_pass = True
        raise err