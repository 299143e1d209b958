"""Output modes deciding what reaches the standard streams."""

from __future__ import annotations

import enum
import sys


class Printer(enum.Enum):
    """How much output to show."""

    DEFAULT = "default"
    QUIET = "quiet"
    VERBOSE = "verbose"
    NO_PROGRESS = "no-progress"

    def stdout_enabled(self) -> bool:
        return self is not Printer.QUIET

    def stderr_enabled(self) -> bool:
        return self is not Printer.QUIET

    def show_progress(self) -> bool:
        # Progress is hidden in verbose mode so it does not interleave with debug output.
        return self is Printer.DEFAULT

    def write_stdout(self, text: str) -> None:
        if self.stdout_enabled():
            sys.stdout.write(text)

    def write_stderr(self, text: str) -> None:
        if self.stderr_enabled():
            sys.stderr.write(text)