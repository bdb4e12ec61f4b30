"""
SINEX block scanner.

A SINEX file is a header line followed by blocks delimited by
``+BLOCK NAME`` and ``-BLOCK NAME`` lines. Lines starting with ``*``
are comments. The scanner walks a stream one block at a time and hands
the data lines of each block to whichever handler wants them.

A block that is followed by another ``+`` line before its own ``-`` line
is not terminated. That is reported as a warning; the partial block is
kept and scanning resumes at the new block marker.
"""

from __future__ import annotations

import re
from typing import Iterable, Iterator

from pygnss_sinex.core.exceptions import SinexFormatError
from pygnss_sinex.utils.logging import get_logger


logger = get_logger(__name__)

# Block names
STATISTICS_BLOCK = "SOLUTION/STATISTICS"
EPOCHS_BLOCK = "SOLUTION/EPOCHS"
ESTIMATE_BLOCK = "SOLUTION/ESTIMATE"
COVARIANCE_BLOCK = "SOLUTION/MATRIX_ESTIMATE L COVA"

HEADER_PATTERN = re.compile(r"^%=SNX\s(\d\.\d\d)\s+")

BLOCK_START = "+"
BLOCK_END = "-"
COMMENT = "*"


def strip_eol(line: str) -> str:
    """Remove the line terminator but keep trailing blanks."""
    return line.rstrip("\r\n")


class LineReader:
    """Line iterator with one-line push back and line counting.

    Args:
        lines: Source of lines (open text stream or any iterable of str)
        name: Source name used in error messages
    """

    def __init__(self, lines: Iterable[str], name: str = "<stream>"):
        self.name = name
        self.lineno = 0
        self._lines = iter(lines)
        self._pushed: str | None = None

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        line = self.readline()
        if line is None:
            raise StopIteration
        return line

    def readline(self) -> str | None:
        """Return the next line (with terminator), or None at end of input."""
        if self._pushed is not None:
            line, self._pushed = self._pushed, None
        else:
            line = next(self._lines, None)
            if line is None:
                return None
        self.lineno += 1
        return line

    def push_back(self, line: str) -> None:
        """Return a line so the next readline() delivers it again."""
        if self._pushed is not None:
            raise RuntimeError("Only one line can be pushed back")
        self._pushed = line
        self.lineno -= 1

    def format_error(self, message: str, line: str | None = None) -> SinexFormatError:
        """Build a SinexFormatError located at the current line."""
        return SinexFormatError(
            message,
            filename=self.name,
            lineno=self.lineno,
            line=strip_eol(line) if line is not None else None,
        )


def read_header(reader: LineReader) -> str:
    """Validate the %=SNX header line.

    Args:
        reader: Reader positioned at the start of the file

    Returns:
        SINEX format version from the header (e.g. '2.02')

    Raises:
        SinexFormatError: If the first line is not a SINEX header
    """
    header = reader.readline()
    match = HEADER_PATTERN.match(header or "")
    if match is None:
        raise SinexFormatError(f"{reader.name} is not a valid SINEX file - missing %=SNX header")
    return match.group(1)


class BlockScanner:
    """Locates blocks in a SINEX stream.

    Usage:
        scanner = BlockScanner(reader)
        for block in scanner.blocks():
            for line in scanner.block_lines(block):
                ...

    Blocks whose lines are not consumed by the caller are skipped.
    """

    def __init__(self, reader: LineReader):
        self.reader = reader

    def blocks(self) -> Iterator[str]:
        """Yield the name of each block start marker in turn."""
        reader = self.reader
        while True:
            line = reader.readline()
            if line is None:
                return
            if not line.startswith(BLOCK_START):
                continue
            yield strip_eol(line)[1:].rstrip()

    def block_lines(self, block: str) -> Iterator[str]:
        """Yield the data lines of the current block.

        Comment and empty lines are skipped. Iteration stops at the block
        end marker, or at the next block start marker if the block is not
        terminated. Lines are returned without their terminator.

        Args:
            block: Name of the block being read (for diagnostics)
        """
        reader = self.reader
        while True:
            line = reader.readline()
            if line is None:
                logger.warning(
                    "SINEX block not terminated at end of file",
                    block=block,
                    filename=reader.name,
                )
                return
            if line.startswith(BLOCK_END):
                return
            if line.startswith(BLOCK_START):
                logger.warning(
                    "SINEX block not terminated",
                    block=block,
                    filename=reader.name,
                    lineno=reader.lineno,
                )
                reader.push_back(line)
                return
            if line.startswith(COMMENT):
                continue
            text = strip_eol(line)
            if not text.strip():
                continue
            yield text
