"""
Station-only SINEX filter.

Rewrites a SINEX file so that it holds only the station coordinate
parameters found by a previous scan of the same file:

- the header parameter count becomes 3 * number of stations and the
  solution content marker becomes 'S' (stations only)
- SOLUTION/ESTIMATE and SOLUTION/APRIORI lines are renumbered to the new
  contiguous parameter ids; lines for other parameters are dropped
- SOLUTION/MATRIX_ESTIMATE and SOLUTION/MATRIX_APRIORI L COVA block
  bodies are regenerated over the station coordinate parameters only
- every other line is copied unchanged

The renumbering table is built from the finalized station registry, so
the scan must have completed before filtering starts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, TextIO

from pygnss_sinex.sinex.matrix import LowerTriangularMatrix
from pygnss_sinex.sinex.records import COVARIANCE_RECORD, PARAMETER_ID_RECORD
from pygnss_sinex.sinex.registry import StationRegistry
from pygnss_sinex.sinex.scanner import (
    BLOCK_END,
    BLOCK_START,
    COMMENT,
    LineReader,
    strip_eol,
)
from pygnss_sinex.utils.logging import get_logger


logger = get_logger(__name__)

ESTIMATE_SECTION = re.compile(r"^SOLUTION/(ESTIMATE|APRIORI)\b")
COVARIANCE_SECTION = re.compile(r"^SOLUTION/MATRIX_(ESTIMATE|APRIORI)\s+L\s+COVA")

ZERO = f"{0.0:21.14E}"

# Header columns
HEADER_NPARAM = slice(60, 65)
HEADER_CONTENT_START = 68
STATIONS_ONLY = "S" + " " * 11

VALUE_FIELDS = ("value1", "value2", "value3")


@dataclass
class FilterSummary:
    """Counts from a filter run."""

    nparam: int = 0
    lines_written: int = 0
    parameters_dropped: int = 0
    matrices_rewritten: int = 0


class StationFilter:
    """Writes a station-only copy of a SINEX file.

    Args:
        registry: Finalized registry from a scan of the same source
    """

    def __init__(self, registry: StationRegistry):
        if not registry.finalized:
            raise ValueError("Station registry must be finalized before filtering")
        self.remap = registry.parameter_remap()
        self.nparam = registry.nparam

    def filter(self, source: Iterable[str], destination: TextIO, name: str = "<stream>") -> FilterSummary:
        """Copy ``source`` to ``destination`` keeping only station data.

        Args:
            source: Lines of the original SINEX file
            destination: Open text stream to write to
            name: Source name used in diagnostics

        Returns:
            FilterSummary

        Raises:
            SinexFormatError: If an estimate or covariance line is malformed
        """
        reader = LineReader(source, name)
        summary = FilterSummary(nparam=self.nparam)
        self._out = destination
        self._summary = summary
        self._eol = "\n"
        section = ""

        for line in reader:
            if line.startswith("%=SNX"):
                self._eol = line[len(strip_eol(line)):] or "\n"
                self._write(self._rewrite_header(line))
            elif line.startswith(BLOCK_START):
                section = strip_eol(line)[1:].rstrip()
                self._write(line)
                if COVARIANCE_SECTION.match(section):
                    self._rewrite_covariance(reader, section)
                    section = ""
            elif line.startswith(BLOCK_END):
                section = ""
                self._write(line)
            elif line.startswith(COMMENT):
                self._write(line)
            elif ESTIMATE_SECTION.match(section):
                renumbered = self._renumber(line, reader)
                if renumbered is None:
                    summary.parameters_dropped += 1
                else:
                    self._write(renumbered)
            else:
                self._write(line)

        logger.info(
            "Filtered SINEX file to station coordinates",
            source=name,
            parameters=summary.nparam,
            dropped=summary.parameters_dropped,
            matrices=summary.matrices_rewritten,
        )
        return summary

    def _write(self, line: str) -> None:
        self._out.write(line)
        self._summary.lines_written += 1

    def _rewrite_header(self, line: str) -> str:
        text = strip_eol(line)
        eol = line[len(text):]
        text = text.ljust(HEADER_CONTENT_START)
        text = (
            text[:HEADER_NPARAM.start]
            + f"{self.nparam:05d}"
            + text[HEADER_NPARAM.stop:HEADER_CONTENT_START]
            + STATIONS_ONLY
        )
        return text + (eol or "\n")

    def _renumber(self, line: str, reader: LineReader) -> str | None:
        text = strip_eol(line)
        if not text.strip():
            return line
        values = PARAMETER_ID_RECORD.parse(text)
        try:
            prmid = int(values["param_id"]) if values is not None else None
        except ValueError:
            prmid = None
        if prmid is None:
            raise reader.format_error("Invalid parameter id", line)
        newid = self.remap.get(prmid)
        if newid is None:
            return None
        return f"{text[:1]}{newid:5d}{text[6:]}{line[len(text):]}"

    def _rewrite_covariance(self, reader: LineReader, section: str) -> None:
        """Replace a covariance block body with the station-only matrix.

        The reader is left after the block end marker, or before the next
        block start marker if the block is not terminated.
        """
        remap = self.remap
        matrix = LowerTriangularMatrix(self.nparam, fill=ZERO, dtype=object)
        comments: list[str] = []
        end_line = None

        for line in reader:
            if line.startswith(BLOCK_END):
                end_line = line
                break
            if line.startswith(BLOCK_START):
                logger.warning(
                    "SINEX block not terminated",
                    block=section,
                    filename=reader.name,
                    lineno=reader.lineno,
                )
                reader.push_back(line)
                break
            if line.startswith(COMMENT):
                comments.append(line)
                continue
            text = strip_eol(line)
            if not text.strip():
                continue

            values = COVARIANCE_RECORD.parse(text, strip=False)
            if values is None:
                raise reader.format_error(f"Invalid {section} line", line)
            try:
                prmid0 = int(values["param1"])
                prmid1 = int(values["param2"])
            except ValueError:
                raise reader.format_error(f"Invalid {section} line", line)

            row = remap.get(prmid0)
            if row is None:
                continue
            for offset, name in enumerate(VALUE_FIELDS):
                value = values[name]
                if not value.strip():
                    continue
                col = remap.get(prmid1 + offset)
                if col is None:
                    continue
                matrix[row - 1, col - 1] = value

        for comment in comments:
            self._write(comment)
        self._write_matrix(matrix)
        if end_line is not None:
            self._write(end_line)
        self._summary.matrices_rewritten += 1

    def _write_matrix(self, matrix: LowerTriangularMatrix) -> None:
        """Write the lower triangle in blocks of up to three columns."""
        eol = self._eol
        for i in range(1, matrix.size + 1):
            row = matrix.row(i - 1)
            for j0 in range(1, i + 1, 3):
                cells = "".join(" " + row[j - 1] for j in range(j0, min(j0 + 2, i) + 1))
                self._write(f" {i:5d} {j0:5d}{cells}{eol}")
