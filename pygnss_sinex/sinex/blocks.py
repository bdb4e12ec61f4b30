"""
Handlers for the SOLUTION/STATISTICS and SOLUTION/EPOCHS blocks.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable

from pygnss_sinex.sinex.records import (
    EPOCHS_RECORD,
    STATISTICS_LABEL,
    STATISTICS_VALUE,
)
from pygnss_sinex.sinex.registry import StationRegistry
from pygnss_sinex.sinex.scanner import EPOCHS_BLOCK, STATISTICS_BLOCK, LineReader
from pygnss_sinex.utils.dates import parse_sinex_epoch


@dataclass
class SolutionStatistics:
    """Statistics of the adjustment.

    Attributes:
        nobs: Number of observations
        nprm: Number of unknowns
        dof: Degrees of freedom
        seu: Standard error of unit weight (sqrt of the variance factor)
        items: Every label/value pair of the block as written
    """

    nobs: int = 0
    nprm: int = 0
    dof: int = 0
    seu: float = 1.0
    items: dict[str, str] = field(default_factory=dict)


# Label -> (attribute, converter)
_STATISTICS_ITEMS = {
    "NUMBER OF OBSERVATIONS": ("nobs", lambda v: int(float(v))),
    "NUMBER OF UNKNOWNS": ("nprm", lambda v: int(float(v))),
    "NUMBER OF DEGREES OF FREEDOM": ("dof", lambda v: int(float(v))),
    "VARIANCE FACTOR": ("seu", lambda v: math.sqrt(float(v))),
}


def scan_statistics(lines: Iterable[str], reader: LineReader) -> SolutionStatistics:
    """Read a SOLUTION/STATISTICS block.

    Args:
        lines: Data lines of the block
        reader: Line source, for error locations

    Returns:
        SolutionStatistics with defaults for any missing item

    Raises:
        SinexFormatError: If a recognised item has a non-numeric value
    """
    stats = SolutionStatistics()
    for line in lines:
        if not line.startswith(" "):
            continue
        label = line[STATISTICS_LABEL].strip()
        value = line[STATISTICS_VALUE].strip()
        stats.items[label] = value
        item = _STATISTICS_ITEMS.get(label)
        if item is None:
            continue
        attribute, convert = item
        try:
            setattr(stats, attribute, convert(value))
        except ValueError:
            raise reader.format_error(f"Invalid {STATISTICS_BLOCK} value for {label}", line)
    return stats


def scan_epochs(lines: Iterable[str], reader: LineReader, registry: StationRegistry) -> int:
    """Read a SOLUTION/EPOCHS block, storing mean epochs on the stations.

    Args:
        lines: Data lines of the block
        reader: Line source, for error locations
        registry: Station registry to update

    Returns:
        Number of epoch records read

    Raises:
        SinexFormatError: If a line does not match the epochs record layout
    """
    count = 0
    for line in lines:
        values = EPOCHS_RECORD.parse(line)
        if values is None:
            raise reader.format_error(f"Invalid {EPOCHS_BLOCK} line", line)
        solnid = f"{values['point_code']}:{values['solution_id']}"
        station = registry.get_or_create(values["point_id"], solnid)
        station.epoch = parse_sinex_epoch(values["mean"])
        count += 1
    return count
