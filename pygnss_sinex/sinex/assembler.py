"""
Estimate and covariance assembly.

Coordinate estimates come from SOLUTION/ESTIMATE lines with parameter
types STAX, STAY and STAZ. The parameter ids of those lines are the only
ones of interest in SOLUTION/MATRIX_ESTIMATE L COVA; covariances of any
other parameter are skipped.

Every station always receives its own 3x3 coordinate covariance. The
full covariance matrix over all coordinate parameters is only built on
request as it grows with the square of the number of stations.
"""

from __future__ import annotations

import re
from typing import Iterable

from pygnss_sinex.sinex.matrix import LowerTriangularMatrix
from pygnss_sinex.sinex.records import COVARIANCE_RECORD, ESTIMATE_RECORD
from pygnss_sinex.sinex.registry import AXES, StationRegistry
from pygnss_sinex.sinex.scanner import COVARIANCE_BLOCK, ESTIMATE_BLOCK, LineReader
from pygnss_sinex.utils.logging import get_logger


logger = get_logger(__name__)

COORDINATE_TYPE = re.compile(r"^STA([XYZ])$")

VALUE_FIELDS = ("value1", "value2", "value3")


class SolutionAssembler:
    """Builds station estimates and covariances from their SINEX blocks.

    Args:
        registry: Registry receiving the stations and parameter index
        full_covariance: Also build the full coordinate covariance matrix
    """

    def __init__(self, registry: StationRegistry, full_covariance: bool = False):
        self.registry = registry
        self.full_covariance = full_covariance
        self.covariance: LowerTriangularMatrix | None = None

    def scan_estimate(self, lines: Iterable[str], reader: LineReader) -> int:
        """Read a SOLUTION/ESTIMATE block and finalize the registry.

        Args:
            lines: Data lines of the block
            reader: Line source, for error locations

        Returns:
            Number of coordinate parameters read

        Raises:
            SinexFormatError: If a line does not match the estimate layout
        """
        registry = self.registry
        count = 0
        for line in lines:
            values = ESTIMATE_RECORD.parse(line)
            if values is None:
                raise reader.format_error(f"Invalid {ESTIMATE_BLOCK} line", line)

            match = COORDINATE_TYPE.match(values["param_type"])
            if match is None:
                continue
            axis = AXES.index(match.group(1))

            try:
                prmid = int(values["param_id"])
                value = float(values["value"])
            except ValueError:
                raise reader.format_error(f"Invalid {ESTIMATE_BLOCK} line", line)

            solnid = f"{values['point_code']}:{values['solution_id']}"
            station = registry.get_or_create(values["point_id"], solnid)
            station.xyz[axis] = value
            station.estimated = True
            registry.add_parameter(prmid, station, axis)
            count += 1

        registry.finalize()
        logger.debug(
            "Read coordinate estimates",
            parameters=count,
            stations=len(registry.solution_stations),
        )
        return count

    def scan_covariance(self, lines: Iterable[str], reader: LineReader) -> int:
        """Read a SOLUTION/MATRIX_ESTIMATE L COVA block.

        The registry must already be finalized by scan_estimate().

        Args:
            lines: Data lines of the block
            reader: Line source, for error locations

        Returns:
            Number of coordinate covariance elements stored

        Raises:
            SinexFormatError: If a line is malformed
        """
        registry = self.registry
        full = None
        if self.full_covariance:
            full = LowerTriangularMatrix(registry.nparam)
            self.covariance = full

        parameters = registry.parameters
        count = 0
        for line in lines:
            values = COVARIANCE_RECORD.parse(line)
            if values is None:
                raise reader.format_error(f"Invalid {COVARIANCE_BLOCK} line", line)
            try:
                prmid0 = int(values["param1"])
                prmid1 = int(values["param2"])
            except ValueError:
                raise reader.format_error(f"Invalid {COVARIANCE_BLOCK} line", line)

            ref0 = parameters.get(prmid0)
            if ref0 is None:
                continue

            for offset, name in enumerate(VALUE_FIELDS):
                text = values[name]
                if not text:
                    continue
                ref1 = parameters.get(prmid1 + offset)
                if ref1 is None:
                    continue
                try:
                    value = float(text)
                except ValueError:
                    raise reader.format_error(f"Invalid {COVARIANCE_BLOCK} value", line)

                if full is not None:
                    full[ref0.index, ref1.index] = value
                if ref1.station is ref0.station:
                    ref0.station.set_covariance(ref0.axis, ref1.axis, value)
                count += 1
        return count
