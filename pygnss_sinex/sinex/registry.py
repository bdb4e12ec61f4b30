"""
Station registry for SINEX solutions.

One Station record is kept per (site code, solution id). Records are
created the first time any block mentions them and are only mutated
afterwards, so EPOCHS, ESTIMATE and covariance blocks all update the
same object whatever order they arrive in.

Once the ESTIMATE block has been read the registry is finalized: the
estimated stations are sorted by (code, solnid) and each is given a
parameter offset of 3 * its position. That ordering defines the rows and
columns of the full coordinate covariance matrix.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

import numpy as np

from pygnss_sinex.core.exceptions import StationLookupError
from pygnss_sinex.utils.dates import epoch_to_datetime

AXES = "XYZ"


@dataclass(eq=False)
class Station:
    """Coordinate solution for one site.

    Attributes:
        code: 4-character SINEX site code
        solnid: Solution id as 'pointcode:solutionid', e.g. 'A:1'
        epoch: Mean observation epoch (seconds since 1970-01-01 UTC)
        prmoffset: Offset of the X parameter in the full covariance matrix
        estimated: At least one coordinate was in the ESTIMATE block
        xyz: X, Y, Z coordinates (m)
        covar: 3x3 symmetric coordinate covariance (m^2)
    """

    code: str
    solnid: str
    epoch: float = 0.0
    prmoffset: int = 0
    estimated: bool = False
    xyz: np.ndarray = field(default_factory=lambda: np.zeros(3))
    covar: np.ndarray = field(default_factory=lambda: np.zeros((3, 3)))

    @property
    def key(self) -> tuple[str, str]:
        """Sort and lookup key."""
        return (self.code, self.solnid)

    @property
    def epoch_datetime(self) -> datetime:
        """Mean observation epoch as a UTC datetime."""
        return epoch_to_datetime(self.epoch)

    def set_covariance(self, axis1: int, axis2: int, value: float) -> None:
        """Set a covariance element, keeping the matrix symmetric."""
        self.covar[axis1, axis2] = value
        self.covar[axis2, axis1] = value

    def __repr__(self) -> str:
        return (
            f"Station(code={self.code!r}, solnid={self.solnid!r}, "
            f"prmoffset={self.prmoffset}, estimated={self.estimated})"
        )


@dataclass(frozen=True)
class ParameterRef:
    """A SINEX coordinate parameter: one axis of one station."""

    station: Station
    axis: int

    @property
    def index(self) -> int:
        """Row/column of the parameter in the full covariance matrix."""
        return self.station.prmoffset + self.axis


class StationRegistry:
    """Owns the Station records and the parameter id index of a SINEX file."""

    def __init__(self) -> None:
        self._stations: dict[tuple[str, str], Station] = {}
        self._codes: dict[str, list[str]] = {}
        self.parameters: dict[int, ParameterRef] = {}
        self.solution_stations: list[Station] = []
        self.finalized = False

    def __len__(self) -> int:
        return len(self._stations)

    @property
    def nparam(self) -> int:
        """Number of coordinate parameters in the finalized solution."""
        return 3 * len(self.solution_stations)

    def get_or_create(self, code: str, solnid: str) -> Station:
        """Return the station for (code, solnid), creating it if new."""
        key = (code, solnid)
        station = self._stations.get(key)
        if station is None:
            station = Station(code=code, solnid=solnid)
            self._stations[key] = station
            self._codes.setdefault(code, []).append(solnid)
        return station

    def add_parameter(self, prmid: int, station: Station, axis: int) -> None:
        """Record that SINEX parameter ``prmid`` is ``axis`` of ``station``."""
        self.parameters[prmid] = ParameterRef(station, axis)

    def finalize(self) -> list[Station]:
        """Order the estimated stations and assign parameter offsets.

        Returns:
            Estimated stations sorted by (code, solnid)
        """
        stations = sorted(
            (s for s in self._stations.values() if s.estimated),
            key=lambda s: s.key,
        )
        for position, station in enumerate(stations):
            station.prmoffset = 3 * position
        self.solution_stations = stations
        self.finalized = True
        return stations

    def solution_ids(self, code: str) -> list[str]:
        """Solution ids known for a site code, sorted."""
        return sorted(self._codes.get(code, []))

    def lookup(self, code: str, solnid: str | None = None) -> Station:
        """Find a station by code and optionally solution id.

        If ``solnid`` is omitted or empty the code must have exactly one
        solution.

        Raises:
            StationLookupError: Unknown code, unknown solution id, or more
                than one solution for the code when no solnid is given
        """
        solnids = self.solution_ids(code)
        if not solnids:
            raise StationLookupError(code, "not in SINEX file")
        if not solnid:
            if len(solnids) > 1:
                raise StationLookupError(
                    code, f"does not have a unique solution ({', '.join(solnids)})"
                )
            solnid = solnids[0]
        station = self._stations.get((code, solnid))
        if station is None:
            raise StationLookupError(code, f"invalid solution id {solnid}", solnid=solnid)
        return station

    def parameter_remap(self) -> dict[int, int]:
        """Map SINEX coordinate parameter ids to new 1-based contiguous ids.

        Only valid after finalize().
        """
        return {prmid: ref.index + 1 for prmid, ref in self.parameters.items()}
