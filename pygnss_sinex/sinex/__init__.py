"""SINEX solution file reading and station-only filtering."""

from pygnss_sinex.sinex.blocks import SolutionStatistics
from pygnss_sinex.sinex.filter import FilterSummary, StationFilter
from pygnss_sinex.sinex.matrix import LowerTriangularMatrix
from pygnss_sinex.sinex.reader import SinexFile, open_sinex
from pygnss_sinex.sinex.registry import ParameterRef, Station, StationRegistry
from pygnss_sinex.sinex.scanner import (
    COVARIANCE_BLOCK,
    EPOCHS_BLOCK,
    ESTIMATE_BLOCK,
    STATISTICS_BLOCK,
)

__all__ = [
    "SolutionStatistics",
    "FilterSummary",
    "StationFilter",
    "LowerTriangularMatrix",
    "SinexFile",
    "open_sinex",
    "ParameterRef",
    "Station",
    "StationRegistry",
    "COVARIANCE_BLOCK",
    "EPOCHS_BLOCK",
    "ESTIMATE_BLOCK",
    "STATISTICS_BLOCK",
]
