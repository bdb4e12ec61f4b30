"""
PyGNSS-SINEX: SINEX geodetic solution file reader

Extracts station coordinates, their covariances and solution statistics
from SINEX files, and writes station-only copies of them.
"""

__version__ = "1.0.0"
__author__ = "PyGNSS-RT Team"

from pygnss_sinex.core.config import ReaderConfig, Settings, load_settings
from pygnss_sinex.core.exceptions import (
    SinexError,
    SinexFormatError,
    MissingBlockError,
    StationLookupError,
    SinexIOError,
    CovarianceNotAvailableError,
)
from pygnss_sinex.sinex.reader import SinexFile, open_sinex

__all__ = [
    "ReaderConfig",
    "Settings",
    "load_settings",
    "SinexError",
    "SinexFormatError",
    "MissingBlockError",
    "StationLookupError",
    "SinexIOError",
    "CovarianceNotAvailableError",
    "SinexFile",
    "open_sinex",
    "__version__",
]
