"""Core configuration and exceptions."""

from pygnss_sinex.core.config import (
    LoggingConfig,
    ReaderConfig,
    Settings,
    load_config,
    load_settings,
)
from pygnss_sinex.core.exceptions import (
    SinexError,
    SinexFormatError,
    MissingBlockError,
    StationLookupError,
    SinexIOError,
    CovarianceNotAvailableError,
)

__all__ = [
    "LoggingConfig",
    "ReaderConfig",
    "Settings",
    "load_config",
    "load_settings",
    "SinexError",
    "SinexFormatError",
    "MissingBlockError",
    "StationLookupError",
    "SinexIOError",
    "CovarianceNotAvailableError",
]
