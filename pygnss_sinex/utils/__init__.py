"""Utility modules for date/time handling, logging, and compressed file access."""

from pygnss_sinex.utils.dates import (
    full_year,
    yearday_seconds,
    parse_sinex_epoch,
    epoch_to_datetime,
)
from pygnss_sinex.utils.logging import (
    get_logger,
    setup_logging,
    setup_logging_from_config,
)
from pygnss_sinex.utils.compression import (
    CompressionFormat,
    detect_compression,
    is_compressed,
    open_text,
)

__all__ = [
    "full_year",
    "yearday_seconds",
    "parse_sinex_epoch",
    "epoch_to_datetime",
    "get_logger",
    "setup_logging",
    "setup_logging_from_config",
    "CompressionFormat",
    "detect_compression",
    "is_compressed",
    "open_text",
]
