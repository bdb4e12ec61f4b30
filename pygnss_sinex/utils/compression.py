"""
Compression utilities for SINEX files.

SINEX products are commonly distributed gzip compressed. Files are opened
transparently in text mode according to their extension, so readers and
writers never need to decompress to a temporary copy.

Usage:
    from pygnss_sinex.utils.compression import open_text

    with open_text("/path/to/IGS0OPSSNX_20242600000_01D_01D_SOL.SNX.gz") as f:
        header = f.readline()
"""

from __future__ import annotations

import bz2
import gzip
from enum import Enum
from pathlib import Path
from typing import TextIO

# SINEX is an ASCII format; latin-1 maps every byte so lines pass through unchanged
SINEX_ENCODING = "latin-1"


class CompressionFormat(str, Enum):
    """Supported compression formats."""

    GZIP = "gz"
    COMPRESS = "Z"
    ZIP = "zip"
    BZIP2 = "bz2"
    NONE = ""


def detect_compression(filepath: Path | str) -> CompressionFormat:
    """Detect compression format from the file extension.

    Args:
        filepath: Path to file

    Returns:
        CompressionFormat
    """
    name = Path(filepath).name.lower()

    if name.endswith(".gz"):
        return CompressionFormat.GZIP
    elif name.endswith(".z"):
        return CompressionFormat.COMPRESS
    elif name.endswith(".zip"):
        return CompressionFormat.ZIP
    elif name.endswith(".bz2"):
        return CompressionFormat.BZIP2
    return CompressionFormat.NONE


def is_compressed(filepath: Path | str) -> bool:
    """Check if file has a compression extension."""
    return detect_compression(filepath) != CompressionFormat.NONE


def open_text(filepath: Path | str, mode: str = "r") -> TextIO:
    """Open a possibly compressed file in text mode.

    Line endings are passed through untranslated.

    Args:
        filepath: Path to file
        mode: 'r' to read or 'w' to write

    Returns:
        Open text stream

    Raises:
        ValueError: If the mode or compression format is not supported
        OSError: If the file cannot be opened
    """
    if mode not in ("r", "w"):
        raise ValueError(f"Unsupported mode {mode!r}")

    compression = detect_compression(filepath)
    text_mode = mode + "t"

    if compression == CompressionFormat.GZIP:
        return gzip.open(filepath, text_mode, encoding=SINEX_ENCODING, newline="")
    elif compression == CompressionFormat.BZIP2:
        return bz2.open(filepath, text_mode, encoding=SINEX_ENCODING, newline="")
    elif compression == CompressionFormat.NONE:
        return open(filepath, mode, encoding=SINEX_ENCODING, newline="")

    raise ValueError(
        f"Cannot open {filepath} transparently: {compression.value} compression requires an external tool"
    )
