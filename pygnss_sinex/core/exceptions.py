"""
Custom exceptions for PyGNSS-SINEX.

Provides a hierarchy of exceptions for different error conditions.
"""

from __future__ import annotations


class SinexError(Exception):
    """Base exception for all PyGNSS-SINEX errors."""

    pass


class SinexFormatError(SinexError):
    """SINEX content does not match the expected format."""

    def __init__(
        self,
        message: str,
        filename: str | None = None,
        lineno: int | None = None,
        line: str | None = None,
    ):
        self.filename = filename
        self.lineno = lineno
        self.line = line
        detail = message
        if lineno is not None:
            detail += f" at line {lineno}"
        if filename:
            detail += f" of {filename}"
        if line is not None:
            detail += f": {line.rstrip()!r}"
        super().__init__(detail)


class MissingBlockError(SinexFormatError):
    """One or more mandatory blocks were never found in the file."""

    def __init__(self, blocks: list[str], filename: str | None = None):
        self.blocks = list(blocks)
        names = ", ".join(self.blocks)
        super().__init__(f"Missing mandatory block(s) {names}", filename=filename)


class StationLookupError(SinexError, LookupError):
    """Requested station or solution is unknown or ambiguous."""

    def __init__(self, code: str, message: str, solnid: str | None = None):
        self.code = code
        self.solnid = solnid
        super().__init__(f"Station {code}: {message}")


class SinexIOError(SinexError):
    """A SINEX source or destination could not be opened."""

    def __init__(self, path: str, operation: str, message: str):
        self.path = path
        self.operation = operation
        super().__init__(f"Cannot {operation} SINEX file {path}: {message}")


class CovarianceNotAvailableError(SinexError):
    """Full covariance matrix was not built for this reader."""

    pass
