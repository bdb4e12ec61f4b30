"""
Fixed-width SINEX record layouts.

Each data record type is described by a table of fields. A single
tokenizer compiles the table into a regular expression so every block
validates its lines the same way: one leading blank, then each field
preceded by a single separating blank.

Usage:
    from pygnss_sinex.sinex.records import ESTIMATE_RECORD

    values = ESTIMATE_RECORD.parse(line)
    if values is None:
        raise ...
    prmid = int(values["param_id"])
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

# Character classes used by the layouts
DIGITS = r"\s\d"
WORD = r"\s\w"
SITE = r"\s\w\-"
UNITS = r"\s\w/"
NUMBER = r"\s\dEe\+\-\."
EPOCH = r"\d\d:\d\d\d:\d\d\d\d\d"


def column(chars: str, width: int) -> str:
    """Regex for a field of exactly ``width`` characters from ``chars``."""
    return f"[{chars}]{{{width}}}"


@dataclass(frozen=True)
class Field:
    """One fixed-width field of a record.

    Attributes:
        name: Key used in the parsed result
        pattern: Regex matching the complete field text
        optional: Field (and its separator) may be missing
    """

    name: str
    pattern: str
    optional: bool = False


@dataclass(frozen=True)
class RecordLayout:
    """Declarative layout for one SINEX record type.

    Attributes:
        name: Record description used in error messages
        fields: Ordered field table
        strict_end: Only trailing blanks may follow the last field
    """

    name: str
    fields: tuple[Field, ...]
    strict_end: bool = False
    _regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        parts = ["^"]
        for fld in self.fields:
            group = rf"\s(?P<{fld.name}>{fld.pattern})"
            parts.append(f"(?:{group})?" if fld.optional else group)
        if self.strict_end:
            parts.append(r"\s*$")
        object.__setattr__(self, "_regex", re.compile("".join(parts)))

    def parse(self, line: str, strip: bool = True) -> dict[str, str] | None:
        """Split a line into field values.

        Missing optional fields are returned as empty strings.

        Args:
            line: Record text without line terminator
            strip: Strip surrounding blanks from each value

        Returns:
            Mapping of field name to value, or None if the line does not
            match the layout
        """
        match = self._regex.match(line)
        if match is None:
            return None
        values = {name: value or "" for name, value in match.groupdict().items()}
        if strip:
            values = {name: value.strip() for name, value in values.items()}
        return values


# Parameter estimate (SOLUTION/ESTIMATE and SOLUTION/APRIORI)
ESTIMATE_RECORD = RecordLayout(
    "SOLUTION/ESTIMATE",
    (
        Field("param_id", column(DIGITS, 5)),
        Field("param_type", column(WORD, 6)),
        Field("point_id", column(SITE, 4)),
        Field("point_code", column(SITE, 2)),
        Field("solution_id", column(SITE, 4)),
        Field("epoch", EPOCH),
        Field("units", column(UNITS, 4)),
        Field("constraint", column(WORD, 1)),
        Field("value", column(NUMBER, 21)),
        Field("stddev", column(NUMBER, 11)),
    ),
    strict_end=True,
)

# Lower triangle covariance row segment (SOLUTION/MATRIX_ESTIMATE L COVA)
COVARIANCE_RECORD = RecordLayout(
    "SOLUTION/MATRIX_ESTIMATE",
    (
        Field("param1", column(DIGITS, 5)),
        Field("param2", column(DIGITS, 5)),
        Field("value1", column(NUMBER, 21)),
        Field("value2", column(NUMBER, 21), optional=True),
        Field("value3", column(NUMBER, 21), optional=True),
    ),
)

# Observation time span of a site solution (SOLUTION/EPOCHS)
EPOCHS_RECORD = RecordLayout(
    "SOLUTION/EPOCHS",
    (
        Field("point_id", column(SITE, 4)),
        Field("point_code", column(SITE, 2)),
        Field("solution_id", column(SITE, 4)),
        Field("technique", column(WORD, 1)),
        Field("start", EPOCH),
        Field("end", EPOCH),
        Field("mean", EPOCH),
    ),
)

# Parameter id only, used when renumbering estimate lines
PARAMETER_ID_RECORD = RecordLayout(
    "parameter id",
    (Field("param_id", column(DIGITS, 5)),),
)

# Column slices of a SOLUTION/STATISTICS line
STATISTICS_LABEL = slice(1, 31)
STATISTICS_VALUE = slice(32, 54)
