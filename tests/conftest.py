"""Shared fixtures for SINEX tests.

The sample solution has two estimated stations. BBBB uses parameter ids
1-3 and AAAA ids 5-7, so sorting by code reverses their order. Parameter 4
is a velocity, which is not a coordinate and must be ignored.
"""

from pathlib import Path

import pytest


EPOCH = "24:260:43200"

# id -> (type, code, solution id, value)
PARAMETERS = {
    1: ("STAX", "BBBB", "1", -4052052.734),
    2: ("STAY", "BBBB", "1", 4212835.989),
    3: ("STAZ", "BBBB", "1", -2545104.581),
    4: ("VELX", "BBBB", "1", 0.0123),
    5: ("STAX", "AAAA", "1", 1130773.545),
    6: ("STAY", "AAAA", "1", -4831253.553),
    7: ("STAZ", "AAAA", "1", 3994200.423),
}


def cov_value(i: int, j: int) -> float:
    """Covariance of parameters i and j in the sample file."""
    i, j = max(i, j), min(i, j)
    return (10 * i + j) * 1.0e-6


def header_line(nparam: int = 7, content: str = "S E") -> str:
    return f"%=SNX 2.02 IGS 24:261:00000 IGS 24:260:00000 24:260:86399 P {nparam:05d} 2 {content}"


def estimate_line(
    prmid: int,
    ptype: str,
    code: str,
    value: float,
    solution: str = "1",
    point: str = "A",
    units: str = "m",
) -> str:
    return (
        f" {prmid:5d} {ptype:<6s} {code:<4s} {point:>2s} {solution:>4s} {EPOCH} "
        f"{units:<4s} 2 {value:21.14e} {1.0e-3:11.5e}"
    )


def covariance_line(p0: int, p1: int, values: list[float]) -> str:
    return f" {p0:5d} {p1:5d}" + "".join(f" {v:21.14e}" for v in values)


def epochs_line(code: str, mean: str, solution: str = "1", point: str = "A") -> str:
    return f" {code:<4s} {point:>2s} {solution:>4s} C 24:260:00000 24:260:86370 {mean}"


def statistics_line(label: str, value: str) -> str:
    return f" {label:<30s} {value:>22s}"


def lower_triangle_lines(nparam: int) -> list[str]:
    lines = []
    for i in range(1, nparam + 1):
        for j0 in range(1, i + 1, 3):
            values = [cov_value(i, j) for j in range(j0, min(j0 + 2, i) + 1)]
            lines.append(covariance_line(i, j0, values))
    return lines


def statistics_block() -> list[str]:
    return [
        "+SOLUTION/STATISTICS",
        "*_STATISTICAL PARAMETER________ __VALUE(S)____________",
        statistics_line("NUMBER OF OBSERVATIONS", "125644"),
        statistics_line("NUMBER OF UNKNOWNS", "7"),
        statistics_line("NUMBER OF DEGREES OF FREEDOM", "125637"),
        statistics_line("SAMPLING INTERVAL (SECONDS)", "180"),
        statistics_line("VARIANCE FACTOR", "2.250000000000000"),
        "-SOLUTION/STATISTICS",
    ]


def epochs_block() -> list[str]:
    return [
        "+SOLUTION/EPOCHS",
        "*CODE PT SOLN T _DATA_START_ __DATA_END__ _MEAN_EPOCH_",
        epochs_line("AAAA", "24:260:43185"),
        epochs_line("BBBB", "99:001:00000"),
        "-SOLUTION/EPOCHS",
    ]


def estimate_block(name: str = "SOLUTION/ESTIMATE") -> list[str]:
    lines = [f"+{name}", "*INDEX TYPE__ CODE PT SOLN _REF_EPOCH__ UNIT S __ESTIMATED VALUE____ _STD_DEV___"]
    for prmid, (ptype, code, solution, value) in PARAMETERS.items():
        units = "m/y" if ptype.startswith("VEL") else "m"
        lines.append(estimate_line(prmid, ptype, code, value, solution, units=units))
    lines.append(f"-{name}")
    return lines


def covariance_block(name: str = "SOLUTION/MATRIX_ESTIMATE L COVA") -> list[str]:
    return (
        [f"+{name}", "*PARA1 PARA2 ____PARA2+0__________ ____PARA2+1__________ ____PARA2+2__________"]
        + lower_triangle_lines(len(PARAMETERS))
        + [f"-{name}"]
    )


def sample_lines() -> list[str]:
    return (
        [
            header_line(),
            "*-------------------------------------------------------------------------------",
            "+FILE/REFERENCE",
            " DESCRIPTION        Test solution",
            "-FILE/REFERENCE",
            "+SITE/ID",
            " AAAA  A 12345M001 P Site A                 12 34 56.0 -41 17 18.9   123.4",
            "-SITE/ID",
        ]
        + statistics_block()
        + epochs_block()
        + estimate_block("SOLUTION/APRIORI")
        + estimate_block()
        + covariance_block()
        + ["%ENDSNX"]
    )


def write_sinex(path: Path, lines: list[str]) -> Path:
    path.write_text("\n".join(lines) + "\n", encoding="latin-1")
    return path


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    """Well formed sample SINEX file."""
    return write_sinex(tmp_path / "sample.snx", sample_lines())
