"""
SINEX solution file reader.

Reads station coordinates and covariances from a SINEX file. This is not
a general purpose SINEX reader: only the SOLUTION/STATISTICS,
SOLUTION/EPOCHS, SOLUTION/ESTIMATE and SOLUTION/MATRIX_ESTIMATE L COVA
blocks are interpreted, which is what is needed to use coordinate
solutions from ADDNEQ-style combined solutions.

Usage:
    from pygnss_sinex import open_sinex

    snx = open_sinex("/path/to/solution.SNX.gz", full_covariance=True)
    for station in snx.stations():
        print(station.code, station.solnid, station.xyz)

    covar = snx.covariance()
    snx.filter_stations_only("/path/to/stations.SNX")
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Iterable, TextIO

from pygnss_sinex.core.config import ReaderConfig
from pygnss_sinex.core.exceptions import (
    CovarianceNotAvailableError,
    MissingBlockError,
    SinexError,
    SinexFormatError,
    SinexIOError,
)
from pygnss_sinex.sinex.assembler import SolutionAssembler
from pygnss_sinex.sinex.blocks import SolutionStatistics, scan_epochs, scan_statistics
from pygnss_sinex.sinex.filter import FilterSummary, StationFilter
from pygnss_sinex.sinex.matrix import LowerTriangularMatrix
from pygnss_sinex.sinex.registry import Station, StationRegistry
from pygnss_sinex.sinex.scanner import (
    COVARIANCE_BLOCK,
    EPOCHS_BLOCK,
    ESTIMATE_BLOCK,
    STATISTICS_BLOCK,
    BlockScanner,
    LineReader,
    read_header,
)
from pygnss_sinex.utils.compression import open_text
from pygnss_sinex.utils.logging import get_logger


logger = get_logger(__name__)


def _open_source(path: Path) -> TextIO:
    try:
        return open_text(path, "r")
    except (OSError, ValueError) as e:
        raise SinexIOError(str(path), "open", str(e)) from e


class SinexFile:
    """Station solutions scanned from a SINEX file.

    The file is read once when the object is created. If any mandatory
    block is missing, or a line is malformed, construction fails and no
    object is returned.

    Args:
        filename: Path of the SINEX file (may be gzip or bzip2 compressed)
        config: Reader options
        **options: Overrides of the ReaderConfig fields
            (full_covariance, need_covariance)

    Raises:
        SinexIOError: If the file cannot be opened
        SinexFormatError: If the file is not a valid SINEX file
    """

    def __init__(
        self,
        filename: Path | str | None,
        config: ReaderConfig | None = None,
        **options: Any,
    ):
        self.filename = Path(filename) if filename is not None else None
        self.config = _merge_config(config, options)
        self.version = ""
        self.registry = StationRegistry()
        self._stats = SolutionStatistics()
        self._covariance: LowerTriangularMatrix | None = None

        if self.filename is not None:
            with _open_source(self.filename) as f:
                self._scan(f, str(self.filename))

    @classmethod
    def from_stream(
        cls,
        stream: Iterable[str],
        name: str = "<stream>",
        config: ReaderConfig | None = None,
        **options: Any,
    ) -> SinexFile:
        """Scan an already open text stream.

        The resulting reader has no filename, so it cannot be filtered.
        """
        sinex = cls(None, config, **options)
        sinex._scan(stream, name)
        return sinex

    # -------------------------------------------------------------------------
    # Scanning
    # -------------------------------------------------------------------------

    def _required_blocks(self) -> list[str]:
        blocks = [STATISTICS_BLOCK, EPOCHS_BLOCK, ESTIMATE_BLOCK]
        if self.config.need_covariance:
            blocks.append(COVARIANCE_BLOCK)
        return blocks

    def _scan(self, stream: Iterable[str], name: str) -> None:
        reader = LineReader(stream, name)
        self.version = read_header(reader)

        scanner = BlockScanner(reader)
        assembler = SolutionAssembler(self.registry, self.config.full_covariance)

        handlers: dict[str, Callable[[Iterable[str]], Any]] = {
            STATISTICS_BLOCK: lambda lines: self._set_stats(scan_statistics(lines, reader)),
            EPOCHS_BLOCK: lambda lines: scan_epochs(lines, reader, self.registry),
            ESTIMATE_BLOCK: lambda lines: assembler.scan_estimate(lines, reader),
            COVARIANCE_BLOCK: lambda lines: assembler.scan_covariance(lines, reader),
        }

        processed: set[str] = set()
        misplaced: list[str] = []
        for block in scanner.blocks():
            handler = handlers.get(block)
            if handler is None:
                logger.debug("Skipping SINEX block", block=block, filename=name)
                continue
            if block == COVARIANCE_BLOCK and not self.registry.finalized:
                if self.config.need_covariance:
                    misplaced.append(f"{block} at line {reader.lineno}")
                    processed.add(block)
                else:
                    logger.warning(
                        "Skipping covariance block before estimates",
                        block=block,
                        filename=name,
                        lineno=reader.lineno,
                    )
                continue
            handler(scanner.block_lines(block))
            processed.add(block)

        missing = sorted(set(self._required_blocks()) - processed)
        if missing:
            raise MissingBlockError(missing, filename=name)
        if misplaced:
            raise SinexFormatError(
                f"{misplaced[0]} precedes the {ESTIMATE_BLOCK} block", filename=name
            )

        self._covariance = assembler.covariance
        logger.info(
            "Scanned SINEX file",
            filename=name,
            version=self.version,
            stations=len(self.registry.solution_stations),
            parameters=self.nparam,
        )

    def _set_stats(self, stats: SolutionStatistics) -> None:
        self._stats = stats

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def nparam(self) -> int:
        """Number of station coordinate parameters."""
        return self.registry.nparam

    def stations(self) -> list[Station]:
        """Stations with estimated coordinates, sorted by (code, solnid).

        Each station's prmoffset is the row of its X coordinate in the
        full covariance matrix.
        """
        return list(self.registry.solution_stations)

    def station(self, code: str, solnid: str | None = None) -> Station:
        """Get a single station by code and solution id.

        If solnid is omitted the code must have a single solution.

        Raises:
            StationLookupError: Unknown code or solution id, or ambiguous code
        """
        return self.registry.lookup(code, solnid)

    def covariance(self) -> LowerTriangularMatrix:
        """Full coordinate covariance matrix (lower triangle).

        Rows and columns follow stations(): row r is coordinate r % 3 of
        stations()[r // 3].

        Raises:
            CovarianceNotAvailableError: If not opened with full_covariance,
                or the file has no covariance block
        """
        if self._covariance is None:
            raise CovarianceNotAvailableError(
                "Full covariance not read - open the SINEX file with full_covariance=True"
            )
        return self._covariance

    def stats(self) -> SolutionStatistics:
        """Solution statistics."""
        return self._stats

    def parameter_remap(self) -> dict[int, int]:
        """Map original coordinate parameter ids to filtered 1-based ids."""
        return self.registry.parameter_remap()

    # -------------------------------------------------------------------------
    # Filtering
    # -------------------------------------------------------------------------

    def filter_stations_only(self, destination: Path | str) -> FilterSummary:
        """Create a copy of the SINEX file containing only station coordinates.

        Args:
            destination: Output path (compressed if it ends in .gz or .bz2)

        Returns:
            FilterSummary

        Raises:
            SinexError: If this reader was not created from a file
            SinexIOError: If the source or destination cannot be opened
        """
        if self.filename is None:
            raise SinexError("Cannot filter a SINEX file read from a stream")

        destination = Path(destination)
        station_filter = StationFilter(self.registry)
        with _open_source(self.filename) as src:
            try:
                tgt = open_text(destination, "w")
            except (OSError, ValueError) as e:
                raise SinexIOError(str(destination), "write", str(e)) from e
            with tgt:
                return station_filter.filter(src, tgt, str(self.filename))


def _merge_config(config: ReaderConfig | None, options: dict[str, Any]) -> ReaderConfig:
    config = config or ReaderConfig()
    if options:
        config = ReaderConfig.model_validate({**config.model_dump(), **options})
    return config


def open_sinex(
    filename: Path | str,
    config: ReaderConfig | None = None,
    **options: Any,
) -> SinexFile:
    """Open and scan a SINEX file.

    Args:
        filename: Path of the SINEX file
        config: Reader options
        **options: full_covariance / need_covariance overrides

    Returns:
        SinexFile
    """
    return SinexFile(filename, config, **options)
