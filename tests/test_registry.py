"""Tests for the station registry and packed covariance matrix."""

import numpy as np
import pytest

from pygnss_sinex.core.exceptions import StationLookupError
from pygnss_sinex.sinex.matrix import LowerTriangularMatrix
from pygnss_sinex.sinex.registry import Station, StationRegistry


def _estimated(registry: StationRegistry, code: str, solnid: str, first_id: int) -> Station:
    station = registry.get_or_create(code, solnid)
    station.estimated = True
    for axis in range(3):
        registry.add_parameter(first_id + axis, station, axis)
    return station


class TestStation:
    """Tests for Station records."""

    def test_defaults(self) -> None:
        station = Station(code="WGTN", solnid="A:1")

        assert station.epoch == 0.0
        assert station.prmoffset == 0
        assert station.estimated is False
        assert np.all(station.xyz == 0.0)
        assert station.covar.shape == (3, 3)
        assert np.all(station.covar == 0.0)

    def test_set_covariance_symmetric(self) -> None:
        station = Station(code="WGTN", solnid="A:1")
        station.set_covariance(2, 0, 4.5)

        assert station.covar[2, 0] == 4.5
        assert station.covar[0, 2] == 4.5

    def test_defaults_not_shared(self) -> None:
        a = Station(code="AAAA", solnid="A:1")
        b = Station(code="BBBB", solnid="A:1")
        a.xyz[0] = 1.0

        assert b.xyz[0] == 0.0


class TestStationRegistry:
    """Tests for StationRegistry."""

    def test_get_or_create_returns_same_object(self) -> None:
        registry = StationRegistry()
        first = registry.get_or_create("WGTN", "A:1")
        first.epoch = 100.0
        second = registry.get_or_create("WGTN", "A:1")

        assert second is first
        assert second.epoch == 100.0
        assert len(registry) == 1

    def test_finalize_orders_and_offsets(self) -> None:
        registry = StationRegistry()
        _estimated(registry, "WGTN", "A:2", 1)
        _estimated(registry, "AUCK", "A:1", 4)
        _estimated(registry, "WGTN", "A:1", 7)
        registry.get_or_create("CHAT", "A:1")  # epochs only

        stations = registry.finalize()

        assert [s.key for s in stations] == [("AUCK", "A:1"), ("WGTN", "A:1"), ("WGTN", "A:2")]
        assert [s.prmoffset for s in stations] == [0, 3, 6]
        assert registry.nparam == 9
        assert registry.finalized is True

    def test_parameter_remap(self) -> None:
        registry = StationRegistry()
        _estimated(registry, "WGTN", "A:1", 1)
        _estimated(registry, "AUCK", "A:1", 10)
        registry.finalize()

        remap = registry.parameter_remap()

        assert remap == {10: 1, 11: 2, 12: 3, 1: 4, 2: 5, 3: 6}

    def test_lookup_unknown_code(self) -> None:
        registry = StationRegistry()
        with pytest.raises(StationLookupError):
            registry.lookup("NONE")

    def test_lookup_unique_without_solnid(self) -> None:
        registry = StationRegistry()
        station = registry.get_or_create("WGTN", "A:1")

        assert registry.lookup("WGTN") is station

    def test_lookup_empty_solnid(self) -> None:
        registry = StationRegistry()
        station = registry.get_or_create("WGTN", "A:1")

        assert registry.lookup("WGTN", "") is station

    def test_lookup_ambiguous_without_solnid(self) -> None:
        registry = StationRegistry()
        registry.get_or_create("WGTN", "A:1")
        registry.get_or_create("WGTN", "A:2")

        with pytest.raises(StationLookupError) as excinfo:
            registry.lookup("WGTN")
        assert isinstance(excinfo.value, LookupError)
        assert "unique" in str(excinfo.value)

    def test_lookup_with_solnid(self) -> None:
        registry = StationRegistry()
        registry.get_or_create("WGTN", "A:1")
        station = registry.get_or_create("WGTN", "A:2")

        assert registry.lookup("WGTN", "A:2") is station

    def test_lookup_invalid_solnid(self) -> None:
        registry = StationRegistry()
        registry.get_or_create("WGTN", "A:1")

        with pytest.raises(StationLookupError) as excinfo:
            registry.lookup("WGTN", "A:9")
        assert excinfo.value.solnid == "A:9"


class TestLowerTriangularMatrix:
    """Tests for the packed lower triangle."""

    def test_symmetric_indexing(self) -> None:
        matrix = LowerTriangularMatrix(4)
        matrix[1, 3] = 2.5

        assert matrix[3, 1] == 2.5
        assert matrix[1, 3] == 2.5
        assert matrix[2, 2] == 0.0

    def test_row(self) -> None:
        matrix = LowerTriangularMatrix(3)
        matrix[2, 0] = 1.0
        matrix[2, 1] = 2.0
        matrix[2, 2] = 3.0

        assert list(matrix.row(2)) == [1.0, 2.0, 3.0]
        assert len(matrix.row(0)) == 1

    def test_to_dense(self) -> None:
        matrix = LowerTriangularMatrix(3)
        matrix[1, 0] = 4.0
        matrix[2, 2] = 9.0
        dense = matrix.to_dense()

        assert dense.shape == (3, 3)
        assert dense[0, 1] == 4.0
        assert dense[1, 0] == 4.0
        assert dense[2, 2] == 9.0
        assert np.array_equal(dense, dense.T)

    def test_text_fill(self) -> None:
        matrix = LowerTriangularMatrix(2, fill="0", dtype=object)
        matrix[1, 0] = "x"

        assert list(matrix.row(1)) == ["x", "0"]

    def test_out_of_range(self) -> None:
        matrix = LowerTriangularMatrix(2)
        with pytest.raises(IndexError):
            matrix[2, 0] = 1.0
