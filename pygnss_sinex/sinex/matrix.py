"""
Packed lower-triangular matrix.

Stores the lower triangle (row >= col) of a symmetric n x n matrix in a
flat numpy array of n(n+1)/2 elements. Indexing with (i, j) in either
order addresses the same element.
"""

from __future__ import annotations

from typing import Any

import numpy as np


class LowerTriangularMatrix:
    """Symmetric matrix holding only its lower triangle.

    Args:
        size: Number of rows/columns
        fill: Initial value of every element
        dtype: numpy dtype of the storage (object for formatted text)
    """

    def __init__(self, size: int, fill: Any = 0.0, dtype: Any = float):
        self.size = size
        self._data = np.full(size * (size + 1) // 2, fill, dtype=dtype)

    @staticmethod
    def _offset(row: int, col: int) -> int:
        if col > row:
            row, col = col, row
        return row * (row + 1) // 2 + col

    def _check(self, row: int, col: int) -> None:
        if not (0 <= row < self.size and 0 <= col < self.size):
            raise IndexError(f"Index ({row}, {col}) out of range for size {self.size}")

    def __getitem__(self, index: tuple[int, int]) -> Any:
        row, col = index
        self._check(row, col)
        return self._data[self._offset(row, col)]

    def __setitem__(self, index: tuple[int, int], value: Any) -> None:
        row, col = index
        self._check(row, col)
        self._data[self._offset(row, col)] = value

    def __len__(self) -> int:
        return self.size

    def row(self, row: int) -> np.ndarray:
        """Elements (row, 0) .. (row, row) of the lower triangle."""
        start = row * (row + 1) // 2
        return self._data[start:start + row + 1]

    def to_dense(self) -> np.ndarray:
        """Full symmetric numpy array."""
        dense = np.zeros((self.size, self.size), dtype=self._data.dtype)
        rows, cols = np.tril_indices(self.size)
        dense[rows, cols] = self._data
        dense[cols, rows] = self._data
        return dense
