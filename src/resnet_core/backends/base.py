# src/resnet_core/backends/base.py
"""
Defines the `LinearAlgebraBackend` contract used by the direct solver.

A backend owns three dense operations: `invert(matrix)`, `multiply(matrix, operand)`
for a vector or matrix operand, and the derived `solve(matrix, rhs)`. Implementations
must compute the same mathematical result; they may differ in working precision and
in how the work is scheduled. Calls are synchronous from the caller's point of view.
"""
import logging
from abc import ABC, abstractmethod
from typing import Tuple

import numpy as np

from ..solver.exceptions import SingularMatrixError

logger = logging.getLogger(__name__)


class LinearAlgebraBackend(ABC):
    """Abstract base for dense linear-algebra backends."""

    #: Registry name, also reported in diagnostics and on `Solution.backend`.
    name: str = "abstract"

    def __init__(self, dtype=np.float64):
        self.dtype = np.dtype(dtype)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(dtype={self.dtype.name})"

    # --- Contract ---

    @abstractmethod
    def invert(self, matrix: np.ndarray) -> np.ndarray:
        """
        Returns the inverse of a square matrix.

        Raises:
            SingularMatrixError: The matrix is singular to working precision.
            ValueError: The input is not a square 2-D array.
        """
        raise NotImplementedError

    @abstractmethod
    def multiply(self, matrix: np.ndarray, operand: np.ndarray) -> np.ndarray:
        """Returns `matrix · operand` for a 1-D (vector) or 2-D (matrix) operand."""
        raise NotImplementedError

    def solve(self, matrix: np.ndarray, rhs: np.ndarray) -> np.ndarray:
        """Solves `matrix · x = rhs` as `inverse(matrix) · rhs`."""
        inverse = self.invert(matrix)
        x = self.multiply(inverse, rhs)
        if not np.all(np.isfinite(x)):
            raise SingularMatrixError(details="Solve produced NaN or Inf values.", backend=self.name)
        return x

    # --- Shared helpers ---

    def asarray(self, data) -> np.ndarray:
        """Copies `data` into a C-contiguous array of the backend working dtype."""
        return np.array(data, dtype=self.dtype, order="C", copy=True)

    def _as_square(self, matrix) -> np.ndarray:
        arr = self.asarray(matrix)
        if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
            raise ValueError(f"Expected a square 2-D matrix, got shape {arr.shape}.")
        return arr

    def _check_multiply_shapes(self, matrix: np.ndarray, operand: np.ndarray) -> None:
        if matrix.ndim != 2:
            raise ValueError(f"Left operand must be 2-D, got shape {matrix.shape}.")
        if operand.ndim not in (1, 2):
            raise ValueError(f"Right operand must be 1-D or 2-D, got shape {operand.shape}.")
        if matrix.shape[1] != operand.shape[0]:
            raise ValueError(f"Shapes {matrix.shape} and {operand.shape} are not aligned.")

    def _augment(self, matrix: np.ndarray) -> np.ndarray:
        """Builds the Gauss-Jordan working array `[matrix | I]`."""
        n = matrix.shape[0]
        return np.hstack([matrix, np.eye(n, dtype=self.dtype)])

    def _pivot_tolerance(self, n: int) -> float:
        """Absolute pivot threshold for an `n x n` row-equilibrated matrix in the working dtype."""
        return max(n, 1) * float(np.finfo(self.dtype).eps)

    def _equilibrate(self, matrix: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Scales every row to a largest magnitude of one and returns `(scaled, row_scales)`.

        The inverse of the original matrix is `inverse(scaled) / row_scales` applied
        column-wise, so pivots stay comparable to one even when resistances span many
        decades.

        Raises:
            SingularMatrixError: A row is all zeros or holds non-finite values.
        """
        if not matrix.size:
            return matrix, np.ones(0, dtype=self.dtype)
        row_scales = np.max(np.abs(matrix), axis=1)
        bad_rows = np.flatnonzero((row_scales == 0) | ~np.isfinite(row_scales))
        if bad_rows.size:
            row = int(bad_rows[0])
            raise SingularMatrixError(
                details=f"Row {row} has no finite non-zero entries (max |a_ij| = {row_scales[row]}).",
                pivot_index=row,
                backend=self.name
            )
        return matrix / row_scales[:, np.newaxis], row_scales

    def _select_pivot(self, augmented: np.ndarray, k: int, tolerance: float) -> int:
        """
        Partial pivoting: returns the row at or below `k` with the largest magnitude in
        column `k`, or raises when that magnitude is at or below `tolerance`.
        """
        column = np.abs(augmented[k:, k])
        p = k + int(np.argmax(column))
        pivot = float(augmented[p, k])
        if not np.isfinite(pivot) or abs(pivot) <= tolerance:
            raise SingularMatrixError(
                details=(
                    f"Pivot magnitude {abs(pivot):.3e} in column {k} is below the singularity "
                    f"threshold {tolerance:.3e}."
                ),
                pivot_index=k,
                backend=self.name
            )
        return p

    @staticmethod
    def _swap_rows(augmented: np.ndarray, k: int, p: int) -> None:
        if p != k:
            augmented[[k, p]] = augmented[[p, k]]
