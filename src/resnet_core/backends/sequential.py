# src/resnet_core/backends/sequential.py
import logging

import numpy as np

from .base import LinearAlgebraBackend

logger = logging.getLogger(__name__)


class SequentialBackend(LinearAlgebraBackend):
    """
    Reference backend: double-precision Gauss-Jordan elimination with partial pivoting.

    Rows are equilibrated before elimination, and every elimination step is a
    whole-array row operation on the augmented matrix `[A | I]`; after the last step the
    right half holds the inverse of the equilibrated matrix. Results are deterministic,
    so repeated solves of the same system are bit-identical.
    """
    name = "sequential"

    def __init__(self):
        super().__init__(dtype=np.float64)

    def invert(self, matrix: np.ndarray) -> np.ndarray:
        a = self._as_square(matrix)
        n = a.shape[0]
        scaled, row_scales = self._equilibrate(a)
        tolerance = self._pivot_tolerance(n)
        augmented = self._augment(scaled)

        logger.debug(f"Inverting {n}x{n} matrix by Gauss-Jordan elimination (float64).")
        for k in range(n):
            p = self._select_pivot(augmented, k, tolerance)
            self._swap_rows(augmented, k, p)

            augmented[k] /= augmented[k, k]
            factors = augmented[:, k].copy()
            factors[k] = 0.0
            augmented -= np.outer(factors, augmented[k])

        return np.ascontiguousarray(augmented[:, n:] / row_scales[np.newaxis, :])

    def multiply(self, matrix: np.ndarray, operand: np.ndarray) -> np.ndarray:
        m = np.asarray(matrix, dtype=self.dtype)
        x = np.asarray(operand, dtype=self.dtype)
        self._check_multiply_shapes(m, x)
        return m @ x
