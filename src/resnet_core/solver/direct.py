# src/resnet_core/solver/direct.py
import logging
from typing import Optional

import numpy as np

from ..backends.base import LinearAlgebraBackend
from ..backends.sequential import SequentialBackend
from ..data_structures import LinearSystem
from .exceptions import SingularMatrixError

logger = logging.getLogger(__name__)


class DirectSolver:
    """
    Solves a `LinearSystem` as `x = inverse(M) · b` through a `LinearAlgebraBackend`.

    Args:
        backend: The backend performing inversion and multiplication. Defaults to the
                 double-precision `SequentialBackend`.
    """
    def __init__(self, backend: Optional[LinearAlgebraBackend] = None):
        self.backend: LinearAlgebraBackend = backend if backend is not None else SequentialBackend()

    def solve(self, system: LinearSystem) -> np.ndarray:
        """
        Returns the float64 solution vector of `system`.

        Raises:
            SingularMatrixError: The backend could not invert the matrix, or the product
                                 contains NaN/Inf values.
        """
        logger.debug(f"Solving {system.size}x{system.size} system with backend '{self.backend.name}'...")
        try:
            inverse = self.backend.invert(system.matrix)
        except SingularMatrixError as e:
            logger.error(f"Inversion failed on backend '{self.backend.name}': {e}")
            raise

        x = np.asarray(self.backend.multiply(inverse, system.rhs), dtype=np.float64)

        if np.any(np.isnan(x)) or np.any(np.isinf(x)):
            logger.error("NaN or Inf detected in solution vector.")
            raise SingularMatrixError(details="Solution vector contains NaN/Inf values.", backend=self.backend.name)

        return x
