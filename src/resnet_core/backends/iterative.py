# src/resnet_core/backends/iterative.py
"""
Approximate matrix inversion by fixed-point iteration.

Two recurrences are available, both driven by the residual `R_k = I − A·X_k`:

- ``richardson`` (default): `X_{k+1} = X_k + damping · R_k`, starting from `X_0 = I`,
  with `damping = ½`. It converges linearly when every eigenvalue of `A` lies in
  `(0, 2/damping)`, which holds for the KCL matrices of modest-degree networks. Fast
  convergence after a single pass is a property of some matrices, never a guarantee.
- ``newton_schulz``: `X_{k+1} = X_k + X_k · R_k`, starting from
  `X_0 = Aᵀ / (‖A‖₁ ‖A‖∞)`. It converges quadratically for any non-singular `A`.

Iteration stops once the Frobenius norm of `R_k` drops below the tolerance, when the
iteration budget is spent, or when the residual stops being finite.
"""
import logging
import warnings
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ..constants import (
    DEFAULT_INVERTER_DAMPING,
    DEFAULT_INVERTER_MAX_ITERATIONS,
    DEFAULT_INVERTER_TOLERANCE,
)
from ..solver.exceptions import InvalidParameterError, NumericDivergenceWarning, SingularMatrixError
from .base import LinearAlgebraBackend
from .sequential import SequentialBackend

logger = logging.getLogger(__name__)

INVERTER_METHODS = ("richardson", "newton_schulz")


def gershgorin_bound(matrix: np.ndarray) -> float:
    """Upper bound on the eigenvalue magnitudes of `matrix`: the largest absolute row sum."""
    if not matrix.size:
        return 0.0
    return float(np.max(np.sum(np.abs(matrix), axis=1)))


@dataclass(frozen=True, eq=False)
class InversionReport:
    """
    Outcome of an iterative inversion.

    Attributes:
        inverse: The last iterate `X_k`.
        residual_history: Frobenius norm of `A·X − I` for `X_0 ... X_k`.
        iterations: Number of updates applied (`k`).
        converged: Whether the final residual is within the tolerance.
    """
    inverse: np.ndarray
    residual_history: Tuple[float, ...]
    iterations: int
    converged: bool

    @property
    def residual(self) -> float:
        return self.residual_history[-1]


class IterativeInverter:
    """Fixed-point approximation of a matrix inverse (see module docstring)."""

    def __init__(
        self,
        max_iterations: int = DEFAULT_INVERTER_MAX_ITERATIONS,
        tolerance: float = DEFAULT_INVERTER_TOLERANCE,
        method: str = "richardson",
        damping: float = DEFAULT_INVERTER_DAMPING,
        backend: Optional[LinearAlgebraBackend] = None,
    ):
        if method not in INVERTER_METHODS:
            raise InvalidParameterError(
                parameter="method",
                details=f"Unknown inversion method '{method}'. Available: {list(INVERTER_METHODS)}."
            )
        if isinstance(max_iterations, bool) or not isinstance(max_iterations, int) or max_iterations < 0:
            raise InvalidParameterError(
                parameter="max_iterations",
                details=f"Iteration budget must be a non-negative integer; got {max_iterations!r}."
            )
        if not tolerance >= 0:
            raise InvalidParameterError(parameter="tolerance", details=f"Tolerance must be >= 0; got {tolerance!r}.")
        if not 0 < damping < 2:
            raise InvalidParameterError(parameter="damping", details=f"Damping must lie in (0, 2); got {damping!r}.")

        self.max_iterations = max_iterations
        self.tolerance = tolerance
        self.method = method
        self.damping = damping
        self.backend: LinearAlgebraBackend = backend if backend is not None else SequentialBackend()

    @property
    def convergence_limit(self) -> float:
        """Richardson converges when every eigenvalue lies in `(0, convergence_limit)`."""
        return 2.0 / self.damping

    def _initial_guess(self, a: np.ndarray) -> np.ndarray:
        n = a.shape[0]
        if self.method == "richardson":
            return np.eye(n, dtype=self.backend.dtype)
        norm_product = np.linalg.norm(a, 1) * np.linalg.norm(a, np.inf)
        if norm_product == 0:
            return np.zeros_like(a)
        return np.ascontiguousarray(a.T / norm_product)

    def _residual(self, a: np.ndarray, x: np.ndarray, identity: np.ndarray) -> Tuple[np.ndarray, float]:
        r = identity - self.backend.multiply(a, x)
        return r, float(np.linalg.norm(r, "fro"))

    def iterate(self, matrix: np.ndarray) -> InversionReport:
        """Runs the recurrence on `matrix` and returns the full report."""
        a = self.backend.asarray(matrix)
        if a.ndim != 2 or a.shape[0] != a.shape[1]:
            raise ValueError(f"Expected a square 2-D matrix, got shape {a.shape}.")
        identity = np.eye(a.shape[0], dtype=self.backend.dtype)

        x = self._initial_guess(a)
        r, residual = self._residual(a, x, identity)
        history = [residual]
        iterations = 0

        while residual > self.tolerance and iterations < self.max_iterations and np.isfinite(residual):
            if self.method == "richardson":
                x = x + self.damping * r
            else:
                x = x + self.backend.multiply(x, r)
            iterations += 1
            r, residual = self._residual(a, x, identity)
            history.append(residual)

        converged = bool(np.isfinite(residual) and residual <= self.tolerance)
        logger.debug(
            f"Iterative inversion ({self.method}) of {a.shape[0]}x{a.shape[0]} matrix: "
            f"residual {residual:.3e} after {iterations} iteration(s), converged={converged}."
        )
        return InversionReport(inverse=x, residual_history=tuple(history), iterations=iterations, converged=converged)

    def invert(self, matrix: np.ndarray) -> np.ndarray:
        """
        Returns the approximate inverse. Emits `NumericDivergenceWarning` when the
        tolerance was not reached.
        """
        report = self.iterate(matrix)
        if not report.converged:
            warnings.warn(
                f"Iterative inversion did not converge: residual {report.residual:.3e} after "
                f"{report.iterations} iteration(s) (tolerance {self.tolerance:.1e}).",
                NumericDivergenceWarning,
                stacklevel=2,
            )
        return report.inverse


class IterativeBackend(LinearAlgebraBackend):
    """
    Backend whose inversion is delegated to an `IterativeInverter`.

    Multiplication uses the inverter's own backend. Unlike the standalone inverter, a
    non-converged inversion is a hard failure here, because the direct solver must not
    return an unsignalled wrong answer.
    """
    name = "iterative"

    def __init__(self, inverter: Optional[IterativeInverter] = None):
        self.inverter = inverter if inverter is not None else IterativeInverter()
        super().__init__(dtype=self.inverter.backend.dtype)

    def invert(self, matrix: np.ndarray) -> np.ndarray:
        a = self._as_square(matrix)
        self._equilibrate(a)
        report = self.inverter.iterate(a)
        if not report.converged:
            raise self._non_convergence_error(a, report)
        return report.inverse

    def _non_convergence_error(self, a: np.ndarray, report: InversionReport) -> SingularMatrixError:
        inverter = self.inverter
        details = (
            f"Iterative inversion ({inverter.method}) did not converge: residual "
            f"{report.residual:.3e} after {report.iterations} iteration(s)."
        )
        if inverter.method == "richardson":
            bound = gershgorin_bound(a)
            limit = inverter.convergence_limit
            if bound >= limit:
                details += (
                    f" The Gershgorin bound {bound:.3e} on the eigenvalues reaches the Richardson "
                    f"limit 2/damping = {limit:.3e}, so the matrix may lie outside the convergence "
                    f"region of the method."
                )
            suggestion = (
                "Use inverter_method='newton_schulz', which converges for any non-singular matrix, "
                "or use the 'sequential' backend. A smaller damping widens the Richardson convergence "
                "region at the cost of more iterations."
            )
        else:
            suggestion = (
                "Raise inverter_max_iterations or use the 'sequential' backend. If the elimination "
                "backends also report a singular matrix, check the circuit for isolated nodes."
            )
        logger.warning(details)
        return SingularMatrixError(details=details, backend=self.name, suggestion=suggestion)

    def multiply(self, matrix: np.ndarray, operand: np.ndarray) -> np.ndarray:
        return self.inverter.backend.multiply(matrix, operand)
