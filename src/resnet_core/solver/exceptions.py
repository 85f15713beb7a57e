# src/resnet_core/solver/exceptions.py
"""
Defines the diagnosable exceptions and warnings of the solving phase.

Two failure modes are part of the public contract of the solver entry points:

1.  `InvalidParameterError`: the inputs violate a structural precondition (bad node
    index, equal ground and source, non-positive resistance, bad iteration settings).
    It is raised eagerly, before any matrix is assembled.
2.  `SingularMatrixError`: the assembled system has no unique solution, typically an
    isolated node or a group of nodes connected to neither ground nor source.

Both inherit from `DiagnosableError` and from the matching standard exception type, so
they can be caught either way. `NumericDivergenceWarning` is advisory only.
"""
import numpy as np
from typing import Optional
from dataclasses import dataclass

from ..errors import DiagnosableError, format_diagnostic_report

_SINGULAR_SUGGESTION = (
    "This is usually caused by a node with no connections, or by a group of nodes that has no "
    "resistive path to the ground or source node. Check the adjacency lists of the circuit."
)


@dataclass(eq=False)
class InvalidParameterError(DiagnosableError, ValueError):
    """
    Raised when a solver input violates a structural precondition.
    """
    parameter: str
    details: str
    node: Optional[int] = None

    def __str__(self):
        node_str = f" (node {self.node})" if self.node is not None else ""
        return f"Invalid parameter '{self.parameter}'{node_str}: {self.details}"

    def get_diagnostic_report(self) -> str:
        """Generates the diagnostic report for an invalid solver parameter."""
        return format_diagnostic_report(
            error_type="Invalid Solver Parameter",
            details=self.details,
            suggestion="Check that ground and source are distinct, in-range node indices and that every connection has a finite, strictly positive resistance.",
            context={'parameter': self.parameter, 'node': self.node}
        )


@dataclass(eq=False)
class SingularMatrixError(DiagnosableError, np.linalg.LinAlgError):
    """
    Raised when the assembled KCL matrix is found to be singular during inversion,
    when a solve produces non-finite values, or when the iterative backend fails to
    converge. `suggestion` replaces the default advice of the diagnostic report.

    Catchable both as `DiagnosableError` and as `numpy.linalg.LinAlgError`.
    """
    details: str
    pivot_index: Optional[int] = None
    backend: Optional[str] = None
    suggestion: Optional[str] = None

    def __str__(self):
        pivot_str = f" at elimination step {self.pivot_index}" if self.pivot_index is not None else ""
        return f"Singular matrix detected{pivot_str}: {self.details}"

    def get_diagnostic_report(self) -> str:
        """Generates the diagnostic report for a singular matrix error."""
        return format_diagnostic_report(
            error_type="Singular Matrix Encountered",
            details=self.details,
            suggestion=self.suggestion or _SINGULAR_SUGGESTION,
            context={'node': self.pivot_index, 'backend': self.backend}
        )


class NumericDivergenceWarning(RuntimeWarning):
    """
    Emitted when an iterative method ends further from a solution than it started,
    or produces non-finite values. The result is still returned; treating the
    warning as fatal is the caller's decision.
    """
    pass
