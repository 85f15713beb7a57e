# src/resnet_core/__init__.py
import logging
from .log_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)
logger.info("ResNet Core package initialized.")

from .units import ureg, pint, Quantity, RESISTANCE_DIMENSIONALITY, VOLTAGE_DIMENSIONALITY
from .data_structures import (
    Circuit,
    Connection,
    BoundaryCondition,
    LinearSystem,
    NodeResult,
    ConnectionResult,
    Solution,
)
# The solver package must be imported before the backends and the parser, which
# depend on its exception and configuration modules.
from .solver import (
    solve_direct,
    solve_relaxation,
    solve_netlist,
    MatrixBuilder,
    DirectSolver,
    RelaxationSolver,
    SolverConfig,
    InvalidParameterError,
    SingularMatrixError,
    NumericDivergenceWarning,
)
from .backends import SequentialBackend, ParallelBackend, IterativeBackend, IterativeInverter
from .parser import NetlistParser, ParsedNetlist
from .validation import CircuitValidator, SolutionValidator, compare_solutions, compare_matrices
from .errors import ResNetError, NetlistLoadError, SolverRunError

__all__ = [
    # Units
    "ureg", "pint", "Quantity",
    # Canonical dimensionalities
    "RESISTANCE_DIMENSIONALITY", "VOLTAGE_DIMENSIONALITY",
    # Data Structures
    "Circuit", "Connection", "BoundaryCondition", "LinearSystem",
    "NodeResult", "ConnectionResult", "Solution",
    # Entry points
    "solve_direct", "solve_relaxation", "solve_netlist",
    # Solver services
    "MatrixBuilder", "DirectSolver", "RelaxationSolver", "SolverConfig",
    # Backends
    "SequentialBackend", "ParallelBackend", "IterativeBackend", "IterativeInverter",
    # Parser
    "NetlistParser", "ParsedNetlist",
    # Validation
    "CircuitValidator", "SolutionValidator", "compare_solutions", "compare_matrices",
    # Solver failure modes
    "InvalidParameterError", "SingularMatrixError", "NumericDivergenceWarning",
    # Top-Level Errors (Actionable Diagnostics)
    "ResNetError", "NetlistLoadError", "SolverRunError",
]
