from .exceptions import (
    InvalidParameterError,
    SingularMatrixError,
    NumericDivergenceWarning,
)
from .matrix_builder import MatrixBuilder, validate_inputs
from .results import extract_results
from .direct import DirectSolver
from .relaxation import RelaxationSolver, RelaxationReport
from .config import SolverConfig, ConfigParsingError, parse_solver_config, create_backend
from .execution import solve_direct, solve_relaxation, solve_netlist

__all__ = [
    # Exceptions & warnings
    "InvalidParameterError",
    "SingularMatrixError",
    "NumericDivergenceWarning",
    # Core services
    "MatrixBuilder",
    "validate_inputs",
    "extract_results",
    "DirectSolver",
    "RelaxationSolver",
    "RelaxationReport",
    # Configuration
    "SolverConfig",
    "ConfigParsingError",
    "parse_solver_config",
    "create_backend",
    # Entry points
    "solve_direct",
    "solve_relaxation",
    "solve_netlist",
]
