# src/resnet_core/solver/execution.py
"""
Provides the public entry points for solving resistive networks.

This module is a thin facade over the solver services. Each entry point:

1.  Normalizes its inputs into immutable `Circuit` and `BoundaryCondition` objects.
2.  Runs the structural circuit checks and logs anything they find. These checks are
    advisory; preconditions that make a solve impossible are enforced by the
    `MatrixBuilder` and raise `InvalidParameterError`.
3.  Runs the selected strategy and packages the voltages into a `Solution`.
4.  Lets the documented failure modes (`InvalidParameterError`, `SingularMatrixError`)
    propagate unchanged, and wraps anything unexpected in a `SolverRunError` carrying a
    formatted diagnostic report.

Every call builds its own system and shares no mutable state with other calls.
"""
import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from ..data_structures import BoundaryCondition, Circuit, Solution, as_circuit
from ..errors import DiagnosableError, NetlistLoadError, SolverRunError, format_diagnostic_report
from ..parser import NetlistParser, ParsedNetlist
from ..validation import CircuitValidator, ValidationIssueLevel
from ..backends.base import LinearAlgebraBackend
from ..constants import DEFAULT_LEARNING_RATE, DEFAULT_LOG_INTERVAL, DEFAULT_RELAXATION_ITERATIONS
from .config import SolverConfig, create_backend
from .direct import DirectSolver
from .exceptions import InvalidParameterError, SingularMatrixError
from .matrix_builder import MatrixBuilder, validate_inputs
from .relaxation import IterationCallback, RelaxationSolver
from .results import extract_results

logger = logging.getLogger(__name__)

CircuitInput = Union[Circuit, Iterable[Iterable]]


def _log_circuit_issues(circuit: Circuit, boundary: BoundaryCondition) -> None:
    for issue in CircuitValidator(circuit, boundary).validate():
        if issue.level == ValidationIssueLevel.INFO:
            logger.info(str(issue))
        else:
            logger.warning(str(issue))


def _unexpected_error_report(e: Exception) -> str:
    return format_diagnostic_report(
        error_type=f"An Unexpected Solver Error Occurred ({type(e).__name__})",
        details=f"The solver encountered an unexpected internal error: {e}",
        suggestion="This may be a bug. Review the traceback and consider filing a bug report.",
        context={}
    )


def solve_direct(
    circuit: CircuitInput,
    ground_node: int,
    source_node: int,
    source_voltage: float,
    backend: Union[str, LinearAlgebraBackend, None] = None,
    config: Optional[SolverConfig] = None,
) -> Solution:
    """
    Solves a network exactly by inverting its KCL matrix.

    Args:
        circuit: A `Circuit`, or raw per-node adjacency lists.
        ground_node: Index of the node pinned to 0 V.
        source_node: Index of the node pinned to `source_voltage`.
        source_voltage: Applied voltage in volts.
        backend: "sequential", "parallel", "iterative" or a backend instance. Defaults to
                 `config.backend`.
        config: Solver settings; required with `allow_reduced_precision=True` for the
                "parallel" backend.

    Returns:
        A `Solution`, which is also a sequence of `NodeResult`.

    Raises:
        InvalidParameterError: Bad indices, equal ground/source, non-positive resistance,
                               unknown backend or missing reduced-precision flag.
        SingularMatrixError: The system has no unique solution.
        SolverRunError: Any other failure, with the original exception chained.
    """
    effective_config = config if config is not None else SolverConfig()
    try:
        circuit = as_circuit(circuit)
        boundary = BoundaryCondition(ground_node, source_node, source_voltage)
        logger.info(f"--- Starting direct solve of '{circuit.name}' ({circuit.node_count} nodes) ---")

        system = MatrixBuilder(circuit, boundary).build()
        _log_circuit_issues(circuit, boundary)
        solver_backend = create_backend(backend, effective_config)
        voltages = DirectSolver(solver_backend).solve(system)

        solution = Solution(
            voltages=voltages,
            results=extract_results(circuit, voltages),
            boundary=boundary,
            method="direct",
            backend=solver_backend.name,
        )
        logger.info(f"Direct solve of '{circuit.name}' successful (backend '{solver_backend.name}').")
        return solution

    except (InvalidParameterError, SingularMatrixError) as e:
        logger.error(f"Direct solve failed:{e.get_diagnostic_report()}")
        raise

    except DiagnosableError as e:
        logger.error(f"A diagnosable error occurred during the direct solve: {e}")
        raise SolverRunError(e.get_diagnostic_report()) from e

    except Exception as e:
        logger.critical(f"An unexpected internal error occurred during the direct solve: {e}", exc_info=True)
        raise SolverRunError(_unexpected_error_report(e)) from e


def solve_relaxation(
    circuit: CircuitInput,
    ground_node: int,
    source_node: int,
    source_voltage: float,
    iterations: int = DEFAULT_RELAXATION_ITERATIONS,
    learning_rate: float = DEFAULT_LEARNING_RATE,
    callback: Optional[IterationCallback] = None,
    log_interval: int = DEFAULT_LOG_INTERVAL,
) -> Solution:
    """
    Solves a network approximately by gradient relaxation, without forming an inverse.

    The returned `Solution` carries the per-pass `error_history` and `imbalance_history`.
    Divergence is reported by `NumericDivergenceWarning`, never by an exception.

    Raises:
        InvalidParameterError: Same input validation as `solve_direct`, plus a non-negative
                               integer `iterations` and a finite, positive `learning_rate`.
        SolverRunError: Any unexpected failure, with the original exception chained.
    """
    try:
        circuit = as_circuit(circuit)
        boundary = BoundaryCondition(ground_node, source_node, source_voltage)
        logger.info(f"--- Starting relaxation solve of '{circuit.name}' ({circuit.node_count} nodes) ---")

        validate_inputs(circuit, boundary)
        _log_circuit_issues(circuit, boundary)
        solver = RelaxationSolver(
            iterations=iterations,
            learning_rate=learning_rate,
            log_interval=log_interval,
            callback=callback,
        )
        report = solver.solve(circuit, boundary)

        return Solution(
            voltages=report.voltages,
            results=extract_results(circuit, report.voltages),
            boundary=boundary,
            method="relaxation",
            error_history=report.error_history,
            imbalance_history=report.imbalance_history,
        )

    except InvalidParameterError as e:
        logger.error(f"Relaxation solve failed:{e.get_diagnostic_report()}")
        raise

    except DiagnosableError as e:
        logger.error(f"A diagnosable error occurred during the relaxation solve: {e}")
        raise SolverRunError(e.get_diagnostic_report()) from e

    except Exception as e:
        logger.critical(f"An unexpected internal error occurred during the relaxation solve: {e}", exc_info=True)
        raise SolverRunError(_unexpected_error_report(e)) from e


def solve_netlist(
    netlist: Union[str, Path, ParsedNetlist],
    config: Optional[SolverConfig] = None,
) -> Solution:
    """
    Loads a YAML netlist and solves it with the strategy of its `solver` block.

    Args:
        netlist: Path to a netlist file, or an already parsed `ParsedNetlist`.
        config: Overrides the configuration found in the netlist.

    Raises:
        NetlistLoadError: The file cannot be read, fails schema validation or carries
                          invalid units.
        InvalidParameterError, SingularMatrixError, SolverRunError: As for the solvers.
    """
    if isinstance(netlist, ParsedNetlist):
        parsed = netlist
    else:
        try:
            parsed = NetlistParser().parse(netlist)
        except DiagnosableError as e:
            logger.error(f"Failed to load netlist '{netlist}': {e}")
            raise NetlistLoadError(e.get_diagnostic_report()) from e

    effective_config = config if config is not None else parsed.config
    boundary = parsed.boundary
    if effective_config.method == "relaxation":
        return solve_relaxation(
            parsed.circuit,
            boundary.ground_node,
            boundary.source_node,
            boundary.source_voltage,
            iterations=effective_config.relaxation_iterations,
            learning_rate=effective_config.learning_rate,
            log_interval=effective_config.log_interval,
        )
    return solve_direct(
        parsed.circuit,
        boundary.ground_node,
        boundary.source_node,
        boundary.source_voltage,
        config=effective_config,
    )
