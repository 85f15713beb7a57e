# src/resnet_core/solver/relaxation.py
"""
Gradient relaxation solver for resistive networks.

The solver never forms a matrix. It minimizes the current-imbalance objective

    F(v) = ½ Σ_j s_j(v)²,    s_j = Σ_k (v[to_k] − v[j]) / r_k

over the interior nodes `j` (every node except ground and source), visiting the
nodes in index order and applying the gradient of each term immediately:

- every neighbour `to_k` that is not a fixed node is lowered by `lr · s_j / r_k`;
- node `j` itself is raised by `lr · s_j · Σ_k 1/r_k`.

Fixed nodes are recognised by node identity, never by their position in an adjacency
list. The run always spends its full iteration budget. Two diagnostics are recorded
per pass: `error = Σ current²` over the branch currents seen at interior nodes, and
`imbalance = Σ s_j²`, the objective itself.
"""
import logging
import math
import numbers
import warnings
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import numpy as np

from ..constants import DEFAULT_LEARNING_RATE, DEFAULT_LOG_INTERVAL, DEFAULT_RELAXATION_ITERATIONS
from ..data_structures import BoundaryCondition, Circuit
from .exceptions import InvalidParameterError, NumericDivergenceWarning
from .matrix_builder import validate_inputs

logger = logging.getLogger(__name__)

#: Called once per pass with (iteration index, error diagnostic of that pass).
IterationCallback = Callable[[int, float], None]


@dataclass(frozen=True, eq=False)
class RelaxationReport:
    """Final voltages of a relaxation run and its per-pass diagnostics."""
    voltages: np.ndarray
    error_history: Tuple[float, ...]
    imbalance_history: Tuple[float, ...]

    @property
    def diverged(self) -> bool:
        """True when the imbalance ended above where it started or became non-finite."""
        if not self.imbalance_history:
            return False
        first, last = self.imbalance_history[0], self.imbalance_history[-1]
        return not math.isfinite(last) or last > first


class RelaxationSolver:
    """
    Approximate, tunable alternative to `DirectSolver` (see module docstring).

    Result quality depends on `iterations × learning_rate`; too large a learning rate
    makes the iteration diverge, which is reported through `NumericDivergenceWarning`
    and the diagnostics, never through an exception.
    """
    def __init__(
        self,
        iterations: int = DEFAULT_RELAXATION_ITERATIONS,
        learning_rate: float = DEFAULT_LEARNING_RATE,
        log_interval: int = DEFAULT_LOG_INTERVAL,
        callback: Optional[IterationCallback] = None,
    ):
        if isinstance(iterations, bool) or not isinstance(iterations, numbers.Integral) or iterations < 0:
            raise InvalidParameterError(
                parameter="iterations",
                details=f"Iteration count must be a non-negative integer; got {iterations!r}."
            )
        if isinstance(learning_rate, bool) or not isinstance(learning_rate, numbers.Real) \
                or not math.isfinite(learning_rate) or learning_rate <= 0:
            raise InvalidParameterError(
                parameter="learning_rate",
                details=f"Learning rate must be finite and strictly positive; got {learning_rate!r}."
            )
        if isinstance(log_interval, bool) or not isinstance(log_interval, numbers.Integral) or log_interval < 1:
            raise InvalidParameterError(
                parameter="log_interval",
                details=f"Log interval must be a positive integer; got {log_interval!r}."
            )
        self.iterations = int(iterations)
        self.learning_rate = float(learning_rate)
        self.log_interval = int(log_interval)
        self.callback = callback

    def solve(self, circuit: Circuit, boundary: BoundaryCondition) -> RelaxationReport:
        validate_inputs(circuit, boundary)

        n = circuit.node_count
        voltages = np.zeros(n, dtype=np.float64)
        voltages[boundary.ground_node] = 0.0
        voltages[boundary.source_node] = float(boundary.source_voltage)

        targets: List[np.ndarray] = []
        conductances: List[np.ndarray] = []
        free_neighbours: List[np.ndarray] = []
        for connections in circuit.adjacency:
            to = np.array([conn.to for conn in connections], dtype=np.intp)
            g = np.array([1.0 / conn.resistance for conn in connections], dtype=np.float64)
            targets.append(to)
            conductances.append(g)
            free_neighbours.append((to != boundary.ground_node) & (to != boundary.source_node))

        interior = [j for j in range(n) if not boundary.is_fixed(j) and targets[j].size]
        lr = self.learning_rate
        error_history: List[float] = []
        imbalance_history: List[float] = []

        logger.info(
            f"Starting relaxation of '{circuit.name}': {len(interior)} interior node(s), "
            f"{self.iterations} iteration(s), learning rate {lr:g}."
        )
        for iteration in range(self.iterations):
            error = 0.0
            imbalance = 0.0
            for j in interior:
                to, g, free = targets[j], conductances[j], free_neighbours[j]

                currents = (voltages[to] - voltages[j]) * g
                current_sum = float(currents.sum())
                error += float(np.dot(currents, currents))
                imbalance += current_sum * current_sum

                step = lr * current_sum
                voltages[j] += step * float(g.sum())
                np.subtract.at(voltages, to[free], step * g[free])

            error_history.append(error)
            imbalance_history.append(imbalance)
            if self.callback is not None:
                self.callback(iteration, error)
            if iteration % self.log_interval == 0:
                logger.debug(f"Relaxation pass {iteration}: error={error:.6e}, imbalance={imbalance:.6e}")

        report = RelaxationReport(
            voltages=voltages,
            error_history=tuple(error_history),
            imbalance_history=tuple(imbalance_history),
        )
        if report.diverged:
            logger.warning(
                f"Relaxation of '{circuit.name}' diverged: imbalance went from "
                f"{report.imbalance_history[0]:.3e} to {report.imbalance_history[-1]:.3e}."
            )
            warnings.warn(
                f"Relaxation diverged (imbalance {report.imbalance_history[0]:.3e} -> "
                f"{report.imbalance_history[-1]:.3e}); consider a smaller learning rate.",
                NumericDivergenceWarning,
                stacklevel=2,
            )
        elif imbalance_history:
            logger.info(f"Relaxation finished: final error={error_history[-1]:.6e}, imbalance={imbalance_history[-1]:.6e}.")
        return report
