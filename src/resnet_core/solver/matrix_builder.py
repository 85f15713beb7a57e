# src/resnet_core/solver/matrix_builder.py
import logging
import math
import numbers

import numpy as np

from ..data_structures import BoundaryCondition, Circuit, LinearSystem
from .exceptions import InvalidParameterError

logger = logging.getLogger(__name__)


def _is_index(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def validate_inputs(circuit: Circuit, boundary: BoundaryCondition) -> None:
    """
    Checks the structural preconditions shared by every solve strategy.

    Raises:
        InvalidParameterError: On the first violated precondition.
    """
    node_count = circuit.node_count
    if node_count < 2:
        raise InvalidParameterError(
            parameter="circuit",
            details=f"A network needs at least two nodes (ground and source); got {node_count}."
        )

    for name, node in (("ground_node", boundary.ground_node), ("source_node", boundary.source_node)):
        if not _is_index(node) or not 0 <= node < node_count:
            raise InvalidParameterError(
                parameter=name,
                details=f"Node index {node!r} is not an integer in [0, {node_count})."
            )

    if boundary.ground_node == boundary.source_node:
        raise InvalidParameterError(
            parameter="source_node",
            details=f"Ground and source must be distinct nodes; both are {boundary.ground_node}.",
            node=boundary.source_node
        )

    if isinstance(boundary.source_voltage, bool) or not isinstance(boundary.source_voltage, numbers.Real) \
            or not math.isfinite(boundary.source_voltage):
        raise InvalidParameterError(
            parameter="source_voltage",
            details=f"Source voltage must be a finite real number; got {boundary.source_voltage!r}."
        )

    for node, connections in enumerate(circuit.adjacency):
        for position, conn in enumerate(connections):
            if not _is_index(conn.to) or not 0 <= conn.to < node_count:
                raise InvalidParameterError(
                    parameter=f"circuit[{node}][{position}].to",
                    details=f"Connection target {conn.to!r} is not an integer in [0, {node_count}).",
                    node=node
                )
            resistance = conn.resistance
            if isinstance(resistance, bool) or not isinstance(resistance, numbers.Real) \
                    or not math.isfinite(resistance) or resistance <= 0:
                raise InvalidParameterError(
                    parameter=f"circuit[{node}][{position}].resistance",
                    details=f"Resistance toward node {conn.to!r} must be finite and strictly positive; got {resistance!r}.",
                    node=node
                )


class MatrixBuilder:
    """
    Translates a resistor network and its boundary condition into the KCL linear system.

    Row layout of the assembled system `M · v = b`:

    - ground row: `M[g, g] = 1`, `b[g] = 0`.
    - source row: `M[s, s] = 1`, `b[s] = source_voltage`.
    - any other row `i`: for every connection `(to, r)` of node `i`,
      `M[i, i] += 1/r` and `M[i, to] -= 1/r`; `b[i] = 0`.

    Parallel resistors between the same pair of nodes accumulate, so their conductances
    sum. Preconditions are validated in the constructor, before any allocation.
    """
    def __init__(self, circuit: Circuit, boundary: BoundaryCondition):
        validate_inputs(circuit, boundary)
        self.circuit: Circuit = circuit
        self.boundary: BoundaryCondition = boundary
        logger.debug(
            f"MatrixBuilder initialized for '{circuit.name}' with {circuit.node_count} nodes "
            f"(ground={boundary.ground_node}, source={boundary.source_node})."
        )

    def build(self) -> LinearSystem:
        """Assembles a fresh dense system for one solve."""
        n = self.circuit.node_count
        ground, source = self.boundary.ground_node, self.boundary.source_node

        matrix = np.zeros((n, n), dtype=np.float64)
        rhs = np.zeros(n, dtype=np.float64)

        matrix[ground, ground] = 1.0
        rhs[ground] = 0.0
        matrix[source, source] = 1.0
        rhs[source] = float(self.boundary.source_voltage)

        for i, connections in enumerate(self.circuit.adjacency):
            if i == ground or i == source:
                continue
            for conn in connections:
                conductance = 1.0 / conn.resistance
                matrix[i, i] += conductance
                matrix[i, conn.to] -= conductance

        logger.debug(f"Assembled {n}x{n} KCL system with {np.count_nonzero(matrix)} non-zero entries.")
        return LinearSystem(matrix=matrix, rhs=rhs)
