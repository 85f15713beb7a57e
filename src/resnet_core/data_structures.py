# src/resnet_core/data_structures.py
"""
Defines the immutable data contracts that flow through the solver.

A resistor network is an adjacency list keyed by node index: node `i` lists one
`Connection` per resistor attached to it. A physical resistor between `i` and `j`
therefore appears twice, once in each node's list, with the same resistance. The
containers here do not enforce that symmetry; `CircuitValidator` reports violations.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Connection:
    """Directed view of a resistor: current flows from the owning node toward `to`."""
    to: int
    resistance: float

    @property
    def conductance(self) -> float:
        return 1.0 / self.resistance


ConnectionLike = Union[Connection, Mapping, Tuple[int, float]]


def _as_connection(item: ConnectionLike) -> Connection:
    if isinstance(item, Connection):
        return item
    if isinstance(item, Mapping):
        return Connection(to=item["to"], resistance=item["resistance"])
    to, resistance = item
    return Connection(to=to, resistance=resistance)


@dataclass(frozen=True)
class Circuit:
    """
    A resistive network as per-node adjacency lists, index-aligned with node identity.

    Circuits are solver inputs and are never modified by the solver.
    """
    adjacency: Tuple[Tuple[Connection, ...], ...]
    name: str = "circuit"

    @classmethod
    def from_adjacency(cls, adjacency: Iterable[Iterable[ConnectionLike]], name: str = "circuit") -> "Circuit":
        """
        Builds a Circuit from nested sequences.

        Entries may be `Connection` objects, `{"to": ..., "resistance": ...}` mappings or
        `(to, resistance)` pairs.
        """
        nodes = tuple(tuple(_as_connection(item) for item in node) for node in adjacency)
        return cls(adjacency=nodes, name=name)

    @classmethod
    def from_resistors(
        cls,
        node_count: int,
        resistors: Iterable[Tuple[int, int, float]],
        name: str = "circuit",
    ) -> "Circuit":
        """
        Builds a symmetric Circuit from undirected `(node_a, node_b, resistance)` elements.

        Each element is expanded into the two directed entries the solver expects.
        """
        lists: List[List[Connection]] = [[] for _ in range(node_count)]
        for node_a, node_b, resistance in resistors:
            lists[node_a].append(Connection(to=node_b, resistance=resistance))
            lists[node_b].append(Connection(to=node_a, resistance=resistance))
        return cls(adjacency=tuple(tuple(node) for node in lists), name=name)

    @property
    def node_count(self) -> int:
        return len(self.adjacency)

    def __len__(self) -> int:
        return len(self.adjacency)

    def __getitem__(self, node: int) -> Tuple[Connection, ...]:
        return self.adjacency[node]

    def __iter__(self) -> Iterator[Tuple[Connection, ...]]:
        return iter(self.adjacency)

    def conductance(self, node: int) -> float:
        """Total conductance attached to `node` (its diagonal entry in a KCL row)."""
        return sum(conn.conductance for conn in self.adjacency[node])


def as_circuit(circuit: Union[Circuit, Iterable[Iterable[ConnectionLike]]]) -> Circuit:
    """Accepts either a `Circuit` or raw nested adjacency lists."""
    if isinstance(circuit, Circuit):
        return circuit
    return Circuit.from_adjacency(circuit)


@dataclass(frozen=True)
class BoundaryCondition:
    """The two pinned nodes of the network and the voltage applied at the source."""
    ground_node: int
    source_node: int
    source_voltage: float

    @property
    def fixed_nodes(self) -> Tuple[int, int]:
        return (self.ground_node, self.source_node)

    def is_fixed(self, node: int) -> bool:
        return node == self.ground_node or node == self.source_node


@dataclass(frozen=True, eq=False)
class LinearSystem:
    """
    The KCL system `matrix · x = rhs` for one solve.

    Row `i` is either an identity row (ground or source node) or the current balance
    equation of node `i`. Built fresh for every solve call.
    """
    matrix: np.ndarray
    rhs: np.ndarray

    @property
    def size(self) -> int:
        return self.rhs.shape[0]


@dataclass(frozen=True)
class ConnectionResult:
    """Current through one adjacency entry; positive flows from the owning node toward `to`."""
    to: int
    current: float


@dataclass(frozen=True)
class NodeResult:
    voltage: float
    connections: Tuple[ConnectionResult, ...]


@dataclass(frozen=True, eq=False)
class Solution(Sequence):
    """
    The sole output of a solve: a read-only sequence of `NodeResult`, index-aligned with
    the nodes of the input circuit, plus the voltage vector and solver diagnostics.

    Attributes:
        voltages: Node voltages as a float64 array.
        results: One `NodeResult` per node; `connections` mirror the adjacency order.
        boundary: The boundary condition the solution was computed for.
        method: "direct" or "relaxation".
        backend: Name of the linear-algebra backend for direct solves, None otherwise.
        error_history: Relaxation only. Sum of squared branch currents per pass.
        imbalance_history: Relaxation only. Sum of squared per-node current imbalances per pass.
    """
    voltages: np.ndarray
    results: Tuple[NodeResult, ...]
    boundary: BoundaryCondition
    method: str
    backend: Optional[str] = None
    error_history: Tuple[float, ...] = field(default_factory=tuple)
    imbalance_history: Tuple[float, ...] = field(default_factory=tuple)

    def __getitem__(self, index):
        return self.results[index]

    def __len__(self) -> int:
        return len(self.results)

    def to_records(self) -> List[Dict[str, Any]]:
        """Plain-dict view: `[{"voltage": v, "connections": [{"to": j, "current": i}, ...]}, ...]`."""
        return [
            {
                "voltage": node.voltage,
                "connections": [{"to": conn.to, "current": conn.current} for conn in node.connections],
            }
            for node in self.results
        ]
