# tests/conftest.py
from dataclasses import dataclass
from typing import Tuple

import numpy as np
import pytest

from resnet_core import BoundaryCondition, Circuit


@dataclass(frozen=True)
class ReferenceCircuit:
    """A solved reference network: inputs plus the expected node voltages."""
    circuit: Circuit
    ground_node: int
    source_node: int
    source_voltage: float
    expected_voltages: Tuple[float, ...]

    @property
    def boundary(self) -> BoundaryCondition:
        return BoundaryCondition(self.ground_node, self.source_node, self.source_voltage)

    @property
    def args(self):
        return (self.circuit, self.ground_node, self.source_node, self.source_voltage)


def make_chain(node_count: int, resistance: float = 1.0, name: str = "chain") -> Circuit:
    """Series chain 0 - 1 - ... - (node_count - 1)."""
    return Circuit.from_resistors(
        node_count,
        [(i, i + 1, resistance) for i in range(node_count - 1)],
        name=name,
    )


@pytest.fixture
def two_node_circuit() -> ReferenceCircuit:
    """One 1 ohm resistor, source 0 at 1 V, ground 1."""
    circuit = Circuit.from_adjacency([[(1, 1.0)], [(0, 1.0)]], name="two_node")
    return ReferenceCircuit(circuit, ground_node=1, source_node=0, source_voltage=1.0,
                            expected_voltages=(1.0, 0.0))


@pytest.fixture
def three_node_chain() -> ReferenceCircuit:
    """Two 1 ohm resistors in series, source 0 at 1 V, ground 2."""
    return ReferenceCircuit(make_chain(3, name="chain3"), ground_node=2, source_node=0, source_voltage=1.0,
                            expected_voltages=(1.0, 0.5, 0.0))


@pytest.fixture
def five_node_chain() -> ReferenceCircuit:
    return ReferenceCircuit(make_chain(5, name="chain5"), ground_node=4, source_node=0, source_voltage=1.0,
                            expected_voltages=(1.0, 0.75, 0.5, 0.25, 0.0))


@pytest.fixture
def eleven_node_chain() -> ReferenceCircuit:
    """Ten 1 ohm resistors in series, source 0 at 1 V, ground 10."""
    expected = tuple(np.linspace(1.0, 0.0, 11))
    return ReferenceCircuit(make_chain(11, name="chain11"), ground_node=10, source_node=0, source_voltage=1.0,
                            expected_voltages=expected)


@pytest.fixture
def parallel_branches() -> ReferenceCircuit:
    """
    Three branches of two 1 ohm resistors each between source 0 (1 V) and ground 1.
    Nodes 2, 3 and 4 are the branch midpoints.
    """
    circuit = Circuit.from_adjacency([
        [(2, 1.0), (3, 1.0), (4, 1.0)],
        [(2, 1.0), (3, 1.0), (4, 1.0)],
        [(0, 1.0), (1, 1.0)],
        [(0, 1.0), (1, 1.0)],
        [(0, 1.0), (1, 1.0)],
    ], name="parallel_branches")
    return ReferenceCircuit(circuit, ground_node=1, source_node=0, source_voltage=1.0,
                            expected_voltages=(1.0, 0.0, 0.5, 0.5, 0.5))


def _divider(name: str, first: float, second: float) -> ReferenceCircuit:
    """`first` ohm from source 0 (1 V) to node 1, then two `second` ohm resistors to ground 3."""
    circuit = Circuit.from_resistors(4, [(0, 1, first), (1, 2, second), (2, 3, second)], name=name)
    total = first + 2 * second
    return ReferenceCircuit(circuit, ground_node=3, source_node=0, source_voltage=1.0,
                            expected_voltages=(1.0, 2 * second / total, second / total, 0.0))


@pytest.fixture
def mixed_magnitude_divider() -> ReferenceCircuit:
    """1 ohm in series with two 1 Mohm resistors; conductances span six decades."""
    return _divider("mixed_divider", 1.0, 1.0e6)


@pytest.fixture
def wide_span_divider() -> ReferenceCircuit:
    """1 mohm in series with two 10 Gohm resistors; conductances span thirteen decades."""
    return _divider("wide_divider", 1.0e-3, 1.0e10)


@pytest.fixture
def low_resistance_chain() -> ReferenceCircuit:
    """Five 0.1 ohm resistors in series; interior KCL rows carry a diagonal of 20 S."""
    return ReferenceCircuit(make_chain(6, resistance=0.1, name="chain6_low"), ground_node=5, source_node=0,
                            source_voltage=1.0, expected_voltages=tuple(np.linspace(1.0, 0.0, 6)))


@pytest.fixture(params=["two_node_circuit", "three_node_chain", "five_node_chain",
                        "eleven_node_chain", "parallel_branches"])
def reference_circuit(request) -> ReferenceCircuit:
    return request.getfixturevalue(request.param)


@pytest.fixture
def well_conditioned_matrix() -> np.ndarray:
    """Symmetric, diagonally dominant 4x4 matrix with eigenvalues inside (0, 4)."""
    return np.array([
        [2.0, -0.5, 0.0, 0.1],
        [-0.5, 1.5, 0.2, 0.0],
        [0.0, 0.2, 1.8, -0.3],
        [0.1, 0.0, -0.3, 1.2],
    ])
