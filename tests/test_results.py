# tests/test_results.py
import math

import numpy as np
import pytest

from resnet_core import Circuit
from resnet_core.solver import extract_results


def test_currents_follow_ohms_law():
    circuit = Circuit.from_resistors(3, [(0, 1, 2.0), (1, 2, 4.0)])
    results = extract_results(circuit, np.array([6.0, 4.0, 0.0]))

    assert results[0].connections[0].current == pytest.approx(1.0)
    assert results[1].connections[0].current == pytest.approx(-1.0)
    assert results[1].connections[1].current == pytest.approx(1.0)
    assert results[2].connections[0].current == pytest.approx(-1.0)


def test_voltages_copied_as_floats():
    circuit = Circuit.from_resistors(2, [(0, 1, 1.0)])
    results = extract_results(circuit, np.array([1, 0], dtype=np.int64))
    assert isinstance(results[0].voltage, float)
    assert results[0].connections[0].current == 1.0


def test_self_loop_carries_no_current():
    circuit = Circuit.from_adjacency([[(0, 1.0), (1, 1.0)], [(0, 1.0)]])
    results = extract_results(circuit, [2.0, 0.0])
    assert results[0].connections[0].current == 0.0
    assert results[0].connections[1].current == 2.0


def test_nan_voltages_propagate():
    circuit = Circuit.from_resistors(2, [(0, 1, 1.0)])
    results = extract_results(circuit, [math.nan, 0.0])
    assert math.isnan(results[0].connections[0].current)
    assert math.isnan(results[1].connections[0].current)


def test_node_without_connections():
    circuit = Circuit.from_adjacency([[(1, 1.0)], [(0, 1.0)], []])
    results = extract_results(circuit, [1.0, 0.0, 0.0])
    assert results[2].connections == ()
