# src/resnet_core/validation/comparison.py
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ..data_structures import NodeResult


@dataclass(frozen=True)
class ComparisonReport:
    """
    Absolute differences between a reference solution and a computed one.

    `voltage_error` and `current_error` are totals divided by the node count, so the
    current figure is a per-node sum over that node's branches, not a per-branch mean.
    """
    voltage_error: float
    current_error: float
    max_voltage_error: float
    max_current_error: float


def compare_solutions(truth: Sequence[NodeResult], result: Sequence[NodeResult]) -> ComparisonReport:
    """
    Compares two solutions of the same network node by node and branch by branch.

    Raises:
        ValueError: The solutions differ in node count or in the number of branches at a node.
    """
    if len(truth) != len(result):
        raise ValueError(f"Cannot compare solutions with {len(truth)} and {len(result)} nodes.")
    if len(truth) == 0:
        return ComparisonReport(0.0, 0.0, 0.0, 0.0)

    voltage_diffs = []
    current_diffs = []
    for node, (expected, actual) in enumerate(zip(truth, result)):
        if len(expected.connections) != len(actual.connections):
            raise ValueError(
                f"Node {node} has {len(expected.connections)} reference branches but "
                f"{len(actual.connections)} computed branches."
            )
        voltage_diffs.append(abs(expected.voltage - actual.voltage))
        current_diffs.extend(
            abs(e.current - a.current) for e, a in zip(expected.connections, actual.connections)
        )

    n = len(truth)
    return ComparisonReport(
        voltage_error=float(np.sum(voltage_diffs)) / n,
        current_error=float(np.sum(current_diffs)) / n,
        max_voltage_error=float(np.max(voltage_diffs)),
        max_current_error=float(np.max(current_diffs)) if current_diffs else 0.0,
    )


def compare_matrices(matrix_a, matrix_b) -> float:
    """Mean absolute element-wise difference of two equally shaped matrices."""
    a = np.asarray(matrix_a, dtype=np.float64)
    b = np.asarray(matrix_b, dtype=np.float64)
    if a.shape != b.shape:
        raise ValueError(f"Cannot compare matrices of shapes {a.shape} and {b.shape}.")
    if a.size == 0:
        return 0.0
    return float(np.mean(np.abs(a - b)))
