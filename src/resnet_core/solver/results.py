# src/resnet_core/solver/results.py
import logging
from typing import Sequence, Tuple

from ..data_structures import Circuit, ConnectionResult, NodeResult

logger = logging.getLogger(__name__)


def extract_results(circuit: Circuit, voltages: Sequence[float]) -> Tuple[NodeResult, ...]:
    """
    Derives per-connection currents from solved node voltages.

    For every connection `(to, r)` of node `i` the current is `(v[i] − v[to]) / r`,
    positive when flowing from `i` toward `to`. Connection results keep the adjacency
    order of their node. NaN voltages propagate into the currents unchanged.
    """
    results = []
    for i, connections in enumerate(circuit.adjacency):
        v_i = float(voltages[i])
        results.append(NodeResult(
            voltage=v_i,
            connections=tuple(
                ConnectionResult(to=conn.to, current=(v_i - float(voltages[conn.to])) / conn.resistance)
                for conn in connections
            )
        ))
    return tuple(results)
