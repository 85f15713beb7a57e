"""
Exposes the linear-algebra backends and their name registry.
"""
from .base import LinearAlgebraBackend
from .sequential import SequentialBackend
from .parallel import ParallelBackend
from .iterative import IterativeBackend, IterativeInverter, InversionReport, INVERTER_METHODS, gershgorin_bound

BACKEND_REGISTRY = {
    SequentialBackend.name: SequentialBackend,
    ParallelBackend.name: ParallelBackend,
    IterativeBackend.name: IterativeBackend,
}

__all__ = [
    "LinearAlgebraBackend",
    "SequentialBackend",
    "ParallelBackend",
    "IterativeBackend",
    "IterativeInverter",
    "InversionReport",
    "INVERTER_METHODS",
    "gershgorin_bound",
    "BACKEND_REGISTRY",
]
