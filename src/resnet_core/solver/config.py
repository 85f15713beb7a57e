# src/resnet_core/solver/config.py
import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Union

import cerberus
import numpy as np

from ..backends import BACKEND_REGISTRY, INVERTER_METHODS
from ..backends.base import LinearAlgebraBackend
from ..backends.iterative import IterativeBackend, IterativeInverter
from ..backends.parallel import ParallelBackend
from ..backends.sequential import SequentialBackend
from ..constants import (
    DEFAULT_INVERTER_MAX_ITERATIONS,
    DEFAULT_INVERTER_TOLERANCE,
    DEFAULT_LEARNING_RATE,
    DEFAULT_LOG_INTERVAL,
    DEFAULT_RELAXATION_ITERATIONS,
)
from .exceptions import InvalidParameterError

logger = logging.getLogger(__name__)

SOLVE_METHODS = ("direct", "relaxation")


class ConfigParsingError(ValueError):
    """Custom exception for errors during solver configuration parsing."""
    pass


@dataclass(frozen=True)
class SolverConfig:
    """
    Immutable solver settings.

    Attributes:
        method: Strategy used by `solve_netlist`: "direct" or "relaxation".
        backend: Backend name for direct solves ("sequential", "parallel", "iterative").
        allow_reduced_precision: Must be True to use the "parallel" backend, whose default
                                 single-precision arithmetic carries materially higher error.
        parallel_dtype: Working dtype of the parallel backend ("float32" or "float64").
        inverter_method: Recurrence of the "iterative" backend.
        inverter_max_iterations: Iteration budget of the "iterative" backend.
        inverter_tolerance: Residual tolerance of the "iterative" backend.
        relaxation_iterations: Pass count of the relaxation solver.
        learning_rate: Step size of the relaxation solver.
        log_interval: Relaxation passes between progress log records.
    """
    method: str = "direct"
    backend: str = SequentialBackend.name
    allow_reduced_precision: bool = False
    parallel_dtype: str = "float32"
    inverter_method: str = "richardson"
    inverter_max_iterations: int = DEFAULT_INVERTER_MAX_ITERATIONS
    inverter_tolerance: float = DEFAULT_INVERTER_TOLERANCE
    relaxation_iterations: int = DEFAULT_RELAXATION_ITERATIONS
    learning_rate: float = DEFAULT_LEARNING_RATE
    log_interval: int = DEFAULT_LOG_INTERVAL


_CONFIG_SCHEMA = {
    "method": {"type": "string", "allowed": list(SOLVE_METHODS)},
    "backend": {"type": "string", "allowed": sorted(BACKEND_REGISTRY)},
    "allow_reduced_precision": {"type": "boolean"},
    "parallel_dtype": {"type": "string", "allowed": ["float32", "float64"]},
    "inverter_method": {"type": "string", "allowed": list(INVERTER_METHODS)},
    "inverter_max_iterations": {"type": "integer", "min": 0},
    "inverter_tolerance": {"type": "number", "min": 0},
    "relaxation_iterations": {"type": "integer", "min": 0},
    "learning_rate": {"type": "number", "min": 0, "forbidden": [0, 0.0]},
    "log_interval": {"type": "integer", "min": 1},
}


def parse_solver_config(raw_config: Optional[Dict[str, Any]]) -> SolverConfig:
    """
    Parses a raw configuration mapping (e.g. the `solver` block of a netlist) into a
    `SolverConfig`. Missing keys keep their defaults.

    Raises:
        ConfigParsingError: Unknown keys or values of the wrong type or range.
    """
    if not raw_config:
        return SolverConfig()
    validator = cerberus.Validator(_CONFIG_SCHEMA)
    validator.allow_unknown = False
    if not validator.validate(raw_config):
        messages = "; ".join(f"{key}: {value[0]}" for key, value in sorted(validator.errors.items()))
        raise ConfigParsingError(f"Failed to parse solver configuration: {messages}")

    known = {f.name for f in fields(SolverConfig)}
    config = SolverConfig(**{k: v for k, v in validator.document.items() if k in known})
    logger.debug(f"Parsed solver configuration: {config}")
    return config


def create_backend(
    backend: Union[str, LinearAlgebraBackend, None],
    config: Optional[SolverConfig] = None,
) -> LinearAlgebraBackend:
    """
    Resolves a backend instance from a name (or passes an instance through).

    The "parallel" backend is only created when `config.allow_reduced_precision` is set,
    so that the precision trade-off is an explicit caller decision.

    Raises:
        InvalidParameterError: Unknown backend name, or "parallel" requested without
                               the reduced-precision flag.
    """
    config = config if config is not None else SolverConfig()
    if isinstance(backend, LinearAlgebraBackend):
        return backend
    name = backend if backend is not None else config.backend

    if name not in BACKEND_REGISTRY:
        raise InvalidParameterError(
            parameter="backend",
            details=f"Unknown backend '{name}'. Available: {sorted(BACKEND_REGISTRY)}."
        )
    if name == ParallelBackend.name:
        if not config.allow_reduced_precision:
            raise InvalidParameterError(
                parameter="backend",
                details=(
                    "The parallel backend computes in reduced precision. Set "
                    "allow_reduced_precision=True in the solver configuration to accept it."
                )
            )
        return ParallelBackend(dtype=np.dtype(config.parallel_dtype))
    if name == IterativeBackend.name:
        return IterativeBackend(IterativeInverter(
            max_iterations=config.inverter_max_iterations,
            tolerance=config.inverter_tolerance,
            method=config.inverter_method,
        ))
    return SequentialBackend()
