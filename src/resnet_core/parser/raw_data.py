# src/resnet_core/parser/raw_data.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..data_structures import BoundaryCondition, Circuit
from ..solver.config import SolverConfig

# The parser's output is a fully resolved, unit-free network. Netlist values have
# already been converted to ohms and volts; nothing downstream sees raw YAML.

@dataclass(frozen=True)
class ParsedNetlist:
    """A netlist file turned into solver inputs."""
    name: str
    circuit: Circuit
    boundary: BoundaryCondition
    config: SolverConfig
    source_path: Optional[Path] = None
