# src/resnet_core/validation/circuit_validator.py
import logging
from collections import Counter
from typing import List, Optional

from ..data_structures import BoundaryCondition, Circuit
from .issues import ValidationIssue, ValidationIssueLevel
from .issue_codes import IssueCode

logger = logging.getLogger(__name__)


class CircuitValidator:
    """
    Structural checks on a resistor network before it is solved.

    The checks report conditions the solver deliberately does not correct:

    - a directed connection with no matching reverse entry (asymmetric conductance matrix);
    - a non-boundary node without connections (singular system);
    - a connection from a node to itself.

    Node indices and resistances must already have passed `validate_inputs`; the
    validator only reports and never raises.
    """

    def __init__(self, circuit: Circuit, boundary: Optional[BoundaryCondition] = None):
        if not isinstance(circuit, Circuit):
            raise TypeError("CircuitValidator requires a Circuit object.")
        self.circuit = circuit
        self.boundary = boundary
        self.issues: List[ValidationIssue] = []

    def validate(self) -> List[ValidationIssue]:
        """Runs all checks and returns the issues found (possibly empty)."""
        self.issues = []
        self._check_isolated_nodes()
        self._check_self_loops()
        self._check_symmetry()

        if self.issues:
            warnings = sum(1 for i in self.issues if i.level == ValidationIssueLevel.WARNING)
            infos = sum(1 for i in self.issues if i.level == ValidationIssueLevel.INFO)
            logger.debug(f"Circuit checks for '{self.circuit.name}' found {warnings} warning(s), {infos} info message(s).")
        return self.issues

    def _add_issue(self, level: ValidationIssueLevel, code_enum: IssueCode, **kwargs):
        self.issues.append(ValidationIssue(
            level=level, code=code_enum.code, message=code_enum.format_message(**kwargs),
            node=kwargs.get('node'), details=kwargs
        ))

    def _check_isolated_nodes(self):
        for node, connections in enumerate(self.circuit.adjacency):
            if connections:
                continue
            if self.boundary is not None and self.boundary.is_fixed(node):
                continue
            self._add_issue(ValidationIssueLevel.WARNING, IssueCode.TOPO_ISOLATED, node=node)

    def _check_self_loops(self):
        for node, connections in enumerate(self.circuit.adjacency):
            for conn in connections:
                if conn.to == node:
                    self._add_issue(ValidationIssueLevel.INFO, IssueCode.TOPO_SELF_LOOP, node=node, resistance=conn.resistance)

    def _check_symmetry(self):
        directed = Counter(
            (node, conn.to, float(conn.resistance))
            for node, connections in enumerate(self.circuit.adjacency)
            for conn in connections
            if conn.to != node
        )
        for (node, to, resistance), count in sorted(directed.items()):
            reverse_count = directed.get((to, node, resistance), 0)
            if reverse_count != count:
                reverse = sorted(conn.resistance for conn in self.circuit.adjacency[to] if conn.to == node)
                self._add_issue(
                    ValidationIssueLevel.WARNING, IssueCode.TOPO_ASYMMETRIC,
                    node=node, to=to, resistance=resistance, reverse=reverse or "none"
                )
