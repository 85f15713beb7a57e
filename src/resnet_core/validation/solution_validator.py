# src/resnet_core/validation/solution_validator.py
"""
Post-solve checks on a `Solution`.

The checks are diagnostic: they are never run inside the solvers, and a solution that
fails them is still returned to the caller. Three families of checks are performed:

- numerical: every voltage and every branch current must be a number (ERROR);
- current law: the outgoing currents at each interior node must sum to zero within
  the tolerance (ERROR);
- voltage consistency: the neighbour voltage deltas at each interior node should sum
  to zero within the tolerance (WARNING). This only follows from the current law when
  all resistors at the node are equal, so a deviation is reported but not fatal.

Interior nodes are all nodes except ground and source. A solution without a boundary
condition is checked at every node.
"""
import logging
import math
from typing import List, Sequence

from ..constants import KCL_TOLERANCE_AMPS, VOLTAGE_CONSISTENCY_TOLERANCE_VOLTS
from ..data_structures import NodeResult
from .exceptions import SolutionValidationError
from .issues import ValidationIssue, ValidationIssueLevel
from .issue_codes import IssueCode

logger = logging.getLogger(__name__)


class SolutionValidator:
    def __init__(
        self,
        solution: Sequence[NodeResult],
        tolerance: float = KCL_TOLERANCE_AMPS,
        voltage_tolerance: float = VOLTAGE_CONSISTENCY_TOLERANCE_VOLTS,
    ):
        self.solution = solution
        self.tolerance = tolerance
        self.voltage_tolerance = voltage_tolerance
        self.issues: List[ValidationIssue] = []

    def _interior_nodes(self) -> List[int]:
        boundary = getattr(self.solution, "boundary", None)
        nodes = range(len(self.solution))
        if boundary is None:
            return list(nodes)
        return [node for node in nodes if not boundary.is_fixed(node)]

    def validate(self) -> List[ValidationIssue]:
        """Runs all checks and returns the issues found (possibly empty)."""
        self.issues = []
        self._check_numerical()
        interior = self._interior_nodes()
        self._check_current_law(interior)
        self._check_voltage_consistency(interior)

        errors = sum(1 for i in self.issues if i.level == ValidationIssueLevel.ERROR)
        if errors:
            logger.warning(f"Solution checks found {errors} error(s) across {len(self.solution)} node(s).")
        return self.issues

    def assert_valid(self) -> None:
        """
        Raises:
            SolutionValidationError: At least one ERROR-level issue was found.
        """
        issues = self.validate()
        if any(issue.level == ValidationIssueLevel.ERROR for issue in issues):
            raise SolutionValidationError(issues)

    def _add_issue(self, level: ValidationIssueLevel, code_enum: IssueCode, **kwargs):
        self.issues.append(ValidationIssue(
            level=level, code=code_enum.code, message=code_enum.format_message(**kwargs),
            node=kwargs.get('node'), details=kwargs
        ))

    def _check_numerical(self):
        for node, result in enumerate(self.solution):
            if math.isnan(result.voltage):
                self._add_issue(ValidationIssueLevel.ERROR, IssueCode.NUM_NAN_VOLTAGE, node=node)
            for conn in result.connections:
                if math.isnan(conn.current):
                    self._add_issue(ValidationIssueLevel.ERROR, IssueCode.NUM_NAN_CURRENT, node=node, to=conn.to)

    def _check_current_law(self, nodes: List[int]):
        for node in nodes:
            current_sum = math.fsum(conn.current for conn in self.solution[node].connections)
            # NaN sums are already reported by the numerical check.
            if abs(current_sum) > self.tolerance:
                self._add_issue(ValidationIssueLevel.ERROR, IssueCode.LAW_KCL, node=node, current_sum=current_sum)

    def _check_voltage_consistency(self, nodes: List[int]):
        for node in nodes:
            result = self.solution[node]
            voltage_sum = math.fsum(self.solution[conn.to].voltage - result.voltage for conn in result.connections)
            if abs(voltage_sum) > self.voltage_tolerance:
                self._add_issue(
                    ValidationIssueLevel.WARNING, IssueCode.LAW_VOLTAGE_CONSISTENCY,
                    node=node, voltage_sum=voltage_sum
                )
