# src/resnet_core/validation/exceptions.py
"""
Defines the diagnosable exception raised when a solved network fails its checks.
"""
from typing import List

from .issues import ValidationIssue, ValidationIssueLevel
from ..errors import DiagnosableError, format_diagnostic_report


class SolutionValidationError(DiagnosableError):
    """
    Raised by `SolutionValidator.assert_valid` when one or more ERROR-level issues
    were found. Holds only the error-level issues.
    """
    def __init__(self, issues: List[ValidationIssue]):
        self.issues: List[ValidationIssue] = [
            issue for issue in issues if issue.level == ValidationIssueLevel.ERROR
        ]
        if not self.issues:
            summary_message = "SolutionValidationError was raised with no error-level issues."
        else:
            summary_message = (
                f"Solution validation failed with {len(self.issues)} error(s):\n"
                + "\n".join(f"  - {issue}" for issue in self.issues)
            )
        super().__init__(summary_message)

    def get_diagnostic_report(self) -> str:
        details = (
            f"The solved network violates {len(self.issues)} check(s):\n\n"
            + "\n".join(f"  - {issue}" for issue in self.issues)
        )
        first_issue = self.issues[0] if self.issues else None
        context = {'node': first_issue.node} if first_issue else {}

        return format_diagnostic_report(
            error_type="Solution Validation Error",
            details=details,
            suggestion="NaN values point at a singular or diverged solve. KCL violations after a relaxation solve usually mean the iteration budget or learning rate is too small.",
            context=context
        )
