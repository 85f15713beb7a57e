# src/resnet_core/validation/__init__.py
from .issues import ValidationIssue, ValidationIssueLevel
from .issue_codes import IssueCode
from .exceptions import SolutionValidationError
from .circuit_validator import CircuitValidator
from .solution_validator import SolutionValidator
from .comparison import ComparisonReport, compare_matrices, compare_solutions

__all__ = [
    "ValidationIssue",
    "ValidationIssueLevel",
    "IssueCode",
    "SolutionValidationError",
    "CircuitValidator",
    "SolutionValidator",
    "ComparisonReport",
    "compare_matrices",
    "compare_solutions",
]
