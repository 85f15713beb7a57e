# src/resnet_core/errors.py
import logging
from typing import Any, Dict, Protocol, abstractmethod
from typing import runtime_checkable

logger = logging.getLogger(__name__)

# --- User-Facing Exception Hierarchy ---

class ResNetError(Exception):
    """Base class for all custom, user-facing errors in ResNet Core."""
    pass

class NetlistLoadError(ResNetError):
    """
    Raised when a netlist file cannot be turned into a solvable network, from YAML
    loading to schema and unit validation. The message is a pre-formatted diagnostic report.
    """
    pass

class SolverRunError(ResNetError):
    """
    Raised when a solve fails for a reason that is not one of the documented solver
    failure modes (invalid parameters, singular system). The message is a pre-formatted,
    user-friendly diagnostic report and the original exception is chained.
    """
    pass


# --- Diagnostic Protocol & Base Exception ---

@runtime_checkable
class Diagnosable(Protocol):
    """
    A protocol for exceptions that can generate their own diagnostic report.
    """
    def get_diagnostic_report(self) -> str:
        """Generates a complete, user-friendly, multi-line report string."""
        ...

class DiagnosableError(Exception, Diagnosable):
    """
    A common, concrete base class for all internal exceptions that are diagnosable.

    It inherits from `Exception`, so it can be used in `except` clauses, and declares
    `get_diagnostic_report` as abstract, so every subclass must provide a report or fail
    at instantiation time.
    """
    @abstractmethod
    def get_diagnostic_report(self) -> str:
        """
        Abstract method to generate the diagnostic report.
        Subclasses MUST implement this.
        """
        raise NotImplementedError


# --- Stateless Formatting Utility ---

def format_diagnostic_report(
    error_type: str,
    details: str,
    suggestion: str,
    context: Dict[str, Any]
) -> str:
    """
    A stateless helper to format the final multi-line report string, ensuring a
    consistent look and feel for all user-facing diagnostics.

    Args:
        error_type: The high-level category of the error (e.g., "Singular Matrix").
        details: A detailed, potentially multi-line description of the problem.
        suggestion: Actionable advice for the user to resolve the issue.
        context: A dictionary of contextual information (node, parameter, source file, ...).

    Returns:
        A formatted diagnostic report string ready for display.
    """
    lines = [
        "\n",
        "================ ResNet Core: Actionable Diagnostic Report ================",
        f"Error Type:     {error_type}",
    ]
    if parameter := context.get('parameter'):
        lines.append(f"Parameter:      {parameter}")
    if (node := context.get('node')) is not None:
        lines.append(f"Node:           {node}")
    if source_file := context.get('source_file'):
        lines.append(f"Source File:    {source_file}")
    if backend := context.get('backend'):
        lines.append(f"Backend:        {backend}")

    lines.append("\nDetails:")
    for line in details.splitlines():
        lines.append(f"  {line}")

    if suggestion:
        lines.append("\nSuggestion:")
        for line in suggestion.splitlines():
            lines.append(f"  {line}")

    lines.append("=========================================================================")
    return "\n".join(lines)
