# src/resnet_core/parser/exceptions.py
"""
Defines the diagnosable exceptions of the netlist loading stage.

`ParsingError` covers file access, YAML syntax, units and values that cannot be
turned into a network. `SchemaValidationError` covers documents whose structure does
not match the netlist schema. Both derive from `DiagnosableError`, and
`solve_netlist` converts either into a user-facing `NetlistLoadError`.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union

from ..errors import DiagnosableError, format_diagnostic_report


class BaseParsingError(DiagnosableError):
    """Common base for all netlist loading errors."""
    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Generic Netlist Error",
            details=str(self),
            suggestion="Please check the format and content of the netlist file.",
            context={}
        )


@dataclass(eq=False)
class ParsingError(BaseParsingError):
    """
    Raised for a missing or unreadable file, invalid YAML syntax, or a value that is
    structurally valid but cannot be used (unknown unit, wrong dimension, node index
    outside the declared node count).
    """
    details: str
    file_path: Union[Path, str]

    def __str__(self):
        return f"Parsing error in '{self.file_path}': {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Netlist Parsing or File Error",
            details=self.details,
            suggestion="Ensure the file exists and is readable, contains valid YAML, and that resistances and voltages use ohm- and volt-compatible units (e.g. '2.2 kohm', '500 mV').",
            context={'source_file': self.file_path}
        )


def _format_schema_errors(errors: Dict[Any, Any]) -> str:
    return "\n".join(
        f"  - Field '{field}': {messages[0] if isinstance(messages, list) and len(messages) == 1 else messages}"
        for field, messages in sorted(errors.items(), key=lambda item: str(item[0]))
    )


@dataclass(eq=False)
class SchemaValidationError(BaseParsingError):
    """
    Raised when the YAML is syntactically valid but does not conform to the netlist
    schema (missing keys, wrong types, invalid identifiers, duplicate resistor IDs).
    """
    errors: Dict[str, Any]
    file_path: Union[Path, str]

    def __str__(self):
        return f"Netlist schema validation failed for '{self.file_path}':\n{_format_schema_errors(self.errors)}"

    def get_diagnostic_report(self) -> str:
        details = (
            "The structure of the netlist does not conform to the required schema.\n"
            f"See details for {len(self.errors)} issue(s) below:\n\n{_format_schema_errors(self.errors)}"
        )
        return format_diagnostic_report(
            error_type="Netlist Schema Validation Error",
            details=details,
            suggestion="Correct the listed fields. A netlist needs 'ground', 'source' (with 'node' and 'voltage') and a non-empty 'resistors' list whose entries have two 'nodes' and a 'resistance'.",
            context={'source_file': self.file_path}
        )
