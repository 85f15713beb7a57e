# src/resnet_core/validation/issues.py
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)


class ValidationIssueLevel(Enum):
    """Severity level of a validation issue."""
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"

    def __str__(self):
        return self.value


@dataclass
class ValidationIssue:
    """
    Represents a single finding of a circuit or solution check, located at a node
    when the finding is node-specific.
    """
    level: ValidationIssueLevel
    code: str
    message: str
    node: Optional[int] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.level.name} - {self.code}]"]
        if self.node is not None:
            parts.append(f"Node: {self.node}")
        parts.append(f"Message: {self.message}")

        if self.details:
            filtered_details = {k: v for k, v in self.details.items() if k != 'node'}
            if filtered_details:
                details_str = ", ".join(f"{k}={v}" for k, v in sorted(filtered_details.items()))
                parts.append(f"Details: ({details_str})")

        return " ".join(parts)
