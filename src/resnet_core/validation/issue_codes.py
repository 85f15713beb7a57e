# src/resnet_core/validation/issue_codes.py
import logging
from enum import Enum

logger = logging.getLogger(__name__)


class IssueCode(Enum):
    """
    Registry of validation issue codes and their message templates.
    Each enum member's value is a tuple: (code_str, message_template_str).
    """

    # --- Circuit Topology Issues (TOPO_...) ---
    TOPO_ASYMMETRIC = ("TOPO_ASYMMETRIC", "Node {node} lists a {resistance} ohm connection to node {to}, but node {to} has no matching connection back (found: {reverse}).")
    TOPO_ISOLATED = ("TOPO_ISOLATED", "Node {node} has no connections; a direct solve will report a singular matrix.")
    TOPO_SELF_LOOP = ("TOPO_SELF_LOOP", "Node {node} has a {resistance} ohm connection to itself, which carries no current.")

    # --- Solution Numerical Issues (NUM_...) ---
    NUM_NAN_VOLTAGE = ("NUM_NAN_VOLTAGE", "Node {node} has an undefined (NaN) voltage.")
    NUM_NAN_CURRENT = ("NUM_NAN_CURRENT", "Node {node} has an undefined (NaN) current toward node {to}.")

    # --- Solution Physics Issues (LAW_...) ---
    LAW_KCL = ("LAW_KCL", "Kirchhoff's current law is violated at node {node}: outgoing currents sum to {current_sum:.3e} A.")
    LAW_VOLTAGE_CONSISTENCY = ("LAW_VOLTAGE_CONSISTENCY", "Neighbour voltage deltas at node {node} sum to {voltage_sum:.3e} V.")

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def template(self) -> str:
        return self.value[1]

    def format_message(self, **kwargs) -> str:
        """Formats the message template with provided keyword arguments."""
        try:
            return self.template.format(**kwargs)
        except KeyError as e:
            logger.error(f"Missing key {e} for formatting message template of {self.name} (code: {self.code}): '{self.template}'. Provided args: {kwargs}")
            return f"Error formatting message for {self.code}: Missing key {e}. Template: '{self.template}' Args: {kwargs}"
