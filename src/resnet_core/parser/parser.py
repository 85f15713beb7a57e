# src/resnet_core/parser/parser.py
import logging
import math
import re
import string
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import cerberus
import pint
import yaml

from ..data_structures import BoundaryCondition, Circuit
from ..solver.config import ConfigParsingError, parse_solver_config
from ..units import to_magnitude
from .raw_data import ParsedNetlist
from .exceptions import ParsingError, SchemaValidationError

logger = logging.getLogger(__name__)

ID_REGEX = r"^[a-zA-Z_][a-zA-Z0-9_]*$"
ALLOWED_ID_CHARS = set(string.ascii_letters + string.digits + "_")


class EnhancedValidator(cerberus.Validator):
    """Cerberus validator with the netlist's identifier and uniqueness rules."""
    def __init__(self, *args, **kwargs):
        super(EnhancedValidator, self).__init__(*args, **kwargs)
        self.rules['id_regex'] = {'schema': {'type': 'boolean'}}
        self.rules['unique_elements_by_key'] = {'schema': {'type': 'string'}}

    def _validate_id_regex(self, constraint: bool, field: str, value: Any):
        if not constraint: return
        if not isinstance(value, str):
            self._error(field, "must be a string to be validated by id_regex.")
            return

        if not re.match(ID_REGEX, value):
            invalid_chars = sorted(list(set(value) - ALLOWED_ID_CHARS))
            message = (
                f"Identifier '{value}' is invalid. Identifiers must start with a letter or underscore, "
                "and can only contain letters, numbers, and underscores. "
                f"This identifier contains the following forbidden character(s): {invalid_chars}"
            )
            self._error(field, message)

    def _validate_unique_elements_by_key(self, key_for_uniqueness: str, field: str, value: List[Dict]):
        """
        Validates that all dictionaries in a list have a unique value for a given key.
        The rule's arguments are validated against this schema:
        {'type': 'string'}
        """
        if not isinstance(value, list):
            return

        seen_keys = set()
        duplicates = []
        for item in value:
            if not isinstance(item, dict):
                continue
            item_key = item.get(key_for_uniqueness)
            if item_key is not None:
                if item_key in seen_keys:
                    duplicates.append(item_key)
                else:
                    seen_keys.add(item_key)

        if duplicates:
            self._error(field, f"Duplicate values found for key '{key_for_uniqueness}': {sorted(set(duplicates))}")


class NetlistParser:
    """
    Parses and validates a YAML netlist into a `ParsedNetlist`.

    Resistors are undirected elements in the file and are expanded into the two
    directed adjacency entries the solvers expect, so parsed circuits are always
    symmetric. Resistances and voltages may carry units ("2.2 kohm", "500 mV");
    plain numbers are read as ohms and volts.
    """
    _node_rule = {"type": "integer", "min": 0}
    _quantity_rule = {"type": ["string", "number"], "required": True}

    _resistor_schema = {
        "id": {"type": "string", "required": False, "empty": False, "id_regex": True},
        "nodes": {"type": "list", "required": True, "minlength": 2, "maxlength": 2, "schema": _node_rule},
        "resistance": _quantity_rule,
    }

    _schema = {
        "circuit_name": {"type": "string", "required": False, "id_regex": True},
        "node_count": {"type": "integer", "required": False, "min": 2},
        "ground": dict(_node_rule, required=True),
        "source": {
            "type": "dict", "required": True, "schema": {
                "node": dict(_node_rule, required=True),
                "voltage": _quantity_rule,
            },
        },
        "resistors": {
            "type": "list", "required": True, "minlength": 1, "unique_elements_by_key": "id",
            "schema": {"type": "dict", "schema": _resistor_schema},
        },
        "solver": {"type": "dict", "required": False},
    }

    def __init__(self):
        self._validator = EnhancedValidator(self._schema)
        self._validator.allow_unknown = False
        logger.debug("NetlistParser initialized.")

    def parse(self, netlist_path: Union[str, Path]) -> ParsedNetlist:
        """Reads, validates and converts the netlist file at `netlist_path`."""
        path = Path(netlist_path).resolve()
        logger.info(f"Parsing netlist file: {path}")
        content = self._load_yaml(path)
        return self._build(content, source=path, default_name=path.stem, source_path=path)

    def parse_text(self, text: str, source_name: str = "<string>") -> ParsedNetlist:
        """Parses an in-memory netlist document. `source_name` is used in error reports."""
        try:
            content = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ParsingError(details=f"Invalid YAML syntax: {e}", file_path=source_name) from e
        self._check_root(content, source_name)
        return self._build(content, source=source_name, default_name="circuit", source_path=None)

    def _build(
        self,
        content: Dict[str, Any],
        source: Union[Path, str],
        default_name: str,
        source_path: Optional[Path],
    ) -> ParsedNetlist:
        if not self._validator.validate(content):
            raise SchemaValidationError(errors=self._validator.errors, file_path=source)
        data = self._validator.document

        resistors = [self._convert_resistor(index, raw, source) for index, raw in enumerate(data["resistors"])]
        ground = data["ground"]
        source_node = data["source"]["node"]
        source_voltage = self._convert(data["source"]["voltage"], "volt", "source voltage", source)

        node_count = self._resolve_node_count(data.get("node_count"), ground, source_node, resistors, source)

        try:
            config = parse_solver_config(data.get("solver"))
        except ConfigParsingError as e:
            raise ParsingError(details=str(e), file_path=source) from e

        name = data.get("circuit_name", default_name)
        circuit = Circuit.from_resistors(node_count, resistors, name=name)
        parsed = ParsedNetlist(
            name=name,
            circuit=circuit,
            boundary=BoundaryCondition(ground, source_node, source_voltage),
            config=config,
            source_path=source_path,
        )
        logger.info(f"Parsed netlist '{name}': {node_count} nodes, {len(resistors)} resistor(s).")
        return parsed

    def _convert(self, value: Any, unit: str, what: str, source: Union[Path, str]) -> float:
        try:
            magnitude = to_magnitude(value, unit)
        except pint.DimensionalityError as e:
            raise ParsingError(details=f"The {what} '{value}' is not compatible with '{unit}': {e}", file_path=source) from e
        except pint.UndefinedUnitError as e:
            raise ParsingError(details=f"The {what} '{value}' uses an unknown unit: {e}", file_path=source) from e
        except (pint.errors.PintError, ValueError, TypeError) as e:
            raise ParsingError(details=f"Could not interpret the {what} '{value}': {e}", file_path=source) from e
        if not math.isfinite(magnitude):
            raise ParsingError(details=f"The {what} '{value}' is not a finite number.", file_path=source)
        return magnitude

    def _convert_resistor(self, index: int, raw: Dict[str, Any], source: Union[Path, str]) -> Tuple[int, int, float]:
        label = raw.get("id", f"#{index}")
        node_a, node_b = raw["nodes"]
        resistance = self._convert(raw["resistance"], "ohm", f"resistance of resistor '{label}'", source)
        if resistance <= 0:
            raise ParsingError(
                details=f"Resistor '{label}' has resistance {resistance} ohm; resistances must be strictly positive.",
                file_path=source
            )
        return node_a, node_b, resistance

    def _resolve_node_count(
        self,
        declared: Optional[int],
        ground: int,
        source_node: int,
        resistors: List[Tuple[int, int, float]],
        source: Union[Path, str],
    ) -> int:
        highest = max([ground, source_node] + [node for a, b, _ in resistors for node in (a, b)])
        if declared is None:
            return highest + 1
        if highest >= declared:
            raise ParsingError(
                details=f"Node index {highest} is outside the declared node_count of {declared}.",
                file_path=source
            )
        return declared

    def _check_root(self, content: Any, source: Union[Path, str]) -> None:
        if content is None:
            raise ParsingError(details="The YAML document is empty or contains no valid content.", file_path=source)
        if not isinstance(content, dict):
            raise ParsingError(details="The root of the YAML document must be a dictionary (mapping).", file_path=source)

    def _load_yaml(self, source: Path) -> Dict[str, Any]:
        """Loads and performs basic sanity checks on a YAML file."""
        if not source.is_file():
            raise ParsingError(details=f"Netlist file not found at path: {source}", file_path=source)
        try:
            with source.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except PermissionError as e:
            raise ParsingError(details=f"Permission denied when trying to read file: {e}", file_path=source) from e
        except yaml.YAMLError as e:
            raise ParsingError(details=f"Invalid YAML syntax: {e}", file_path=source) from e
        self._check_root(content, source)
        return content
