# --- src/resnet_core/units.py ---
import pint
import logging

logger = logging.getLogger(__name__)
ureg = pint.UnitRegistry()
Quantity = ureg.Quantity
logger.info("Pint Unit Registry initialized.")

# --- Canonical dimensionality objects for explicit checks ---
RESISTANCE_DIMENSIONALITY = ureg.parse_expression('ohm').dimensionality
VOLTAGE_DIMENSIONALITY = ureg.parse_expression('volt').dimensionality


def to_magnitude(value, unit: str) -> float:
    """
    Converts a netlist value to a float in the given unit.

    Plain numbers are taken to already be expressed in `unit`. Strings are parsed by pint
    ("2.2 kohm", "500 mV"); a bare numeric string is treated like a plain number.

    Raises:
        pint.DimensionalityError: The value carries a unit incompatible with `unit`.
        pint.UndefinedUnitError: The string names a unit pint does not know.
        ValueError: The value is neither a number nor a parseable string.
    """
    if isinstance(value, bool):
        raise ValueError(f"Boolean value '{value}' is not a valid {unit} quantity.")
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        raise ValueError(f"Value '{value}' of type {type(value).__name__} is not a valid {unit} quantity.")

    parsed = ureg.Quantity(value)
    if parsed.dimensionless and not parsed.unitless:
        raise pint.DimensionalityError(parsed.units, unit)
    if parsed.unitless:
        return float(parsed.magnitude)
    return float(parsed.to(unit).magnitude)
