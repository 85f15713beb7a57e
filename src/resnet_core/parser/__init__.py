# src/resnet_core/parser/__init__.py
from .raw_data import ParsedNetlist
from .parser import NetlistParser
from .exceptions import ParsingError, SchemaValidationError

__all__ = [
    "ParsedNetlist",
    "NetlistParser",
    "ParsingError",
    "SchemaValidationError",
]
