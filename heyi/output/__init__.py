"""Output contract and schema language for heyi."""
from .contract import OutputContract, OutputFormat
from .schema import SchemaNode, SchemaParser, parse_schema

__all__ = [
    'OutputContract', 'OutputFormat',
    'SchemaNode', 'SchemaParser', 'parse_schema',
]
