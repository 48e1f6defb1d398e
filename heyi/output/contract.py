"""
Output contract between heyi and the model.

The model always answers with a JSON object holding a single `result`
field. The requested format decides what `result` must be and how it is
printed:

- string, number: the scalar, printed as is
- object: one value matching the user schema, printed as indented JSON
- array: a list of values matching the user schema, printed as indented JSON
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..errors import ResponseError, SchemaError
from ..utils import strip_code_fence, truncate_string
from .schema import ArrayNode, NumberNode, SchemaNode, StringNode, parse_schema


logger = logging.getLogger(__name__)


RESULT_FIELD = "result"

# Integral floats below this print without a fractional part
INTEGRAL_FLOAT_LIMIT = 1e21


class OutputFormat(Enum):
    """Shapes a response can take."""
    STRING = "string"
    NUMBER = "number"
    OBJECT = "object"
    ARRAY = "array"

    @property
    def needs_schema(self) -> bool:
        return self in (OutputFormat.OBJECT, OutputFormat.ARRAY)


def format_number(value: Any) -> str:
    """Format a number result.

    Integral floats such as 42.0 print as 42. Very large values keep the
    exponent form (1e+21).
    """
    if isinstance(value, float) and value.is_integer() and abs(value) < INTEGRAL_FLOAT_LIMIT:
        return str(int(value))
    return str(value)


@dataclass
class OutputContract:
    """The response shape for one invocation.

    Attributes:
        format: The requested output format.
        item_schema: Parsed user schema (object and array formats only).
    """
    format: OutputFormat
    item_schema: Optional[SchemaNode] = None

    @classmethod
    def from_options(cls, fmt: str, schema: Optional[str] = None) -> "OutputContract":
        """Build a contract from the --format and --schema values.

        Raises:
            SchemaError: If object/array is requested without a schema, or
                the schema description does not parse.
            ValueError: If the format is not one of the known formats.
        """
        try:
            output_format = OutputFormat(fmt)
        except ValueError:
            raise ValueError(f"Can't create schema for unknown format '{fmt}'") from None

        if not output_format.needs_schema:
            return cls(format=output_format)

        if not schema or not schema.strip():
            raise SchemaError(f"--schema or -s is required when format is '{fmt}'")
        return cls(format=output_format, item_schema=parse_schema(schema))

    @property
    def result_node(self) -> SchemaNode:
        """Schema node the `result` field must satisfy."""
        if self.format is OutputFormat.STRING:
            return StringNode()
        if self.format is OutputFormat.NUMBER:
            return NumberNode()
        if self.format is OutputFormat.OBJECT:
            return self.item_schema
        return ArrayNode(self.item_schema)

    @property
    def strict(self) -> bool:
        """Strict structured output cannot express optional fields."""
        return not self.result_node.has_optional_fields()

    def response_schema(self) -> dict[str, Any]:
        """JSON Schema of the whole reply object."""
        return {
            "type": "object",
            "properties": {RESULT_FIELD: self.result_node.to_json_schema()},
            "required": [RESULT_FIELD],
            "additionalProperties": False,
        }

    def response_format(self) -> dict[str, Any]:
        """The `response_format` request parameter for structured output."""
        return {
            "type": "json_schema",
            "json_schema": {
                "name": f"{self.format.value}_response",
                "strict": self.strict,
                "schema": self.response_schema(),
            },
        }

    def parse_reply(self, content: str) -> Any:
        """Decode and validate the model reply, returning the `result` value.

        Raises:
            ResponseError: If the reply is not JSON, lacks `result`, or the
                value does not conform to the contract.
        """
        try:
            data = json.loads(strip_code_fence(content))
        except json.JSONDecodeError as e:
            raise ResponseError(
                f"Model reply is not valid JSON ({e.msg}): {truncate_string(content, 200)!r}"
            ) from e

        if not isinstance(data, dict) or RESULT_FIELD not in data:
            raise ResponseError(f"Model reply has no '{RESULT_FIELD}' field")

        value = data[RESULT_FIELD]
        errors = self.result_node.validate(value, RESULT_FIELD)
        if errors:
            raise ResponseError("Model reply does not match the requested format", errors)
        return value

    def render(self, value: Any) -> str:
        """Format a validated result for printing."""
        if self.format is OutputFormat.STRING:
            return value
        if self.format is OutputFormat.NUMBER:
            return format_number(value)
        if self.format in (OutputFormat.OBJECT, OutputFormat.ARRAY):
            return json.dumps(value, indent=2, ensure_ascii=False)
        raise ValueError(f"Can't format response for unknown format '{self.format}'")
