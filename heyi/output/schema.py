"""
Schema description language for structured output.

Users describe the shape of an object or array item with a small,
zod-flavoured expression language:

    z.object({name: z.string(), population: z.number().int()})
    z.array(z.enum(["low", "medium", "high"]))
    object({title: string().describe("Headline"), tags: string().array()})

The text is parsed with Python's `ast` module and walked against a fixed set
of constructs. It is never evaluated. The result is a tree of SchemaNode
objects that renders to JSON Schema and validates decoded JSON values.
"""

import ast
from abc import ABC, abstractmethod
from typing import Any, Optional

from ..errors import SchemaError


NAMESPACE = "z"


class SchemaNode(ABC):
    """Base class for schema tree nodes.

    Attributes:
        description: Optional description passed on to the model.
        optional: Whether an object field using this node may be omitted.
        nullable: Whether null is accepted in addition to the node's type.
    """

    def __init__(self) -> None:
        self.description: Optional[str] = None
        self.optional = False
        self.nullable = False

    @abstractmethod
    def _json_schema(self) -> dict[str, Any]:
        """JSON Schema for the bare type, without modifiers."""
        pass

    @abstractmethod
    def _validate(self, value: Any, path: str) -> list[str]:
        """Validate a non-null value."""
        pass

    def to_json_schema(self) -> dict[str, Any]:
        """Render this node as a JSON Schema fragment."""
        schema = self._json_schema()
        if self.nullable:
            schema = {"anyOf": [schema, {"type": "null"}]}
        if self.description:
            schema["description"] = self.description
        return schema

    def validate(self, value: Any, path: str = "result") -> list[str]:
        """Validate a decoded JSON value.

        Args:
            value: The value to check.
            path: Location of the value, used in error messages.

        Returns:
            List of error messages; empty when the value conforms.
        """
        if value is None:
            return [] if self.nullable else [f"{path}: expected {self.type_name}, got null"]
        return self._validate(value, path)

    def has_optional_fields(self) -> bool:
        """Whether any object field below this node is optional."""
        return False

    @property
    def type_name(self) -> str:
        return self._json_schema().get("type", "value")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.to_json_schema()!r})"


def _describe_type(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


class StringNode(SchemaNode):
    def _json_schema(self) -> dict[str, Any]:
        return {"type": "string"}

    def _validate(self, value: Any, path: str) -> list[str]:
        if isinstance(value, str):
            return []
        return [f"{path}: expected string, got {_describe_type(value)}"]


class NumberNode(SchemaNode):
    def _json_schema(self) -> dict[str, Any]:
        return {"type": "number"}

    def _validate(self, value: Any, path: str) -> list[str]:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return []
        return [f"{path}: expected number, got {_describe_type(value)}"]


class IntegerNode(SchemaNode):
    def _json_schema(self) -> dict[str, Any]:
        return {"type": "integer"}

    def _validate(self, value: Any, path: str) -> list[str]:
        if isinstance(value, bool):
            return [f"{path}: expected integer, got boolean"]
        if isinstance(value, int) or (isinstance(value, float) and value.is_integer()):
            return []
        return [f"{path}: expected integer, got {_describe_type(value)}"]


class BooleanNode(SchemaNode):
    def _json_schema(self) -> dict[str, Any]:
        return {"type": "boolean"}

    def _validate(self, value: Any, path: str) -> list[str]:
        if isinstance(value, bool):
            return []
        return [f"{path}: expected boolean, got {_describe_type(value)}"]


class EnumNode(SchemaNode):
    def __init__(self, values: list[str]) -> None:
        super().__init__()
        self.values = values

    def _json_schema(self) -> dict[str, Any]:
        return {"type": "string", "enum": list(self.values)}

    def _validate(self, value: Any, path: str) -> list[str]:
        if value in self.values and isinstance(value, str):
            return []
        return [f"{path}: expected one of {self.values}, got {value!r}"]


class ArrayNode(SchemaNode):
    def __init__(self, items: SchemaNode) -> None:
        super().__init__()
        self.items = items

    def _json_schema(self) -> dict[str, Any]:
        return {"type": "array", "items": self.items.to_json_schema()}

    def _validate(self, value: Any, path: str) -> list[str]:
        if not isinstance(value, list):
            return [f"{path}: expected array, got {_describe_type(value)}"]
        errors: list[str] = []
        for i, item in enumerate(value):
            errors.extend(self.items.validate(item, f"{path}[{i}]"))
        return errors

    def has_optional_fields(self) -> bool:
        return self.items.has_optional_fields()


class ObjectNode(SchemaNode):
    def __init__(self, fields: dict[str, SchemaNode]) -> None:
        super().__init__()
        self.fields = fields

    def _json_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {name: node.to_json_schema() for name, node in self.fields.items()},
            "required": [name for name, node in self.fields.items() if not node.optional],
            "additionalProperties": False,
        }

    def _validate(self, value: Any, path: str) -> list[str]:
        if not isinstance(value, dict):
            return [f"{path}: expected object, got {_describe_type(value)}"]

        errors: list[str] = []
        for name, node in self.fields.items():
            if name not in value:
                if not node.optional:
                    errors.append(f"{path}.{name}: missing required field")
                continue
            errors.extend(node.validate(value[name], f"{path}.{name}"))

        for name in value:
            if name not in self.fields:
                errors.append(f"{path}.{name}: unexpected field")
        return errors

    def has_optional_fields(self) -> bool:
        return any(
            node.optional or node.has_optional_fields()
            for node in self.fields.values()
        )


SCALAR_TYPES: dict[str, type[SchemaNode]] = {
    "string": StringNode,
    "number": NumberNode,
    "integer": IntegerNode,
    "boolean": BooleanNode,
}

MODIFIERS = frozenset({"optional", "nullable", "describe", "int", "array"})


class SchemaParser:
    """Turns schema description text into a SchemaNode tree.

    Example:
        node = SchemaParser().parse("z.object({name: z.string()})")
        node.validate({"name": "Ada"})  # []
    """

    def parse(self, text: str) -> SchemaNode:
        """Parse a schema description.

        Raises:
            SchemaError: If the text is empty, not valid syntax, or uses a
                construct outside the language.
        """
        source = (text or "").strip()
        if not source:
            raise SchemaError("Schema description is empty")

        try:
            tree = ast.parse(source, mode="eval")
        except SyntaxError as e:
            raise SchemaError(f"Invalid schema description '{source}': {e.msg}") from e

        return self._node(tree.body)

    def _node(self, node: ast.AST) -> SchemaNode:
        if not isinstance(node, ast.Call):
            raise self._unsupported(node)

        func = node.func
        if isinstance(func, ast.Name):
            return self._constructor(func.id, node)

        if isinstance(func, ast.Attribute):
            if isinstance(func.value, ast.Name) and func.value.id == NAMESPACE:
                return self._constructor(func.attr, node)
            if isinstance(func.value, ast.Call) and func.attr in MODIFIERS:
                return self._modifier(self._node(func.value), func.attr, node)

        raise self._unsupported(node)

    def _constructor(self, name: str, call: ast.Call) -> SchemaNode:
        if call.keywords:
            raise self._unsupported(call)

        if name in SCALAR_TYPES:
            self._expect_args(call, 0)
            return SCALAR_TYPES[name]()

        if name == "array":
            self._expect_args(call, 1)
            return ArrayNode(self._node(call.args[0]))

        if name == "object":
            self._expect_args(call, 1)
            return ObjectNode(self._fields(call.args[0]))

        if name == "enum":
            self._expect_args(call, 1)
            return EnumNode(self._enum_values(call.args[0]))

        raise SchemaError(f"Unknown schema type '{name}'")

    def _modifier(self, base: SchemaNode, name: str, call: ast.Call) -> SchemaNode:
        if call.keywords:
            raise self._unsupported(call)

        if name == "describe":
            self._expect_args(call, 1)
            base.description = self._string(call.args[0])
            return base

        self._expect_args(call, 0)
        if name == "optional":
            base.optional = True
        elif name == "nullable":
            base.nullable = True
        elif name == "array":
            return ArrayNode(base)
        elif name == "int":
            if not isinstance(base, NumberNode):
                raise SchemaError("'.int()' can only follow 'number()'")
            integer = IntegerNode()
            integer.description = base.description
            integer.optional = base.optional
            integer.nullable = base.nullable
            return integer
        return base

    def _fields(self, node: ast.AST) -> dict[str, SchemaNode]:
        if not isinstance(node, ast.Dict):
            raise SchemaError(
                f"object() expects a mapping of fields, got '{ast.unparse(node)}'"
            )
        if not node.keys:
            raise SchemaError("object() needs at least one field")

        fields: dict[str, SchemaNode] = {}
        for key, value in zip(node.keys, node.values):
            if key is None:
                raise SchemaError("Unpacking ('**') is not supported in object()")
            if isinstance(key, ast.Name):
                name = key.id
            else:
                name = self._string(key)
            if name in fields:
                raise SchemaError(f"Duplicate field '{name}' in object()")
            fields[name] = self._node(value)
        return fields

    def _enum_values(self, node: ast.AST) -> list[str]:
        if not isinstance(node, (ast.List, ast.Tuple)) or not node.elts:
            raise SchemaError("enum() expects a non-empty list of strings")
        return [self._string(elt) for elt in node.elts]

    def _string(self, node: ast.AST) -> str:
        if isinstance(node, ast.Constant) and isinstance(node.value, str):
            return node.value
        raise SchemaError(f"Expected a string literal, got '{ast.unparse(node)}'")

    def _expect_args(self, call: ast.Call, count: int) -> None:
        if len(call.args) != count:
            raise SchemaError(
                f"'{ast.unparse(call)}' takes {count} argument(s), got {len(call.args)}"
            )

    def _unsupported(self, node: ast.AST) -> SchemaError:
        return SchemaError(f"Unsupported schema construct '{ast.unparse(node)}'")


def parse_schema(text: str) -> SchemaNode:
    """Convenience function to parse a schema description."""
    return SchemaParser().parse(text)
