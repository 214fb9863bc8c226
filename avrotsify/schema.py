"""Avro schema node model.

Decoded Avro JSON is converted into a closed set of frozen dataclasses before
any TypeScript is generated:

- PrimitiveSchema: null, boolean, int, long, float, double, bytes, string,
  including annotated forms such as ``{"type": "long", "logicalType": ...}``
- RecordSchema / FieldSchema, EnumSchema, FixedSchema: named types
- ArraySchema, MapSchema, UnionSchema: anonymous complex types
- NamedReference: a bare string naming a record, enum or fixed type
- UnknownSchema: anything that matches none of the shapes above

Names of named types and references are stored fully qualified, following
Avro's namespace inheritance rules.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

from avrotsify.common import fullname, namespace_of

logger = logging.getLogger(__name__)

PRIMITIVE_TYPES = ('null', 'boolean', 'int', 'long', 'float', 'double', 'bytes', 'string')


class SchemaError(Exception):
    """
    Base class for errors raised while translating an Avro schema.

    Attributes:
        message: Human-readable error description
        context: Optional context about where the error occurred
        cause: Optional underlying exception that caused this error
    """

    def __init__(self, message: str, context: Optional[str] = None,
                 cause: Optional[Exception] = None) -> None:
        self.message = message
        self.context = context
        self.cause = cause
        full_message = message
        if context:
            full_message = f"{message} (context: {context})"
        super().__init__(full_message)


class MalformedInputError(SchemaError):
    """Raised when a document does not describe a usable top-level schema."""


class UnsupportedConstructError(SchemaError):
    """Raised in strict mode when a schema node has an unrecognized shape."""


@dataclass(frozen=True)
class PrimitiveSchema:
    """An Avro primitive, with any foreign annotations it was written with."""
    name: str
    annotations: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class FieldSchema:
    name: str
    type: 'SchemaNode'
    doc: Optional[str] = None


@dataclass(frozen=True)
class RecordSchema:
    name: str
    fields: Tuple[FieldSchema, ...] = ()
    doc: Optional[str] = None


@dataclass(frozen=True)
class EnumSchema:
    name: str
    symbols: Tuple[str, ...] = ()
    doc: Optional[str] = None


@dataclass(frozen=True)
class FixedSchema:
    name: str
    size: Optional[int] = None


@dataclass(frozen=True)
class ArraySchema:
    items: 'SchemaNode'


@dataclass(frozen=True)
class MapSchema:
    values: 'SchemaNode'


@dataclass(frozen=True)
class UnionSchema:
    branches: Tuple['SchemaNode', ...]

    @property
    def is_optional(self) -> bool:
        """True if one of the branches is null."""
        return any(is_null(branch) for branch in self.branches)

    def without_null(self) -> Tuple['SchemaNode', ...]:
        """The branches that are not null, in order."""
        return tuple(branch for branch in self.branches if not is_null(branch))


@dataclass(frozen=True)
class NamedReference:
    name: str


@dataclass(frozen=True)
class UnknownSchema:
    """A node that matches none of the recognized shapes."""
    raw: Any = field(hash=False)
    reason: str = 'unrecognized schema node'

    def describe(self) -> str:
        """Compact JSON rendering of the offending node."""
        return json.dumps(self.raw, sort_keys=True, default=str)


SchemaNode = Union[PrimitiveSchema, RecordSchema, EnumSchema, FixedSchema, ArraySchema,
                   MapSchema, UnionSchema, NamedReference, UnknownSchema]
NamedSchema = Union[RecordSchema, EnumSchema]


def is_null(node: SchemaNode) -> bool:
    return isinstance(node, PrimitiveSchema) and node.name == 'null'


def _optional_doc(value: Dict[str, Any]) -> Optional[str]:
    doc = value.get('doc')
    return doc if isinstance(doc, str) else None


def _required_name(value: Dict[str, Any], kind: str, context: str) -> str:
    name = value.get('name')
    if not isinstance(name, str) or not name:
        raise MalformedInputError(f"{kind} schema is missing a 'name'", context)
    return name


def _own_namespace(name: str, value: Dict[str, Any], namespace: str) -> str:
    """The namespace a named type defines for itself and its children."""
    if '.' in name:
        return namespace_of(name)
    own = value.get('namespace')
    if isinstance(own, str):
        return own
    return namespace


def _parse_record(value: Dict[str, Any], namespace: str, context: str) -> RecordSchema:
    name = _required_name(value, 'Record', context)
    record_namespace = _own_namespace(name, value, namespace)
    qualified_name = fullname(name, record_namespace)
    raw_fields = value.get('fields')
    if not isinstance(raw_fields, list):
        raise MalformedInputError(f"Record '{qualified_name}' has no 'fields' list", context)

    fields = []
    for index, raw_field in enumerate(raw_fields):
        field_context = f"{qualified_name}.fields[{index}]"
        if not isinstance(raw_field, dict):
            raise MalformedInputError("Record field must be a JSON object", field_context)
        field_name = raw_field.get('name')
        if not isinstance(field_name, str) or not field_name:
            raise MalformedInputError("Record field is missing a 'name'", field_context)
        if 'type' not in raw_field:
            raise MalformedInputError(f"Field '{field_name}' is missing a 'type'", field_context)
        fields.append(FieldSchema(
            name=field_name,
            type=parse_schema(raw_field['type'], record_namespace, f"{qualified_name}.{field_name}"),
            doc=_optional_doc(raw_field)))
    return RecordSchema(name=qualified_name, fields=tuple(fields), doc=_optional_doc(value))


def _parse_enum(value: Dict[str, Any], namespace: str, context: str) -> EnumSchema:
    name = _required_name(value, 'Enum', context)
    qualified_name = fullname(name, _own_namespace(name, value, namespace))
    symbols = value.get('symbols')
    if not isinstance(symbols, list) or not all(isinstance(s, str) for s in symbols):
        raise MalformedInputError(f"Enum '{qualified_name}' needs a 'symbols' list of strings", context)
    return EnumSchema(name=qualified_name, symbols=tuple(symbols), doc=_optional_doc(value))


def parse_schema(value: Any, namespace: str = '', context: str = '') -> SchemaNode:
    """
    Convert a decoded Avro JSON value into a schema node.

    Args:
        value: The decoded JSON value (string, list or dict).
        namespace: The namespace inherited from the enclosing named type.
        context: Location of the value, used in error messages.

    Returns:
        The schema node. Values of unrecognized shape become UnknownSchema.

    Raises:
        MalformedInputError: A named type is structurally unusable.
    """
    if isinstance(value, str):
        if value in PRIMITIVE_TYPES:
            return PrimitiveSchema(value)
        return NamedReference(fullname(value, namespace))

    if isinstance(value, list):
        if not value:
            return UnknownSchema(value, 'empty union')
        return UnionSchema(tuple(parse_schema(branch, namespace, context) for branch in value))

    if not isinstance(value, dict):
        return UnknownSchema(value)

    schema_type = value.get('type')
    if schema_type in ('record', 'error'):
        return _parse_record(value, namespace, context)
    if schema_type == 'enum':
        return _parse_enum(value, namespace, context)
    if schema_type == 'fixed':
        name = _required_name(value, 'Fixed', context)
        size = value.get('size')
        return FixedSchema(name=fullname(name, _own_namespace(name, value, namespace)),
                           size=size if isinstance(size, int) else None)
    if schema_type == 'array':
        if 'items' not in value:
            return UnknownSchema(value, "array without 'items'")
        return ArraySchema(parse_schema(value['items'], namespace, context))
    if schema_type == 'map':
        if 'values' not in value:
            return UnknownSchema(value, "map without 'values'")
        return MapSchema(parse_schema(value['values'], namespace, context))
    if isinstance(schema_type, str) and schema_type in PRIMITIVE_TYPES:
        annotations = {k: v for k, v in value.items() if k != 'type'}
        return PrimitiveSchema(schema_type, annotations)
    if isinstance(schema_type, str) and schema_type:
        # {"type": "com.x.Foo"} is a reference to a named type
        return NamedReference(fullname(schema_type, namespace))
    return UnknownSchema(value)


def parse_document(value: Any) -> Tuple[NamedSchema, ...]:
    """
    Parse a top-level schema document.

    A document is a record, an enum, or a list of records and enums.

    Raises:
        MalformedInputError: The document has any other shape.
    """
    if isinstance(value, dict):
        items = [value]
    elif isinstance(value, list):
        items = value
    else:
        raise MalformedInputError(
            f"Schema document must be a JSON object or array, got {type(value).__name__}")
    if not items:
        raise MalformedInputError("Schema document is empty")

    roots = []
    for index, item in enumerate(items):
        context = f"document[{index}]" if isinstance(value, list) else None
        if not isinstance(item, dict) or item.get('type') not in ('record', 'error', 'enum'):
            raise MalformedInputError("Top-level schema must be a record or an enum", context)
        node = parse_schema(item, '', context or '')
        logger.debug("Parsed top-level %s", node.name)
        roots.append(node)
    return tuple(roots)
