"""
Resolution of Avro schema nodes to TypeScript type references.

Resolving a node returns the text a containing declaration uses to refer to
the type. As a side effect, declarations for records and enums seen for the
first time are appended to the declaration buffer and their identifiers are
recorded in the type registry.
"""

# pylint: disable=too-many-arguments, line-too-long

import logging
from dataclasses import dataclass
from typing import List, Optional

from avrotsify.common import check_doc_width, create_documentation, process_template, simple_name
from avrotsify.registry import DeclarationBuffer, TypeRegistry, forward_reference
from avrotsify.schema import (ArraySchema, EnumSchema, FieldSchema, FixedSchema, MapSchema,
                              NamedReference, PrimitiveSchema, RecordSchema, SchemaNode,
                              UnionSchema, UnknownSchema, UnsupportedConstructError)

logger = logging.getLogger(__name__)

NULL_TYPE = 'null | undefined'
BINARY_TYPE = 'Buffer'
UNKNOWN_TYPE = 'unknown'
INTERFACE_PREFIX = 'I'
UNION_SEPARATOR = ' | '

PRIMITIVE_TYPE_MAP = {
    'null': NULL_TYPE,
    'boolean': 'boolean',
    'int': 'number',
    'long': 'number',
    'float': 'number',
    'double': 'number',
    'bytes': BINARY_TYPE,
    'string': 'string',
}


@dataclass(frozen=True)
class ResolvedType:
    """The TypeScript text for a type and whether that text is a union."""
    text: str
    is_union: bool = False


@dataclass(frozen=True)
class Diagnostic:
    """A warning about a schema node that could not be translated."""
    offending_node: str
    message: str
    document: Optional[str] = None


class TypeResolver:
    """Converts schema nodes to TypeScript type references and declarations."""

    def __init__(self, registry: TypeRegistry, buffer: DeclarationBuffer, deduplicate: bool = False,
                 strict: bool = False, doc_width: int = 80, indent: str = '  ',
                 diagnostics: Optional[List[Diagnostic]] = None, document_name: Optional[str] = None) -> None:
        self.registry = registry
        self.buffer = buffer
        self.deduplicate = deduplicate
        self.strict = strict
        self.doc_width = check_doc_width(doc_width, indent)
        self.indent = indent
        self.diagnostics = diagnostics if diagnostics is not None else []
        self.document_name = document_name

    def resolve(self, node: SchemaNode) -> ResolvedType:
        """Resolve any schema node to the type text used at its reference site."""
        if isinstance(node, PrimitiveSchema):
            return self.resolve_primitive(node)
        if isinstance(node, NamedReference):
            return self.resolve_reference(node)
        if isinstance(node, RecordSchema):
            return self.resolve_record(node)
        if isinstance(node, EnumSchema):
            return self.resolve_enum(node)
        if isinstance(node, FixedSchema):
            return self.resolve_fixed(node)
        if isinstance(node, ArraySchema):
            return self.resolve_array(node)
        if isinstance(node, MapSchema):
            return self.resolve_map(node)
        if isinstance(node, UnionSchema):
            return self.resolve_union(node)
        if isinstance(node, UnknownSchema):
            return self.resolve_unknown(node)
        return self.resolve_unknown(UnknownSchema(node, f"unexpected node {type(node).__name__}"))

    def resolve_primitive(self, node: PrimitiveSchema) -> ResolvedType:
        text = PRIMITIVE_TYPE_MAP[node.name]
        return ResolvedType(text, is_union=UNION_SEPARATOR in text)

    def resolve_reference(self, node: NamedReference) -> ResolvedType:
        """
        Resolve a reference by name. Names not yet in the registry become a
        forward-reference marker, replaced by link_forward_references once
        every declaration of the output is known.
        """
        identifier = self.registry.lookup(node.name)
        if identifier is None:
            logger.debug("Forward reference to %s", node.name)
            return ResolvedType(forward_reference(node.name))
        return ResolvedType(identifier)

    def link_forward_references(self) -> None:
        """
        Replace forward-reference markers in the buffer with the identifiers
        registered for them. Names never declared fall back to their simple
        name.
        """
        for name in self.buffer.pending_references():
            if self.registry.lookup(name) is None:
                logger.warning("Type %s is referenced but never declared", name)

        def identifier_for(name: str) -> str:
            identifier = self.registry.lookup(name)
            return identifier if identifier is not None else simple_name(name)

        self.buffer.link(identifier_for)

    def resolve_record(self, record: RecordSchema) -> ResolvedType:
        """
        Emit an interface declaration for a record and return its identifier.

        The identifier is reserved before the fields are resolved, so fields
        that refer back to the record resolve to the interface name.
        """
        if self.deduplicate and record.name in self.registry:
            return ResolvedType(self.registry.lookup(record.name))

        interface_name = self.registry.reserve(record.name, INTERFACE_PREFIX + simple_name(record.name))
        members = [self.render_member(field) for field in record.fields]
        declaration = process_template(
            "avrotots/interface.ts.jinja",
            doc=create_documentation(record.doc, self.doc_width),
            interface_name=interface_name,
            members=members,
        )
        self.buffer.append(declaration)
        logger.debug("Declared interface %s for %s", interface_name, record.name)
        return ResolvedType(interface_name)

    def render_member(self, field: FieldSchema) -> str:
        """Render one interface member. Unions with null become optional members."""
        field_type = field.type
        optional = isinstance(field_type, UnionSchema) and field_type.is_optional
        if optional:
            branches = field_type.without_null()
            resolved = self.resolve_union(UnionSchema(branches)) if branches else ResolvedType(NULL_TYPE, True)
        else:
            resolved = self.resolve(field_type)
        doc = create_documentation(field.doc, self.doc_width, self.indent)
        return f"{doc}{self.indent}{field.name}{'?' if optional else ''}: {resolved.text};"

    def resolve_enum(self, enum: EnumSchema) -> ResolvedType:
        if self.deduplicate and enum.name in self.registry:
            return ResolvedType(self.registry.lookup(enum.name))

        enum_name = self.registry.reserve(enum.name, simple_name(enum.name))
        declaration = process_template(
            "avrotots/enum.ts.jinja",
            doc=create_documentation(enum.doc, self.doc_width),
            enum_name=enum_name,
            symbols=enum.symbols,
            indent=self.indent,
        )
        self.buffer.append(declaration)
        logger.debug("Declared enum %s for %s", enum_name, enum.name)
        return ResolvedType(enum_name)

    def resolve_fixed(self, fixed: FixedSchema) -> ResolvedType:
        # fixed is rendered inline; later references by name resolve to the same type
        self.registry.register_alias(fixed.name, BINARY_TYPE)
        return ResolvedType(BINARY_TYPE)

    def resolve_array(self, array: ArraySchema) -> ResolvedType:
        items = self.resolve(array.items)
        if items.is_union:
            return ResolvedType(f"Array<{items.text}>")
        return ResolvedType(f"{items.text}[]")

    def resolve_map(self, map_schema: MapSchema) -> ResolvedType:
        values = self.resolve(map_schema.values)
        return ResolvedType(f"{{ [key: string]: {values.text} }}")

    def resolve_union(self, union: UnionSchema) -> ResolvedType:
        """Resolve all branches in order and join the distinct results."""
        texts: List[str] = []
        nested_union = False
        for branch in union.branches:
            resolved = self.resolve(branch)
            if resolved.text not in texts:
                texts.append(resolved.text)
                nested_union = nested_union or resolved.is_union
        return ResolvedType(UNION_SEPARATOR.join(texts), is_union=nested_union or len(texts) > 1)

    def resolve_unknown(self, node: UnknownSchema) -> ResolvedType:
        """
        Handle a node of unrecognized shape.

        Raises:
            UnsupportedConstructError: In strict mode.
        """
        message = f"Cannot work out type: {node.reason}"
        if self.strict:
            raise UnsupportedConstructError(message, node.describe())
        self.diagnostics.append(Diagnostic(node.describe(), message, self.document_name))
        logger.warning("%s: %s", message, node.describe())
        return ResolvedType(UNKNOWN_TYPE)
