"""
Translation of whole Avro schema documents into TypeScript output units.

In per-input mode every document gets its own registry and buffer and is
written as its own unit. In concatenation mode all documents share one
registry and one buffer, and named types are declared only once. Forward
references are linked when a unit is complete.
"""

# pylint: disable=line-too-long

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from avrotsify.common import check_doc_width
from avrotsify.registry import DeclarationBuffer, TypeRegistry
from avrotsify.resolver import Diagnostic, TypeResolver
from avrotsify.schema import SchemaError, parse_document

logger = logging.getLogger(__name__)

DEFAULT_CONCAT_TARGET = 'avro.ts'


@dataclass
class SchemaDocument:
    """One decoded schema document and the name of the unit it produces."""
    name: str
    schema: Any


@dataclass
class OutputUnit:
    """The declarations generated for one output file."""
    name: str
    buffer: DeclarationBuffer
    indent: str = '  '

    @property
    def declarations(self) -> List[str]:
        return self.buffer.blocks

    def render(self) -> str:
        return self.buffer.render(self.indent)


@dataclass
class DocumentFailure:
    document: str
    error: Exception

    def __str__(self) -> str:
        return f"{self.document}: {self.error}"


@dataclass
class TranslationResult:
    units: List[OutputUnit] = field(default_factory=list)
    failures: List[DocumentFailure] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.failures


class SchemaTranslator:
    """Drives the TypeResolver over schema documents and partitions the output."""

    def __init__(self, concat: bool = False, strict: bool = False, doc_width: int = 80, indent: str = '  ') -> None:
        self.concat = concat
        self.strict = strict
        self.doc_width = check_doc_width(doc_width, indent)
        self.indent = indent

    def create_resolver(self, registry: TypeRegistry, buffer: DeclarationBuffer,
                        diagnostics: List[Diagnostic], document_name: Optional[str] = None) -> TypeResolver:
        return TypeResolver(registry, buffer,
                            deduplicate=self.concat,
                            strict=self.strict,
                            doc_width=self.doc_width,
                            indent=self.indent,
                            diagnostics=diagnostics,
                            document_name=document_name)

    def translate_document(self, document: SchemaDocument, registry: TypeRegistry,
                           buffer: DeclarationBuffer, diagnostics: List[Diagnostic]) -> None:
        """
        Parse one document and resolve each of its top-level types into the buffer.

        Raises:
            MalformedInputError: The document is not a usable schema.
            UnsupportedConstructError: Strict mode met an unrecognized node.
        """
        roots = parse_document(document.schema)
        resolver = self.create_resolver(registry, buffer, diagnostics, document.name)
        for root in roots:
            resolver.resolve(root)

    def translate(self, documents: Iterable[SchemaDocument], target: Optional[str] = None) -> TranslationResult:
        """
        Translate all documents.

        Args:
            documents: The documents, in processing order.
            target: Name of the single unit produced in concatenation mode.

        Returns:
            The output units plus the failures and diagnostics of the run.
        """
        if self.concat:
            return self._translate_concatenated(documents, target or DEFAULT_CONCAT_TARGET)
        return self._translate_per_input(documents)

    def _translate_per_input(self, documents: Iterable[SchemaDocument]) -> TranslationResult:
        result = TranslationResult()
        for document in documents:
            registry = TypeRegistry()
            buffer = DeclarationBuffer()
            try:
                self.translate_document(document, registry, buffer, result.diagnostics)
            except SchemaError as e:
                logger.error("Failed to translate %s: %s", document.name, e)
                result.failures.append(DocumentFailure(document.name, e))
                continue
            self.create_resolver(registry, buffer, result.diagnostics, document.name).link_forward_references()
            result.units.append(OutputUnit(f"{document.name}.ts", buffer, self.indent))
        return result

    def _translate_concatenated(self, documents: Iterable[SchemaDocument], target: str) -> TranslationResult:
        result = TranslationResult()
        registry = TypeRegistry()
        buffer = DeclarationBuffer()
        translated = 0
        for document in documents:
            checkpoint = len(buffer)
            snapshot = registry.snapshot()
            try:
                self.translate_document(document, registry, buffer, result.diagnostics)
            except SchemaError as e:
                logger.error("Failed to translate %s: %s", document.name, e)
                buffer.truncate(checkpoint)
                registry.restore(snapshot)
                result.failures.append(DocumentFailure(document.name, e))
                continue
            translated += 1
        if translated:
            # references may point at types declared by later documents
            self.create_resolver(registry, buffer, result.diagnostics).link_forward_references()
            result.units.append(OutputUnit(target, buffer, self.indent))
        return result
