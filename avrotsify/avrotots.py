# coding: utf-8
"""
Module to convert Avro schema files to TypeScript interface declarations.
"""

# pylint: disable=too-many-arguments, line-too-long

import json
import logging
import os
from typing import Any, List, Optional, Sequence, Union

from avrotsify.schema import MalformedInputError
from avrotsify.translator import DocumentFailure, OutputUnit, SchemaDocument, SchemaTranslator, TranslationResult

logger = logging.getLogger(__name__)

SCHEMA_FILE_EXTENSION = '.avsc'


def get_files_from_input(input_path: str) -> List[str]:
    """
    List the schema files designated by an input argument.

    A file is returned as is. A directory yields its *.avsc files, sorted by name.

    Raises:
        FileNotFoundError: The path does not exist.
    """
    if os.path.isdir(input_path):
        return [os.path.join(input_path, name) for name in sorted(os.listdir(input_path))
                if name.endswith(SCHEMA_FILE_EXTENSION) and os.path.isfile(os.path.join(input_path, name))]
    if os.path.isfile(input_path):
        return [input_path]
    raise FileNotFoundError(f"Avro schema file not found: {input_path}")


def load_schema_document(avro_schema_path: str) -> SchemaDocument:
    """
    Read a schema file. The document is named after the file, without extension.

    Raises:
        OSError: The file cannot be read.
        MalformedInputError: The file is not valid JSON.
    """
    with open(avro_schema_path, 'r', encoding='utf-8') as file:
        text = file.read()
    try:
        schema = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedInputError(f"Invalid JSON: {e}", avro_schema_path, e) from e
    name = os.path.splitext(os.path.basename(avro_schema_path))[0]
    return SchemaDocument(name, schema)


def write_output_unit(output_path: str, unit: OutputUnit) -> str:
    """Write a rendered output unit and return the text that was written."""
    content = unit.render()
    directory = os.path.dirname(output_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as file:
        file.write(content)
    logger.info("Wrote %s", output_path)
    return content


def default_output_folder(input_paths: Sequence[str]) -> str:
    first = input_paths[0]
    if os.path.isdir(first):
        return first
    return os.path.dirname(first) or os.curdir


def convert_avro_to_typescript(input_paths: Union[str, Sequence[str]], out_folder: Optional[str] = None,
                               concat: Optional[str] = None, strict: bool = False, doc_width: int = 80,
                               verbose: bool = False) -> TranslationResult:
    """
    Convert Avro schema files to TypeScript interface files.

    Args:
        input_paths: Schema files or folders containing *.avsc files.
        out_folder: Folder for the per-input .ts files. Defaults to the folder of the first input.
        concat: If set, write all declarations to this single file, declaring every
            named type once. The output folder is ignored.
        strict: Fail a document on unrecognized schema nodes instead of emitting 'unknown'.
        doc_width: Maximum width of generated documentation comments.
        verbose: Print every generated file.

    Returns:
        The translation result. Unreadable inputs are listed among its failures.
    """
    if isinstance(input_paths, str):
        input_paths = [input_paths]
    if not input_paths:
        raise ValueError("At least one input path is required")

    load_failures: List[DocumentFailure] = []
    documents: List[SchemaDocument] = []
    for input_path in input_paths:
        try:
            schema_files = get_files_from_input(input_path)
        except FileNotFoundError as e:
            logger.error("%s", e)
            load_failures.append(DocumentFailure(input_path, e))
            continue
        for schema_file in schema_files:
            try:
                documents.append(load_schema_document(schema_file))
            except (OSError, MalformedInputError) as e:
                logger.error("Failed to load %s: %s", schema_file, e)
                load_failures.append(DocumentFailure(schema_file, e))

    translator = SchemaTranslator(concat=bool(concat), strict=strict, doc_width=doc_width)
    result = translator.translate(documents, target=concat)
    result.failures[:0] = load_failures

    if not concat:
        out_folder = out_folder or default_output_folder(input_paths)
        os.makedirs(out_folder, exist_ok=True)
    for unit in result.units:
        output_path = unit.name if concat else os.path.join(out_folder, unit.name)
        content = write_output_unit(output_path, unit)
        if verbose:
            print(f"{content} is written to {output_path}.")
    return result


def convert_avro_schema_to_typescript(avro_schema: Any, strict: bool = False, doc_width: int = 80) -> str:
    """
    Convert one decoded Avro schema to TypeScript text.

    Raises:
        MalformedInputError: The schema is not a usable top-level schema.
        UnsupportedConstructError: Strict mode met an unrecognized node.
    """
    translator = SchemaTranslator(strict=strict, doc_width=doc_width)
    result = translator.translate([SchemaDocument('schema', avro_schema)])
    if result.failures:
        raise result.failures[0].error
    return result.units[0].render()
