"""
Common utility functions for avrotsify.
"""

# pylint: disable=line-too-long

import os
import textwrap
from typing import Optional

import jinja2

MIN_DOC_WIDTH = 20
TAB_WIDTH = 4


def simple_name(name: str) -> str:
    """
    Strip the namespace from a dotted Avro name.

    Args:
        name (str): A simple or namespace-qualified Avro name.

    Returns:
        str: The final segment of the name.
    """
    return name.split('.')[-1]


def namespace_of(name: str) -> str:
    """Return the namespace part of a dotted Avro name, or '' if there is none."""
    return name.rpartition('.')[0]


def fullname(name: str, namespace: str = '') -> str:
    """
    Constructs the full name of an Avro named type.

    A name that already contains a dot is taken as fully qualified. Otherwise
    the given namespace, if any, is prepended.

    Args:
        name (str): The name as written in the schema.
        namespace (str): The namespace in effect for the name.

    Returns:
        str: The fully qualified name.
    """
    if '.' in name or not namespace:
        return name
    return namespace + '.' + name


def process_template(file_path: str, **kvargs) -> str:
    """
    Process a file as a Jinja2 template with the given object as input.

    Args:
        file_path (str): The path to the template, relative to the package.
        **kvargs: The values to render into the template.

    Returns:
        str: The processed template as a string.
    """
    file_dir = os.path.dirname(__file__)
    template_loader = jinja2.FileSystemLoader(searchpath=file_dir)
    template_env = jinja2.Environment(loader=template_loader, keep_trailing_newline=True)
    template_env.filters['simple_name'] = simple_name

    template = template_env.get_template(file_path)
    return template.render(**kvargs)


def check_doc_width(width: int, indent: str = '', tab_width: int = TAB_WIDTH) -> int:
    """
    Validate a documentation width.

    Raises:
        ValueError: The width is below MIN_DOC_WIDTH or leaves no room for
            comment text after the indentation.
    """
    if width < MIN_DOC_WIDTH:
        raise ValueError(f"Documentation width must be at least {MIN_DOC_WIDTH}, got {width}")
    if width - len(indent.expandtabs(tab_width)) - 3 < 1:
        raise ValueError(f"Documentation width {width} is too small for an indent of {indent!r}")
    return width


def create_documentation(doc: Optional[str], width: int = 80, indent: str = '', tab_width: int = TAB_WIDTH) -> str:
    """
    Render a documentation string as a TypeScript block comment.

    Short docs become a single ``/** text */`` line. Longer docs are word
    wrapped so that no line, indentation included, exceeds ``width``
    columns. Tabs in the indentation count as ``tab_width`` columns. Line
    breaks present in the doc are kept.

    Args:
        doc (Optional[str]): The Avro ``doc`` attribute.
        width (int): The maximum line width of the comment.
        indent (str): The indentation placed in front of every comment line.
        tab_width (int): The column width of a tab in ``indent``.

    Returns:
        str: The comment followed by a newline, or '' when there is no doc.

    Raises:
        ValueError: ``width`` is too small, see check_doc_width.
    """
    if not doc or not doc.strip():
        return ''
    check_doc_width(width, indent, tab_width)
    text = doc.strip().replace('*/', '*\\/')
    column = len(indent.expandtabs(tab_width))
    lines = text.splitlines()
    if len(lines) == 1 and column + len(text) + 7 <= width:
        return f"{indent}/** {text} */\n"

    wrap_width = width - column - 3
    body = []
    for line in lines:
        wrapped = textwrap.wrap(line, wrap_width)
        if not wrapped:
            body.append(f"{indent} *")
        else:
            body.extend(f"{indent} * {segment}" for segment in wrapped)
    return f"{indent}/**\n" + "\n".join(body) + f"\n{indent} */\n"
