import pytest

from avrotsify.common import (MIN_DOC_WIDTH, check_doc_width, create_documentation, fullname, namespace_of,
                              process_template, simple_name)


def test_simple_name_and_namespace():
    assert simple_name("com.example.Thing") == "Thing"
    assert simple_name("Thing") == "Thing"
    assert namespace_of("com.example.Thing") == "com.example"
    assert namespace_of("Thing") == ""


@pytest.mark.parametrize("name, namespace, expected", [
    ("Thing", "", "Thing"),
    ("Thing", "com.example", "com.example.Thing"),
    ("other.Thing", "com.example", "other.Thing"),
])
def test_fullname(name, namespace, expected):
    assert fullname(name, namespace) == expected


def test_documentation_absent():
    assert create_documentation(None) == ''
    assert create_documentation('   ') == ''


def test_short_documentation_is_one_line():
    assert create_documentation("Short doc.") == "/** Short doc. */\n"
    assert create_documentation("  Short doc.  ", indent="  ") == "  /** Short doc. */\n"


def test_long_documentation_is_wrapped_to_width():
    doc = "very long text exceeding eighty characters " * 5
    comment = create_documentation(doc, 80, "    ")
    lines = comment.splitlines()
    assert lines[0] == "    /**"
    assert lines[-1] == "     */"
    assert len(lines) > 3
    assert all(line.startswith("     * ") for line in lines[1:-1])
    assert all(len(line) <= 80 for line in lines)
    assert " ".join(line[7:] for line in lines[1:-1]) == doc.strip()


def test_long_words_are_broken():
    comment = create_documentation("x" * 50, 20)
    assert all(len(line) <= 20 for line in comment.splitlines())


def test_line_breaks_are_preserved():
    assert create_documentation("first\n\nsecond") == "/**\n * first\n *\n * second\n */\n"


def test_comment_terminator_is_escaped():
    assert create_documentation("a */ b") == "/** a *\\/ b */\n"


def test_process_template_renders_enum():
    text = process_template("avrotots/enum.ts.jinja", doc='', enum_name='Kind', symbols=['A', 'B'], indent='  ')
    assert text == "export enum Kind {\n  A = 'A',\n  B = 'B'\n}\n"


def test_process_template_renders_empty_interface():
    text = process_template("avrotots/interface.ts.jinja", doc='', interface_name='IEmpty', members=[])
    assert text == "export interface IEmpty {\n}\n"


@pytest.mark.parametrize("width, indent", [(0, ''), (-5, ''), (19, ''), (20, ' ' * 17)])
def test_too_small_width_is_rejected(width, indent):
    with pytest.raises(ValueError):
        check_doc_width(width, indent)
    with pytest.raises(ValueError):
        create_documentation("hello world text", width, indent)


def test_minimum_width_is_accepted():
    assert check_doc_width(MIN_DOC_WIDTH) == MIN_DOC_WIDTH
    comment = create_documentation("hello world text " * 4, MIN_DOC_WIDTH, "  ")
    assert all(len(line) <= MIN_DOC_WIDTH for line in comment.splitlines())


def test_tabs_in_indent_count_at_tab_width():
    doc = "documentation that does not fit"
    # fits when the tab counts as one column, not when it counts as four
    assert create_documentation(doc, 39, "\t", tab_width=1) == f"\t/** {doc} */\n"
    comment = create_documentation(doc, 39, "\t", tab_width=4)
    assert comment.startswith("\t/**\n")
    assert all(len(line.expandtabs(4)) <= 39 for line in comment.splitlines())
