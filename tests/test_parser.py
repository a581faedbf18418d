import pytest

from jsast.parser import ParseError, parse_source, select_grammar


@pytest.mark.parametrize(
    "filename, grammar",
    [
        ("app.js", "javascript"),
        ("view.jsx", "javascript"),
        ("server.mjs", "javascript"),
        ("index.ts", "typescript"),
        ("lib.mts", "typescript"),
        ("page.tsx", "tsx"),
        ("snippet", "tsx"),
    ],
)
def test_select_grammar_by_extension(filename, grammar):
    assert select_grammar(filename) == grammar


def test_select_grammar_hints_override_extension():
    assert select_grammar("app.js", typescript=True) == "tsx"
    assert select_grammar("app.ts", jsx=True) == "tsx"
    assert select_grammar("page.tsx", typescript=False) == "javascript"


def test_parse_source_returns_program():
    root = parse_source("const answer: number = 42;", "answer.ts")

    assert root.type == "program"
    assert not root.has_error


def test_parse_source_raises_on_syntax_error():
    with pytest.raises(ParseError) as excinfo:
        parse_source("function (", "broken.js")

    assert excinfo.value.filename == "broken.js"
    assert "syntax error" in excinfo.value.reason
