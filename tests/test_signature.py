import pytest

from sandbox_completion.sanitizer import load_definition
from sandbox_completion.signature import parse_call_signature, render_description, render_signature


def test_parse_parameters_with_optional_markers():
    signature = parse_call_signature("fn(sep?: string, maxsplit?: number)")

    assert [(p.name, p.type, p.optional) for p in signature.parameters] == [
        ("sep", "string", True),
        ("maxsplit", "number", True),
    ]
    assert signature.return_type is None


def test_parse_empty_parameter_list():
    signature = parse_call_signature("fn()")

    assert signature.parameters == []
    assert signature.render() == "fn()"


def test_parse_structured_parameter_types():
    signature = parse_call_signature("fn(items: [string], key?: fn(), value: string|number, proto: +dict)")

    assert [p.type for p in signature.parameters] == ["[string]", "fn()", "string|number", "+dict"]


def test_parse_keeps_curried_remainder_as_return():
    signature = parse_call_signature("fn(x: number) -> fn(y: number)")

    assert signature.parameters[0].name == "x"
    assert signature.return_type == "fn(y: number)"


@pytest.mark.parametrize("malformed", ["", "fn(", "number", "fn(x number)", None])
def test_malformed_signatures_are_absent(malformed):
    assert parse_call_signature(malformed) is None


def test_render_function_description():
    node = load_definition(
        {"split": {"!type": "fn(sep?: string) -> [string]", "!doc": "Split a string.", "!url": "https://docs.python.org/3/library/stdtypes.html#str.split"}}
    ).child("split")

    rendered = render_description("split", node)

    assert rendered.startswith("```python\n(function) split(sep?: string) -> [string]\n```")
    assert "**Split a string.**" in rendered
    assert "[Reference](https://docs.python.org/3/library/stdtypes.html#str.split)" in rendered


def test_render_property_and_object():
    root = load_definition({"size": {"!type": "number"}, "tools": {}})

    assert render_signature("size", root.child("size")) == "(property) size: number"
    assert render_signature("tools", root.child("tools")) == "(object) tools"
