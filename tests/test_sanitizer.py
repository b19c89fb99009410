import copy

import pytest
from pydantic import ValidationError

from sandbox_completion.definition import DefinitionNode
from sandbox_completion.sanitizer import load_definition, sanitize_definition, split_call_signature


def test_split_call_signature_peels_the_return_type():
    assert split_call_signature("fn(x: number) -> string") == ("fn(x: number)", "string")


def test_split_call_signature_without_arrow_has_no_return():
    assert split_call_signature("fn(x: number)") == ("fn(x: number)", None)


def test_sanitize_splits_call_signature():
    raw = {"toFixed": {"!type": "fn(x: number) -> string"}}

    sanitized = sanitize_definition(raw)

    assert sanitized["toFixed"]["!type"] == "fn(x: number)"
    assert sanitized["toFixed"]["!return"] == "string"


def test_sanitize_only_peels_the_final_segment_of_curried_signatures():
    raw = {"curry": {"!type": "fn(x: number) -> fn(y: number) -> string"}}

    sanitized = sanitize_definition(raw)

    assert sanitized["curry"]["!type"] == "fn(x: number) -> fn(y: number)"
    assert sanitized["curry"]["!return"] == "string"


def test_call_signature_without_return_stays_without_return():
    sanitized = sanitize_definition({"log": {"!type": "fn(message: string)"}})

    assert sanitized["log"]["!type"] == "fn(message: string)"
    assert "!return" not in sanitized["log"]


def test_non_call_signatures_are_untouched():
    raw = {"length": {"!type": "number"}, "items": {"!type": "[fn() -> string]"}, "proto": {"!type": "+list"}}

    sanitized = sanitize_definition(raw)

    assert sanitized == raw
    assert "!return" not in sanitized["items"]


def test_sanitize_recurses_into_function_children():
    raw = {"Counter": {"!type": "fn(start: number) -> +Counter", "increment": {"!type": "fn() -> !this"}}}

    sanitized = sanitize_definition(raw)

    assert sanitized["Counter"]["!return"] == "+Counter"
    assert sanitized["Counter"]["increment"]["!type"] == "fn()"
    assert sanitized["Counter"]["increment"]["!return"] == "!this"


def test_metadata_and_leaf_values_pass_through_in_order():
    raw = {"!name": "doc", "!define": {"Point": {"!type": "fn() -> number"}}, "version": "1.0", "x": {"!type": "number"}}

    sanitized = sanitize_definition(raw)

    assert list(sanitized) == ["!name", "!define", "version", "x"]
    # Metadata is never treated as a child, even when it looks like one.
    assert sanitized["!define"] == {"Point": {"!type": "fn() -> number"}}
    assert sanitized["version"] == "1.0"


def test_sanitize_does_not_mutate_its_input():
    raw = {"a": {"!type": "fn() -> string", "b": {"!type": "fn() -> number"}}}
    original = copy.deepcopy(raw)

    sanitize_definition(raw)

    assert raw == original


def test_sanitizing_a_canonical_tree_is_a_no_op():
    raw = {
        "split": {"!type": "fn(sep?: string) -> [string]"},
        "curry": {"!type": "fn(x: number) -> fn(y: number) -> string"},
        "nested": {"inner": {"!type": "fn() -> bool", "deeper": {"!type": "fn() -> +list"}}},
        "plain": {"!type": "string"},
    }

    once = sanitize_definition(raw)
    twice = sanitize_definition(once)

    assert twice == once


def test_load_definition_builds_node_tree():
    raw = {
        "!doc": "root",
        "upper": {"!type": "fn() -> string", "!doc": "Uppercase.", "!url": "https://example.test/upper", "!effects": ["custom"]},
        "count": 3,
    }

    node = load_definition(raw)

    assert isinstance(node, DefinitionNode)
    assert node.doc == "root"
    assert list(node.children) == ["upper"]
    upper = node.child("upper")
    assert upper.type_signature == "fn()"
    assert upper.return_signature == "string"
    assert upper.url == "https://example.test/upper"
    assert upper.annotations == {"!effects": ["custom"]}
    assert upper.is_call


def test_loaded_nodes_cannot_be_changed():
    node = load_definition({"upper": {"!type": "fn() -> string", "!effects": ["custom"]}})
    upper = node.child("upper")

    with pytest.raises(TypeError):
        node.children["lower"] = upper
    with pytest.raises(TypeError):
        upper.annotations["!effects"] = []
    with pytest.raises(ValidationError):
        upper.doc = "changed"

    assert list(node.children) == ["upper"]
    assert DefinitionNode().children == {}
