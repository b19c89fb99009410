import types

import pytest

from sandbox_completion.exceptions import DescriptionError, ErrorCode
from sandbox_completion.graph_builder import AssociationTable, attach_descriptions, build_association_table
from sandbox_completion.object_model import ObjectModel
from sandbox_completion.sanitizer import load_definition


class Widget:
    def render(self):
        return "<widget>"

    @property
    def size(self):
        raise RuntimeError("accessor must not run")


@pytest.fixture
def live_root():
    return types.SimpleNamespace(
        Widget=Widget,
        settings={"debug": True, "theme": {"name": "dark"}},
        version=3,
        undocumented=types.SimpleNamespace(secret=object()),
    )


@pytest.fixture
def definition():
    return load_definition(
        {
            "Widget": {
                "!type": "fn() -> +Widget",
                "render": {"!type": "fn() -> string"},
                "size": {"!type": "number", "unit": {"!type": "string"}},
            },
            "settings": {"debug": {"!type": "bool"}, "theme": {"name": {"!type": "string"}}},
            "version": {"!type": "number"},
            "missing": {"!type": "fn()"},
        }
    )


def test_every_reachable_pair_is_recorded_by_identity(live_root, definition):
    table = build_association_table([definition], live_root)

    assert table.get(live_root) is definition
    assert table.get(Widget) is definition.child("Widget")
    assert table.get(Widget.__dict__["render"]) is definition.child("Widget").child("render")
    assert table.get(live_root.settings) is definition.child("settings")
    assert table.get(live_root.settings["theme"]) is definition.child("settings").child("theme")
    assert len(table) == 5


def test_primitive_and_missing_branches_are_not_recorded(live_root, definition):
    table = build_association_table([definition], live_root)

    # `version` is a primitive, `missing` has no live counterpart.
    assert table.get(3) is None
    assert all(node is not definition.child("missing") for node in (table.get(obj) for obj in table))


def test_undefined_live_properties_are_never_visited(live_root, definition):
    table = build_association_table([definition], live_root)

    assert live_root.undocumented not in table
    assert live_root.undocumented.secret not in table


def test_accessors_are_read_without_running_them(live_root, definition):
    # Building would raise if the `size` property getter ran.
    table = build_association_table([definition], live_root)

    assert Widget.__dict__["size"] not in table


def test_table_is_keyed_by_identity_not_equality():
    first, second = {"a": {}}, {"a": {}}
    root = {"first": first, "second": second}
    node = load_definition({"first": {"a": {"!doc": "first"}}, "second": {"a": {"!doc": "second"}}})

    table = build_association_table([node], root)

    assert first == second
    assert table.get(first["a"]).doc == "first"
    assert table.get(second["a"]).doc == "second"
    assert table.get({"a": {}}) is None


def test_later_documents_win(live_root):
    generic = load_definition({"Widget": {"!doc": "generic"}})
    specific = load_definition({"Widget": {"!doc": "specific"}})

    table = build_association_table([generic, specific], live_root)

    assert table.get(Widget).doc == "specific"


def test_attach_descriptions_folds_into_an_existing_table(live_root):
    table = AssociationTable()
    model = ObjectModel()

    attach_descriptions(table, load_definition({"Widget": {}}), live_root, model)
    attach_descriptions(table, load_definition({"settings": {}}), live_root, model)

    assert Widget in table
    assert live_root.settings in table


def test_built_table_is_read_only(live_root, definition):
    table = build_association_table([definition], live_root)

    assert table.frozen
    with pytest.raises(DescriptionError) as exc_info:
        table.attach(object(), definition)

    assert exc_info.value.code == ErrorCode.TABLE_FROZEN


def test_non_structured_root_records_nothing(definition):
    table = build_association_table([definition], "not an object")

    assert len(table) == 0
