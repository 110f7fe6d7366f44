"""Collection items — pure list edits on diagram collections."""

import pytest

from diagram_store.core.collection_items import (
    append_item, assign_item_attributes, clear_items, find_item,
    get_items, parse_collection, put_item, remove_item, validate_item,
)
from diagram_store.core.domain_types import Collection
from diagram_store.core.errors import (
    InvalidCollectionError, ItemNotFoundError, UnknownCollectionError,
)


def _diagram():
    return {
        "id": "d1",
        "tables": [
            {"id": "t1", "name": "users", "x": 0},
            {"id": "t2", "name": "orders", "x": 10},
        ],
    }


def test_parse_collection_accepts_stored_names():
    assert parse_collection("customTypes") is Collection.CUSTOM_TYPES
    assert parse_collection("tables") is Collection.TABLES


def test_parse_collection_rejects_unknown():
    with pytest.raises(UnknownCollectionError) as exc:
        parse_collection("views")
    assert exc.value.http_status == 404


def test_get_items_absent_collection_is_empty():
    assert get_items({"id": "d1"}, Collection.AREAS) == []


def test_get_items_rejects_mapping():
    with pytest.raises(InvalidCollectionError):
        get_items({"areas": {"a1": {}}}, Collection.AREAS)


def test_find_item():
    assert find_item(_diagram(), Collection.TABLES, "t2")["name"] == "orders"
    assert find_item(_diagram(), Collection.TABLES, "nope") is None


def test_append_item_keeps_order_and_input():
    diagram = _diagram()
    result = append_item(diagram, Collection.TABLES, {"id": "t3"})
    assert [t["id"] for t in result["tables"]] == ["t1", "t2", "t3"]
    assert len(diagram["tables"]) == 2


def test_append_to_absent_collection():
    result = append_item({"id": "d1"}, Collection.AREAS, {"id": "a1"})
    assert result["areas"] == [{"id": "a1"}]


def test_put_item_replaces_in_place():
    result = put_item(_diagram(), Collection.TABLES, {"id": "t1", "name": "people"})
    assert result["tables"][0] == {"id": "t1", "name": "people"}
    assert result["tables"][1]["id"] == "t2"


def test_put_item_appends_when_absent():
    result = put_item(_diagram(), Collection.TABLES, {"id": "t9"})
    assert result["tables"][-1] == {"id": "t9"}


def test_remove_item_absent_is_noop():
    result = remove_item(_diagram(), Collection.TABLES, "nope")
    assert len(result["tables"]) == 2


def test_remove_item():
    result = remove_item(_diagram(), Collection.TABLES, "t1")
    assert [t["id"] for t in result["tables"]] == ["t2"]


def test_clear_items():
    assert clear_items(_diagram(), Collection.TABLES)["tables"] == []


def test_assign_attributes_is_shallow():
    diagram = {"tables": [{"id": "t1", "name": "users", "fields": [{"id": "f1"}]}]}
    result = assign_item_attributes(
        diagram, Collection.TABLES, "t1", {"name": "people", "fields": []},
    )
    assert result["tables"][0] == {"id": "t1", "name": "people", "fields": []}
    assert diagram["tables"][0]["name"] == "users"


def test_assign_attributes_cannot_change_id():
    result = assign_item_attributes(
        _diagram(), Collection.TABLES, "t1", {"id": "hijack"},
    )
    assert result["tables"][0]["id"] == "t1"


def test_assign_attributes_missing_item():
    with pytest.raises(ItemNotFoundError):
        assign_item_attributes(_diagram(), Collection.TABLES, "nope", {})


@pytest.mark.parametrize("item", [None, [], "t1", {"name": "x"}, {"id": ""}, {"id": 5}])
def test_validate_item_rejects_malformed(item):
    with pytest.raises(InvalidCollectionError):
        validate_item(Collection.TABLES, item)
