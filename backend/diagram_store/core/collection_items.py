"""Collection Items — pure list operations on a diagram's nested collections.

Invariants:
    - Every function returns a NEW diagram dict; inputs are never mutated
    - Items are addressed by their string `id` field, unique within a collection
    - A collection absent from the diagram behaves as an empty list
    - assign_item_attributes never changes an item's id

Design Decisions:
    - Shallow attribute assignment for item updates (nested objects replaced, not merged):
      item patches come from the editor as complete attribute values
    - put_item replaces in place to keep ordering stable; absent ids append
"""

import copy
from typing import Any

from diagram_store.core.domain_types import Collection, ID_FIELD, ItemId, JsonObject
from diagram_store.core.errors import (
    InvalidCollectionError, ItemNotFoundError, UnknownCollectionError,
)


def parse_collection(name: str) -> Collection:
    """Map a path segment onto a Collection or raise UnknownCollectionError."""
    try:
        return Collection(name)
    except ValueError:
        raise UnknownCollectionError(name) from None


def validate_item(collection: Collection, item: Any) -> JsonObject:
    """An item must be an object with a non-empty string id."""
    if not isinstance(item, dict):
        raise InvalidCollectionError(collection.value, "item must be an object")
    item_id = item.get(ID_FIELD)
    if not isinstance(item_id, str) or not item_id:
        raise InvalidCollectionError(
            collection.value, "item must have a non-empty string 'id'",
        )
    return item


def get_items(diagram: JsonObject, collection: Collection) -> list[JsonObject]:
    """Deep copy of the collection's items ([] when absent or null)."""
    items = diagram.get(collection.value)
    if items is None:
        return []
    if not isinstance(items, list):
        raise InvalidCollectionError(
            collection.value, f"expected a list, got {type(items).__name__}",
        )
    return copy.deepcopy(items)


def find_item_index(items: list[JsonObject], item_id: str) -> int | None:
    for index, item in enumerate(items):
        if isinstance(item, dict) and item.get(ID_FIELD) == item_id:
            return index
    return None


def find_item(
    diagram: JsonObject, collection: Collection, item_id: str,
) -> JsonObject | None:
    items = get_items(diagram, collection)
    index = find_item_index(items, item_id)
    return None if index is None else items[index]


def _with_items(
    diagram: JsonObject, collection: Collection, items: list[JsonObject],
) -> JsonObject:
    updated = dict(diagram)
    updated[collection.value] = items
    return updated


def append_item(
    diagram: JsonObject, collection: Collection, item: JsonObject,
) -> JsonObject:
    items = get_items(diagram, collection)
    items.append(copy.deepcopy(validate_item(collection, item)))
    return _with_items(diagram, collection, items)


def put_item(
    diagram: JsonObject, collection: Collection, item: JsonObject,
) -> JsonObject:
    """Replace the item with the same id, or append it when absent."""
    item = copy.deepcopy(validate_item(collection, item))
    items = get_items(diagram, collection)
    index = find_item_index(items, item[ID_FIELD])
    if index is None:
        items.append(item)
    else:
        items[index] = item
    return _with_items(diagram, collection, items)


def remove_item(
    diagram: JsonObject, collection: Collection, item_id: str,
) -> JsonObject:
    """Drop every item with item_id. Absent ids are a no-op."""
    items = [
        i for i in get_items(diagram, collection)
        if not (isinstance(i, dict) and i.get(ID_FIELD) == item_id)
    ]
    return _with_items(diagram, collection, items)


def clear_items(diagram: JsonObject, collection: Collection) -> JsonObject:
    return _with_items(diagram, collection, [])


def assign_item_attributes(
    diagram: JsonObject,
    collection: Collection,
    item_id: ItemId,
    attributes: JsonObject,
) -> JsonObject:
    """Shallow-assign attributes onto the item; raises ItemNotFoundError if absent."""
    items = get_items(diagram, collection)
    index = find_item_index(items, item_id)
    if index is None:
        raise ItemNotFoundError(collection.value, item_id)
    updated = dict(items[index])
    updated.update(copy.deepcopy(attributes))
    updated[ID_FIELD] = item_id
    items[index] = updated
    return _with_items(diagram, collection, items)
