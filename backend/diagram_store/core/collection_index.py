"""Collection Index — locate the diagram that owns a collection item.

Invariants:
    - Linear scan, no persistent index: O(total items across all diagrams)
    - First match wins when (by caller error) an id appears in several diagrams
    - Scan order is the order of the documents passed in (store lists sorted by key)
    - Malformed collections are skipped, never fatal to the scan

Design Decisions:
    - Kept as an explicit, separately named operation rather than folded into CRUD:
      its cost and its race with concurrent writers stay visible to callers
    - Pure over an iterable of already-loaded documents; the service layer does IO
"""

from collections.abc import Iterable

from diagram_store.core.domain_types import Collection, DocumentKey, ID_FIELD, JsonObject


def find_owner(
    documents: Iterable[JsonObject], item_id: str, collection: Collection,
) -> DocumentKey | None:
    """Key of the first document whose collection holds item_id, else None."""
    for document in documents:
        items = document.get(collection.value)
        if not isinstance(items, list):
            continue
        for item in items:
            if isinstance(item, dict) and item.get(ID_FIELD) == item_id:
                return DocumentKey(document[ID_FIELD])
    return None
