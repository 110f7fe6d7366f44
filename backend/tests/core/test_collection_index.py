"""Collection index — item id → owning diagram scan."""

from diagram_store.core.collection_index import find_owner
from diagram_store.core.domain_types import Collection


DIAGRAM_A = {"id": "a", "tables": [{"id": "ta"}], "areas": [{"id": "shared"}]}
DIAGRAM_B = {"id": "b", "tables": [{"id": "tb"}], "areas": [{"id": "shared"}]}


def test_finds_owner_in_second_document():
    assert find_owner([DIAGRAM_A, DIAGRAM_B], "tb", Collection.TABLES) == "b"


def test_first_match_wins_on_duplicate_ids():
    assert find_owner([DIAGRAM_A, DIAGRAM_B], "shared", Collection.AREAS) == "a"
    assert find_owner([DIAGRAM_B, DIAGRAM_A], "shared", Collection.AREAS) == "b"


def test_scans_only_the_named_collection():
    assert find_owner([DIAGRAM_A, DIAGRAM_B], "ta", Collection.AREAS) is None


def test_missing_item_returns_none():
    assert find_owner([DIAGRAM_A], "nope", Collection.TABLES) is None


def test_malformed_collections_are_skipped():
    broken = {"id": "broken", "tables": {"tb": {"id": "tb"}}}
    assert find_owner([broken, DIAGRAM_B], "tb", Collection.TABLES) == "b"


def test_empty_document_list():
    assert find_owner([], "x", Collection.TABLES) is None
