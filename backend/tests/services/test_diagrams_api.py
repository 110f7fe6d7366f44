"""Diagram endpoints — merge-on-POST, replace-on-PUT, gate, defaults, idempotent delete.

Invariants:
    - POST without a required field is rejected with 400 and no file is created
    - Omitted collections survive a partial POST; an empty array clears them
    - Collections absent on create read back as []
    - DELETE succeeds twice in a row
"""

import json

import pytest

from diagram_store.core.domain_types import DocumentKind


async def test_create_and_read_back(client, make_diagram):
    res = await client.post("/api/diagrams/d1", json=make_diagram())
    assert res.status_code == 200
    assert res.json() == {"ok": True}

    res = await client.get("/api/diagrams/d1")
    assert res.status_code == 200
    body = res.json()
    assert body["id"] == "d1"
    assert body["name"] == "Diagram"


async def test_partial_update_preserves_tables_and_relationships(client, make_diagram):
    initial = make_diagram(
        databaseType="mysql",
        tables=[{"id": "t1", "name": "Table1"}],
        relationships=[{
            "id": "r1", "name": "Rel1",
            "sourceTableId": "t1", "targetTableId": "t1",
            "sourceFieldId": "f1", "targetFieldId": "f1",
        }],
    )
    assert (await client.post("/api/diagrams/test", json=initial)).status_code == 200

    update = make_diagram(databaseType="mysql", updatedAt="2024-01-02")
    assert (await client.post("/api/diagrams/test", json=update)).status_code == 200

    diagram = (await client.get("/api/diagrams/test")).json()
    assert len(diagram["tables"]) == 1
    assert diagram["tables"][0]["id"] == "t1"
    assert len(diagram["relationships"]) == 1
    assert diagram["relationships"][0]["id"] == "r1"
    assert diagram["updatedAt"] == "2024-01-02"


async def test_empty_array_in_patch_deletes_collection(client, make_diagram):
    await client.post("/api/diagrams/d1", json=make_diagram(tables=[{"id": "t1"}]))
    await client.post("/api/diagrams/d1", json=make_diagram(tables=[]))
    assert (await client.get("/api/diagrams/d1")).json()["tables"] == []


async def test_array_defaults_on_create(client, make_diagram):
    await client.post("/api/diagrams/arr-test", json=make_diagram())
    diagram = (await client.get("/api/diagrams/arr-test")).json()
    for key in ("tables", "relationships", "dependencies", "areas", "customTypes"):
        assert diagram[key] == []


async def test_table_position_defaults_on_persist(client, make_diagram):
    await client.post(
        "/api/diagrams/d1", json=make_diagram(tables=[{"id": "t1", "name": "users"}]),
    )
    table = (await client.get("/api/diagrams/d1")).json()["tables"][0]
    assert (table["x"], table["y"]) == (0, 0)
    assert table["fields"] == []
    assert table["indexes"] == []


@pytest.mark.parametrize(
    "missing", ["name", "databaseType", "createdAt", "updatedAt"],
)
async def test_required_field_gate_creates_no_file(client, store, make_diagram, missing):
    body = make_diagram()
    del body[missing]
    res = await client.post("/api/diagrams/new", json=body)

    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "MISSING_REQUIRED_FIELDS"
    assert error["details"]["missing_fields"] == [missing]
    assert not store.path_for(DocumentKind.DIAGRAM, "new").exists()
    assert (await client.get("/api/diagrams/new")).status_code == 404


async def test_required_field_gate_leaves_existing_untouched(client, store, make_diagram):
    await client.post("/api/diagrams/d1", json=make_diagram(tables=[{"id": "t1"}]))
    before = store.path_for(DocumentKind.DIAGRAM, "d1").read_bytes()

    res = await client.post("/api/diagrams/d1", json={"tables": []})
    assert res.status_code == 400
    assert store.path_for(DocumentKind.DIAGRAM, "d1").read_bytes() == before


async def test_id_in_body_cannot_redirect_storage(client, store, make_diagram):
    await client.post("/api/diagrams/d1", json=make_diagram(id="other"))
    assert (await client.get("/api/diagrams/d1")).json()["id"] == "d1"
    assert not store.path_for(DocumentKind.DIAGRAM, "other").exists()


async def test_put_replaces_without_inheriting(client, make_diagram):
    await client.post(
        "/api/diagrams/d1", json=make_diagram(tables=[{"id": "t1"}], note="keep?"),
    )
    res = await client.put("/api/diagrams/d1", json=make_diagram(name="Fresh"))
    assert res.status_code == 200

    diagram = (await client.get("/api/diagrams/d1")).json()
    assert diagram["name"] == "Fresh"
    assert diagram["tables"] == []
    assert "note" not in diagram


async def test_put_also_enforces_required_fields(client):
    res = await client.put("/api/diagrams/d1", json={"name": "x"})
    assert res.status_code == 400


async def test_patch_updates_attributes_and_bumps_updated_at(client, make_diagram):
    await client.post("/api/diagrams/d1", json=make_diagram(tables=[{"id": "t1"}]))
    res = await client.patch("/api/diagrams/d1", json={"name": "Renamed"})
    assert res.status_code == 200

    diagram = (await client.get("/api/diagrams/d1")).json()
    assert diagram["name"] == "Renamed"
    assert diagram["tables"][0]["id"] == "t1"
    assert diagram["updatedAt"] != "2024-01-01T00:00:00.000Z"
    assert diagram["updatedAt"].endswith("Z")


async def test_patch_missing_diagram_is_404(client):
    res = await client.patch("/api/diagrams/nope", json={"name": "x"})
    assert res.status_code == 404


async def test_get_missing_is_404(client):
    res = await client.get("/api/diagrams/missing")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "DOCUMENT_NOT_FOUND"


async def test_delete_is_idempotent(client, make_diagram):
    await client.post("/api/diagrams/d1", json=make_diagram())
    first = await client.delete("/api/diagrams/d1")
    second = await client.delete("/api/diagrams/d1")
    assert first.status_code == second.status_code == 200
    assert first.json() == {"ok": True, "deleted": True}
    assert second.json() == {"ok": True, "deleted": False}
    assert (await client.get("/api/diagrams/d1")).status_code == 404


async def test_list_returns_every_diagram_with_ids(client, make_diagram):
    await client.post("/api/diagrams/b", json=make_diagram(name="B"))
    await client.post("/api/diagrams/a", json=make_diagram(name="A"))
    res = await client.get("/api/diagrams")
    assert res.status_code == 200
    assert [(d["id"], d["name"]) for d in res.json()] == [("a", "A"), ("b", "B")]


async def test_list_skips_corrupt_diagram(client, store, make_diagram):
    await client.post("/api/diagrams/good", json=make_diagram())
    store.path_for(DocumentKind.DIAGRAM, "broken").write_text("{oops")
    res = await client.get("/api/diagrams")
    assert res.status_code == 200
    assert [d["id"] for d in res.json()] == ["good"]


async def test_get_corrupt_diagram_is_500(client, store):
    store.directory(DocumentKind.DIAGRAM).mkdir(parents=True)
    store.path_for(DocumentKind.DIAGRAM, "broken").write_text("{oops")
    res = await client.get("/api/diagrams/broken")
    assert res.status_code == 500
    assert res.json()["error"]["code"] == "CORRUPT_DOCUMENT"


async def test_merge_onto_corrupt_diagram_is_refused_and_put_repairs(
    client, store, make_diagram,
):
    store.directory(DocumentKind.DIAGRAM).mkdir(parents=True)
    path = store.path_for(DocumentKind.DIAGRAM, "broken")
    path.write_text("{oops")

    res = await client.post("/api/diagrams/broken", json=make_diagram())
    assert res.status_code == 500
    assert path.read_text() == "{oops"

    res = await client.put("/api/diagrams/broken", json=make_diagram())
    assert res.status_code == 200
    assert json.loads(path.read_text())["id"] == "broken"


async def test_non_object_body_is_400(client):
    res = await client.post("/api/diagrams/d1", json=[1, 2, 3])
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_mapping_collection_rejected_at_write_boundary(client, store, make_diagram):
    res = await client.post(
        "/api/diagrams/d1", json=make_diagram(tables={"t1": {"id": "t1"}}),
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_COLLECTION"
    assert not store.path_for(DocumentKind.DIAGRAM, "d1").exists()


async def test_reserved_temp_suffix_rejected(client, make_diagram):
    res = await client.post("/api/diagrams/draft.tmp", json=make_diagram())
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_DOCUMENT_KEY"


async def test_storage_failure_surfaces_as_503(client, store, make_diagram, monkeypatch):
    from diagram_store.infrastructure import atomic_writer

    def failing_replace(src, dst):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(atomic_writer.os, "replace", failing_replace)
    res = await client.post("/api/diagrams/d1", json=make_diagram())
    assert res.status_code == 503
    assert res.json()["error"]["code"] == "STORAGE_IO_ERROR"
    assert "/" not in res.json()["error"]["message"]


@pytest.mark.parametrize(
    "overrides",
    [{"name": "\ud800"}, {"zoom": float("nan")}, {"tables": [{"id": "t1", "x": float("-inf")}]}],
    ids=["lone-surrogate", "nan", "negative-infinity"],
)
async def test_non_standard_json_rejected_without_files(client, store, make_diagram, overrides):
    # stdlib dumps escapes the surrogate and emits NaN/-Infinity literals
    body = json.dumps(make_diagram(**overrides)).encode("ascii")
    res = await client.post(
        "/api/diagrams/d1", content=body, headers={"content-type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_DOCUMENT"
    assert not store.path_for(DocumentKind.DIAGRAM, "d1").exists()
    assert list(store.data_dir.rglob("*.tmp")) == []


async def test_nan_config_rejected(client):
    res = await client.put(
        "/api/config", content=b'{"zoom": NaN}', headers={"content-type": "application/json"},
    )
    assert res.status_code == 400
    assert (await client.get("/api/config")).json() == {}
