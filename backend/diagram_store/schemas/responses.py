"""Response Schemas — small typed envelopes for write/lookup endpoints.

Invariants:
    - Documents themselves are returned as stored JSON (no response_model re-serialization)
    - Every successful write answers {"ok": true}

Design Decisions:
    - Documents stay untyped dicts at the API boundary: the store persists caller
      payloads verbatim apart from merge/normalization (ADR: structure validated by the editor)
"""

from pydantic import BaseModel


class OkResponse(BaseModel):
    """Acknowledgement of a successful write or idempotent delete."""
    ok: bool = True


class DeleteResponse(OkResponse):
    """Idempotent delete — `deleted` tells whether a file was actually removed."""
    deleted: bool


class OwnerResponse(BaseModel):
    """Result of an item-id → owning diagram lookup."""
    collection: str
    item_id: str
    diagram_id: str
