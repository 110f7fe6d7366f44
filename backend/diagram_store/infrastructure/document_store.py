"""Document Store — JSON documents on a filesystem volume, keyed by kind and id.

Invariants:
    - The store exclusively owns the on-disk layout; nothing else writes these files
    - Diagrams live at <data>/diagrams/{id}.json, filters at <data>/diagram_filters/{id}.json,
      config at <data>/config.json
    - Every diagram returned by get/list carries id == its file name (stale body ids overridden)
    - delete is idempotent: a missing key is success, not DocumentNotFoundError
    - list skips-and-logs unreadable or corrupt entries but fails closed when the
      directory itself cannot be enumerated
    - Readers only open '*.json' paths; '*.tmp' files are invisible

Design Decisions:
    - Blocking file IO runs in worker threads (asyncio.to_thread): route handlers stay async
      and the event loop never blocks on fsync
    - Singleton store initialized on startup, mirroring the FastAPI lifespan pattern
      (ADR: no global import side effects)
    - No lock: concurrent read-merge-write updates to one key are last-rename-wins
      and may drop a patch (documented weak consistency, single-user tool)
"""

import asyncio
import logging
import os
from pathlib import Path

from diagram_store.core.document_keys import validate_document_key
from diagram_store.core.domain_types import (
    DOCUMENT_SUFFIX, DocumentKind, DocumentKey, ID_FIELD, JsonObject,
)
from diagram_store.core.errors import (
    CorruptDocumentError, DocumentNotFoundError, ErrorContext,
    InvalidDocumentError, InvalidDocumentKeyError, StorageIOError,
)
from diagram_store.infrastructure.atomic_writer import (
    read_json, remove_file, write_json_atomic,
)

logger = logging.getLogger(__name__)

CONFIG_KEY = DocumentKey("config")


class DocumentStore:
    """Get/list/put/delete of JSON documents with atomic writes."""

    def __init__(
        self,
        data_dir: Path | str,
        diagrams_subdir: str = "diagrams",
        filters_subdir: str = "diagram_filters",
        config_filename: str = "config.json",
        verify_writes: bool = True,
    ):
        self.data_dir = Path(data_dir)
        self._dirs = {
            DocumentKind.DIAGRAM: self.data_dir / diagrams_subdir,
            DocumentKind.DIAGRAM_FILTER: self.data_dir / filters_subdir,
        }
        self._config_path = self.data_dir / config_filename
        self.verify_writes = verify_writes

    # ─── Layout ──────────────────────────────────────────────────

    def directory(self, kind: DocumentKind) -> Path:
        if kind is DocumentKind.CONFIG:
            raise ValueError("config is a single document, not a directory")
        return self._dirs[kind]

    def path_for(self, kind: DocumentKind, key: str) -> Path:
        if kind is DocumentKind.CONFIG:
            return self._config_path
        return self.directory(kind) / f"{validate_document_key(key)}{DOCUMENT_SUFFIX}"

    # ─── Async API ───────────────────────────────────────────────

    async def get(self, kind: DocumentKind, key: str) -> JsonObject:
        return await asyncio.to_thread(self.get_sync, kind, key)

    async def list_all(self, kind: DocumentKind) -> list[JsonObject]:
        return await asyncio.to_thread(self.list_all_sync, kind)

    async def put(self, kind: DocumentKind, key: str, document: JsonObject) -> None:
        await asyncio.to_thread(self.put_sync, kind, key, document)

    async def delete(self, kind: DocumentKind, key: str) -> bool:
        return await asyncio.to_thread(self.delete_sync, kind, key)

    async def exists(self, kind: DocumentKind, key: str) -> bool:
        return await asyncio.to_thread(self.path_for(kind, key).is_file)

    async def health_check(self) -> bool:
        """Data directory exists (or can be created) and is writable."""
        return await asyncio.to_thread(self._health_check_sync)

    # ─── Sync implementation ─────────────────────────────────────

    def get_sync(self, kind: DocumentKind, key: str) -> JsonObject:
        path = self.path_for(kind, key)
        context = ErrorContext(document_kind=kind.value, document_key=key)
        try:
            document = read_json(path)
        except FileNotFoundError:
            raise DocumentNotFoundError(kind.value, key)
        except ValueError as e:
            raise CorruptDocumentError(kind.value, key, type(e).__name__)
        except OSError as e:
            raise StorageIOError(e.strerror or str(e), "read", context)
        if not isinstance(document, dict):
            raise CorruptDocumentError(kind.value, key, "not a JSON object")
        return self._with_id(kind, key, document)

    def list_all_sync(self, kind: DocumentKind) -> list[JsonObject]:
        directory = self.directory(kind)
        try:
            with os.scandir(directory) as it:
                names = sorted(
                    e.name for e in it
                    if e.name.endswith(DOCUMENT_SUFFIX) and e.is_file()
                )
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageIOError(
                e.strerror or str(e), "list",
                ErrorContext(document_kind=kind.value),
            )

        documents = []
        for name in names:
            key = name[: -len(DOCUMENT_SUFFIX)]
            try:
                documents.append(self.get_sync(kind, key))
            except (
                DocumentNotFoundError, CorruptDocumentError,
                InvalidDocumentKeyError, StorageIOError,
            ) as e:
                # deleted mid-scan, corrupt or unreadable: skip, keep enumerating
                logger.warning(
                    f"Skipping {kind.value} '{key}' while listing: {e.message}",
                    extra={
                        "document_kind": kind.value, "document_key": key,
                        "error_code": e.code,
                    },
                )
        return documents

    def put_sync(self, kind: DocumentKind, key: str, document: JsonObject) -> None:
        if not isinstance(document, dict):
            raise InvalidDocumentError("body must be a JSON object")
        write_json_atomic(
            self.path_for(kind, key), document,
            kind=kind.value, key=key, verify=self.verify_writes,
        )

    def delete_sync(self, kind: DocumentKind, key: str) -> bool:
        removed = remove_file(self.path_for(kind, key))
        logger.info(
            f"Deleted {kind.value} '{key}'" if removed
            else f"{kind.value} '{key}' already absent",
            extra={"document_kind": kind.value, "document_key": key},
        )
        return removed

    def _health_check_sync(self) -> bool:
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Data directory unavailable: {e}")
            return False
        return os.access(self.data_dir, os.W_OK)

    @staticmethod
    def _with_id(kind: DocumentKind, key: str, document: JsonObject) -> JsonObject:
        if kind is DocumentKind.DIAGRAM:
            document[ID_FIELD] = key
        return document


# Singleton (initialized on startup)
document_store: DocumentStore | None = None


def init_store(data_dir: Path | str, **kwargs) -> DocumentStore:
    global document_store
    document_store = DocumentStore(data_dir, **kwargs)
    return document_store


def get_store() -> DocumentStore:
    """FastAPI dependency for the document store."""
    if not document_store:
        raise RuntimeError("Document store not initialized")
    return document_store
