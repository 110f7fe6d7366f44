"""Atomic File Writer — crash-safe JSON persistence via temp file + fsync + rename.

Invariants:
    - Readers see the previous complete file or the new complete file, never a mix
    - Temp file lives in the destination directory (same filesystem as the rename)
    - Temp data is fsynced BEFORE os.replace; the destination is untouched on failure
    - Temp files always end in '.tmp' and are removed when the write fails
    - The temp descriptor is closed on every path, success or failure
    - Only standard JSON reaches disk: NaN, Infinity and lone surrogates are
      rejected before any file is created
    - Every writer uses its own temp file: concurrent writers to one key never share bytes

Design Decisions:
    - mkstemp over a fixed '{id}.json.tmp' name: two writers racing on one fixed temp
      path could interleave bytes before either rename (ADR: last-rename-wins contract)
    - Verification re-reads the renamed file: catches media corruption, reported as
      WriteVerificationError rather than a plain StorageIOError
    - No automatic retry: write failures always surface to the caller
    - Encoding happens in serialize_document, so the temp write is raw bytes and
      cannot fail halfway on a character the codec rejects
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from diagram_store.core.domain_types import TEMP_SUFFIX
from diagram_store.core.errors import (
    ErrorContext, InvalidDocumentError, StorageIOError, WriteVerificationError,
)

logger = logging.getLogger(__name__)

_FILE_MODE = 0o644


def serialize_document(document: Any) -> bytes:
    """Canonical JSON as UTF-8: 2-space indent, trailing newline, no NaN/Infinity."""
    try:
        text = json.dumps(document, indent=2, ensure_ascii=False, allow_nan=False)
        return (text + "\n").encode("utf-8")
    except (TypeError, ValueError) as e:
        # UnicodeEncodeError (lone surrogates) is a ValueError
        raise InvalidDocumentError(f"no standard JSON form ({e})")


def read_json(path: Path) -> Any:
    """Parse a JSON file. Raises FileNotFoundError, OSError or ValueError."""
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def write_json_atomic(
    path: Path,
    document: Any,
    *,
    kind: str = "document",
    key: str | None = None,
    verify: bool = True,
) -> None:
    """Persist document at path atomically, optionally verifying the result."""
    key = key or path.stem
    context = ErrorContext(document_kind=kind, document_key=key)
    data = serialize_document(document)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f"{path.name}.", suffix=TEMP_SUFFIX,
        )
    except OSError as e:
        raise StorageIOError(e.strerror or str(e), "open", context)

    tmp = Path(tmp_name)
    try:
        try:
            _write_all(fd, data)
            os.fsync(fd)
        finally:
            os.close(fd)
        os.chmod(tmp, _FILE_MODE)
        os.replace(tmp, path)
    except OSError as e:
        _discard_temp(tmp)
        raise StorageIOError(e.strerror or str(e), "write", context)

    logger.debug(
        f"Wrote {kind} '{key}' ({len(data)} bytes)",
        extra={"document_kind": kind, "document_key": key},
    )
    if verify:
        verify_json(path, kind=kind, key=key)


def verify_json(path: Path, *, kind: str, key: str) -> None:
    """Re-read and re-parse path; raise WriteVerificationError on failure."""
    try:
        read_json(path)
    except (OSError, ValueError) as e:
        logger.error(
            f"Verification of {kind} '{key}' failed: {e}",
            extra={"document_kind": kind, "document_key": key},
        )
        raise WriteVerificationError(kind, key, type(e).__name__)


def remove_file(path: Path) -> bool:
    """Unlink path. Returns False when it did not exist (idempotent delete)."""
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as e:
        raise StorageIOError(e.strerror or str(e), "delete")
    return True


def _write_all(fd: int, data: bytes) -> None:
    view = memoryview(data)
    while view:
        view = view[os.write(fd, view):]


def _discard_temp(tmp: Path) -> None:
    try:
        tmp.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove temp file {tmp.name}: {e}")
