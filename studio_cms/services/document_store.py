"""
JSON document storage on the local filesystem.

This module provides safe read/write of whole JSON documents:
- Read failures are classified as missing, corrupt, or other I/O errors
- Serialization happens before anything touches the disk
- The previous contents are copied to ``<file>.backup`` before each overwrite
- New contents are written to a temp file and moved into place

Concurrent writers within one process are serialized per document through
``DocumentStore.lock``; separate processes are not coordinated and the last
writer wins.
"""

from __future__ import annotations

import json
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator

from studio_cms.core.locks import LockRegistry
from studio_cms.utils.exceptions import (
    CorruptDocumentError,
    DocumentNotFoundError,
    FileOperationError,
    SerializationError,
)
from studio_cms.utils.files import atomic_write_text, ensure_directory
from studio_cms.utils.logger import get_logger

logger = get_logger(__name__)

BACKUP_SUFFIX = ".backup"


def backup_path_for(path: Path) -> Path:
    return path.with_name(path.name + BACKUP_SUFFIX)


class DocumentStore:
    """Reads and writes JSON documents under a base directory"""

    def __init__(self, base_dir: Path):
        self.base_dir = ensure_directory(Path(base_dir))
        self._locks = LockRegistry()

    def resolve(self, name: str) -> Path:
        """Map a document name (``hero``) or file name (``hero.json``) to its path"""
        filename = name if name.endswith(".json") else f"{name}.json"
        return self.base_dir / filename

    @contextmanager
    def lock(self, path: Path) -> Iterator[None]:
        """Hold the per-document lock for a read-modify-write cycle"""
        with self._locks.get(str(Path(path).resolve())):
            yield

    def read(self, path: Path) -> Any:
        """
        Load and parse a JSON document.

        Raises:
            DocumentNotFoundError: The file does not exist
            CorruptDocumentError: The file exists but is not valid JSON
            FileOperationError: Any other filesystem failure
        """
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = f.read()
        except FileNotFoundError:
            raise DocumentNotFoundError(f"File not found: {path.name}")
        except OSError as e:
            raise FileOperationError(f"Failed to read file: {e}")

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("Corrupt document", document=path.name, error=str(e))
            raise CorruptDocumentError(f"Invalid JSON in file: {path.name}")

    def write(self, path: Path, document: Any) -> None:
        """
        Serialize and persist a document, backing up the previous version.

        Raises:
            SerializationError: The document cannot be encoded as JSON
            FileOperationError: The new contents could not be written
        """
        path = Path(path)
        try:
            payload = json.dumps(document, indent=2, ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Data cannot be serialized to JSON: {e}")

        with self.lock(path):
            self._backup(path)
            try:
                atomic_write_text(path, payload)
            except OSError as e:
                raise FileOperationError(f"Failed to write file: {e}")

        logger.info("Document written", document=path.name, bytes=len(payload))

    def read_backup(self, path: Path) -> Any:
        """Previous contents of ``path``, for recovery tooling; requests never read backups"""
        return self.read(backup_path_for(Path(path)))

    def _backup(self, path: Path) -> None:
        # Best effort: a failed backup never blocks the write
        if not path.exists():
            return
        try:
            shutil.copyfile(path, backup_path_for(path))
        except OSError as e:
            logger.warning("Failed to create backup", document=path.name, error=str(e))


class ContentRepository:
    """
    Per-kind access to content documents.

    Routers and the CRUD service talk to ``get``/``put`` by resource kind and
    never see file paths, so the storage backend can change underneath them.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    def path_for(self, kind: str) -> Path:
        return self.store.resolve(kind)

    def get(self, kind: str) -> Any:
        return self.store.read(self.path_for(kind))

    def put(self, kind: str, document: Dict[str, Any]) -> None:
        self.store.write(self.path_for(kind), document)

    def get_backup(self, kind: str) -> Any:
        """Previous version of a document, for manual recovery"""
        return self.store.read_backup(self.path_for(kind))

    @contextmanager
    def lock(self, kind: str) -> Iterator[None]:
        with self.store.lock(self.path_for(kind)):
            yield
