"""Durable key-value persistence for session artifacts.

Paths are ``/``-separated and relative to the store root, e.g.
``project-sessions/session-1700000000000-abc1234/session.json``. The store
knows nothing about sessions; layout decisions belong to
``launchpad.session.storage``.
"""

import logging
import shutil
from pathlib import Path
from typing import Protocol

from launchpad.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    """Hierarchical storage used by the context manager."""

    def exists(self, path: str) -> bool: ...

    def is_directory(self, path: str) -> bool: ...

    def create_file(self, path: str, content: str) -> None: ...

    def update_file(self, path: str, content: str) -> None: ...

    def read_file(self, path: str) -> str: ...

    def create_directory(self, path: str) -> None: ...

    def list_directory(self, path: str) -> list[str]: ...

    def delete(self, path: str) -> None: ...


class FileSessionStore:
    """Session store backed by a directory on the local filesystem.

    Every ``OSError`` is re-raised as ``PersistenceError`` carrying the
    offending path.
    """

    def __init__(self, base_dir: str | Path = "."):
        self.base_dir = Path(base_dir)

    def _resolve(self, path: str) -> Path:
        resolved = (self.base_dir / path).resolve()
        root = self.base_dir.resolve()
        if resolved != root and root not in resolved.parents:
            raise PersistenceError(f"Path escapes store root: {path}", path=path)
        return resolved

    def exists(self, path: str) -> bool:
        return self._resolve(path).exists()

    def is_directory(self, path: str) -> bool:
        return self._resolve(path).is_dir()

    def create_file(self, path: str, content: str) -> None:
        """Write a new file, creating parent directories as needed."""
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Failed to create {path}: {e}", path=path) from e

    def update_file(self, path: str, content: str) -> None:
        """Replace a file's content atomically."""
        target = self._resolve(path)
        tmp = target.with_name(f".{target.name}.tmp")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(content, encoding="utf-8")
            tmp.replace(target)
        except OSError as e:
            raise PersistenceError(f"Failed to update {path}: {e}", path=path) from e

    def read_file(self, path: str) -> str:
        try:
            return self._resolve(path).read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Failed to read {path}: {e}", path=path) from e

    def create_directory(self, path: str) -> None:
        try:
            self._resolve(path).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(f"Failed to create directory {path}: {e}", path=path) from e

    def list_directory(self, path: str) -> list[str]:
        """Return entry names in ``path``, sorted. Missing directories list as empty."""
        target = self._resolve(path)
        if not target.exists():
            return []
        try:
            return sorted(entry.name for entry in target.iterdir())
        except OSError as e:
            raise PersistenceError(f"Failed to list {path}: {e}", path=path) from e

    def delete(self, path: str) -> None:
        """Delete a file or a directory tree."""
        target = self._resolve(path)
        try:
            if target.is_dir():
                shutil.rmtree(target)
            else:
                target.unlink()
        except OSError as e:
            raise PersistenceError(f"Failed to delete {path}: {e}", path=path) from e
        logger.debug(f"Deleted {path}")
