"""
Path store contract and the in-memory implementation.

Repositories hand out independent copies of the aggregate. `save` is a
compare-and-swap on the version counter: it only succeeds if nobody saved
the path since it was read, which serializes read-modify-write cycles on the
same path without cross-path locking.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Dict, List

from learning_engine.errors import ConcurrentModificationError, NotFoundError
from learning_engine.models import LearningPath


class PathRepository(ABC):
    """
    Defines the contract for learning path persistence.
    """
    @abstractmethod
    def add(self, path: LearningPath) -> LearningPath:
        raise NotImplementedError

    @abstractmethod
    def get(self, path_id: str) -> LearningPath:
        """Return a copy of the stored path or raise NotFoundError."""
        raise NotImplementedError

    @abstractmethod
    def save(self, path: LearningPath, expected_version: int) -> LearningPath:
        """Persist `path` if the stored version equals `expected_version`; bumps the version."""
        raise NotImplementedError

    @abstractmethod
    def list_for_user(self, user_id: int, limit: int = 10, skip: int = 0) -> List[LearningPath]:
        """Paths owned by `user_id`, newest first."""
        raise NotImplementedError


class InMemoryPathRepository(PathRepository):
    """Process-local store. Create one per app instance or test fixture."""

    def __init__(self):
        self._lock = threading.Lock()
        self._documents: Dict[str, dict] = {}

    def add(self, path: LearningPath) -> LearningPath:
        with self._lock:
            path.version = 1
            self._documents[path.id] = path.model_dump(mode="json")
        return self.get(path.id)

    def get(self, path_id: str) -> LearningPath:
        with self._lock:
            document = self._documents.get(path_id)
        if document is None:
            raise NotFoundError("Learning path", path_id)
        return LearningPath.model_validate(document)

    def save(self, path: LearningPath, expected_version: int) -> LearningPath:
        with self._lock:
            current = self._documents.get(path.id)
            if current is None:
                raise NotFoundError("Learning path", path.id)
            if current["version"] != expected_version:
                raise ConcurrentModificationError(path.id, expected_version, current["version"])
            path.version = expected_version + 1
            self._documents[path.id] = path.model_dump(mode="json")
        return path

    def list_for_user(self, user_id: int, limit: int = 10, skip: int = 0) -> List[LearningPath]:
        with self._lock:
            documents = [d for d in self._documents.values() if d["user_id"] == user_id]
        paths = [LearningPath.model_validate(d) for d in documents]
        paths.sort(key=lambda p: p.created_at, reverse=True)
        return paths[skip:skip + limit]

    def __len__(self) -> int:
        return len(self._documents)
