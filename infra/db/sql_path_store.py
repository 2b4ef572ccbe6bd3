"""
SQLAlchemy implementation of the learning path store.

The aggregate is stored as one JSON document per row. Saves are conditional
updates on the version column (`UPDATE ... WHERE id = :id AND version = :v`),
so two read-modify-write cycles on the same path cannot both win.
"""

from __future__ import annotations

from typing import List

from sqlalchemy import update
from sqlalchemy.orm import Session as DBSession

from api.models.models import LearningPathRecord
from api.utils.logger import configure_logging
from learning_engine.errors import ConcurrentModificationError, NotFoundError
from learning_engine.models import LearningPath
from learning_engine.store import PathRepository

logger = configure_logging()


class SqlPathRepository(PathRepository):
    def __init__(self, db: DBSession):
        self.db = db

    @staticmethod
    def _to_path(record: LearningPathRecord) -> LearningPath:
        document = dict(record.document or {})
        document["version"] = record.version
        return LearningPath.model_validate(document)

    def add(self, path: LearningPath) -> LearningPath:
        path.version = 1
        record = LearningPathRecord(
            id=path.id,
            user_id=path.user_id,
            topic=path.topic,
            level=path.level.value,
            is_public=path.is_public,
            version=1,
            document=path.model_dump(mode="json"),
            created_at=path.created_at,
            updated_at=path.updated_at,
            completed_at=path.completed_at,
        )
        self.db.add(record)
        self.db.commit()
        return self.get(path.id)

    def get(self, path_id: str) -> LearningPath:
        # populate_existing: never serve a stale identity-map copy to a retrying writer.
        record = self.db.get(LearningPathRecord, path_id, populate_existing=True)
        if record is None:
            raise NotFoundError("Learning path", path_id)
        return self._to_path(record)

    def save(self, path: LearningPath, expected_version: int) -> LearningPath:
        path.version = expected_version + 1
        stmt = (
            update(LearningPathRecord)
            .where(LearningPathRecord.id == path.id, LearningPathRecord.version == expected_version)
            .values(
                version=path.version,
                topic=path.topic,
                level=path.level.value,
                is_public=path.is_public,
                document=path.model_dump(mode="json"),
                updated_at=path.updated_at,
                completed_at=path.completed_at,
            )
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        if result.rowcount != 1:
            self.db.rollback()
            path.version = expected_version
            actual = (
                self.db.query(LearningPathRecord.version)
                .filter(LearningPathRecord.id == path.id)
                .scalar()
            )
            if actual is None:
                raise NotFoundError("Learning path", path.id)
            logger.info("version conflict path=%s expected=%s actual=%s", path.id, expected_version, actual)
            raise ConcurrentModificationError(path.id, expected_version, actual)
        self.db.commit()
        return path

    def list_for_user(self, user_id: int, limit: int = 10, skip: int = 0) -> List[LearningPath]:
        records = (
            self.db.query(LearningPathRecord)
            .filter(LearningPathRecord.user_id == user_id)
            .order_by(LearningPathRecord.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return [self._to_path(r) for r in records]
