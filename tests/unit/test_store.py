"""Unit tests for the path repositories (in-memory and SQLAlchemy)."""
from datetime import timedelta

import pytest

from infra.db.sql_path_store import SqlPathRepository
from learning_engine.errors import ConcurrentModificationError, NotFoundError
from learning_engine.path_builder import build_learning_path
from learning_engine.progress import set_step_completed


@pytest.fixture(params=["memory", "sql"])
def repository(request, memory_repository, db_session, test_user):
    if request.param == "memory":
        return memory_repository
    return SqlPathRepository(db_session)


def owned_path(document, user_id, topic="Python"):
    return build_learning_path(topic, "beginner", user_id, document)


@pytest.mark.unit
class TestPathRepository:
    def test_add_and_get(self, repository, sample_document, test_user):
        path = repository.add(owned_path(sample_document, test_user.id))
        assert path.version == 1
        loaded = repository.get(path.id)
        assert loaded.id == path.id
        assert [s.title for s in loaded.steps] == [s.title for s in path.steps]
        assert [cp.after_step for cp in loaded.checkpoints] == [3.0, 6.0, 9.0]

    def test_get_missing(self, repository):
        with pytest.raises(NotFoundError):
            repository.get("missing")

    def test_save_bumps_version(self, repository, sample_document, test_user):
        path = repository.add(owned_path(sample_document, test_user.id))
        set_step_completed(path, path.steps[0].id)
        saved = repository.save(path, 1)
        assert saved.version == 2
        loaded = repository.get(path.id)
        assert loaded.version == 2
        assert loaded.steps[0].completed is True
        assert loaded.progress == 10

    def test_stale_save_rejected(self, repository, sample_document, test_user):
        path = repository.add(owned_path(sample_document, test_user.id))
        first = repository.get(path.id)
        second = repository.get(path.id)

        set_step_completed(first, first.steps[0].id)
        repository.save(first, first.version)

        set_step_completed(second, second.steps[1].id)
        with pytest.raises(ConcurrentModificationError):
            repository.save(second, second.version)

        loaded = repository.get(path.id)
        assert loaded.steps[0].completed is True
        assert loaded.steps[1].completed is False

    def test_save_missing(self, repository, sample_document, test_user):
        with pytest.raises(NotFoundError):
            repository.save(owned_path(sample_document, test_user.id), 1)

    def test_list_for_user_newest_first(self, repository, sample_document, test_user):
        created = []
        for i, topic in enumerate(["A", "B", "C"]):
            path = owned_path(sample_document, test_user.id, topic)
            path.created_at = path.created_at + timedelta(seconds=i)
            created.append(repository.add(path))
        repository.add(owned_path(sample_document, test_user.id + 1000, "Other"))

        topics = [p.topic for p in repository.list_for_user(test_user.id)]
        assert topics == ["C", "B", "A"]
        assert [p.topic for p in repository.list_for_user(test_user.id, limit=1, skip=1)] == ["B"]
