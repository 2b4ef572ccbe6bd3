"""
Learning path operations used by the HTTP layer.

Each mutating operation is one read-modify-write over a single aggregate.
Writes are conditional on the version that was read; on a conflict the whole
cycle is repeated against fresh state, up to `max_retries` times. Calls to
the generator happen before the cycle starts.
"""

from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

from api.utils.logger import configure_logging
from learning_engine.branches import attach_branch, build_branch_steps
from learning_engine.checkpoints import evaluate_checkpoint
from learning_engine.errors import (
    AuthorizationDeniedError,
    ConcurrentModificationError,
    GenerationFailure,
    ValidationError,
)
from learning_engine.generation import CurriculumGenerator, TemplateCurriculumGenerator
from learning_engine.models import (
    BranchCondition,
    Checkpoint,
    LearningPath,
    Level,
    Prerequisite,
    coerce_level,
    utcnow,
)
from learning_engine.parser import unique_tags
from learning_engine.path_builder import build_learning_path
from learning_engine.prerequisites import identify_prerequisites
from learning_engine.progress import refresh_completion, set_step_completed, should_take_checkpoint
from learning_engine.remediation import adapt_to_performance, adapt_to_score, compact_step_orders
from learning_engine.store import PathRepository

logger = configure_logging()

T = TypeVar("T")

UPDATABLE_FIELDS = {"title", "description", "topic", "level", "is_public", "is_adaptive", "tags", "raw_content"}


class LearningPathService:
    """Service for creating, reading and mutating learning paths."""

    def __init__(
        self,
        repository: PathRepository,
        generator: CurriculumGenerator,
        max_retries: int = 5,
    ):
        self.repository = repository
        self.generator = generator
        self.max_retries = max(1, max_retries)
        self._fallback = TemplateCurriculumGenerator()

    # ---- access ----

    @staticmethod
    def _check_read(path: LearningPath, user_id: int) -> None:
        if path.user_id != user_id and not path.is_public:
            raise AuthorizationDeniedError(f"Not authorized to access learning path {path.id}")

    @staticmethod
    def _check_write(path: LearningPath, user_id: int) -> None:
        if path.user_id != user_id:
            raise AuthorizationDeniedError(f"Not authorized to modify learning path {path.id}")

    def _mutate(self, path_id: str, user_id: int, action: str, mutation: Callable[[LearningPath], T]) -> Tuple[LearningPath, T]:
        """Run `mutation` on a fresh copy of the path and save it, retrying on version conflicts."""
        last_error: Optional[ConcurrentModificationError] = None
        for attempt in range(1, self.max_retries + 1):
            path = self.repository.get(path_id)
            self._check_write(path, user_id)
            expected_version = path.version
            result = mutation(path)
            try:
                saved = self.repository.save(path, expected_version)
            except ConcurrentModificationError as e:
                last_error = e
                logger.info("retrying %s path=%s attempt=%d/%d", action, path_id, attempt, self.max_retries)
                continue
            logger.info("%s path=%s version=%d", action, path_id, saved.version)
            return saved, result
        logger.warning("%s path=%s gave up after %d conflicting writes", action, path_id, self.max_retries)
        raise last_error

    # ---- operations ----

    def create_path(self, topic: str, level: str, user_id: int, is_adaptive: bool = True, is_public: bool = False) -> LearningPath:
        topic = (topic or "").strip()
        if not topic:
            raise ValidationError("Topic is required")
        lvl = coerce_level(level)
        try:
            document = self.generator.generate(topic, lvl.value)
        except GenerationFailure as e:
            logger.warning("path generation failed topic=%s level=%s: %s; using templates", topic, lvl.value, e)
            document = self._fallback.generate(topic, lvl.value)

        path = build_learning_path(topic, lvl, user_id, document, is_adaptive=is_adaptive, is_public=is_public)
        saved = self.repository.add(path)
        logger.info(
            "created path=%s user=%s topic=%s steps=%d checkpoints=%d",
            saved.id, user_id, topic, len(saved.steps), len(saved.checkpoints),
        )
        return saved

    def list_paths(self, user_id: int, limit: int = 10, skip: int = 0) -> List[LearningPath]:
        if limit < 1 or skip < 0:
            raise ValidationError("limit must be positive and skip non-negative")
        return self.repository.list_for_user(user_id, limit=limit, skip=skip)

    def get_path(self, path_id: str, user_id: int) -> LearningPath:
        path = self.repository.get(path_id)
        self._check_read(path, user_id)
        return path

    def update_path(self, path_id: str, fields: Dict[str, Any], user_id: int) -> LearningPath:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
        nulls = sorted(name for name, value in fields.items() if value is None)
        if nulls:
            raise ValidationError(f"Fields cannot be null: {', '.join(nulls)}")
        if "title" in fields and not (fields["title"] or "").strip():
            raise ValidationError("Title cannot be empty")
        if "topic" in fields and not (fields["topic"] or "").strip():
            raise ValidationError("Topic cannot be empty")
        if "level" in fields:
            try:
                fields = {**fields, "level": Level(fields["level"])}
            except ValueError:
                raise ValidationError(f"Unknown level: {fields['level']}") from None

        def apply(path: LearningPath) -> None:
            for name, value in fields.items():
                if name == "tags":
                    value = unique_tags(list(value or []))
                setattr(path, name, value)
            path.touch()

        path, _ = self._mutate(path_id, user_id, "update_path", apply)
        return path

    def complete_step(self, path_id: str, step_id: str, user_id: int) -> Tuple[LearningPath, bool]:
        path, _ = self._mutate(
            path_id, user_id, "complete_step",
            lambda p: set_step_completed(p, step_id, True),
        )
        return path, should_take_checkpoint(path)

    def reopen_step(self, path_id: str, step_id: str, user_id: int) -> LearningPath:
        path, _ = self._mutate(
            path_id, user_id, "reopen_step",
            lambda p: set_step_completed(p, step_id, False),
        )
        return path

    def take_checkpoint(
        self,
        path_id: str,
        checkpoint_id: str,
        answers: Optional[List[int]],
        user_id: int,
    ) -> Tuple[Checkpoint, LearningPath]:
        """Score an attempt, record it and, for adaptive paths, insert follow-up steps in the same write."""
        if answers is None:
            raise ValidationError("answers are required")

        def apply(path: LearningPath) -> Checkpoint:
            now = utcnow()
            checkpoint = path.find_checkpoint(checkpoint_id)
            performance = evaluate_checkpoint(checkpoint, answers, now)
            refresh_completion(path, now)
            path.touch(now)
            adapt_to_performance(path, checkpoint, performance, now)
            return checkpoint

        path, checkpoint = self._mutate(path_id, user_id, "take_checkpoint", apply)
        return checkpoint, path

    def adapt_path(
        self,
        path_id: str,
        checkpoint_id: str,
        score: Optional[float],
        areas: Optional[List[str]],
        user_id: int,
    ) -> LearningPath:
        if score is None:
            raise ValidationError("score is required")
        if not 0 <= score <= 100:
            raise ValidationError("score must be between 0 and 100")
        path, _ = self._mutate(
            path_id, user_id, "adapt_path",
            lambda p: adapt_to_score(p, checkpoint_id, score, areas),
        )
        return path

    def create_branch(
        self,
        path_id: str,
        name: str,
        condition: str,
        data: Optional[Dict[str, Any]],
        user_id: int,
    ) -> LearningPath:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Branch name is required")
        try:
            condition = BranchCondition(condition or BranchCondition.MANUAL)
        except ValueError:
            raise ValidationError(f"Unknown branch condition: {condition}") from None
        data = data or {}

        # Read once for authorization and the generation inputs; the write below re-reads.
        current = self.repository.get(path_id)
        self._check_write(current, user_id)
        level = coerce_level(data.get("level") or current.level)
        branch_topic = data.get("topic") or name
        steps = build_branch_steps(name, branch_topic, level, current.topic, self.generator)

        path, _ = self._mutate(
            path_id, user_id, "create_branch",
            lambda p: attach_branch(p, name, steps, condition, data.get("description", "")),
        )
        return path

    def get_prerequisites(self, topic: str, level: str) -> List[Prerequisite]:
        topic = (topic or "").strip()
        if not topic:
            raise ValidationError("Topic is required")
        return identify_prerequisites(topic, level, self.generator)

    def compact_path(self, path_id: str, user_id: int) -> LearningPath:
        path, _ = self._mutate(path_id, user_id, "compact_path", compact_step_orders)
        return path
