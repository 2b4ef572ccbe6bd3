"""Assemble a new LearningPath aggregate from a generated document."""

from __future__ import annotations

from typing import Optional

from learning_engine.checkpoints import plan_checkpoints
from learning_engine.models import LearningPath, Level, coerce_level, utcnow
from learning_engine.parser import parse_path_document, unique_tags
from learning_engine.progress import refresh_completion


def build_learning_path(
    topic: str,
    level: Level | str,
    user_id: int,
    document: Optional[str],
    *,
    is_adaptive: bool = True,
    is_public: bool = False,
) -> LearningPath:
    level = coerce_level(level)
    parsed = parse_path_document(document, topic, level.value)
    now = utcnow()
    path = LearningPath(
        title=f"Learning Path: {topic}",
        description=parsed.description,
        topic=topic,
        level=level,
        user_id=user_id,
        steps=parsed.steps,
        prerequisites=parsed.prerequisites,
        checkpoints=plan_checkpoints(parsed.steps),
        is_adaptive=is_adaptive,
        is_public=is_public,
        tags=unique_tags([topic, level.value] + parsed.tags),
        raw_content=document or "",
        created_at=now,
        updated_at=now,
    )
    path.sort_steps()
    refresh_completion(path, now)
    return path
