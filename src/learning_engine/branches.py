"""
Branch manager: named alternate sub-sequences of steps attached to a path.

A branch is a view: its steps live in the path's flat step collection, after
the current last step, and the branch records their ids. Building the steps
(which may call the generator) is separate from attaching them, so the
generation call stays outside the path's read-modify-write cycle.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from api.utils.logger import configure_logging
from learning_engine.errors import GenerationFailure, ValidationError
from learning_engine.models import (
    Branch,
    BranchCondition,
    LearningPath,
    Level,
    Step,
    StepOrigin,
    coerce_level,
    utcnow,
)
from learning_engine.parser import parse_path_document
from learning_engine.progress import refresh_completion

if TYPE_CHECKING:
    from learning_engine.generation import CurriculumGenerator

logger = configure_logging()

FALLBACK_STEP_COUNTS = {
    Level.BEGINNER: 3,
    Level.INTERMEDIATE: 4,
    Level.ADVANCED: 5,
}


def fallback_branch_titles(branch_name: str, level: Level | str) -> List[str]:
    count = FALLBACK_STEP_COUNTS[coerce_level(level)]
    return [f"{branch_name} - Step {i}" for i in range(1, count + 1)]


def fallback_branch_steps(branch_name: str, topic: str, level: Level | str) -> List[Step]:
    return [
        Step(
            title=title,
            description=f"Learn about {branch_name} in the context of {topic}",
            content=f"## {title}\n\nThis step covers important aspects of {branch_name} related to {topic}.",
            order=float(i),
            estimated_minutes=30,
        )
        for i, title in enumerate(fallback_branch_titles(branch_name, level), start=1)
    ]


def build_branch_steps(
    branch_name: str,
    topic: str,
    level: Level | str,
    main_topic: str,
    generator: "CurriculumGenerator | None",
) -> List[Step]:
    """Steps for a new branch; falls back to templated steps when generation yields none."""
    level = coerce_level(level)
    if generator is not None:
        try:
            document = generator.generate_branch(topic, branch_name, level.value, main_topic)
            steps = parse_path_document(document, topic, level.value).steps
            if steps:
                return steps
            logger.warning("generated branch has no steps branch=%s topic=%s; using templates", branch_name, topic)
        except GenerationFailure as e:
            logger.warning("branch generation failed branch=%s topic=%s: %s", branch_name, topic, e)
    return fallback_branch_steps(branch_name, topic, level)


def attach_branch(
    path: LearningPath,
    name: str,
    steps: List[Step],
    condition: BranchCondition | str = BranchCondition.MANUAL,
    description: str = "",
    now: Optional[datetime] = None,
) -> Branch:
    """Append `steps` after the last existing step and record them as a branch."""
    if not name or not name.strip():
        raise ValidationError("Branch name is required")
    try:
        condition = BranchCondition(condition)
    except ValueError:
        raise ValidationError(f"Unknown branch condition: {condition}") from None
    now = now or utcnow()

    branch = Branch(
        name=name,
        description=description or f"A specialized path focusing on {name}",
        condition=condition,
    )
    base = path.max_order()
    attached: List[Step] = []
    for offset, step in enumerate(steps, start=1):
        attached.append(
            step.model_copy(
                update={
                    "order": base + offset,
                    "origin": StepOrigin.BRANCH,
                    "branch_id": branch.id,
                    "completed": False,
                    "completed_at": None,
                }
            )
        )
    branch.step_ids = [s.id for s in attached]

    path.add_steps(attached)
    path.branches.append(branch)
    refresh_completion(path, now)
    path.touch(now)
    logger.info("branch created path=%s branch=%s steps=%d", path.id, name, len(attached))
    return branch
