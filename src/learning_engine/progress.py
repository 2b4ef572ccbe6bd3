"""
Progress tracking: completion percentage, path-level completion state and
the "time for a checkpoint" signal.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Optional

from learning_engine.models import Checkpoint, LearningPath, utcnow


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (round() would pick the even neighbour)."""
    return int(math.floor(value + 0.5))


def calculate_progress(path: LearningPath) -> int:
    total = len(path.steps)
    if total == 0:
        path.progress = 0
        return 0
    done = sum(1 for s in path.steps if s.completed)
    path.progress = round_half_up(100 * done / total)
    return path.progress


def is_path_complete(path: LearningPath) -> bool:
    # A path without steps has nothing to complete yet.
    if not path.steps:
        return False
    return all(s.completed for s in path.steps) and all(cp.passed for cp in path.checkpoints)


def refresh_completion(path: LearningPath, now: Optional[datetime] = None) -> bool:
    """
    Recompute progress and completed_at. completed_at keeps its original
    timestamp while the path stays complete and is cleared as soon as it is not.
    """
    calculate_progress(path)
    if is_path_complete(path):
        if path.completed_at is None:
            path.completed_at = now or utcnow()
        return True
    path.completed_at = None
    return False


def set_step_completed(path: LearningPath, step_id: str, completed: bool = True, now: Optional[datetime] = None) -> None:
    now = now or utcnow()
    step = path.find_step(step_id)
    step.completed = completed
    step.completed_at = now if completed else None
    refresh_completion(path, now)
    path.touch(now)


def next_open_checkpoint(path: LearningPath) -> Optional[Checkpoint]:
    return next((cp for cp in path.checkpoints if not cp.completed), None)


def should_take_checkpoint(path: LearningPath) -> bool:
    checkpoint = next_open_checkpoint(path)
    if checkpoint is None:
        return False
    completed_steps = sum(1 for s in path.steps if s.completed)
    return completed_steps >= checkpoint.after_step
