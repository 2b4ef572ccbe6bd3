"""
Adaptive remediation: inserts review or advanced steps after a checkpoint
using fractional ordering, so no existing step is renumbered.

Keys are allocated in the gap between the checkpoint threshold and the next
existing step order: review steps at after_step + 0.1, + 0.2, ... and
advanced content at after_step + 0.2, shrinking the spacing when the gap is
narrower. When the gap is exhausted the path is compacted first.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence

from api.utils.logger import configure_logging
from learning_engine.checkpoints import classify
from learning_engine.models import Checkpoint, LearningPath, PerformanceData, Step, StepOrigin, utcnow
from learning_engine.progress import refresh_completion, round_half_up

logger = configure_logging()

ORDER_OFFSET = 0.1
MIN_ORDER_GAP = 1e-6
GENERIC_REVIEW_TITLE = "Checkpoint Review"


def allocate_orders(path: LearningPath, after: float, count: int) -> List[float]:
    """`count` distinct keys strictly between `after` and the next existing order."""
    upper = path.next_order_after(after)
    gap = (upper - after) if upper is not None else 1.0
    spacing = min(ORDER_OFFSET, gap / (count + 1))
    return [after + spacing * i for i in range(1, count + 1)]


def compact_step_orders(path: LearningPath) -> None:
    """
    Renumber steps to 1..n in their current order and remap checkpoint
    thresholds onto the new numbering. Maintenance operation: changes
    existing order values.
    """
    path.sort_steps()
    old_orders = [s.order for s in path.steps]
    for checkpoint in path.checkpoints:
        checkpoint.after_step = float(sum(1 for o in old_orders if o <= checkpoint.after_step))
    for idx, step in enumerate(path.steps, start=1):
        step.order = float(idx)
    logger.info("compacted step orders path=%s steps=%d", path.id, len(path.steps))


def _orders_for(path: LearningPath, checkpoint: Checkpoint, count: int) -> List[float]:
    orders = allocate_orders(path, checkpoint.after_step, count)
    if orders[0] - checkpoint.after_step < MIN_ORDER_GAP:
        logger.warning("order gap exhausted after checkpoint=%s path=%s; compacting", checkpoint.id, path.id)
        compact_step_orders(path)
        orders = allocate_orders(path, checkpoint.after_step, count)
    return orders


def build_remedial_steps(areas: Sequence[str], orders: Sequence[float]) -> List[Step]:
    if not areas:
        return [
            Step(
                title=GENERIC_REVIEW_TITLE,
                description="Review of key concepts from previous sections",
                content=(
                    f"## {GENERIC_REVIEW_TITLE}\n\nThis step provides a comprehensive review of the "
                    "key concepts covered in the previous sections."
                ),
                order=orders[0],
                estimated_minutes=30,
                origin=StepOrigin.REMEDIAL,
            )
        ]
    return [
        Step(
            title=f"Review: {area}",
            description=f"Additional practice and review of {area}",
            content=(
                f"## Review: {area}\n\nThis step provides additional explanation and practice for "
                f"{area}, which was identified as an area needing improvement."
            ),
            order=order,
            estimated_minutes=20,
            origin=StepOrigin.REMEDIAL,
        )
        for area, order in zip(areas, orders)
    ]


def build_advanced_step(topic: str, order: float) -> Step:
    return Step(
        title=f"Advanced: {topic}",
        description=f"Advanced concepts and applications of {topic}",
        content=(
            f"## Advanced: {topic}\n\nThis step covers advanced concepts and applications of {topic} "
            "for learners who have demonstrated strong understanding of the core material."
        ),
        order=order,
        estimated_minutes=45,
        origin=StepOrigin.ADVANCED,
    )


def adapt_to_performance(
    path: LearningPath,
    checkpoint: Checkpoint,
    performance: PerformanceData,
    now: Optional[datetime] = None,
) -> List[Step]:
    """
    Insert remedial or advanced steps for one checkpoint outcome and return
    them. Remediation takes precedence when both predicates hold. Not
    idempotent: each call inserts new steps.
    """
    if not path.is_adaptive:
        return []

    inserted: List[Step] = []
    if performance.needs_remediation:
        areas = [a for a in performance.incorrect_areas if a]
        orders = _orders_for(path, checkpoint, max(len(areas), 1))
        inserted = build_remedial_steps(areas, orders)
    elif performance.excellent_performance:
        # Second key of a two-slot allocation: the first slot belongs to review content.
        orders = _orders_for(path, checkpoint, 2)
        inserted = [build_advanced_step(path.topic, orders[1])]

    if inserted:
        path.add_steps(inserted)
        now = now or utcnow()
        refresh_completion(path, now)
        path.touch(now)
        logger.info(
            "adapted path=%s checkpoint=%s inserted=%s",
            path.id,
            checkpoint.id,
            [s.title for s in inserted],
        )
    return inserted


def adapt_to_score(
    path: LearningPath,
    checkpoint_id: str,
    score: float,
    areas: Optional[Sequence[str]] = None,
    now: Optional[datetime] = None,
) -> List[Step]:
    """Adapt from an externally supplied score instead of a recorded attempt."""
    checkpoint = path.find_checkpoint(checkpoint_id)
    performance = classify(round_half_up(score), checkpoint.passing_score, list(areas or []))
    return adapt_to_performance(path, checkpoint, performance, now)
