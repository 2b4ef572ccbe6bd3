"""
Learning path aggregate and its embedded records.

LearningPath is the aggregate root: steps, branches, checkpoints and
prerequisites are embedded and only addressable through it. Structural
mutations that must keep step orders distinct and sorted live here; progress
and completion bookkeeping lives in learning_engine.progress.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from learning_engine.errors import NotFoundError, ValidationError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid4())


class Level(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


def coerce_level(level: "Level | str | None") -> Level:
    """Level from enum or string; unknown or missing values mean intermediate."""
    try:
        return Level(getattr(level, "value", level))
    except ValueError:
        return Level.INTERMEDIATE


class ResourceKind(str, Enum):
    ARTICLE = "article"
    VIDEO = "video"
    BOOK = "book"
    COURSE = "course"
    TOOL = "tool"
    OTHER = "other"


class Importance(str, Enum):
    REQUIRED = "required"
    RECOMMENDED = "recommended"
    OPTIONAL = "optional"


class BranchCondition(str, Enum):
    INTEREST = "interest"
    PERFORMANCE = "performance"
    TIME = "time"
    MANUAL = "manual"


class StepOrigin(str, Enum):
    """Where a step came from; generated steps form the main line."""
    GENERATED = "generated"
    REMEDIAL = "remedial"
    ADVANCED = "advanced"
    BRANCH = "branch"


class Resource(BaseModel):
    title: str
    url: str = ""
    kind: ResourceKind = ResourceKind.ARTICLE
    description: str = ""


class Question(BaseModel):
    question: str
    options: List[str] = Field(default_factory=list)
    correct_answer_index: int = 0
    explanation: str = ""
    # Label reported as an incorrect area when this question is missed.
    topic: Optional[str] = None


class Step(BaseModel):
    id: str = Field(default_factory=new_id)
    title: str
    description: str = ""
    content: str = ""
    order: float
    estimated_minutes: int = 30
    resources: List[Resource] = Field(default_factory=list)
    quiz: List[Question] = Field(default_factory=list)
    completed: bool = False
    completed_at: Optional[datetime] = None
    origin: StepOrigin = StepOrigin.GENERATED
    branch_id: Optional[str] = None


class Branch(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    description: str = ""
    condition: BranchCondition = BranchCondition.MANUAL
    step_ids: List[str] = Field(default_factory=list)


class Prerequisite(BaseModel):
    topic: str
    description: str = ""
    importance: Importance = Importance.RECOMMENDED
    resource_url: Optional[str] = None


class PerformanceData(BaseModel):
    score: int
    incorrect_areas: List[str] = Field(default_factory=list)
    needs_remediation: bool = False
    excellent_performance: bool = False


class Checkpoint(BaseModel):
    id: str = Field(default_factory=new_id)
    # Order threshold: attemptable once this many steps are completed.
    after_step: float
    questions: List[Question] = Field(default_factory=list)
    passing_score: int = 70
    completed: bool = False
    score: Optional[int] = None
    completed_at: Optional[datetime] = None
    performance_data: Optional[PerformanceData] = None

    @property
    def passed(self) -> bool:
        return self.completed and self.score is not None and self.score >= self.passing_score


class LearningPath(BaseModel):
    """
    Aggregate root for one topic/level/owner curriculum.

    Invariants:
    - step orders are pairwise distinct and `steps` is kept sorted by order;
    - completed_at is set iff every step is completed and every checkpoint
      is completed with a passing score (maintained by learning_engine.progress).
    """
    id: str = Field(default_factory=new_id)
    title: str = ""
    description: str = ""
    topic: str
    level: Level = Level.INTERMEDIATE
    user_id: int
    steps: List[Step] = Field(default_factory=list)
    branches: List[Branch] = Field(default_factory=list)
    prerequisites: List[Prerequisite] = Field(default_factory=list)
    checkpoints: List[Checkpoint] = Field(default_factory=list)
    progress: int = 0
    is_adaptive: bool = True
    is_public: bool = False
    tags: List[str] = Field(default_factory=list)
    raw_content: str = ""
    version: int = 0
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    completed_at: Optional[datetime] = None

    def find_step(self, step_id: str) -> Step:
        for step in self.steps:
            if step.id == step_id:
                return step
        raise NotFoundError("Step", step_id)

    def find_checkpoint(self, checkpoint_id: str) -> Checkpoint:
        for checkpoint in self.checkpoints:
            if checkpoint.id == checkpoint_id:
                return checkpoint
        raise NotFoundError("Checkpoint", checkpoint_id)

    def max_order(self) -> float:
        return max((s.order for s in self.steps), default=0.0)

    def next_order_after(self, order: float) -> Optional[float]:
        """Smallest existing step order strictly greater than `order`."""
        later = [s.order for s in self.steps if s.order > order]
        return min(later) if later else None

    def add_steps(self, steps: List[Step]) -> None:
        """Append steps and restore sort order. Rejects orders already in use."""
        used = {s.order for s in self.steps}
        for step in steps:
            if step.order in used:
                raise ValidationError(f"Step order {step.order} already used in path {self.id}")
            used.add(step.order)
        self.steps.extend(steps)
        self.sort_steps()

    def sort_steps(self) -> None:
        self.steps.sort(key=lambda s: s.order)

    def touch(self, now: Optional[datetime] = None) -> None:
        self.updated_at = now or utcnow()
