"""
Learning path request/response schemas. Responses embed the engine's
aggregate models directly.
"""

from pydantic import BaseModel, Field
from typing import Optional

from learning_engine.models import BranchCondition, Checkpoint, LearningPath, Level, Prerequisite


class CreateLearningPathRequest(BaseModel):
    topic: str
    level: Level = Level.INTERMEDIATE
    is_adaptive: bool = True
    is_public: bool = False


class UpdateLearningPathRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    topic: Optional[str] = None
    level: Optional[Level] = None
    is_public: Optional[bool] = None
    is_adaptive: Optional[bool] = None
    tags: Optional[list[str]] = None
    raw_content: Optional[str] = None


class LearningPathListResponse(BaseModel):
    paths: list[LearningPath]


class CompleteStepResponse(BaseModel):
    path: LearningPath
    should_take_checkpoint: bool


class CheckpointAnswersRequest(BaseModel):
    # Selected option index per question, in question order.
    answers: Optional[list[int]] = None


class CheckpointResultResponse(BaseModel):
    checkpoint: Checkpoint
    path: LearningPath


class AdaptPathRequest(BaseModel):
    checkpoint_id: str
    score: Optional[float] = None
    incorrect_areas: list[str] = Field(default_factory=list)


class CreateBranchRequest(BaseModel):
    name: str
    condition: BranchCondition = BranchCondition.MANUAL
    topic: Optional[str] = None
    description: Optional[str] = None
    level: Optional[Level] = None


class PrerequisitesResponse(BaseModel):
    topic: str
    level: Level
    prerequisites: list[Prerequisite]
