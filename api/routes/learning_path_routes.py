"""
Learning path endpoints.
"""

from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from api.bootstrap import build_generator
from api.config import Settings, get_db, get_settings
from api.schemas.learning_path_schemas import (
    AdaptPathRequest,
    CheckpointAnswersRequest,
    CheckpointResultResponse,
    CompleteStepResponse,
    CreateBranchRequest,
    CreateLearningPathRequest,
    LearningPathListResponse,
    PrerequisitesResponse,
    UpdateLearningPathRequest,
)
from api.schemas.user_schemas import User
from api.services.learning_path_service import LearningPathService
from api.utils.auth import get_current_user
from api.utils.common import get_db_user_id
from infra.db.sql_path_store import SqlPathRepository
from learning_engine.errors import (
    AuthorizationDeniedError,
    ConcurrentModificationError,
    LearningPathError,
    NotFoundError,
    ValidationError,
)
from learning_engine.generation import CurriculumGenerator
from learning_engine.models import LearningPath, Level

learning_path_routes = APIRouter()

_STATUS_BY_ERROR = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (AuthorizationDeniedError, status.HTTP_403_FORBIDDEN),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ConcurrentModificationError, status.HTTP_409_CONFLICT),
)


def raise_http_error(e: LearningPathError) -> NoReturn:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(e, error_type):
            raise HTTPException(status_code=status_code, detail=str(e)) from e
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Learning path operation failed") from e


def get_generator(settings: Settings = Depends(get_settings)) -> CurriculumGenerator:
    return build_generator(settings)


def get_path_service(
    db: Session = Depends(get_db),
    generator: CurriculumGenerator = Depends(get_generator),
    settings: Settings = Depends(get_settings),
) -> LearningPathService:
    return LearningPathService(SqlPathRepository(db), generator, max_retries=settings.max_write_retries)


@learning_path_routes.post("", response_model=LearningPath, status_code=status.HTTP_201_CREATED)
def create_learning_path(
    req: CreateLearningPathRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: LearningPathService = Depends(get_path_service),
) -> LearningPath:
    """Generate, parse and store a new learning path for the current user."""
    user_id = get_db_user_id(current_user.email, db)
    try:
        return service.create_path(req.topic, req.level.value, user_id, is_adaptive=req.is_adaptive, is_public=req.is_public)
    except LearningPathError as e:
        raise_http_error(e)


@learning_path_routes.get("", response_model=LearningPathListResponse)
def list_learning_paths(
    limit: int = Query(10, ge=1, le=100),
    skip: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: LearningPathService = Depends(get_path_service),
) -> LearningPathListResponse:
    user_id = get_db_user_id(current_user.email, db)
    try:
        return LearningPathListResponse(paths=service.list_paths(user_id, limit=limit, skip=skip))
    except LearningPathError as e:
        raise_http_error(e)


# Declared before /{path_id} so "prerequisites" is not taken for an id.
@learning_path_routes.get("/prerequisites", response_model=PrerequisitesResponse)
def get_prerequisites(
    topic: str = Query(""),
    level: Level = Query(Level.INTERMEDIATE),
    current_user: User = Depends(get_current_user),
    service: LearningPathService = Depends(get_path_service),
) -> PrerequisitesResponse:
    try:
        prerequisites = service.get_prerequisites(topic, level.value)
    except LearningPathError as e:
        raise_http_error(e)
    return PrerequisitesResponse(topic=topic, level=level, prerequisites=prerequisites)


@learning_path_routes.get("/{path_id}", response_model=LearningPath)
def get_learning_path(
    path_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: LearningPathService = Depends(get_path_service),
) -> LearningPath:
    user_id = get_db_user_id(current_user.email, db)
    try:
        return service.get_path(path_id, user_id)
    except LearningPathError as e:
        raise_http_error(e)


@learning_path_routes.put("/{path_id}", response_model=LearningPath)
def update_learning_path(
    path_id: str,
    req: UpdateLearningPathRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: LearningPathService = Depends(get_path_service),
) -> LearningPath:
    user_id = get_db_user_id(current_user.email, db)
    try:
        return service.update_path(path_id, req.model_dump(exclude_unset=True), user_id)
    except LearningPathError as e:
        raise_http_error(e)


@learning_path_routes.post("/{path_id}/steps/{step_id}/complete", response_model=CompleteStepResponse)
def complete_step(
    path_id: str,
    step_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: LearningPathService = Depends(get_path_service),
) -> CompleteStepResponse:
    user_id = get_db_user_id(current_user.email, db)
    try:
        path, take_checkpoint = service.complete_step(path_id, step_id, user_id)
    except LearningPathError as e:
        raise_http_error(e)
    return CompleteStepResponse(path=path, should_take_checkpoint=take_checkpoint)


@learning_path_routes.post("/{path_id}/steps/{step_id}/reopen", response_model=LearningPath)
def reopen_step(
    path_id: str,
    step_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: LearningPathService = Depends(get_path_service),
) -> LearningPath:
    """Mark a completed step as not completed again."""
    user_id = get_db_user_id(current_user.email, db)
    try:
        return service.reopen_step(path_id, step_id, user_id)
    except LearningPathError as e:
        raise_http_error(e)


@learning_path_routes.post("/{path_id}/checkpoints/{checkpoint_id}", response_model=CheckpointResultResponse)
def take_checkpoint(
    path_id: str,
    checkpoint_id: str,
    req: CheckpointAnswersRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: LearningPathService = Depends(get_path_service),
) -> CheckpointResultResponse:
    user_id = get_db_user_id(current_user.email, db)
    try:
        checkpoint, path = service.take_checkpoint(path_id, checkpoint_id, req.answers, user_id)
    except LearningPathError as e:
        raise_http_error(e)
    return CheckpointResultResponse(checkpoint=checkpoint, path=path)


@learning_path_routes.post("/{path_id}/adapt", response_model=LearningPath)
def adapt_learning_path(
    path_id: str,
    req: AdaptPathRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: LearningPathService = Depends(get_path_service),
) -> LearningPath:
    """Insert remedial or advanced steps for an externally scored checkpoint attempt."""
    user_id = get_db_user_id(current_user.email, db)
    try:
        return service.adapt_path(path_id, req.checkpoint_id, req.score, req.incorrect_areas, user_id)
    except LearningPathError as e:
        raise_http_error(e)


@learning_path_routes.post("/{path_id}/branches", response_model=LearningPath, status_code=status.HTTP_201_CREATED)
def create_branch(
    path_id: str,
    req: CreateBranchRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: LearningPathService = Depends(get_path_service),
) -> LearningPath:
    user_id = get_db_user_id(current_user.email, db)
    data = req.model_dump(include={"topic", "description", "level"}, exclude_none=True)
    try:
        return service.create_branch(path_id, req.name, req.condition.value, data, user_id)
    except LearningPathError as e:
        raise_http_error(e)


@learning_path_routes.post("/{path_id}/compact", response_model=LearningPath)
def compact_learning_path(
    path_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: LearningPathService = Depends(get_path_service),
) -> LearningPath:
    """Renumber step orders to 1..n; checkpoint thresholds follow."""
    user_id = get_db_user_id(current_user.email, db)
    try:
        return service.compact_path(path_id, user_id)
    except LearningPathError as e:
        raise_http_error(e)
