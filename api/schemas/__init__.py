"""
API schemas package. Import from submodules or from this package.

Example:
    from api.schemas import CreateLearningPathRequest, CompleteStepResponse
    from api.schemas.learning_path_schemas import CompleteStepResponse
"""

from api.schemas.auth_schemas import (
    AuthTokenPayload,
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    RegisterRequest,
    RegisterResponse,
)
from api.schemas.user_schemas import User, UserInfoResponse
from api.schemas.learning_path_schemas import (
    CreateLearningPathRequest,
    UpdateLearningPathRequest,
    LearningPathListResponse,
    CompleteStepResponse,
    CheckpointAnswersRequest,
    CheckpointResultResponse,
    AdaptPathRequest,
    CreateBranchRequest,
    PrerequisitesResponse,
)

__all__ = [
    "AuthTokenPayload",
    "LoginRequest",
    "LoginResponse",
    "LogoutResponse",
    "RegisterRequest",
    "RegisterResponse",
    "User",
    "UserInfoResponse",
    "CreateLearningPathRequest",
    "UpdateLearningPathRequest",
    "LearningPathListResponse",
    "CompleteStepResponse",
    "CheckpointAnswersRequest",
    "CheckpointResultResponse",
    "AdaptPathRequest",
    "CreateBranchRequest",
    "PrerequisitesResponse",
]
