"""
Error taxonomy for the learning path engine.

NotFoundError, AuthorizationDeniedError and ValidationError propagate to callers.
GenerationFailure and ParsingFailure are recovered locally by falling back to
deterministic templates / default structures. ConcurrentModificationError is
retried by the service layer and only surfaces when retries are exhausted.
"""


class LearningPathError(Exception):
    """Base class for every engine error."""


class NotFoundError(LearningPathError):
    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found: {identifier}")


class AuthorizationDeniedError(LearningPathError):
    pass


class ValidationError(LearningPathError):
    pass


class GenerationFailure(LearningPathError):
    pass


class ParsingFailure(LearningPathError):
    pass


class ConcurrentModificationError(LearningPathError):
    def __init__(self, path_id: str, expected_version: int, actual_version: int | None):
        self.path_id = path_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Learning path {path_id} was modified concurrently "
            f"(expected version {expected_version}, found {actual_version})"
        )
