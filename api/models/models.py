from api.config import Base
from sqlalchemy import Column, Integer, String, JSON, DateTime, ForeignKey, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True)
    hashed_password = Column(String)
    preferences = Column(JSON)


class LearningPathRecord(Base):
    """
    Persisted learning path aggregate. Steps, branches, checkpoints and
    prerequisites are embedded in `document`; the scalar columns mirror the
    fields used for lookups. `version` backs optimistic concurrency.
    """
    __tablename__ = "learning_paths"
    id = Column(String, primary_key=True, index=True)  # uuid
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    topic = Column(String, nullable=False)
    level = Column(String, nullable=False)  # beginner|intermediate|advanced
    is_public = Column(Boolean, default=False, nullable=False)
    version = Column(Integer, default=1, nullable=False)
    document = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", backref="learning_paths", foreign_keys=[user_id])
