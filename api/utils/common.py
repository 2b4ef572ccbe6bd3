"""
Common utility functions used across multiple routes.
"""

from sqlalchemy.orm import Session
from fastapi import HTTPException

from api.models.models import User as DbUser


def get_db_user_id(email: str, db: Session) -> int:
    """Get database user ID from email."""
    u = db.query(DbUser).filter(DbUser.email == email).first()
    if not u:
        raise HTTPException(status_code=401, detail="User not found")
    return int(u.id)
