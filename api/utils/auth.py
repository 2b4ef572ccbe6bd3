from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import HTTPException, Cookie, Response, status, Depends
from sqlalchemy.orm import Session
from api.schemas.auth_schemas import AuthTokenPayload
from api.schemas.user_schemas import User
from api.utils.jwt import verify_token, get_password_hash, create_access_token, verify_password, ACCESS_TOKEN_EXPIRE_MINUTES
from api.utils.logger import configure_logging
from api.models.models import User as DbUser
from api.config import get_db

logger = configure_logging()


def get_current_user(access_token: Optional[str] = Cookie(None), db: Session = Depends(get_db)) -> User:
    if not access_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing token",
        )

    payload = verify_token(access_token)
    if payload is None or payload.sub is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )
    user = get_user_by_email(payload.sub, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )
    return User(email=user.email, preferences=user.preferences, hashed_password=user.hashed_password)

def set_auth_cookie(response: Response, user: DbUser) -> None:
    expires = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    token = create_access_token(AuthTokenPayload(sub=user.email, exp=expires))
    response.set_cookie(
        key="access_token",
        value=token,
        httponly=True,
        secure=False,
        samesite="lax",
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )

def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(
        key="access_token",
        httponly=True,
        secure=False,
        samesite="lax"
    )


def get_user_by_email(email: str, db: Session) -> DbUser | None:
    return db.query(DbUser).filter(DbUser.email == email).first()

def create_user(email: str, password: str, db: Session) -> DbUser:
    logger.info("Creating user: %s", email)
    user = DbUser(email=email, hashed_password=get_password_hash(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user

def authenticate_user(email: str, password: str, db: Session) -> DbUser | None:
    user = get_user_by_email(email, db)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user
