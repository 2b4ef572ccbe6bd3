from jose import JWTError
from jose.jwt import encode, decode
import bcrypt
from api.config import settings
from api.schemas.auth_schemas import AuthTokenPayload
from api.utils.logger import configure_logging
from typing import Optional
from fastapi import HTTPException, status

logger = configure_logging()

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 30

# Password hashing


def verify_password(plain_password: str, hashed_password: str) -> Optional[bool]:
    """Verify a password against its hash."""
    try:
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
    except ValueError as e:
        logger.warning("Error verifying password: %s", e)
        return None

def get_password_hash(password: str) -> str:
    """Hash a password for storing."""
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

def create_access_token(data: AuthTokenPayload) -> str:
    """Create a JWT access token."""
    return encode(data.model_dump(exclude_none=True), settings.jwt_secret_key, algorithm=ALGORITHM)

def verify_token(token: Optional[str]) -> AuthTokenPayload:
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")
    try:
        payload = decode(token, settings.jwt_secret_key, algorithms=[ALGORITHM])
        return AuthTokenPayload(**payload)
    except JWTError as e:
        logger.warning("Error verifying token: %s", e)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
