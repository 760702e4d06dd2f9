from datetime import timedelta
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel, ValidationError

from echocatering.api.v1.configs.config import settings
from echocatering.api.v1.configs.logging_init import logger
from echocatering.models.models.base import utcnow
from echocatering.models.models.users import UserRole

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token", auto_error=False)


class CurrentUser(BaseModel):
    id: str
    email: str
    role: UserRole = "viewer"

    @property
    def is_editor(self) -> bool:
        return self.role in ("admin", "editor")


def create_access_token(user: CurrentUser, expires_delta: timedelta | None = None) -> str:
    expires_delta = expires_delta or timedelta(minutes=settings.auth.token_lifetime_minutes)
    payload = {
        "sub": user.id,
        "email": user.email,
        "role": user.role,
        "exp": utcnow() + expires_delta,
    }
    return jwt.encode(payload, settings.auth.jwt_secret, algorithm=settings.auth.algorithm)


def decode_access_token(token: str) -> CurrentUser:
    try:
        payload = jwt.decode(token, settings.auth.jwt_secret, algorithms=[settings.auth.algorithm])
    except ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except JWTError as e:
        logger.debug(f"Rejected token: {e}")
        raise HTTPException(status_code=401, detail="Invalid token")

    user_id = payload.get("sub")
    if user_id is None:
        raise HTTPException(status_code=401, detail="Invalid token")
    try:
        return CurrentUser(
            id=user_id, email=payload.get("email", ""), role=payload.get("role", "viewer")
        )
    except ValidationError as e:
        logger.debug(f"Rejected token claims: {e}")
        raise HTTPException(status_code=401, detail="Invalid token")


async def get_current_user(token: Annotated[str | None, Depends(oauth2_scheme)]) -> CurrentUser:
    """
    Resolve the bearer token to a user. In unauthenticated mode every request
    runs as a local admin.
    """
    if settings.auth.unauthenticated_mode:
        return CurrentUser(
            id="local-admin", email=settings.auth.anonymous_user_email, role="admin"
        )

    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return decode_access_token(token)


async def require_editor(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    if not current_user.is_editor:
        raise HTTPException(status_code=403, detail="Editor access required")
    return current_user
