from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel

from echocatering.api.v1.configs.logging_init import logger
from echocatering.api.v1.endpoints.user_endpoints.auth import (
    CurrentUser,
    create_access_token,
    get_current_user,
)
from echocatering.api.v1.endpoints.user_endpoints.core_functions import authenticate_user

auth_endpoint_router = APIRouter()


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: CurrentUser


@auth_endpoint_router.post("/token")
async def login(form_data: Annotated[OAuth2PasswordRequestForm, Depends()]) -> Token:
    """Exchange email (``username``) and password for a bearer token."""
    user = await authenticate_user(form_data.username, form_data.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    current = CurrentUser(id=str(user.id), email=user.email, role=user.role)
    logger.info(f"Issued token for {user.email}")
    return Token(access_token=create_access_token(current), user=current)


@auth_endpoint_router.get("/me")
async def me(current_user: Annotated[CurrentUser, Depends(get_current_user)]) -> CurrentUser:
    return current_user
