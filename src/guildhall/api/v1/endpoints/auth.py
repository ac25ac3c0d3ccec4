# src/guildhall/api/v1/endpoints/auth.py
"""Authentication endpoints for the Guildhall API."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, status

from guildhall.api.v1.dependencies import CurrentUserDep, SessionDep
from guildhall.schemas.common import success
from guildhall.schemas.user import AuthResponse, UserLogin, UserRegister, UserResponse
from guildhall.services import accounts

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: UserRegister, db: SessionDep) -> dict[str, Any]:
    """Create an account and return a token for it."""
    user = accounts.register(
        db,
        username=payload.username,
        email=payload.email,
        password=payload.password,
        display_name=payload.display_name,
    )
    body = AuthResponse(token=accounts.issue_token(user), user=UserResponse.model_validate(user))
    return success(body, "Registration successful")


@router.post("/login")
def login(payload: UserLogin, db: SessionDep) -> dict[str, Any]:
    """Exchange credentials for a token carrying the user's current roles."""
    user = accounts.authenticate(db, payload.username, payload.password)
    body = AuthResponse(token=accounts.issue_token(user), user=UserResponse.model_validate(user))
    return success(body, "Login successful")


@router.post("/logout")
def logout(current_user: CurrentUserDep) -> dict[str, Any]:
    # Tokens are stateless; the client discards its copy.
    return success(None, "Logout successful")


@router.get("/me")
def me(current_user: CurrentUserDep, db: SessionDep) -> dict[str, Any]:
    user = accounts.get_user(db, current_user.user_id)
    return success({"user": UserResponse.model_validate(user)}, "User retrieved successfully")
