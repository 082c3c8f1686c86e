"""Auth Routes: register, login, current user.

Invariants:
    - Plaintext passwords are never logged
    - Error mapping is done by the global ExpenseTrackerError handler
"""

import logging

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_auth_service, get_current_user
from app.core.records import UserRecord
from app.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from app.services.auth_service import AuthService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post(
    "/register", response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    body: RegisterRequest, auth: AuthService = Depends(get_auth_service),
):
    """Create an account and return a session token."""
    result = await auth.register(body.name, body.email, body.password)
    return AuthResponse.from_result(result)


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest, auth: AuthService = Depends(get_auth_service),
):
    """Exchange credentials for a session token."""
    result = await auth.login(body.email, body.password)
    return AuthResponse.from_result(result)


@router.get("/me", response_model=UserResponse)
async def me(user: UserRecord = Depends(get_current_user)):
    return UserResponse.from_public(user.to_public())
