"""
Authentication router for user registration, login, and account management.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from goaltracker.services.database_service import get_db
from goaltracker.services.auth_service import AuthService
from goaltracker.middleware.auth_middleware import get_current_user_required
from goaltracker.models.auth import (
    UserRegisterRequest,
    UserLoginRequest,
    UserUpdateRequest,
    PasswordResetRequest,
    TokenResponse,
    UserEnvelope,
    UserResponse,
    MessageResponse,
)
from goaltracker.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/api/auth", tags=["authentication"])


@router.post("/register", response_model=TokenResponse)
async def register_user(
    request: UserRegisterRequest,
    db: Session = Depends(get_db)
):
    """
    Register a new user account.

    Returns a bearer token bound to the new user.
    """
    auth_service = AuthService(db)
    token = auth_service.register(request.email, request.password)
    logger.info(f"User registered successfully: {request.email}")
    return TokenResponse(token=token)


@router.post("/login", response_model=TokenResponse)
async def login_user(
    request: UserLoginRequest,
    db: Session = Depends(get_db),
):
    """
    Authenticate user and return a fresh bearer token.
    """
    auth_service = AuthService(db)
    token = auth_service.login(request.email, request.password)
    return TokenResponse(token=token)


@router.get("/user", response_model=UserEnvelope)
async def get_me(
    current_user: dict = Depends(get_current_user_required)
):
    """Get current authenticated user information."""
    return UserEnvelope(data=UserResponse(**current_user))


@router.put("/user", response_model=UserEnvelope)
async def update_me(
    request: UserUpdateRequest,
    current_user: dict = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    """Update the current user's email address."""
    auth_service = AuthService(db)
    user = auth_service.update_email(current_user["id"], request.email)
    return UserEnvelope(data=UserResponse.model_validate(user))


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    request: PasswordResetRequest,
    current_user: dict = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    """
    Reset the current user's password.

    The current password must be supplied; existing tokens stay valid until they expire.
    """
    auth_service = AuthService(db)
    auth_service.reset_password(
        user_id=current_user["id"],
        current_password=request.current_password,
        new_password=request.new_password
    )
    return MessageResponse(message="Password reset successfully")
