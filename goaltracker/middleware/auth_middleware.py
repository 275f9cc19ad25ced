"""
Authentication dependency for protecting routes and resolving the caller.
"""
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional
from goaltracker.services.database_service import get_db
from goaltracker.services.auth_service import AuthService
from goaltracker.exceptions import UnauthenticatedError
from goaltracker.utils.logger import get_logger

logger = get_logger(__name__)

# HTTP Bearer token scheme; missing headers are reported by us, not FastAPI
security = HTTPBearer(auto_error=False)


class AuthMiddleware:
    """Resolves bearer credentials to a live user."""

    def __init__(self, db: Session):
        self.db = db
        self.auth_service = AuthService(db)

    def get_current_user(self, credentials: Optional[HTTPAuthorizationCredentials] = None) -> Optional[dict]:
        """
        Get current authenticated user from JWT token.

        Args:
            credentials: HTTP authorization credentials

        Returns:
            User information if authenticated, None otherwise
        """
        if not credentials or not credentials.credentials:
            return None

        token_payload = self.auth_service.verify_token(credentials.credentials)
        if not token_payload:
            return None

        user = self.auth_service.get_user_by_id(token_payload.sub)
        if not user:
            logger.warning(f"Token subject no longer exists: {token_payload.sub}")
            return None

        return {
            "id": user.id,
            "email": user.email,
            "created_at": user.created_at,
            "updated_at": user.updated_at,
        }

    def require_auth(self, credentials: Optional[HTTPAuthorizationCredentials] = None) -> dict:
        """
        Require authentication and return user information.

        Raises:
            UnauthenticatedError: If the token is missing or does not resolve to a user
        """
        if not credentials:
            raise UnauthenticatedError("Not authorized, no token")
        user = self.get_current_user(credentials)
        if not user:
            raise UnauthenticatedError("Not authorized, token failed")
        return user


def get_current_user_required(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> dict:
    """
    FastAPI dependency to require authentication.

    Returns user information or raises 401 if not authenticated.
    """
    auth_middleware = AuthMiddleware(db)
    return auth_middleware.require_auth(credentials)
