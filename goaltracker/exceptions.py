"""
Custom exception hierarchy for the goal tracker service.
"""

from typing import Dict, Any


class GoalTrackerException(Exception):
    """Base exception for the goal tracker service."""
    def __init__(self, message: str, context: Dict[str, Any] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class UnauthenticatedError(GoalTrackerException):
    """Raised when a bearer token is missing, invalid, expired or orphaned."""
    pass


class InvalidCredentialsError(GoalTrackerException):
    """Raised when an email/password pair does not match a user."""
    pass


class ForbiddenError(GoalTrackerException):
    """Raised when the caller does not own the requested entity."""
    pass


class NotFoundError(GoalTrackerException):
    """Raised when an entity id does not resolve."""
    pass


class ConflictError(GoalTrackerException):
    """Raised when a unique value (e.g. email) is already taken."""
    pass


class ValidationFailedError(GoalTrackerException):
    """Raised when input fails domain validation."""
    pass


class AIServiceError(GoalTrackerException):
    """Base exception for AI collaborator errors."""
    pass


class ServiceUnavailableError(AIServiceError):
    """Raised when the AI collaborator cannot be reached."""
    pass
