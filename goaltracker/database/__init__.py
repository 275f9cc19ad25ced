"""
Database package for the goal tracker service.

Engine and session handling live in goaltracker.services.database_service.
"""
from . import models
from .models import Base, User, Goal, Task

__all__ = ["Base", "models", "User", "Goal", "Task"]
