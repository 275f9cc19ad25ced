"""
SQLAlchemy models for the goal tracker database schema.
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def generate_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """User model for authentication and ownership."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    goals = relationship("Goal", back_populates="user")

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"


class Goal(Base):
    """A user-owned objective whose progress is derived from its tasks."""
    __tablename__ = "goals"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(20), nullable=False, default="Other")  # Personal, Professional, Health, ...
    target_date = Column(DateTime, nullable=False)
    is_completed = Column(Boolean, nullable=False, default=False)
    progress = Column(Integer, nullable=False, default=0)  # 0-100
    priority = Column(String(10), nullable=False, default="Medium")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="goals")
    tasks = relationship("Task", back_populates="goal", passive_deletes=True)

    def __repr__(self):
        return f"<Goal(id={self.id}, user_id={self.user_id}, title={self.title}, progress={self.progress})>"


class Task(Base):
    """An actionable item bound to exactly one goal."""
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=generate_id)
    goal_id = Column(String(36), ForeignKey("goals.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    due_date = Column(DateTime, nullable=False)
    is_completed = Column(Boolean, nullable=False, default=False)
    priority = Column(String(10), nullable=False, default="Medium")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    goal = relationship("Goal", back_populates="tasks")

    __table_args__ = (
        Index("idx_tasks_user_due_date", "user_id", "due_date"),
    )

    @property
    def goal_title(self):
        return self.goal.title if self.goal is not None else None

    def __repr__(self):
        return f"<Task(id={self.id}, goal_id={self.goal_id}, title={self.title}, is_completed={self.is_completed})>"
