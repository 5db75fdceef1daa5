"""SQLAlchemy models exposed for metadata creation and imports."""
from .enums import TaskPriority, TaskStatus, UserRole
from .task import Task
from .user import User

__all__ = ["User", "Task", "UserRole", "TaskStatus", "TaskPriority"]
