"""Route modules for the Taskboard API."""
from . import auth, tasks, users

__all__ = ["auth", "users", "tasks"]
