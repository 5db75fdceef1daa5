"""Taskboard: multi-user task management API."""

__version__ = "1.0.0"
