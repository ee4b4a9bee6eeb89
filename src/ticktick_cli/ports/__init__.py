"""Ports - interfaces/protocols for external dependencies."""

from .task_repo import TaskRepository

__all__ = [
    "TaskRepository",
]
