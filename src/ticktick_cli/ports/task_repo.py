"""Task repository interface."""

from typing import Protocol

from ticktick_cli.core.projects import Project, ProjectData
from ticktick_cli.core.tasks import Task


class TaskRepository(Protocol):
    """Interface for reading and writing lists and tasks on any backend."""

    def get_projects(self) -> list[Project]:
        """Fetch all lists."""
        ...

    def get_project(self, project_id: str) -> Project:
        """Fetch a single list."""
        ...

    def get_project_data(self, project_id: str) -> ProjectData:
        """Fetch a list with its tasks and columns."""
        ...

    def create_project(self, project: Project) -> Project:
        """Create a list and return it as stored."""
        ...

    def update_project(self, project_id: str, project: Project) -> Project:
        """Update a list and return it as stored."""
        ...

    def delete_project(self, project_id: str) -> None:
        """Delete a list."""
        ...

    def get_project_tasks(self, project_id: str) -> list[Task]:
        """Fetch the tasks of one list."""
        ...

    def get_task(self, project_id: str, task_id: str) -> Task:
        """Fetch a single task."""
        ...

    def create_task(self, task: Task) -> Task:
        """Create a task and return it as stored."""
        ...

    def update_task(self, task_id: str, task: Task) -> Task:
        """Update a task and return it as stored."""
        ...

    def complete_task(self, project_id: str, task_id: str) -> None:
        """Mark a task as completed."""
        ...

    def delete_task(self, project_id: str, task_id: str) -> None:
        """Delete a task."""
        ...
