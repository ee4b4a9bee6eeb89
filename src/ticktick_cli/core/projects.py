"""Pure list (project) logic - no I/O dependencies."""

from dataclasses import dataclass

from .tasks import Task, normalize_list_name


class ListNotFoundError(Exception):
    """Raised when a list name or default list cannot be resolved."""

    pass


@dataclass
class Project:
    """A TickTick list. The Open API calls these projects."""

    name: str
    id: str | None = None
    color: str | None = None
    sort_order: int | None = None
    closed: bool | None = None
    group_id: str | None = None
    view_mode: str | None = None
    permission: str | None = None
    kind: str | None = None

    @property
    def is_inbox(self) -> bool:
        return self.kind == "INBOX"

    @classmethod
    def from_api(cls, data: dict) -> "Project":
        """Create Project from TickTick API response."""
        return cls(
            name=data.get("name", ""),
            id=data.get("id"),
            color=data.get("color"),
            sort_order=data.get("sortOrder"),
            closed=data.get("closed"),
            group_id=data.get("groupId"),
            view_mode=data.get("viewMode"),
            permission=data.get("permission"),
            kind=data.get("kind"),
        )

    def to_api(self) -> dict:
        payload = {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "sortOrder": self.sort_order,
            "closed": self.closed,
            "groupId": self.group_id,
            "viewMode": self.view_mode,
            "permission": self.permission,
            "kind": self.kind,
        }
        return {k: v for k, v in payload.items() if v is not None}


@dataclass
class ProjectData:
    """A list together with its open tasks and kanban columns."""

    project: Project
    tasks: list[Task] | None = None
    columns: list[dict] | None = None

    @classmethod
    def from_api(cls, data: dict) -> "ProjectData":
        tasks = data.get("tasks")
        return cls(
            project=Project.from_api(data.get("project") or {}),
            tasks=[Task.from_api(t) for t in tasks] if tasks is not None else None,
            columns=data.get("columns"),
        )

    def to_api(self) -> dict:
        payload = {"project": self.project.to_api()}
        if self.tasks is not None:
            payload["tasks"] = [t.to_api() for t in self.tasks]
        if self.columns is not None:
            payload["columns"] = self.columns
        return payload


def filter_projects_by_name(projects: list[Project], name: str | None) -> list[Project]:
    """Keep lists whose name contains `name`."""
    if not name:
        return projects
    return [p for p in projects if name in p.name]


def find_project_by_list_name(projects: list[Project], list_name: str) -> str:
    """
    Resolve a list name to a project ID.

    Matches the exact name case-insensitively, or the normalized name so
    that "personal" finds "🚀Personal".
    """
    needle = normalize_list_name(list_name)
    project = next(
        (
            p
            for p in projects
            if p.name.lower() == list_name.lower()
            or (needle and normalize_list_name(p.name) == needle)
        ),
        None,
    )
    if project is None:
        raise ListNotFoundError(f"List not found: {list_name}")
    if not project.id:
        raise ListNotFoundError(f"List '{list_name}' has no project ID")
    return project.id


def infer_default_project(projects: list[Project]) -> str:
    """
    Pick the list new tasks go to when none was given.

    Inbox first (by kind, then by name), then the first open list, then
    whatever comes first.
    """
    if not projects:
        raise ListNotFoundError("No lists found. Create one in TickTick first.")

    default = (
        next((p for p in projects if p.is_inbox), None)
        or next((p for p in projects if p.name.lower() == "inbox"), None)
        or next((p for p in projects if not p.closed), None)
        or projects[0]
    )
    if not default.id:
        raise ListNotFoundError("Unable to infer a default list. Pass --project-id or --list.")
    return default.id
