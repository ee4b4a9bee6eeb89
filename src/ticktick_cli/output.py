"""Human (table) and JSON rendering for tasks and lists."""

import json

from .core.projects import Project, ProjectData
from .core.tasks import Task, priority_label

TASK_HEADERS = ["ID", "Title", "Priority", "Due"]
PROJECT_HEADERS = ["ID", "Name", "Color", "View"]


def task_row(task: Task) -> list[str]:
    due = (task.due_date or "").split("T")[0]
    return [task.id or "", task.title, priority_label(task.priority), due]


def project_row(project: Project) -> list[str]:
    project_id = project.id or ""
    return [
        f"{project_id[:8]}...",
        project.name,
        project.color or "",
        project.view_mode or "",
    ]


def render_table(headers: list[str], rows: list[list[str]]) -> str:
    """Pipe table with columns sized to their widest cell."""
    if not rows:
        return "No items found."

    widths = [
        max([len(header)] + [len(row[i]) for row in rows if i < len(row)])
        for i, header in enumerate(headers)
    ]

    def line(cells: list[str]) -> str:
        padded = [f" {cells[i] if i < len(cells) else '':<{w}} " for i, w in enumerate(widths)]
        return "|" + "|".join(padded) + "|"

    separator = "|" + "+".join("-" * (w + 2) for w in widths) + "|"
    return "\n".join([line(headers), separator] + [line(row) for row in rows])


def render_tasks(tasks: list[Task], output: str = "human") -> str:
    if output == "json":
        return json.dumps([t.to_api() for t in tasks], indent=2)
    return render_table(TASK_HEADERS, [task_row(t) for t in tasks])


def render_projects(projects: list[Project], output: str = "human") -> str:
    if output == "json":
        return json.dumps([p.to_api() for p in projects], indent=2)
    return render_table(PROJECT_HEADERS, [project_row(p) for p in projects])


def render_task(task: Task) -> str:
    """Pretty JSON for a single task."""
    return json.dumps(task.to_api(), indent=2)


def render_project(project: Project) -> str:
    """Pretty JSON for a single list."""
    return json.dumps(project.to_api(), indent=2)


def render_project_data(data: ProjectData, output: str = "human") -> str:
    if output == "json":
        return json.dumps(data.to_api(), indent=2)
    lines = [f"Project: {data.project.name}"]
    if data.tasks is not None:
        lines.append(f"Tasks: {len(data.tasks)}")
    if data.columns is not None:
        lines.append(f"Columns: {len(data.columns)}")
    return "\n".join(lines)
