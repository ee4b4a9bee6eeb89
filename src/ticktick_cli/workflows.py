"""Shared workflow layer between the CLI and the TickTick repository.

Each function takes a TaskRepository and an explicit `today`, so the
shorthand and date logic stays deterministic under test.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, tzinfo

from .core.due_dates import extract_due_date, format_due_date
from .core.projects import Project, find_project_by_list_name, infer_default_project
from .core.shorthand import WhenFilter, parse_shorthand
from .core.tasks import Task, TaskQuery, filter_tasks, merge_tags
from .ports.task_repo import TaskRepository

logger = logging.getLogger(__name__)


class TaskInputError(Exception):
    """Raised when command input cannot produce a valid task."""

    pass


class EmptyTitleError(TaskInputError):
    """Raised when nothing is left of the title after shorthand extraction."""

    def __init__(self):
        super().__init__("Task title required or provide stdin")


class TaskNotFoundError(Exception):
    """Raised when a task ID is not present in any accessible list."""

    pass


@dataclass
class AddOptions:
    """Explicit `task add` options. Set values win over shorthand."""

    project_id: str | None = None
    list_name: str | None = None
    content: str | None = None
    desc: str | None = None
    start_date: str | None = None
    due_date: str | None = None
    time_zone: str | None = None
    all_day: bool | None = None
    priority: int | None = None
    tags: list[str] = field(default_factory=list)
    reminders: list[str] = field(default_factory=list)
    repeat_flag: str | None = None
    sort_order: int | None = None


@dataclass
class ListOptions:
    """Explicit `task list` options. Set values win over shorthand."""

    project_id: str | None = None
    list_name: str | None = None
    status: str | None = None
    priority: int | None = None
    tags: list[str] = field(default_factory=list)
    when: WhenFilter | None = None
    limit: int = 0


@dataclass
class TaskChanges:
    """Fields to overwrite on `task update`."""

    title: str | None = None
    content: str | None = None
    desc: str | None = None
    start_date: str | None = None
    due_date: str | None = None
    time_zone: str | None = None
    priority: int | None = None
    reminders: list[str] = field(default_factory=list)
    repeat_flag: str | None = None
    sort_order: int | None = None


@dataclass
class ProjectChanges:
    """Fields to overwrite on `project update`."""

    name: str | None = None
    color: str | None = None
    view_mode: str | None = None
    kind: str | None = None
    sort_order: int | None = None


def build_new_task(
    raw: str,
    today: date,
    options: AddOptions | None = None,
    tz: tzinfo | None = None,
) -> tuple[Task, str | None]:
    """
    Turn a shorthand line into a new Task.

    The due date is read from the raw text first, then markers are parsed
    from what is left with temporal phrases disabled. Returns the task and
    the list name to resolve (explicit option or ~list marker).
    """
    options = options or AddOptions()

    cleaned, inferred_due = extract_due_date(raw, today)
    shorthand = parse_shorthand(cleaned, parse_when=False)

    title = shorthand.text
    if not title:
        raise EmptyTitleError()

    due_date = options.due_date
    start_date = options.start_date
    all_day = options.all_day
    if due_date is None and inferred_due is not None:
        formatted = format_due_date(inferred_due, tz)
        if formatted is None:
            raise TaskInputError(f"Failed to format inferred due date '{inferred_due}'")
        logger.debug(f"Inferred due date {inferred_due} -> {formatted}")
        due_date = formatted
        if start_date is None:
            start_date = formatted
        if all_day is None:
            all_day = True

    priority = options.priority if options.priority is not None else shorthand.priority
    tags = merge_tags(options.tags, shorthand.tags)

    task = Task(
        title=title,
        content=options.content,
        desc=options.desc,
        start_date=start_date,
        due_date=due_date,
        time_zone=options.time_zone,
        is_all_day=all_day,
        priority=priority if priority is not None else 0,
        tags=tags or None,
        reminders=options.reminders or None,
        repeat_flag=options.repeat_flag,
        sort_order=options.sort_order,
        kind="TASK",
    )
    return task, options.list_name or shorthand.list_name


def resolve_project_id(
    repo: TaskRepository,
    project_id: str | None,
    list_name: str | None,
) -> str | None:
    """Explicit project ID first, then a list name lookup."""
    if project_id:
        return project_id
    if list_name:
        return find_project_by_list_name(repo.get_projects(), list_name)
    return None


def add_task(
    repo: TaskRepository,
    raw: str,
    today: date,
    options: AddOptions | None = None,
    default_list: str = "",
) -> Task:
    """Parse a shorthand line and create the task in the resolved list."""
    options = options or AddOptions()
    task, list_name = build_new_task(raw, today, options)

    project_id = resolve_project_id(repo, options.project_id, list_name or default_list or None)
    if project_id is None:
        project_id = infer_default_project(repo.get_projects())

    task.project_id = project_id
    logger.info(f"Creating task '{task.title}' in project {project_id}")
    return repo.create_task(task)


def build_query(query_text: str, options: ListOptions | None = None) -> tuple[TaskQuery, str | None]:
    """
    Combine a shorthand search line with explicit list options.

    Returns the query and the list name to resolve. The ~list marker only
    applies when neither a project ID nor a list name was given.
    """
    options = options or ListOptions()
    shorthand = parse_shorthand(query_text, parse_when=True)

    list_name = options.list_name
    if options.project_id is None and list_name is None:
        list_name = shorthand.list_name

    query = TaskQuery(
        status=options.status,
        priority=options.priority if options.priority is not None else shorthand.priority,
        tags=merge_tags(options.tags, shorthand.tags),
        when=options.when or shorthand.when,
        terms=shorthand.terms,
        limit=options.limit,
    )
    return query, list_name


def fetch_tasks(repo: TaskRepository, project_id: str | None) -> list[Task]:
    """Tasks of one list, or of every list when no ID is given."""
    if project_id is not None:
        return repo.get_project_tasks(project_id)

    tasks = []
    for project in repo.get_projects():
        if not project.id:
            continue
        tasks.extend(repo.get_project_tasks(project.id))
    return tasks


def list_tasks(
    repo: TaskRepository,
    query_text: str,
    today: date,
    options: ListOptions | None = None,
) -> list[Task]:
    """Fetch tasks and apply shorthand plus explicit filters."""
    options = options or ListOptions()
    query, list_name = build_query(query_text, options)
    project_id = resolve_project_id(repo, options.project_id, list_name)
    tasks = fetch_tasks(repo, project_id)
    matched = filter_tasks(tasks, query, today)
    logger.debug(f"{len(matched)} of {len(tasks)} tasks matched")
    return matched


def resolve_task_project_id(
    repo: TaskRepository,
    task_id: str,
    project_id: str | None = None,
    list_name: str | None = None,
) -> str:
    """Find which list holds `task_id`, scanning all lists if not told."""
    resolved = resolve_project_id(repo, project_id, list_name)
    if resolved is not None:
        return resolved

    for project in repo.get_projects():
        if not project.id:
            continue
        if any(t.id == task_id for t in repo.get_project_tasks(project.id)):
            return project.id

    raise TaskNotFoundError(
        f"Task '{task_id}' was not found in accessible lists. Pass --project-id or --list."
    )


def update_task(
    repo: TaskRepository,
    task_id: str,
    changes: TaskChanges,
    project_id: str | None = None,
    list_name: str | None = None,
) -> Task:
    """Fetch the task, overwrite the given fields, and save it."""
    resolved = resolve_task_project_id(repo, task_id, project_id, list_name)
    task = repo.get_task(resolved, task_id)

    for name in (
        "title",
        "content",
        "desc",
        "start_date",
        "due_date",
        "time_zone",
        "priority",
        "repeat_flag",
        "sort_order",
    ):
        value = getattr(changes, name)
        if value is not None:
            setattr(task, name, value)
    if changes.reminders:
        task.reminders = changes.reminders

    return repo.update_task(task_id, task)


def complete_task(
    repo: TaskRepository,
    task_id: str,
    project_id: str | None = None,
    list_name: str | None = None,
) -> None:
    resolved = resolve_task_project_id(repo, task_id, project_id, list_name)
    repo.complete_task(resolved, task_id)


def delete_task(
    repo: TaskRepository,
    task_id: str,
    project_id: str | None = None,
    list_name: str | None = None,
) -> None:
    resolved = resolve_task_project_id(repo, task_id, project_id, list_name)
    repo.delete_task(resolved, task_id)


# ============== Lists ==============


def create_project(
    repo: TaskRepository,
    name: str,
    color: str | None = None,
    view_mode: str | None = None,
    kind: str | None = None,
    group_id: str | None = None,
) -> Project:
    if not name.strip():
        raise TaskInputError("List name required")
    project = Project(name=name, color=color, view_mode=view_mode, kind=kind, group_id=group_id)
    logger.info(f"Creating list '{name}'")
    return repo.create_project(project)


def update_project(repo: TaskRepository, project_id: str, changes: ProjectChanges) -> Project:
    """Fetch the list, overwrite the given fields, and save it."""
    project = repo.get_project(project_id)
    for name in ("name", "color", "view_mode", "kind", "sort_order"):
        value = getattr(changes, name)
        if value is not None:
            setattr(project, name, value)
    project.id = project_id
    return repo.update_project(project_id, project)
