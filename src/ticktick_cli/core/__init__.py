"""Functional core - pure business logic with no I/O."""

from .shorthand import ShorthandFilters, WhenFilter, parse_shorthand
from .due_dates import extract_due_date, format_due_date, infer_year_for_month_day
from .tasks import (
    Task,
    TaskQuery,
    date_window_for,
    filter_tasks,
    merge_tags,
    normalize_list_name,
    parse_task_date,
    task_due_date,
    task_has_all_tags,
    task_matches_when_filter,
)
from .projects import (
    Project,
    ProjectData,
    filter_projects_by_name,
    find_project_by_list_name,
    infer_default_project,
)

__all__ = [
    # Shorthand
    "ShorthandFilters",
    "WhenFilter",
    "parse_shorthand",
    # Due dates
    "extract_due_date",
    "format_due_date",
    "infer_year_for_month_day",
    # Tasks
    "Task",
    "TaskQuery",
    "date_window_for",
    "filter_tasks",
    "merge_tags",
    "normalize_list_name",
    "parse_task_date",
    "task_due_date",
    "task_has_all_tags",
    "task_matches_when_filter",
    # Projects
    "Project",
    "ProjectData",
    "filter_projects_by_name",
    "find_project_by_list_name",
    "infer_default_project",
]
