"""Pure task domain logic - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone

from .shorthand import WhenFilter

STATUS_NORMAL = 0
STATUS_COMPLETED = 2

_DONE_STATUSES = ("done", "completed", "complete")
_OPEN_STATUSES = ("todo", "open", "normal", "active")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class InvalidFilterError(Exception):
    """Raised when a list filter value is not understood."""

    pass


@dataclass
class Task:
    """A TickTick task as exchanged with the Open API."""

    title: str = ""
    id: str | None = None
    project_id: str | None = None
    content: str | None = None
    desc: str | None = None
    start_date: str | None = None
    due_date: str | None = None
    time_zone: str | None = None
    is_all_day: bool | None = None
    priority: int | None = None
    tags: list[str] | None = None
    reminders: list[str] | None = None
    repeat_flag: str | None = None
    sort_order: int | None = None
    status: int | None = None
    completed_time: str | None = None
    kind: str | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == STATUS_COMPLETED

    @classmethod
    def from_api(cls, data: dict) -> "Task":
        """Create Task from TickTick API response."""
        return cls(
            title=data.get("title", ""),
            id=data.get("id"),
            project_id=data.get("projectId"),
            content=data.get("content"),
            desc=data.get("desc"),
            start_date=data.get("startDate"),
            due_date=data.get("dueDate"),
            time_zone=data.get("timeZone"),
            is_all_day=data.get("isAllDay"),
            priority=data.get("priority"),
            tags=data.get("tags"),
            reminders=data.get("reminders"),
            repeat_flag=data.get("repeatFlag"),
            sort_order=data.get("sortOrder"),
            status=data.get("status"),
            completed_time=data.get("completedTime"),
            kind=data.get("kind"),
        )

    def to_api(self) -> dict:
        """Serialize for the API, leaving out unset fields."""
        payload = {
            "id": self.id,
            "projectId": self.project_id,
            "title": self.title,
            "content": self.content,
            "desc": self.desc,
            "startDate": self.start_date,
            "dueDate": self.due_date,
            "timeZone": self.time_zone,
            "isAllDay": self.is_all_day,
            "priority": self.priority,
            "tags": self.tags,
            "reminders": self.reminders,
            "repeatFlag": self.repeat_flag,
            "sortOrder": self.sort_order,
            "status": self.status,
            "completedTime": self.completed_time,
            "kind": self.kind,
        }
        return {k: v for k, v in payload.items() if v is not None}


@dataclass
class TaskQuery:
    """Client-side filters applied to fetched tasks."""

    status: str | None = None
    priority: int | None = None
    tags: list[str] = field(default_factory=list)
    when: WhenFilter | None = None
    terms: list[str] = field(default_factory=list)
    limit: int = 0


# ============== Dates ==============


def _from_epoch(value: str) -> date | None:
    try:
        number = int(value)
        if len(value) > 10:
            moment = _EPOCH + timedelta(milliseconds=number)
        else:
            moment = _EPOCH + timedelta(seconds=number)
    except (OverflowError, ValueError):
        return None
    return moment.date()


def parse_task_date(value: str) -> date | None:
    """
    Parse a stored task date into a calendar date.

    Tried in order: epoch seconds/milliseconds, RFC 3339, TickTick's
    "2026-03-01T00:00:00.000+0000", the same without fraction, a bare
    "YYYY-MM-DD", and finally the first ten characters as "YYYY-MM-DD".
    Dates with an offset keep the calendar day of that offset.
    """
    if value.isascii() and value.isdigit():
        return _from_epoch(value)

    try:
        parsed = datetime.fromisoformat(value)
        if parsed.tzinfo is not None:
            return parsed.date()
    except ValueError:
        pass

    for fmt in ("%Y-%m-%dT%H:%M:%S.%f%z", "%Y-%m-%dT%H:%M:%S%z", "%Y-%m-%d"):
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue

    if len(value) < 10:
        return None
    try:
        return datetime.strptime(value[:10], "%Y-%m-%d").date()
    except ValueError:
        return None


def task_due_date(task: Task) -> date | None:
    """Due date, or start date when the due date is missing or unreadable."""
    if task.due_date:
        due = parse_task_date(task.due_date)
        if due is not None:
            return due
    if task.start_date:
        return parse_task_date(task.start_date)
    return None


def date_window_for(when: WhenFilter, today: date) -> tuple[date, date]:
    """Inclusive (start, end) dates covered by a when filter."""
    match when:
        case WhenFilter.TODAY:
            return today, today
        case WhenFilter.TOMORROW:
            day = today + timedelta(days=1)
            return day, day
        case WhenFilter.THIS_WEEK:
            start = today - timedelta(days=today.weekday())
            return start, start + timedelta(days=6)
    raise ValueError(f"Unknown when filter: {when!r}")


def task_matches_when_filter(task: Task, when: WhenFilter, today: date) -> bool:
    task_date = task_due_date(task)
    if task_date is None:
        return False
    start, end = date_window_for(when, today)
    return start <= task_date <= end


# ============== Tags, lists, terms ==============


def merge_tags(existing: list[str], extras: list[str]) -> list[str]:
    """
    Append extras not already present (case-insensitive).

    First-seen casing and order are kept. Returns a new list.
    """
    merged = list(existing)
    for tag in extras:
        if not any(t.lower() == tag.lower() for t in merged):
            merged.append(tag)
    return merged


def task_has_all_tags(task: Task, required_tags: list[str]) -> bool:
    if task.tags is None:
        return False
    actual = {t.lower() for t in task.tags}
    return all(required.lower() in actual for required in required_tags)


def normalize_list_name(value: str) -> str:
    """Lowercase, drop emoji and punctuation, collapse whitespace."""
    kept = "".join(ch for ch in value if ch.isalnum() or ch.isspace())
    return " ".join(kept.lower().split())


def task_matches_terms(task: Task, terms: list[str]) -> bool:
    """Every term must appear in the title, content or description."""
    haystack = f"{task.title} {task.content or ''} {task.desc or ''}".lower()
    return all(term.lower() in haystack for term in terms)


def parse_status_filter(value: str) -> bool:
    """True for completed, False for open. Raises on anything else."""
    normalized = value.lower()
    if normalized in _DONE_STATUSES:
        return True
    if normalized in _OPEN_STATUSES:
        return False
    raise InvalidFilterError(
        f"Unsupported status '{value}'. Use one of: done, completed, todo, open"
    )


def filter_tasks(tasks: list[Task], query: TaskQuery, today: date) -> list[Task]:
    """
    Apply status, priority, tags, when window, search terms and limit.

    Pure function - no I/O.
    """
    result = list(tasks)

    if query.status is not None:
        want_done = parse_status_filter(query.status)
        result = [t for t in result if t.is_completed == want_done]

    if query.priority is not None:
        result = [t for t in result if (t.priority or 0) == query.priority]

    if query.tags:
        result = [t for t in result if task_has_all_tags(t, query.tags)]

    if query.when is not None:
        result = [t for t in result if task_matches_when_filter(t, query.when, today)]

    if query.terms:
        result = [t for t in result if task_matches_terms(t, query.terms)]

    if query.limit > 0:
        result = result[: query.limit]

    return result


def priority_label(priority: int | None) -> str:
    """Human-readable priority label."""
    labels = {0: "", 1: "Low", 3: "Medium", 5: "High"}
    value = priority or 0
    return labels.get(value, str(value))
