"""Inline shorthand markers - pure parsing, no I/O.

Recognized markers in free text:

    !high / !medium / !low / !none / !normal   priority
    ~List                                       target list
    #tag                                        tag (repeatable)
    today / tomorrow / week / this week         when filter (optional)

Everything else is kept, in order, as a term.
"""

from dataclasses import dataclass, field
from enum import Enum


class WhenFilter(Enum):
    """Relative date window used to filter tasks."""

    TODAY = "today"
    TOMORROW = "tomorrow"
    THIS_WEEK = "this-week"

    @classmethod
    def from_token(cls, token: str) -> "WhenFilter | None":
        """Look up a single token in the alias table (case-insensitive)."""
        return WHEN_ALIASES.get(token.lower())


WHEN_ALIASES: dict[str, WhenFilter] = {
    "today": WhenFilter.TODAY,
    "tomorrow": WhenFilter.TOMORROW,
    "week": WhenFilter.THIS_WEEK,
    "thisweek": WhenFilter.THIS_WEEK,
    "this-week": WhenFilter.THIS_WEEK,
}

PRIORITY_LEVELS: dict[str, int] = {
    "high": 5,
    "medium": 3,
    "low": 1,
    "none": 0,
    "normal": 0,
}


@dataclass
class ShorthandFilters:
    """Fields pulled out of a shorthand line."""

    priority: int | None = None
    list_name: str | None = None
    tags: list[str] = field(default_factory=list)
    when: WhenFilter | None = None
    terms: list[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        """Remaining terms joined back into a title/query."""
        return " ".join(self.terms).strip()


def parse_priority_shorthand(token: str) -> int | None:
    """Map `!level` to a TickTick priority. Unknown levels return None."""
    if not token.startswith("!"):
        return None
    return PRIORITY_LEVELS.get(token[1:].lower())


def parse_when_token(token: str) -> WhenFilter | None:
    return WhenFilter.from_token(token)


def parse_shorthand(raw: str, parse_when: bool = True) -> ShorthandFilters:
    """
    Split `raw` on whitespace and consume shorthand markers left to right.

    With parse_when=False, words like "today" stay in terms. The add path
    uses that because due dates are extracted separately beforehand.
    """
    parsed = ShorthandFilters()
    tokens = raw.split()
    i = 0

    while i < len(tokens):
        token = tokens[i]

        priority = parse_priority_shorthand(token)
        if priority is not None:
            parsed.priority = priority
            i += 1
            continue

        if token.startswith("~") and len(token) > 1:
            parsed.list_name = token[1:]
            i += 1
            continue

        if token.startswith("#") and len(token) > 1:
            parsed.tags.append(token[1:])
            i += 1
            continue

        if parse_when:
            if (
                token.lower() == "this"
                and i + 1 < len(tokens)
                and tokens[i + 1].lower() == "week"
            ):
                parsed.when = WhenFilter.THIS_WEEK
                i += 2
                continue

            when = parse_when_token(token)
            if when is not None:
                parsed.when = when
                i += 1
                continue

        parsed.terms.append(token)
        i += 1

    return parsed
