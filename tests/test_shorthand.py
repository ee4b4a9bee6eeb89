"""Tests for inline shorthand parsing."""

import pytest

from ticktick_cli.core.shorthand import (
    ShorthandFilters,
    WhenFilter,
    parse_priority_shorthand,
    parse_shorthand,
    parse_when_token,
)


class TestPriorityShorthand:
    @pytest.mark.parametrize(
        "token, expected",
        [
            ("!high", 5),
            ("!High", 5),
            ("!HIGH", 5),
            ("!medium", 3),
            ("!Low", 1),
            ("!none", 0),
            ("!normal", 0),
        ],
    )
    def test_known_levels(self, token, expected):
        assert parse_priority_shorthand(token) == expected

    def test_unknown_level(self):
        assert parse_priority_shorthand("!urgent") is None

    def test_bare_bang(self):
        assert parse_priority_shorthand("!") is None

    def test_requires_bang(self):
        assert parse_priority_shorthand("high") is None


class TestWhenToken:
    def test_aliases(self):
        assert parse_when_token("today") == WhenFilter.TODAY
        assert parse_when_token("tomorrow") == WhenFilter.TOMORROW
        assert parse_when_token("week") == WhenFilter.THIS_WEEK
        assert parse_when_token("thisweek") == WhenFilter.THIS_WEEK
        assert parse_when_token("this-week") == WhenFilter.THIS_WEEK

    def test_case_insensitive(self):
        assert parse_when_token("TODAY") == WhenFilter.TODAY
        assert parse_when_token("This-Week") == WhenFilter.THIS_WEEK

    def test_unknown(self):
        assert parse_when_token("other") is None


class TestParseShorthand:
    def test_markers_and_terms(self):
        parsed = parse_shorthand("finish report !High ~Personal #work #ops today")
        assert parsed.priority == 5
        assert parsed.list_name == "Personal"
        assert parsed.when == WhenFilter.TODAY
        assert parsed.tags == ["work", "ops"]
        assert parsed.terms == ["finish", "report"]

    def test_this_week_phrase(self):
        parsed = parse_shorthand("plan this week")
        assert parsed.when == WhenFilter.THIS_WEEK
        assert parsed.terms == ["plan"]

    def test_this_week_phrase_case_insensitive(self):
        parsed = parse_shorthand("plan THIS Week")
        assert parsed.when == WhenFilter.THIS_WEEK
        assert parsed.terms == ["plan"]

    def test_this_alone_is_a_term(self):
        parsed = parse_shorthand("fix this")
        assert parsed.when is None
        assert parsed.terms == ["fix", "this"]

    def test_unknown_bang_is_a_term(self):
        parsed = parse_shorthand("review !urgent")
        assert parsed.priority is None
        assert parsed.terms == ["review", "!urgent"]

    def test_last_list_wins(self):
        parsed = parse_shorthand("a ~Work b ~Home")
        assert parsed.list_name == "Home"
        assert parsed.terms == ["a", "b"]

    def test_duplicate_tags_kept(self):
        parsed = parse_shorthand("#ops #Ops")
        assert parsed.tags == ["ops", "Ops"]

    def test_bare_sigils_are_terms(self):
        parsed = parse_shorthand("~ # !")
        assert parsed.list_name is None
        assert parsed.tags == []
        assert parsed.terms == ["~", "#", "!"]

    def test_when_disabled_keeps_temporal_words(self):
        parsed = parse_shorthand("plan today", parse_when=False)
        assert parsed.when is None
        assert parsed.terms == ["plan", "today"]

    def test_when_disabled_still_reads_markers(self):
        parsed = parse_shorthand("plan this week !low #x", parse_when=False)
        assert parsed.priority == 1
        assert parsed.tags == ["x"]
        assert parsed.terms == ["plan", "this", "week"]

    def test_preserves_term_order(self):
        parsed = parse_shorthand("one #t two !low three ~L four")
        assert parsed.terms == ["one", "two", "three", "four"]

    def test_collapses_whitespace(self):
        parsed = parse_shorthand("  buy   milk \t ")
        assert parsed.text == "buy milk"

    def test_empty_input(self):
        assert parse_shorthand("") == ShorthandFilters()

    def test_defaults_are_independent_lists(self):
        first = ShorthandFilters()
        first.tags.append("x")
        first.terms.append("y")
        assert ShorthandFilters() == ShorthandFilters(tags=[], terms=[])
        assert ShorthandFilters().list_name is None
