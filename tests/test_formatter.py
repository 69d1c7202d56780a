"""Tests for report rendering."""

from pathlib import Path

import pytest

from backends.models import AggregatedResult, Match
from core.formatter import ResultFormatter, describe_location, group_by_file
from core.models import SearchRequest
from core.prompt_manager import DEFAULT_PROMPTS_FILE, PromptManager


@pytest.fixture
def formatter():
    return ResultFormatter(PromptManager(), max_matches=20000)


class TestDescribeLocation:
    def test_scoped(self):
        request = SearchRequest(pattern="foo", scope_path="src")

        assert describe_location(request, 3) == 'in path "src"'

    def test_single_root(self):
        assert describe_location(SearchRequest(pattern="foo"), 1) == "in the workspace directory"

    def test_several_roots(self):
        assert (
            describe_location(SearchRequest(pattern="foo"), 2)
            == "across 2 workspace directories"
        )


class TestGroupByFile:
    def test_first_seen_file_order_and_line_order(self):
        matches = [
            Match("b.txt", 9),
            Match("a.txt", 4),
            Match("b.txt", 2),
            Match("a.txt", 1),
        ]

        grouped = group_by_file(matches)

        assert list(grouped) == ["b.txt", "a.txt"]
        assert [m.line_number for m in grouped["b.txt"]] == [2, 9]
        assert [m.line_number for m in grouped["a.txt"]] == [1, 4]


class TestResultFormatter:
    """Tests for the report and status strings."""

    def test_lines_sorted_within_file(self, formatter):
        result = AggregatedResult(
            matches=[
                Match("b.txt", 3, "a foo bar"),
                Match("b.txt", 1, "foo at start"),
            ]
        )

        report, status = formatter.format(
            SearchRequest(pattern="foo"), result, "in the workspace directory"
        )

        assert report == (
            'Found 2 matches for pattern "foo" in the workspace directory:\n'
            "---\n"
            "File: b.txt\n"
            "L1: foo at start\n"
            "L3: a foo bar\n"
            "---"
        )
        assert status == "Found 2 matches"

    def test_single_match_with_filter(self, formatter):
        result = AggregatedResult(matches=[Match("src/x.py", 5, "   def foo():   ")])

        report, status = formatter.format(
            SearchRequest(pattern="foo", include_glob="*.py"), result, 'in path "src"'
        )

        assert report.startswith(
            'Found 1 match for pattern "foo" in path "src" (filter: "*.py"):\n---\n'
        )
        assert "L5: def foo():" in report
        assert status == "Found 1 match"
        # Display trimming leaves the stored text alone
        assert result.matches[0].line_text == "   def foo():   "

    def test_truncated(self):
        formatter = ResultFormatter(PromptManager(), max_matches=2)
        result = AggregatedResult(matches=[Match("a", 1), Match("b", 1)], truncated=True)

        report, status = formatter.format(
            SearchRequest(pattern="x"), result, "across 2 workspace directories"
        )

        assert report.splitlines()[0] == (
            'Found 2 matches for pattern "x" across 2 workspace directories'
            " (results limited to 2 matches for performance):"
        )
        assert report.count("---") == 3
        assert status == "Found 2 matches (limited)"

    def test_no_matches(self, formatter):
        report, status = formatter.format(
            SearchRequest(pattern="foo"), AggregatedResult(), "in the workspace directory"
        )

        assert report == 'No matches found for pattern "foo" in the workspace directory.'
        assert status == "No matches found"

    def test_no_matches_with_filter(self, formatter):
        report, _ = formatter.format(
            SearchRequest(pattern="foo", include_glob="*.md"),
            AggregatedResult(),
            'in path "docs"',
        )

        assert report == 'No matches found for pattern "foo" in path "docs" (filter: "*.md").'

    def test_error(self, formatter):
        report, status = formatter.format_error("boom")

        assert report == "Error during grep search operation: boom"
        assert status == "Error: boom"

    def test_cancelled(self, formatter):
        report, status = formatter.format_cancelled(
            SearchRequest(pattern="foo"), "in the workspace directory"
        )

        assert report == 'Search for pattern "foo" in the workspace directory was cancelled.'
        assert status == "Cancelled"


class TestPromptManager:
    def test_default_file_ships_inside_core_package(self):
        import core

        assert DEFAULT_PROMPTS_FILE.parent == Path(core.__file__).parent
        assert DEFAULT_PROMPTS_FILE.is_file()

    def test_tool_description(self):
        description = PromptManager().get_text("tools.search_file_content")

        assert "regular expression" in description.lower()

    def test_custom_file(self, tmp_path):
        prompts = tmp_path / "prompts.yaml"
        prompts.write_text("reports:\n  hello: 'Hello {{ name }}'\n")

        assert PromptManager(prompts).render("reports.hello", name="grep") == "Hello grep"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PromptManager(tmp_path / "missing.yaml")

    def test_missing_entry(self):
        with pytest.raises(ValueError, match="not found"):
            PromptManager().get_text("reports.nope")
