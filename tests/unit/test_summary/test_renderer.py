"""Unit tests for the job summary renderer."""

from tests.helpers.fetcher import check_run, commit_status
from wait_for_green.status.models import AggregateStatus
from wait_for_green.status.sources import evaluate_check_runs, evaluate_commit_statuses
from wait_for_green.summary.renderer import (
    SummaryRenderer,
    SummarySection,
    escape_cell,
    escape_link_target,
)


class TestEscapeCell:
    """Tests for escape_cell."""

    def test_escapes_pipes_and_newlines(self) -> None:
        """Table syntax in names cannot break the table."""
        assert escape_cell("a|b\nc") == "a\\|b c"


class TestEscapeLinkTarget:
    """Tests for escape_link_target."""

    def test_plain_url_unchanged(self) -> None:
        """Ordinary URLs keep their reserved characters."""
        url = "https://ci.example.com/job/42?tab=log&line=7#L7"
        assert escape_link_target(url) == url

    def test_parentheses_and_spaces_encoded(self) -> None:
        """Characters that would end the link are percent-encoded."""
        assert (
            escape_link_target("https://ci.example.com/build (linux)/")
            == "https://ci.example.com/build%20%28linux%29/"
        )

    def test_existing_escapes_kept(self) -> None:
        """Already encoded sequences are not encoded twice."""
        url = "https://ci.example.com/a%20b"
        assert escape_link_target(url) == url


class TestSummarySection:
    """Tests for SummarySection."""

    def test_rows_sorted_by_name(self) -> None:
        """Rows are listed alphabetically with suite labels."""
        evaluation = evaluate_check_runs(
            [
                check_run("test", "success", suite=2),
                check_run("build", "in_progress", suite=1),
            ]
        )

        section = SummarySection.from_evaluation(evaluation, attempt=4)

        assert section.title == "Checks (attempt 4)"
        assert section.aggregate == AggregateStatus.PENDING.value
        assert [row.name for row in section.rows] == [
            "build (suite 1)",
            "test (suite 2)",
        ]
        assert [row.status for row in section.rows] == ["pending", "success"]


class TestSummaryRenderer:
    """Tests for SummaryRenderer."""

    def test_renders_table_per_source(self) -> None:
        """Each source gets a heading and a name/status table."""
        checks = evaluate_check_runs(
            [check_run("lint", "failure", url="https://github.com/runs/1")]
        )
        statuses = evaluate_commit_statuses([commit_status("ci/jenkins", "success")])

        markdown = SummaryRenderer().render([(2, checks), (2, statuses)])

        assert "### Checks (attempt 2): failure" in markdown
        assert "### Statuses (attempt 2): success" in markdown
        assert "| Name | Status |" in markdown
        assert "| lint (suite 1) | [failure](https://github.com/runs/1) |" in markdown
        assert "| ci/jenkins | success |" in markdown
        assert markdown.index("### Checks") < markdown.index("### Statuses")

    def test_empty_source(self) -> None:
        """A source without reports says so instead of an empty table."""
        markdown = SummaryRenderer().render([(1, evaluate_commit_statuses([]))])

        assert "### Statuses (attempt 1): success" in markdown
        assert "_No reports._" in markdown
        assert "| Name |" not in markdown

    def test_link_with_parenthesis_stays_intact(self) -> None:
        """A URL containing ')' does not break the status link."""
        checks = evaluate_check_runs(
            [check_run("e2e", "success", url="https://ci.example.com/run (1)")]
        )

        markdown = SummaryRenderer().render([(1, checks)])

        assert "[success](https://ci.example.com/run%20%281%29)" in markdown
