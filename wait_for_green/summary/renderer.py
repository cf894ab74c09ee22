"""Markdown summary of the last polling attempt, rendered with Jinja2."""

from dataclasses import dataclass
from urllib.parse import quote

import structlog
from jinja2 import Environment, PackageLoader, select_autoescape

from wait_for_green.status.models import ReportSource, SourceEvaluation


logger = structlog.get_logger()

SOURCE_TITLES: dict[ReportSource, str] = {
    ReportSource.CHECK_RUNS: "Checks",
    ReportSource.COMMIT_STATUSES: "Statuses",
}


def escape_cell(value: str) -> str:
    """Escape a value for use inside a markdown table cell."""
    return value.replace("|", "\\|").replace("\n", " ")


# Reserved URL characters left as they are; parentheses and whitespace are not
_LINK_SAFE = ":/?#[]@!$&'*+,;=%"


def escape_link_target(url: str) -> str:
    """Percent-encode a URL so it cannot end a markdown link early."""
    return quote(url.strip(), safe=_LINK_SAFE)


@dataclass(frozen=True)
class SummaryRow:
    """One table row: a surviving report."""

    name: str
    status: str
    url: str | None


@dataclass(frozen=True)
class SummarySection:
    """One table: a source's surviving reports and its aggregate."""

    title: str
    aggregate: str
    rows: list[SummaryRow]

    @classmethod
    def from_evaluation(
        cls, evaluation: SourceEvaluation, attempt: int | None = None
    ) -> "SummarySection":
        """Build a section from a source evaluation.

        Args:
            evaluation: Evaluation to render.
            attempt: Attempt number shown in the title, if given.

        Returns:
            SummarySection with rows sorted by name.
        """
        rows = sorted(
            (
                SummaryRow(
                    name=key.label(),
                    status=report.status.value,
                    url=report.url,
                )
                for key, report in evaluation.reports.items()
            ),
            key=lambda row: row.name,
        )
        title = SOURCE_TITLES[evaluation.source]
        if attempt is not None:
            title = f"{title} (attempt {attempt})"
        return cls(title=title, aggregate=evaluation.aggregate.value, rows=rows)


class SummaryRenderer:
    """Renders per-source markdown tables (name -> status with link)."""

    def __init__(self) -> None:
        """Initialize the renderer with the packaged templates."""
        self._env = Environment(
            loader=PackageLoader("wait_for_green.summary", "templates"),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._env.filters["cell"] = escape_cell
        self._env.filters["link"] = escape_link_target

    def render(self, evaluations: list[tuple[int, SourceEvaluation]]) -> str:
        """Render one table per evaluation.

        Args:
            evaluations: (attempt, evaluation) pairs in display order.

        Returns:
            Markdown text.
        """
        sections = [
            SummarySection.from_evaluation(evaluation, attempt)
            for attempt, evaluation in evaluations
        ]
        template = self._env.get_template("summary.md.j2")
        content = template.render(sections=sections)
        logger.debug("summary_rendered", component="summary", sections=len(sections))
        return content
