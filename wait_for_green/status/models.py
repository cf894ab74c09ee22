"""Data models for status aggregation."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NormalizedStatus(str, Enum):
    """Normalized status of a single commit status or check run.

    Produced only by the classifiers; the raw vocabulary of each
    reporting mechanism is mapped onto these values.
    """

    UNKNOWN = "unknown"
    FAILURE = "failure"
    CANCELED = "canceled"
    SKIPPED = "skipped"
    PENDING = "pending"
    SUCCESS = "success"


class AggregateStatus(str, Enum):
    """Reduced verdict for one reporting source."""

    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"
    UNKNOWN = "unknown"


class ReportSource(str, Enum):
    """Reporting mechanism a report was fetched from."""

    CHECK_RUNS = "checks"
    COMMIT_STATUSES = "statuses"


class RawReport(BaseModel):
    """One observation reported by the hosting platform.

    Attributes:
        name: Context name (commit status) or check name (check run).
        state: Raw state string in the source vocabulary.
        timestamp: Observation time, None when the platform gave none.
        url: Link to the report details, if any.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(description="Context or check name")
    state: str = Field(description="Raw state string")
    timestamp: datetime | None = Field(default=None, description="Observation time")
    url: str | None = Field(default=None, description="Details URL")

    @field_validator("timestamp")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        """Treat naive timestamps as UTC so reports stay comparable."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v


class CheckRunReport(RawReport):
    """Check run observation, grouped into a check suite."""

    check_suite_id: int = Field(description="Owning check suite identifier")


class AggregationKey(NamedTuple):
    """Identity under which reports are deduplicated.

    Commit statuses are keyed by context name alone; check runs by the
    pair (check name, check suite id).
    """

    name: str
    check_suite_id: int | None = None

    def label(self) -> str:
        """Human-readable form used in warnings and summaries."""
        if self.check_suite_id is None:
            return self.name
        return f"{self.name} (suite {self.check_suite_id})"


@dataclass(frozen=True)
class ClassifiedReport:
    """A report after key derivation and classification."""

    key: AggregationKey
    timestamp: datetime | None
    status: NormalizedStatus
    url: str | None = None


@dataclass(frozen=True)
class SourceEvaluation:
    """Outcome of evaluating one source for one attempt.

    Attributes:
        source: Which reporting mechanism was evaluated.
        aggregate: Reduced verdict.
        reports: Surviving report per aggregation key.
        ignored_count: Reports dropped by the ignore rule.
        dropped_count: Reports dropped for lack of a timestamp.
    """

    source: ReportSource
    aggregate: AggregateStatus
    reports: dict[AggregationKey, ClassifiedReport] = field(default_factory=dict)
    ignored_count: int = 0
    dropped_count: int = 0

    def breakdown(self) -> dict[str, str]:
        """Map each surviving key label to its normalized status."""
        return {
            key.label(): report.status.value for key, report in self.reports.items()
        }


class PollOutcome(str, Enum):
    """Reason a polling session terminated."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


class PollResult(BaseModel):
    """Final, externally visible outcome of a polling session."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    success: bool = Field(description="True only when both sources succeeded")
    outcome: PollOutcome = Field(description="Terminating reason")
    attempts: int = Field(ge=1, description="Attempts performed")
    checks: AggregateStatus = Field(description="Last check-runs aggregate")
    statuses: AggregateStatus = Field(description="Last commit-statuses aggregate")
