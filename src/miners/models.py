"""
Closed Work Data Models.

Defines the report scope, the issue and pull request records projected out of
GitHub API objects, and the keyed data store that accumulates them.
Uses Pydantic for validation and serialization.

Record builders receive the supplementary API results (timeline, commit list,
pull request sub-resource) as arguments: the caller performs those fetches
explicitly, one record at a time.
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from config import ConfigurationError


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive timestamps and convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _midnight_utc(value: str) -> datetime:
    day = date.fromisoformat(value)
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)


class Scope(BaseModel):
    """Query parameters of one report run. ``since`` inclusive, ``until`` exclusive."""

    model_config = ConfigDict(frozen=True)

    repository_names: List[str]
    report_since_date: datetime
    report_until_date: datetime
    labels_to_report: List[str] = Field(default_factory=list)

    @field_validator("report_since_date", "report_until_date")
    def normalize_timezone(cls, v: datetime) -> datetime:
        return as_utc(v)

    @model_validator(mode="after")
    def check_window(self) -> "Scope":
        if self.report_since_date >= self.report_until_date:
            raise ValueError("report_since_date must be before report_until_date")
        return self

    @classmethod
    def from_dates(
        cls,
        since_date: str,
        until_date: str,
        repos: List[str],
        labels: Optional[List[str]] = None,
    ) -> "Scope":
        """Build a scope from ``YYYY-MM-DD`` strings interpreted as midnight UTC.

        Raises:
            ConfigurationError: On unparsable dates, an empty window or no repositories.
        """
        try:
            since = _midnight_utc(since_date)
            until = _midnight_utc(until_date)
        except ValueError as e:
            raise ConfigurationError(f"Invalid report date: {e}") from e

        if since >= until:
            raise ConfigurationError(
                f"Report window is empty: {since_date} is not before {until_date}"
            )
        if not repos:
            raise ConfigurationError("At least one repository must be given")

        return cls(
            repository_names=list(repos),
            report_since_date=since,
            report_until_date=until,
            labels_to_report=list(labels or []),
        )

    def includes(self, closed_at: Optional[datetime]) -> bool:
        """Whether a closing timestamp falls inside the report window."""
        if closed_at is None:
            return False
        closed_at = as_utc(closed_at)
        return self.report_since_date <= closed_at < self.report_until_date

    def same_query(self, other: "Scope") -> bool:
        """Whether two scopes fetch the same records; label columns are not compared."""
        return (
            self.repository_names == other.repository_names
            and self.report_since_date == other.report_since_date
            and self.report_until_date == other.report_until_date
        )


def _cross_referenced_pull_request_url(event: Any) -> Optional[str]:
    """Pull request API URL of a timeline cross-reference, if the entry is one."""
    raw = getattr(event, "raw_data", None)
    if not isinstance(raw, dict):
        return None
    source = raw.get("source")
    if not isinstance(source, dict):
        return None
    issue = source.get("issue")
    if not isinstance(issue, dict):
        return None
    pull_request = issue.get("pull_request")
    if not isinstance(pull_request, dict):
        return None
    return pull_request.get("url")


class _ClosedItem(BaseModel):
    """Fields shared by issues and pull requests."""

    model_config = ConfigDict(frozen=True)

    repository_name: str
    number: int
    created_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    title: str
    url: str
    html_url: str
    labels: List[str] = Field(default_factory=list)

    @field_validator("created_at", "closed_at")
    def normalize_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)

    @property
    def key(self) -> str:
        """Identity within a run: ``owner/repo#number``."""
        return f"{self.repository_name}#{self.number}"


class Issue(_ClosedItem):
    """A closed issue and the pull requests its timeline cross-references."""

    reporter: str
    commit_shas: List[str] = Field(default_factory=list)
    pull_request_urls: List[str] = Field(default_factory=list)

    @classmethod
    def build_from(cls, remote: Any, repository_name: str, timeline: Iterable[Any]) -> "Issue":
        """Project a GitHub issue and its already fetched timeline.

        Args:
            remote: ``github.Issue.Issue`` from the closed items listing.
            repository_name (str): ``owner/repo`` the issue belongs to.
            timeline: ``github.TimelineEvent.TimelineEvent`` entries of the issue.

        Returns:
            Issue: Frozen issue record.
        """
        commit_shas: List[str] = []
        pull_request_urls: List[str] = []
        for event in timeline:
            commit_id = getattr(event, "commit_id", None)
            if commit_id:
                commit_shas.append(commit_id)
            url = _cross_referenced_pull_request_url(event)
            if url:
                pull_request_urls.append(url)

        return cls(
            repository_name=repository_name,
            number=remote.number,
            created_at=remote.created_at,
            closed_at=remote.closed_at,
            title=remote.title,
            url=remote.url,
            html_url=remote.html_url,
            reporter=remote.user.login,
            labels=[label.name for label in remote.labels],
            commit_shas=commit_shas,
            pull_request_urls=pull_request_urls,
        )


class PullRequest(_ClosedItem):
    """A closed pull request. ``url`` is the ``/pulls/N`` sub-resource URL."""

    submitter: str
    # Trailing entry is the merge commit, None when the pull request was not merged
    commit_shas: List[Optional[str]] = Field(default_factory=list)

    @classmethod
    def build_from(
        cls,
        remote: Any,
        repository_name: str,
        pull: Any,
        commits: Iterable[Any],
    ) -> "PullRequest":
        """Project a GitHub pull request and its already fetched details.

        Args:
            remote: ``github.Issue.Issue`` from the closed items listing.
            repository_name (str): ``owner/repo`` the pull request belongs to.
            pull: ``github.PullRequest.PullRequest`` sub-resource (merge commit, URL).
            commits: ``github.Commit.Commit`` entries of the pull request.

        Returns:
            PullRequest: Frozen pull request record.
        """
        commit_shas: List[Optional[str]] = [commit.sha for commit in commits]
        commit_shas.append(pull.merge_commit_sha)

        return cls(
            repository_name=repository_name,
            number=remote.number,
            created_at=remote.created_at,
            closed_at=remote.closed_at,
            title=remote.title,
            # Issue-shaped URL would never match timeline cross-references
            url=pull.url,
            html_url=remote.html_url,
            submitter=remote.user.login,
            labels=[label.name for label in remote.labels],
            commit_shas=commit_shas,
        )


class DataStore(BaseModel):
    """
    In-memory result of a mining pass.

    Records are keyed by ``owner/repo#number`` and iterate in insertion order.
    ``labels`` lists every distinct label name seen, in first-seen order.
    """

    issues: Dict[str, Issue] = Field(default_factory=dict)
    pull_requests: Dict[str, PullRequest] = Field(default_factory=dict)
    labels: List[str] = Field(default_factory=list)

    def add_labels(self, names: Iterable[str]) -> None:
        for name in names:
            if name not in self.labels:
                self.labels.append(name)

    def add_issue(self, issue: Issue) -> None:
        self.add_labels(issue.labels)
        self.issues.setdefault(issue.key, issue)

    def add_pull_request(self, pull_request: PullRequest) -> None:
        self.add_labels(pull_request.labels)
        self.pull_requests.setdefault(pull_request.key, pull_request)

    def issue_list(self) -> List[Issue]:
        return list(self.issues.values())

    def pull_request_list(self) -> List[PullRequest]:
        return list(self.pull_requests.values())
