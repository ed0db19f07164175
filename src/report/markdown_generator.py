"""
Markdown Report Generation Module.

Human-readable companion to the CSV report. Issues are listed with the pull
requests that reference them; pull requests no issue points at get their own
section.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional, TextIO, Tuple, Union

from analyzers.relations import RelationTable, number_from_url
from miners.models import DataStore, Issue, PullRequest, Scope
from report.base import ReportGenerator, format_date

GITHUB_PROFILE_URL = "https://github.com/{login}"


def _sort_key(item: Union[Issue, PullRequest]) -> Tuple[str, int]:
    return (item.repository_name, item.number)


class MarkdownReportGenerator(ReportGenerator):
    """
    Generates the Markdown report.

    Attributes:
        generated_at (Optional[datetime]): Timestamp printed in the header;
            the render time when not given.
    """

    def __init__(self, generated_at: Optional[datetime] = None):
        self.generated_at = generated_at

    def _generate_header(self, data_store: DataStore, scope: Scope) -> str:
        generated_at = self.generated_at or datetime.now(timezone.utc)
        lines = [
            "# Issues and Pull Requests Closed",
            "",
            f"- Run as of {generated_at.isoformat()}",
            f"- From {format_date(scope.report_since_date)} to {format_date(scope.report_until_date)}",
            f"- Repositories: {', '.join(scope.repository_names)}",
            f"- Number of Issues Closed: {len(data_store.issues)}",
            f"- Number of PR Closed: {len(data_store.pull_requests)}",
        ]
        return "\n".join(lines)

    def _generate_issue(
        self,
        issue: Issue,
        relations: RelationTable,
        pulls_by_url: Dict[str, PullRequest],
    ) -> str:
        lines = [
            f"### {issue.title}",
            "",
            f"- [{issue.repository_name}#{issue.number}]({issue.html_url})",
            f"- Reported by: [{issue.reporter}]({GITHUB_PROFILE_URL.format(login=issue.reporter)})",
            f"- Created: {format_date(issue.created_at)}",
            f"- Closed: {format_date(issue.closed_at)}",
        ]

        pull_request_urls = relations.pull_request_urls_for(issue)
        if pull_request_urls:
            lines.append("- Pull Requests:")
            for url in pull_request_urls:
                pull_request = pulls_by_url.get(url)
                if pull_request is None:
                    # Referenced pull request was not closed inside the window
                    lines.append(f"  - #{number_from_url(url)}")
                else:
                    lines.append(
                        f"  - [{pull_request.repository_name}#{pull_request.number}]"
                        f"({pull_request.html_url}): {pull_request.title}"
                    )
        return "\n".join(lines)

    def _generate_issues_section(
        self,
        data_store: DataStore,
        relations: RelationTable,
        pulls_by_url: Dict[str, PullRequest],
    ) -> str:
        sections = ["## Issues Closed"]
        for issue in sorted(data_store.issue_list(), key=_sort_key):
            sections.append(self._generate_issue(issue, relations, pulls_by_url))
        return "\n\n".join(sections)

    def _generate_pull_request(self, pull_request: PullRequest) -> str:
        lines = [
            f"### {pull_request.title}",
            "",
            f"- [{pull_request.repository_name}#{pull_request.number}]({pull_request.html_url})",
            f"- Created: {format_date(pull_request.created_at)}",
            f"- Closed: {format_date(pull_request.closed_at)}",
            f"- Submitter: [{pull_request.submitter}]"
            f"({GITHUB_PROFILE_URL.format(login=pull_request.submitter)})",
        ]
        return "\n".join(lines)

    def _generate_unrelated_pull_requests_section(
        self, unrelated: List[PullRequest]
    ) -> str:
        sections = ["## Pull Requests Merged without Corresponding Issue"]
        for pull_request in sorted(unrelated, key=_sort_key):
            sections.append(self._generate_pull_request(pull_request))
        return "\n\n".join(sections)

    def render(self, data_store: DataStore, scope: Scope, buffer: TextIO) -> None:
        relations = RelationTable.from_issues(data_store.issue_list())
        pulls_by_url = {pr.url: pr for pr in data_store.pull_request_list()}

        sections = [
            self._generate_header(data_store, scope),
            self._generate_issues_section(data_store, relations, pulls_by_url),
        ]

        unrelated = [
            pr for pr in data_store.pull_request_list() if not relations.is_related(pr)
        ]
        if unrelated:
            sections.append(self._generate_unrelated_pull_requests_section(unrelated))

        buffer.write("\n\n".join(sections) + "\n")
