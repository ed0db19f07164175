"""
CSV Report Generation Module.

Renders one row per issue followed by one row per pull request, with issues
and pull requests cross-linked through their related numbers and one boolean
column per requested label. Every field is quoted.
"""

import csv
from typing import List, TextIO

from analyzers.relations import RelationTable
from miners.models import DataStore, Issue, PullRequest, Scope
from report.base import ReportGenerator, format_date

HEADER = [
    "NUMBER",
    "TITLE",
    "TYPE",
    "CREATED_ON",
    "CLOSED_ON",
    "SUBMITTER",
    "HTML_URL",
    "RELATED_NUMBERS",
]

ISSUE_TYPE = "Issue"
PULL_REQUEST_TYPE = "Pull Request"


class CSVReportGenerator(ReportGenerator):
    """
    Generates the CSV report.

    Output depends only on the data store and the scope, so rendering the
    same inputs twice yields identical text.
    """

    @staticmethod
    def _header(scope: Scope) -> List[str]:
        return HEADER + [f"LABEL '{label}'" for label in scope.labels_to_report]

    @staticmethod
    def _label_cells(labels: List[str], scope: Scope) -> List[str]:
        return ["true" if label in labels else "" for label in scope.labels_to_report]

    def _issue_row(self, issue: Issue, relations: RelationTable, scope: Scope) -> List[str]:
        return [
            str(issue.number),
            issue.title,
            ISSUE_TYPE,
            format_date(issue.created_at),
            format_date(issue.closed_at),
            issue.reporter,
            issue.html_url,
            relations.related_numbers_for_issue(issue),
        ] + self._label_cells(issue.labels, scope)

    def _pull_request_row(
        self, pull_request: PullRequest, relations: RelationTable, scope: Scope
    ) -> List[str]:
        return [
            str(pull_request.number),
            pull_request.title,
            PULL_REQUEST_TYPE,
            format_date(pull_request.created_at),
            format_date(pull_request.closed_at),
            pull_request.submitter,
            pull_request.html_url,
            relations.related_numbers_for_pull_request(pull_request),
        ] + self._label_cells(pull_request.labels, scope)

    def render(self, data_store: DataStore, scope: Scope, buffer: TextIO) -> None:
        issues = data_store.issue_list()
        relations = RelationTable.from_issues(issues)

        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(self._header(scope))
        for issue in issues:
            writer.writerow(self._issue_row(issue, relations, scope))
        for pull_request in data_store.pull_request_list():
            writer.writerow(self._pull_request_row(pull_request, relations, scope))
