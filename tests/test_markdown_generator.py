"""
Markdown Report Test Suite.

This module contains tests for the Markdown report sections and for the
report format dispatch shared with the CSV report.
"""

import io

import pytest

from miners.models import DataStore, Issue, PullRequest, Scope
from report.formats import ReportFormat, generator_for, render_report
from report.csv_generator import CSVReportGenerator
from report.markdown_generator import MarkdownReportGenerator
from github_fixtures import issue_api_url, pull_api_url, utc

GENERATED_AT = utc(2022, 3, 2, 8)


def build_issue(number, pull_numbers=()):
    return Issue(
        repository_name="org/repo",
        number=number,
        created_at=utc(2022, 2, 1),
        closed_at=utc(2022, 2, 10),
        title=f"Issue {number}",
        url=issue_api_url("org/repo", number),
        html_url=f"https://github.com/org/repo/issues/{number}",
        reporter="alice",
        pull_request_urls=[pull_api_url("org/repo", n) for n in pull_numbers],
    )


def build_pull_request(number):
    return PullRequest(
        repository_name="org/repo",
        number=number,
        created_at=utc(2022, 2, 11),
        closed_at=utc(2022, 2, 12),
        title=f"PR {number}",
        url=pull_api_url("org/repo", number),
        html_url=f"https://github.com/org/repo/pull/{number}",
        submitter="bob",
    )


@pytest.fixture
def scope():
    return Scope.from_dates("2022-02-01", "2022-03-01", ["org/repo"])


@pytest.fixture
def data_store():
    data_store = DataStore()
    data_store.add_issue(build_issue(11, [42, 77]))
    data_store.add_issue(build_issue(10))
    data_store.add_pull_request(build_pull_request(42))
    data_store.add_pull_request(build_pull_request(60))
    return data_store


def render(data_store, scope):
    buffer = io.StringIO()
    MarkdownReportGenerator(generated_at=GENERATED_AT).render(data_store, scope, buffer)
    return buffer.getvalue()


def test_header_summarizes_the_run(data_store, scope):
    report = render(data_store, scope)

    assert report.startswith("# Issues and Pull Requests Closed\n")
    assert "- Run as of 2022-03-02T08:00:00+00:00" in report
    assert "- From 2022-02-01 to 2022-03-01" in report
    assert "- Number of Issues Closed: 2" in report
    assert "- Number of PR Closed: 2" in report


def test_issues_are_sorted_and_list_their_pull_requests(data_store, scope):
    report = render(data_store, scope)

    assert report.index("### Issue 10") < report.index("### Issue 11")
    assert "- Reported by: [alice](https://github.com/alice)" in report
    assert (
        "- Pull Requests:\n"
        "  - [org/repo#42](https://github.com/org/repo/pull/42): PR 42\n"
        "  - #77"
    ) in report


def test_pull_requests_without_issue_get_their_own_section(data_store, scope):
    report = render(data_store, scope)

    section = report.split("## Pull Requests Merged without Corresponding Issue", 1)[1]
    assert "### PR 60" in section
    assert "- Submitter: [bob](https://github.com/bob)" in section
    assert "### PR 42" not in section


def test_section_omitted_when_every_pull_request_is_referenced(scope):
    data_store = DataStore()
    data_store.add_issue(build_issue(10, [42]))
    data_store.add_pull_request(build_pull_request(42))

    assert "without Corresponding Issue" not in render(data_store, scope)


def test_markdown_rendering_is_repeatable_with_fixed_timestamp(data_store, scope):
    assert render(data_store, scope) == render(data_store, scope)


def test_generator_for_each_format():
    assert isinstance(generator_for(ReportFormat.CSV), CSVReportGenerator)
    markdown = generator_for(ReportFormat.MARKDOWN, GENERATED_AT)
    assert isinstance(markdown, MarkdownReportGenerator)
    assert markdown.generated_at == GENERATED_AT


def test_generator_for_rejects_unknown_format():
    with pytest.raises(ValueError):
        generator_for("pdf")


def test_render_report_dispatches(data_store, scope):
    buffer = io.StringIO()

    render_report(ReportFormat.CSV, data_store, scope, buffer)

    assert buffer.getvalue().startswith('"NUMBER","TITLE"')
