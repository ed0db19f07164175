"""
Test doubles for PyGithub objects.

Each factory returns ``Mock`` objects exposing only the attributes the miner
and record builders read.
"""

from datetime import datetime, timezone
from typing import Iterable, List, Optional
from unittest.mock import Mock

API_ROOT = "https://api.github.com/repos"


def utc(year: int, month: int, day: int, hour: int = 0) -> datetime:
    return datetime(year, month, day, hour, tzinfo=timezone.utc)


def issue_api_url(repo: str, number: int) -> str:
    return f"{API_ROOT}/{repo}/issues/{number}"


def pull_api_url(repo: str, number: int) -> str:
    return f"{API_ROOT}/{repo}/pulls/{number}"


def make_label(name: str) -> Mock:
    # Mock(name=...) names the mock itself
    label = Mock()
    label.name = name
    return label


def make_remote(
    number: int,
    closed_at: Optional[datetime],
    created_at: Optional[datetime] = None,
    title: str = "Closed item",
    login: str = "octocat",
    labels: Iterable[str] = (),
    pull: bool = False,
    repo: str = "org/repo",
) -> Mock:
    remote = Mock()
    remote.number = number
    remote.closed_at = closed_at
    remote.created_at = created_at
    remote.title = title
    remote.url = issue_api_url(repo, number)
    remote.html_url = f"https://github.com/{repo}/{'pull' if pull else 'issues'}/{number}"
    remote.user.login = login
    remote.labels = [make_label(name) for name in labels]
    remote.pull_request = Mock() if pull else None
    return remote


def make_event(commit_id: Optional[str] = None, raw_data: Optional[dict] = None) -> Mock:
    return Mock(commit_id=commit_id, raw_data=raw_data if raw_data is not None else {})


def cross_reference(pull_request_url: Optional[str]) -> Mock:
    return make_event(
        raw_data={
            "event": "cross-referenced",
            "source": {
                "type": "issue",
                "issue": {"pull_request": {"url": pull_request_url}},
            },
        }
    )


def make_pull(
    repo: str, number: int, merge_commit_sha: Optional[str], commit_shas: List[str]
) -> Mock:
    pull = Mock()
    pull.url = pull_api_url(repo, number)
    pull.merge_commit_sha = merge_commit_sha
    pull.get_commits.return_value = [Mock(sha=sha) for sha in commit_shas]
    return pull


def attach_pull(remote: Mock, merge_commit_sha: Optional[str] = "merge", commit_shas=("c1",)) -> Mock:
    repo = remote.url.split("/repos/", 1)[1].rsplit("/issues/", 1)[0]
    pull = make_pull(repo, remote.number, merge_commit_sha, list(commit_shas))
    remote.as_pull_request.return_value = pull
    return pull

