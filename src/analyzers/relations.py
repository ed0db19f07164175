"""
Issue / Pull Request Relation Module.

Joins issues to the pull requests that cross-reference them. Relations are
derived from each issue's timeline cross-references on every render pass and
are never stored in the data store.
"""

from typing import Iterable, List, NamedTuple

from miners.models import Issue, PullRequest


class Relation(NamedTuple):
    """Pairing of an issue API URL with a pull request sub-resource URL."""

    issue_url: str
    pull_request_url: str


def number_from_url(url: str) -> int:
    """Parse the trailing path segment of an API URL as the item number."""
    return int(url.rstrip("/").rsplit("/", 1)[-1])


def format_related_numbers(numbers: Iterable[int]) -> str:
    """Render related numbers: empty for none, bare for one, ``"; "``-joined otherwise."""
    return "; ".join(str(number) for number in numbers)


class RelationTable:
    """
    Ordered, de-duplicated relations between issues and pull requests.

    Attributes:
        relations (List[Relation]): Relations in issue order, then timeline order.
    """

    def __init__(self, relations: Iterable[Relation]):
        self.relations: List[Relation] = list(dict.fromkeys(relations))

    @classmethod
    def from_issues(cls, issues: Iterable[Issue]) -> "RelationTable":
        return cls(
            Relation(issue.url, pull_request_url)
            for issue in issues
            for pull_request_url in issue.pull_request_urls
        )

    def __len__(self) -> int:
        return len(self.relations)

    def pull_request_urls_for(self, issue: Issue) -> List[str]:
        return [r.pull_request_url for r in self.relations if r.issue_url == issue.url]

    def issue_urls_for(self, pull_request: PullRequest) -> List[str]:
        return [r.issue_url for r in self.relations if r.pull_request_url == pull_request.url]

    def is_related(self, pull_request: PullRequest) -> bool:
        return any(r.pull_request_url == pull_request.url for r in self.relations)

    def related_numbers_for_issue(self, issue: Issue) -> str:
        return format_related_numbers(
            number_from_url(url) for url in self.pull_request_urls_for(issue)
        )

    def related_numbers_for_pull_request(self, pull_request: PullRequest) -> str:
        return format_related_numbers(
            number_from_url(url) for url in self.issue_urls_for(pull_request)
        )
