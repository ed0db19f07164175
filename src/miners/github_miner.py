"""
GitHub Closed Work Mining Module.

This module collects the issues and pull requests closed within a report window.
Repositories and result pages are processed strictly one at a time; every
record costs its own follow-up requests (timeline for issues, sub-resource
and commit list for pull requests).
"""

from datetime import datetime, timezone
from typing import Optional

from github import Auth, Github
from github.Issue import Issue as RemoteIssue

from config import ConfigurationError, logger
from miners.base import RepositoryMiner
from miners.models import DataStore, Issue, PullRequest, Scope

DEPENDABOT_LOGIN = "dependabot[bot]"


class GitHubMiner(RepositoryMiner):
    """
    GitHubMiner is responsible for mining closed work from GitHub repositories.
    It lists closed items, classifies them as issues or pull requests and
    transforms them into Pydantic records.
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        per_page: int = 50,
        github: Optional[Github] = None,
    ):
        """Initialize GitHub miner with authentication and configuration.

        Args:
            access_token (Optional[str]): GitHub API token for authentication.
            per_page (int): Page size requested from the API.
            github (Optional[Github]): Preconfigured client, used instead of
                building one from the token.

        Raises:
            ConfigurationError: When neither a token nor a client is given.
        """
        if github is None:
            if not access_token:
                raise ConfigurationError("A GitHub access token is required")
            github = Github(auth=Auth.Token(access_token), per_page=per_page)
        self.github = github

    def _log_rate_limit(self, check_name: str) -> None:
        """
        Log the rate limit status reported by the last API response.

        Called after a repository listing has run, so PyGithub answers from
        the cached response headers.

        Args:
            check_name (str): Identifier for the rate limit check point.
        """
        remaining, limit = self.github.rate_limiting
        reset_time = datetime.fromtimestamp(
            self.github.rate_limiting_resettime, timezone.utc
        )

        logger.info(
            {
                "message": f"{check_name} API rate limit status",
                "remaining_points": remaining,
                "total_points": limit,
                "reset_time": reset_time.isoformat(),
            }
        )

        # If less than 10% of rate limit remains, log a warning
        if remaining < (limit * 0.1):
            logger.warning(
                {
                    "message": "GitHub API rate limit running low",
                    "remaining_points": remaining,
                    "reset_time": reset_time.isoformat(),
                }
            )

    @staticmethod
    def _is_reportable(remote: RemoteIssue, scope: Scope) -> bool:
        if not scope.includes(remote.closed_at):
            return False
        return remote.user.login != DEPENDABOT_LOGIN

    def _build_issue(self, remote: RemoteIssue, repository_name: str) -> Issue:
        timeline = remote.get_timeline()
        return Issue.build_from(remote, repository_name, timeline)

    def _build_pull_request(self, remote: RemoteIssue, repository_name: str) -> PullRequest:
        # Sub-resource carries the merge commit and the URL cross-references use
        pull = remote.as_pull_request()
        commits = pull.get_commits()
        return PullRequest.build_from(remote, repository_name, pull, commits)

    def _mine_repository(
        self, repository_name: str, scope: Scope, data_store: DataStore
    ) -> None:
        """
        Add the closed work of one repository to the data store.

        Args:
            repository_name (str): The full name of the repository (e.g., 'owner/repo').
            scope (Scope): Report window.
            data_store (DataStore): Accumulator owned by the current mining pass.

        Raises:
            Exception: Any API or network failure, after logging it.
        """
        logger.info({"message": "Starting repository mining", "repository": repository_name})

        try:
            repo = self.github.get_repo(repository_name)
            # "since" filters on update time; closing time is checked per item
            remote_items = repo.get_issues(
                state="closed", sort="updated", since=scope.report_since_date
            )

            counts = {"issues": 0, "pull_requests": 0, "skipped": 0}
            for remote in remote_items:
                if not self._is_reportable(remote, scope):
                    counts["skipped"] += 1
                    logger.debug(
                        {
                            "message": "Skipping closed item",
                            "repository": repository_name,
                            "number": remote.number,
                        }
                    )
                    continue

                if remote.pull_request is not None:
                    data_store.add_pull_request(
                        self._build_pull_request(remote, repository_name)
                    )
                    counts["pull_requests"] += 1
                else:
                    data_store.add_issue(self._build_issue(remote, repository_name))
                    counts["issues"] += 1

            self._log_rate_limit(repository_name)
            logger.info(
                {
                    "message": "Finished repository mining",
                    "repository": repository_name,
                    **counts,
                }
            )

        except Exception as e:
            logger.error(
                {
                    "message": "Repository mining failed",
                    "repository": repository_name,
                    "error": str(e),
                }
            )
            raise

    def mine(self, scope: Scope) -> DataStore:
        """
        Collect the closed issues and pull requests of every scoped repository.

        Args:
            scope (Scope): Repositories and report window.

        Returns:
            DataStore: Populated data store, handed out only once complete.
        """
        data_store = DataStore()
        logger.info(
            {
                "message": "Mining closed work",
                "repositories": scope.repository_names,
                "since": scope.report_since_date.isoformat(),
                "until": scope.report_until_date.isoformat(),
            }
        )

        for repository_name in scope.repository_names:
            self._mine_repository(repository_name, scope, data_store)

        logger.info(
            {
                "message": "Mining finished",
                "issues": len(data_store.issues),
                "pull_requests": len(data_store.pull_requests),
                "labels": len(data_store.labels),
            }
        )
        return data_store

