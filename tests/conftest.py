from unittest.mock import Mock

import pytest


@pytest.fixture
def mock_github():
    """PyGithub client whose repositories are registered per test."""
    github = Mock()
    github.rate_limiting = (4990, 5000)
    github.rate_limiting_resettime = 1_700_000_000
    repositories = {}

    def register(name: str, items: list) -> Mock:
        repo = Mock()
        repo.full_name = name
        repo.get_issues.return_value = items
        repositories[name] = repo
        return repo

    github.get_repo.side_effect = lambda name: repositories[name]
    github.register = register
    return github
