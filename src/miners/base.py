"""
Abstract Base Class for Repository Miners.

Defines the interface for closed work mining implementations.
All repository miners (GitHub, GitLab, etc.) should implement this interface.
"""

from abc import ABC, abstractmethod

from miners.models import DataStore, Scope


class RepositoryMiner(ABC):
    """
    Abstract base class for repository miners.

    Defines the contract for collecting closed issues and pull requests.
    Implementations should handle:
    - Authentication with the repository service
    - Pagination across every repository of the scope
    - Filtering by the report window
    - Transformation to the common records
    """

    @abstractmethod
    def mine(self, scope: Scope) -> DataStore:
        """
        Collect every issue and pull request closed within the scope.

        Args:
            scope (Scope): Repositories and report window

        Returns:
            DataStore: Fully populated data store

        Raises:
            Exception: If mining fails; no partial result is returned
        """
        pass
