"""GitHub API interface (port) for the lookups the collector needs.

This is the anti-corruption layer that shields the domain from GitHub API specifics.
Payload-returning methods hand back the decoded JSON objects; only the stats
extractors look inside them.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Tuple
from gitstats.domain.models import Issue, Label


Payload = Dict[str, Any]


class IGitHubClient(ABC):
    """Abstract interface for GitHub API operations.

    Implementations raise ``RemoteLookupError`` for every failure.
    """

    @abstractmethod
    async def get_authenticated_identity(self) -> Payload:
        """Fetch the profile of the account owning the access token."""
        pass

    @abstractmethod
    async def get_identity(self, login: str) -> Payload:
        """Fetch a user or organization profile by login."""
        pass

    @abstractmethod
    async def get_organization_detail(self, login: str) -> Payload:
        """Fetch organization details (private counts, disk usage)."""
        pass

    @abstractmethod
    async def list_owned_repositories(self, owner: str) -> List[Payload]:
        """List every repository owned by ``owner``, all pages included."""
        pass

    @abstractmethod
    async def get_repository(self, owner: str, name: str) -> Payload:
        """Fetch a single repository."""
        pass

    @abstractmethod
    async def get_labels_and_issues(
        self, owner: str, repository: str
    ) -> Tuple[List[Label], List[Issue]]:
        """Fetch every label and every issue of a repository.

        Args:
            owner: Repository owner login
            repository: Repository name as known to GitHub (not the slug)

        Returns:
            Tuple of (labels, issues)
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""
        pass
