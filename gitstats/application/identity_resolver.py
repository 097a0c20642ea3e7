"""Resolution of wildcard owners and repositories for one collection cycle."""
import logging
from typing import Any, Dict, List, Mapping, Optional
from gitstats.application.entity_cache import EntityCache
from gitstats.application.extractors import is_organization, repo_stats, user_stats
from gitstats.application.remote import remote_lookup
from gitstats.domain.exceptions import RemoteLookupError
from gitstats.domain.github_interface import IGitHubClient
from gitstats.domain.models import StatMapping
from gitstats.domain.naming import make_slug


logger = logging.getLogger(__name__)


class IdentityResolver:
    """Resolves the caller's login and owners' repository lists.

    Each resolution happens at most once per cycle: the caller's identity
    once, and the repository list once per owner. Results feed the shared
    EntityCache so later requests for the same entities need no lookups.
    """

    def __init__(
        self,
        github_client: IGitHubClient,
        cache: EntityCache,
        configured_user: Optional[str] = None
    ):
        """Initialize resolver.

        Args:
            github_client: GitHub API client implementation
            cache: Stats cache of the current cycle
            configured_user: Fixed login that replaces the caller's identity
        """
        self._github_client = github_client
        self._cache = cache
        self._configured_user = configured_user
        self._self_login: Optional[str] = None
        self._owned_repositories: Dict[str, List[str]] = {}

    async def resolve_self(self) -> str:
        """Return the login that a wildcard owner stands for.

        A configured user is returned as-is. Otherwise the authenticated
        account is looked up once, and its stats are cached with it.
        """
        if self._self_login is not None:
            return self._self_login

        if self._configured_user:
            self._self_login = self._configured_user
            return self._self_login

        account = await remote_lookup(
            "get authenticated user",
            self._github_client.get_authenticated_identity()
        )
        login = account.get("login")
        if not login:
            raise RemoteLookupError("get authenticated user", "response carries no login")

        await self._cache.get_or_fetch_user_stats(login, lambda: self._account_stats(login, account))
        self._self_login = login
        logger.info(f"Resolved authenticated user to {login}")
        return login

    async def resolve_owned_repositories(self, owner: str) -> List[str]:
        """Return the names of all repositories owned by ``owner``.

        Stats carried by the listing payloads are stored as listed
        repository stats for wildcard expansions.
        """
        if owner in self._owned_repositories:
            return self._owned_repositories[owner]

        repositories = await remote_lookup(
            f"list repositories owned by {owner}",
            self._github_client.list_owned_repositories(owner)
        )

        names: List[str] = []
        for repository in repositories:
            name = repository.get("name")
            if not name:
                continue
            names.append(name)
            self._cache.put_listed_repo_stats(owner, make_slug(name), repo_stats(repository))

        self._owned_repositories[owner] = names
        logger.info(f"Found {len(names)} repositories owned by {owner}")
        return names

    async def user_stats(self, login: str) -> StatMapping:
        """Return stats of a user or organization, fetching them on first use."""
        async def fetch() -> StatMapping:
            logger.info(f"Fetching stats for user {login}")
            account = await remote_lookup(
                f"look up user {login}",
                self._github_client.get_identity(login)
            )
            return await self._account_stats(login, account)

        return await self._cache.get_or_fetch_user_stats(login, fetch)

    async def _account_stats(self, login: str, account: Mapping[str, Any]) -> StatMapping:
        organization = None
        if is_organization(account):
            organization = await remote_lookup(
                f"look up organization {login}",
                self._github_client.get_organization_detail(login)
            )
        return user_stats(account, organization)
