"""Per-cycle memoisation of entity stats."""
import asyncio
import logging
from typing import Awaitable, Callable, Dict, Generic, Hashable, Optional, TypeVar
from gitstats.domain.models import LabelStatKey, RepoKey, StatMapping


logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class _Memo(Generic[K, V]):
    """Get-or-fetch table that runs at most one fetch per key.

    Concurrent callers asking for a key that is still being fetched await the
    same task instead of starting another one. Failed fetches are not stored.
    """

    def __init__(self, kind: str):
        self._kind = kind
        self._values: Dict[K, V] = {}
        self._pending: Dict[K, "asyncio.Future[V]"] = {}

    def get(self, key: K) -> Optional[V]:
        return self._values.get(key)

    def put(self, key: K, value: V) -> None:
        self._values[key] = value

    async def get_or_fetch(self, key: K, fetch_fn: Callable[[], Awaitable[V]]) -> V:
        if key in self._values:
            logger.debug(f"Cache hit for {self._kind} {key}")
            return self._values[key]

        pending = self._pending.get(key)
        if pending is not None:
            return await pending

        future = asyncio.ensure_future(fetch_fn())
        self._pending[key] = future
        try:
            value = await future
        finally:
            del self._pending[key]
        self._values[key] = value
        return value


class EntityCache:
    """Stats of users, organizations and repositories seen in one cycle.

    A new cache is created for every collection cycle and dropped when the
    cycle ends; nothing survives between cycles.
    """

    def __init__(self):
        self._users: _Memo[str, StatMapping] = _Memo("user")
        self._repos: _Memo[RepoKey, StatMapping] = _Memo("repository")
        self._listed_repos: _Memo[RepoKey, StatMapping] = _Memo("listed repository")
        self._labels: _Memo[RepoKey, Dict[LabelStatKey, int]] = _Memo("issue labels of")

    async def get_or_fetch_user_stats(
        self,
        login: str,
        fetch_fn: Callable[[], Awaitable[StatMapping]]
    ) -> StatMapping:
        """Return cached stats for ``login`` or fetch and store them."""
        return await self._users.get_or_fetch(login, fetch_fn)

    async def get_or_fetch_repo_stats(
        self,
        owner: str,
        repo_slug: str,
        fetch_fn: Callable[[], Awaitable[StatMapping]]
    ) -> StatMapping:
        """Return cached stats for a repository or fetch and store them."""
        return await self._repos.get_or_fetch(RepoKey(owner, repo_slug), fetch_fn)

    async def get_or_fetch_label_counts(
        self,
        owner: str,
        repo_slug: str,
        fetch_fn: Callable[[], Awaitable[Dict[LabelStatKey, int]]]
    ) -> Dict[LabelStatKey, int]:
        """Return cached issue-by-label counts for a repository or compute them."""
        return await self._labels.get_or_fetch(RepoKey(owner, repo_slug), fetch_fn)

    def put_listed_repo_stats(self, owner: str, repo_slug: str, stats: StatMapping) -> None:
        """Store stats taken from an owner's repository listing.

        Listing payloads lack some counters, so these are kept apart from the
        stats of individually fetched repositories.
        """
        self._listed_repos.put(RepoKey(owner, repo_slug), stats)

    def listed_repo_stats(self, owner: str, repo_slug: str) -> Optional[StatMapping]:
        return self._listed_repos.get(RepoKey(owner, repo_slug))
