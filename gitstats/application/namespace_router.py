"""Resolution of requested metric namespaces into concrete records."""
import logging
from datetime import datetime
from typing import Iterable, List, NamedTuple, Optional, Sequence
from gitstats.application.emitter import MetricEmitter
from gitstats.application.entity_cache import EntityCache
from gitstats.application.extractors import LISTING_REPO_STATS, repo_stats
from gitstats.application.identity_resolver import IdentityResolver
from gitstats.application.label_aggregator import aggregate_issues_by_label
from gitstats.application.remote import remote_lookup
from gitstats.domain.catalog import (
    COUNT_SEGMENT,
    ISSUES_BY_LABEL,
    NAMESPACE_PREFIX,
    REPO_FAMILY,
    USER_FAMILY,
    stat_key,
)
from gitstats.domain.exceptions import UnsupportedNamespaceShape
from gitstats.domain.github_interface import IGitHubClient
from gitstats.domain.models import (
    WILDCARD,
    CollectorConfig,
    MetricRecord,
    MetricRequest,
    StatMapping,
)
from gitstats.domain.naming import make_slug


logger = logging.getLogger(__name__)


class RequestShape(NamedTuple):
    """Dynamic parts of a classified namespace."""
    family: str
    owner: str
    repo: Optional[str]
    stat: str


def classify(namespace: Sequence[str]) -> RequestShape:
    """Classify a namespace by family and pull out its dynamic segments.

    Raises:
        UnsupportedNamespaceShape: When the namespace matches no template
    """
    prefix_len = len(NAMESPACE_PREFIX)
    if tuple(namespace[:prefix_len]) != NAMESPACE_PREFIX:
        raise UnsupportedNamespaceShape(namespace, "unknown prefix")
    if len(namespace) <= prefix_len:
        raise UnsupportedNamespaceShape(namespace, "missing metric family")

    family = namespace[prefix_len]
    parts = list(namespace[prefix_len + 1:])

    if family == REPO_FAMILY:
        if len(parts) == 3 and parts[2] != ISSUES_BY_LABEL:
            return RequestShape(family, parts[0], parts[1], parts[2])
        if len(parts) == 6 and parts[2] == ISSUES_BY_LABEL and parts[5] == COUNT_SEGMENT:
            return RequestShape(family, parts[0], parts[1], ISSUES_BY_LABEL)
        raise UnsupportedNamespaceShape(namespace, "expected owner/repo/stat or owner/repo/issuesbylabel/label/status/count")

    if family == USER_FAMILY:
        if len(parts) == 2:
            return RequestShape(family, parts[0], None, parts[1])
        raise UnsupportedNamespaceShape(namespace, "expected user/stat")

    raise UnsupportedNamespaceShape(namespace, f"unknown metric family '{family}'")


class NamespaceRouter:
    """Turns one batch of metric requests into metric records.

    A router lives for exactly one collection cycle: its cache and resolved
    identities start empty and are dropped with it. Requests are processed in
    order, one at a time, and any failed lookup aborts the whole batch.
    """

    def __init__(
        self,
        github_client: IGitHubClient,
        config: CollectorConfig,
        collected_at: datetime
    ):
        """Initialize router.

        Args:
            github_client: GitHub API client implementation
            config: Validated configuration of this cycle
            collected_at: Timestamp stamped on every record of the cycle
        """
        self._github_client = github_client
        self._config = config
        self._cache = EntityCache()
        self._resolver = IdentityResolver(github_client, self._cache, config.fixed_user)
        self._emitter = MetricEmitter(collected_at)

    async def route(self, requests: Iterable[MetricRequest]) -> List[MetricRecord]:
        """Resolve every request, keeping request order in the output."""
        records: List[MetricRecord] = []
        for request in requests:
            logger.info(f"Resolving {request.path}")
            shape = classify(request.namespace)
            if shape.family == REPO_FAMILY:
                records.extend(await self._repo_metrics(request, shape))
            else:
                records.append(await self._user_metric(request, shape))
        return records

    async def _repo_metrics(self, request: MetricRequest, shape: RequestShape) -> List[MetricRecord]:
        owner = shape.owner
        if owner == WILDCARD:
            owner = await self._resolver.resolve_self()

        listed = False
        if shape.repo != WILDCARD:
            repositories = [shape.repo]
        elif self._config.fixed_repo:
            repositories = [self._config.fixed_repo]
        else:
            repositories = await self._resolver.resolve_owned_repositories(owner)
            listed = stat_key(shape.stat) in LISTING_REPO_STATS

        records: List[MetricRecord] = []
        for repository in repositories:
            if shape.stat == ISSUES_BY_LABEL:
                records.extend(await self._label_metrics(request, owner, repository))
            else:
                stats = None
                if listed:
                    stats = self._cache.listed_repo_stats(owner, make_slug(repository))
                if stats is None:
                    stats = await self._repo_stats(owner, repository)
                records.append(self._emitter.emit_stat(
                    (REPO_FAMILY, owner, make_slug(repository), shape.stat),
                    stats,
                    request.version
                ))
        return records

    async def _repo_stats(self, owner: str, repository: str) -> StatMapping:
        async def fetch() -> StatMapping:
            logger.info(f"Fetching repository {owner}/{repository}")
            payload = await remote_lookup(
                f"get repository {owner}/{repository}",
                self._github_client.get_repository(owner, repository)
            )
            return repo_stats(payload)

        return await self._cache.get_or_fetch_repo_stats(owner, make_slug(repository), fetch)

    async def _label_metrics(
        self,
        request: MetricRequest,
        owner: str,
        repository: str
    ) -> List[MetricRecord]:
        repo_slug = make_slug(repository)

        async def fetch():
            logger.info(f"Fetching labels and issues of {owner}/{repository}")
            labels, issues = await remote_lookup(
                f"get labels and issues of {owner}/{repository}",
                self._github_client.get_labels_and_issues(owner, repository)
            )
            return aggregate_issues_by_label(labels, issues)

        counts = await self._cache.get_or_fetch_label_counts(owner, repo_slug, fetch)
        return [
            self._emitter.emit(
                (REPO_FAMILY, owner, repo_slug, ISSUES_BY_LABEL, key.label, key.state, COUNT_SEGMENT),
                value,
                request.version
            )
            for key, value in counts.items()
        ]

    async def _user_metric(self, request: MetricRequest, shape: RequestShape) -> MetricRecord:
        login = shape.owner
        if login == WILDCARD:
            login = await self._resolver.resolve_self()

        stats = await self._resolver.user_stats(login)
        return self._emitter.emit_stat((USER_FAMILY, login, shape.stat), stats, request.version)
