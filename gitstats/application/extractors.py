"""Mapping of raw GitHub payloads to stat mappings.

Fields that are absent or null in the payload are left out of the mapping
rather than zeroed.
"""
from typing import Any, Mapping, Optional, Tuple
from gitstats.domain.models import StatMapping


ORGANIZATION_TYPE = "Organization"

# (stat name, payload field)
REPO_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("forks", "forks_count"),
    ("issues", "open_issues_count"),
    ("network", "network_count"),
    ("stars", "stargazers_count"),
    ("subscribers", "subscribers_count"),
    ("watchers", "watchers_count"),
    ("size", "size"),
)

# Stats present in repository listing payloads; the rest needs a single repository fetch.
LISTING_REPO_STATS = frozenset(("forks", "issues", "stars", "watchers", "size"))

USER_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("public_repos", "public_repos"),
    ("public_gists", "public_gists"),
    ("followers", "followers"),
    ("following", "following"),
)

PLAN_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("plan_private_repos", "private_repos"),
    ("plan_seats", "seats"),
    ("plan_filled_seats", "filled_seats"),
)

ORGANIZATION_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("private_gists", "private_gists"),
    ("private_repos", "total_private_repos"),
    ("disk_usage", "disk_usage"),
)


def _copy_present(
    stats: StatMapping,
    payload: Optional[Mapping[str, Any]],
    fields: Tuple[Tuple[str, str], ...]
) -> None:
    if not payload:
        return
    for stat, source in fields:
        value = payload.get(source)
        if value is not None:
            stats[stat] = int(value)


def repo_stats(repository: Mapping[str, Any]) -> StatMapping:
    """Extract repository counters from a repository payload."""
    stats: StatMapping = {}
    _copy_present(stats, repository, REPO_FIELDS)
    return stats


def is_organization(account: Mapping[str, Any]) -> bool:
    """Whether a user payload describes an organization."""
    return account.get("type") == ORGANIZATION_TYPE


def user_stats(
    account: Mapping[str, Any],
    organization: Optional[Mapping[str, Any]] = None
) -> StatMapping:
    """Extract account counters from a user payload.

    Args:
        account: User or organization payload from the users endpoint
        organization: Organization detail payload, only for organizations

    Returns:
        Stat mapping with public counters, plan counters when the payload
        carries a plan, and private counters when organization detail is given
    """
    stats: StatMapping = {}
    _copy_present(stats, account, USER_FIELDS)
    _copy_present(stats, account.get("plan"), PLAN_FIELDS)
    if organization is not None:
        _copy_present(stats, organization, ORGANIZATION_FIELDS)
        _copy_present(stats, organization.get("plan"), PLAN_FIELDS)
    return stats
