"""Domain models representing core business entities."""
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Mapping, NamedTuple, Optional, Tuple

from gitstats.domain.exceptions import ConfigurationError


WILDCARD = "*"

StatMapping = Dict[str, int]


@dataclass(frozen=True)
class CollectorConfig:
    """Configuration shared by every request of one collection cycle."""
    access_token: str
    user: str = ""
    repo: str = ""

    @classmethod
    def from_mapping(cls, table: Mapping[str, object]) -> 'CollectorConfig':
        """Build a config from a host-supplied option table.

        Unknown keys are ignored and ``None`` is treated as unset.
        """
        def _value(key: str) -> str:
            value = table.get(key)
            return "" if value is None else str(value).strip()

        return cls(
            access_token=_value("access_token"),
            user=_value("user"),
            repo=_value("repo"),
        )

    @classmethod
    def from_env(cls) -> 'CollectorConfig':
        """Build a config from GITHUB_TOKEN, GITSTATS_USER and GITSTATS_REPO."""
        return cls(
            access_token=os.getenv("GITHUB_TOKEN", "").strip(),
            user=os.getenv("GITSTATS_USER", "").strip(),
            repo=os.getenv("GITSTATS_REPO", "").strip(),
        )

    @property
    def fixed_user(self) -> Optional[str]:
        return self.user or None

    @property
    def fixed_repo(self) -> Optional[str]:
        return self.repo or None

    def validate(self) -> 'CollectorConfig':
        """Check required options, returning self so calls can be chained.

        Raises:
            ConfigurationError: When ``access_token`` is missing or empty
        """
        if not self.access_token:
            raise ConfigurationError("access_token missing from config")
        return self


@dataclass(frozen=True)
class MetricRequest:
    """A requested metric path, possibly containing wildcard segments."""
    namespace: Tuple[str, ...]
    version: int = 1
    config: Optional[CollectorConfig] = None

    @property
    def path(self) -> str:
        return "/".join(self.namespace)


@dataclass(frozen=True)
class MetricRecord:
    """Immutable, fully resolved metric value."""
    namespace: Tuple[str, ...]
    value: int
    timestamp: datetime
    version: int

    @property
    def path(self) -> str:
        """Returns the namespace joined with '/'."""
        return "/".join(self.namespace)


class RepoKey(NamedTuple):
    """Cache identity of a repository."""
    owner: str
    slug: str


class LabelStatKey(NamedTuple):
    """Issue count bucket: slugged label name and issue state."""
    label: str
    state: str


@dataclass(frozen=True)
class Label:
    """Repository issue label."""
    name: str


@dataclass(frozen=True)
class Issue:
    """Repository issue reduced to what label aggregation needs."""
    state: str
    labels: Tuple[str, ...] = field(default_factory=tuple)
