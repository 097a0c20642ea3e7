"""Static catalog of the metrics and configuration options the collector declares."""
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from gitstats.domain.models import WILDCARD


NAMESPACE_PREFIX: Tuple[str, ...] = ("raintank", "apps", "gitstats")

REPO_FAMILY = "repo"
USER_FAMILY = "user"

ISSUES_BY_LABEL = "issuesbylabel"
COUNT_SEGMENT = "count"
NO_LABEL = "NoLabel"
ISSUE_STATES: Tuple[str, ...] = ("open", "closed")

REPO_METRIC_NAMES: Tuple[str, ...] = (
    "forks",
    "issues",
    "network",
    "stars",
    "subscribers",
    "watches",
    "size",
)

USER_METRIC_NAMES: Tuple[str, ...] = (
    "public_repos",
    "public_gists",
    "followers",
    "following",
    "private_repos",
    "private_gists",
    "plan_private_repos",
    "plan_seats",
    "plan_filled_seats",
)

# Declared metric name -> key produced by the stats extractor.
STAT_ALIASES: Dict[str, str] = {
    "watches": "watchers",
}


def stat_key(metric_name: str) -> str:
    """Map a requested metric name to the stat mapping key holding its value."""
    return STAT_ALIASES.get(metric_name, metric_name)


@dataclass(frozen=True)
class NamespaceElement:
    """One template position, static when ``description`` is None."""
    value: str
    description: Optional[str] = None

    @property
    def is_dynamic(self) -> bool:
        return self.description is not None


def _static(value: str) -> NamespaceElement:
    return NamespaceElement(value)


def _dynamic(name: str, description: str) -> NamespaceElement:
    return NamespaceElement(name, description)


@dataclass(frozen=True)
class MetricTemplate:
    """A declared metric namespace with named dynamic elements."""
    elements: Tuple[NamespaceElement, ...]

    @property
    def dynamic_names(self) -> List[str]:
        return [e.value for e in self.elements if e.is_dynamic]

    def build(self, **values: str) -> Tuple[str, ...]:
        """Fill the dynamic elements, defaulting unset ones to the wildcard."""
        return tuple(
            values.get(e.value, WILDCARD) if e.is_dynamic else e.value
            for e in self.elements
        )

    def __str__(self) -> str:
        return "/".join(
            f"{{{e.value}}}" if e.is_dynamic else e.value for e in self.elements
        )


@dataclass(frozen=True)
class ConfigRule:
    """String option accepted by the collector."""
    name: str
    required: bool
    default: Optional[str] = None


def _prefix(family: str) -> Tuple[NamespaceElement, ...]:
    return tuple(_static(s) for s in NAMESPACE_PREFIX) + (_static(family),)


def repo_counter_template(metric_name: str) -> MetricTemplate:
    return MetricTemplate(_prefix(REPO_FAMILY) + (
        _dynamic("owner", "repository owner"),
        _dynamic("repo", "repository name"),
        _static(metric_name),
    ))


def issues_by_label_template() -> MetricTemplate:
    return MetricTemplate(_prefix(REPO_FAMILY) + (
        _dynamic("owner", "repository owner"),
        _dynamic("repo", "repository name"),
        _static(ISSUES_BY_LABEL),
        _dynamic("label", "issue label"),
        _dynamic("status", "issue status"),
        _static(COUNT_SEGMENT),
    ))


def user_counter_template(metric_name: str) -> MetricTemplate:
    return MetricTemplate(_prefix(USER_FAMILY) + (
        _dynamic("user", "user or organisation name"),
        _static(metric_name),
    ))


def metric_templates() -> List[MetricTemplate]:
    """Return every metric template the collector can resolve."""
    templates = [repo_counter_template(name) for name in REPO_METRIC_NAMES]
    templates.append(issues_by_label_template())
    templates.extend(user_counter_template(name) for name in USER_METRIC_NAMES)
    return templates


CONFIG_POLICY: Tuple[ConfigRule, ...] = (
    ConfigRule("access_token", required=True),
    ConfigRule("user", required=False, default=""),
    ConfigRule("repo", required=False, default=""),
)
