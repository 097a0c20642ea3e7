"""Counting of open and closed issues per label."""
import logging
from typing import Dict, Iterable
from gitstats.domain.catalog import ISSUE_STATES, NO_LABEL
from gitstats.domain.models import Issue, Label, LabelStatKey
from gitstats.domain.naming import make_slug


logger = logging.getLogger(__name__)


def aggregate_issues_by_label(
    labels: Iterable[Label],
    issues: Iterable[Issue]
) -> Dict[LabelStatKey, int]:
    """Count issues per (label, state).

    Every known label and the synthetic ``NoLabel`` bucket start with a zero
    counter for each state, so labels without issues still get entries. An
    issue carrying several labels counts once under each of them.

    Args:
        labels: All labels defined on the repository
        issues: All issues of the repository, open and closed

    Returns:
        Mapping of LabelStatKey to issue count
    """
    counts: Dict[LabelStatKey, int] = {}

    def _init(label_slug: str) -> None:
        for state in ISSUE_STATES:
            counts.setdefault(LabelStatKey(label_slug, state), 0)

    for label in labels:
        _init(make_slug(label.name))
    _init(NO_LABEL)

    for issue in issues:
        state = issue.state.lower()
        if state not in ISSUE_STATES:
            logger.warning(f"Skipping issue with unsupported state '{issue.state}'")
            continue

        if not issue.labels:
            counts[LabelStatKey(NO_LABEL, state)] += 1
            continue

        for name in issue.labels:
            label_slug = make_slug(name)
            # Labels removed from the repository can still be attached to issues
            _init(label_slug)
            counts[LabelStatKey(label_slug, state)] += 1

    return counts
