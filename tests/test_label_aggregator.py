"""Tests for issue counting per label."""
from gitstats.application.label_aggregator import aggregate_issues_by_label
from gitstats.domain.models import Issue, Label, LabelStatKey


def test_counts_per_label_and_state(sample_labels_and_issues):
    labels, issues = sample_labels_and_issues

    counts = aggregate_issues_by_label(labels, issues)

    assert counts == {
        LabelStatKey("bug", "open"): 2,
        LabelStatKey("bug", "closed"): 0,
        LabelStatKey("docs", "open"): 1,
        LabelStatKey("docs", "closed"): 0,
        LabelStatKey("NoLabel", "open"): 0,
        LabelStatKey("NoLabel", "closed"): 1,
    }


def test_empty_repository_still_has_no_label_bucket():
    counts = aggregate_issues_by_label([], [])

    assert counts == {
        LabelStatKey("NoLabel", "open"): 0,
        LabelStatKey("NoLabel", "closed"): 0,
    }


def test_label_names_are_slugged():
    counts = aggregate_issues_by_label(
        [Label("Good First Issue")],
        [Issue(state="open", labels=("Good First Issue",))]
    )

    assert counts[LabelStatKey("good-first-issue", "open")] == 1
    assert counts[LabelStatKey("good-first-issue", "closed")] == 0


def test_unknown_issue_label_gets_its_own_counters():
    counts = aggregate_issues_by_label([Label("bug")], [Issue(state="closed", labels=("wontfix",))])

    assert counts[LabelStatKey("wontfix", "closed")] == 1
    assert counts[LabelStatKey("wontfix", "open")] == 0


def test_unsupported_state_is_skipped():
    counts = aggregate_issues_by_label([Label("bug")], [Issue(state="merged", labels=("bug",))])

    assert sum(counts.values()) == 0
    assert LabelStatKey("bug", "merged") not in counts


def test_state_is_case_insensitive():
    counts = aggregate_issues_by_label([], [Issue(state="OPEN")])

    assert counts[LabelStatKey("NoLabel", "open")] == 1
