"""Tests for domain models."""
from datetime import datetime, timezone

import pytest

from gitstats.domain.exceptions import ConfigurationError
from gitstats.domain.models import CollectorConfig, MetricRecord, MetricRequest, RepoKey
from gitstats.domain.naming import make_slug


def test_metric_record_creation():
    """Test creating an immutable MetricRecord."""
    record = MetricRecord(
        namespace=("raintank", "apps", "gitstats", "repo", "acme", "widget", "stars"),
        value=42,
        timestamp=datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc),
        version=1
    )

    assert record.path == "raintank/apps/gitstats/repo/acme/widget/stars"
    assert record.value == 42

    with pytest.raises(AttributeError):
        record.value = 7


def test_metric_request_path():
    request = MetricRequest(namespace=("raintank", "apps", "gitstats", "user", "*", "followers"), version=3)

    assert request.path == "raintank/apps/gitstats/user/*/followers"
    assert request.version == 3
    assert request.config is None


def test_config_from_mapping():
    """Test building config from a host option table."""
    config = CollectorConfig.from_mapping({"access_token": " abc ", "user": "acme", "repo": None})

    assert config.access_token == "abc"
    assert config.fixed_user == "acme"
    assert config.fixed_repo is None
    assert config.validate() is config


@pytest.mark.parametrize("table", [{}, {"access_token": ""}, {"access_token": None, "user": "acme"}])
def test_config_requires_access_token(table):
    with pytest.raises(ConfigurationError):
        CollectorConfig.from_mapping(table).validate()


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_token")
    monkeypatch.setenv("GITSTATS_USER", "acme")
    monkeypatch.delenv("GITSTATS_REPO", raising=False)

    config = CollectorConfig.from_env()

    assert config == CollectorConfig(access_token="ghp_token", user="acme", repo="")


def test_repo_key_is_hashable_pair():
    assert {RepoKey("acme", "widget"): 1}[("acme", "widget")] == 1


@pytest.mark.parametrize("name,expected", [
    ("widget", "widget"),
    ("Good First Issue", "good-first-issue"),
    ("socket.io", "socket_io"),
    ("type: bug", "type-bug"),
    ("  Über Café  ", "uber-cafe"),
    ("help wanted!", "help-wanted"),
    ("Q&A", "q-and-a"),
    ("user@host", "user-at-host"),
    ("don't panic", "dont-panic"),
    ("_private_", "private"),
    (".github", "github"),
])
def test_make_slug(name, expected):
    assert make_slug(name) == expected
