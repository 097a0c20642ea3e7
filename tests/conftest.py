"""Shared fixtures: an in-memory GitHub client that counts its calls."""
from collections import Counter
from typing import Dict, List, Optional, Tuple

import pytest

from gitstats.domain.exceptions import RemoteLookupError
from gitstats.domain.github_interface import IGitHubClient, Payload
from gitstats.domain.models import Issue, Label


class FakeGitHubClient(IGitHubClient):
    """IGitHubClient backed by dictionaries."""

    def __init__(
        self,
        me: Optional[Payload] = None,
        users: Optional[Dict[str, Payload]] = None,
        orgs: Optional[Dict[str, Payload]] = None,
        owned: Optional[Dict[str, List[Payload]]] = None,
        repos: Optional[Dict[Tuple[str, str], Payload]] = None,
        labels_and_issues: Optional[Dict[Tuple[str, str], Tuple[List[Label], List[Issue]]]] = None,
    ):
        self.me = me
        self.users = users or {}
        self.orgs = orgs or {}
        self.owned = owned or {}
        self.repos = repos or {}
        self.labels_and_issues = labels_and_issues or {}
        self.calls: Counter = Counter()
        self.closed = False

    async def get_authenticated_identity(self) -> Payload:
        self.calls["get_authenticated_identity"] += 1
        if self.me is None:
            raise RemoteLookupError("GET /user", "HTTP 401: Bad credentials")
        return self.me

    async def get_identity(self, login: str) -> Payload:
        self.calls[("get_identity", login)] += 1
        if login not in self.users:
            raise RemoteLookupError(f"GET /users/{login}", "HTTP 404: Not Found")
        return self.users[login]

    async def get_organization_detail(self, login: str) -> Payload:
        self.calls[("get_organization_detail", login)] += 1
        return self.orgs[login]

    async def list_owned_repositories(self, owner: str) -> List[Payload]:
        self.calls[("list_owned_repositories", owner)] += 1
        return self.owned.get(owner, [])

    async def get_repository(self, owner: str, name: str) -> Payload:
        self.calls[("get_repository", owner, name)] += 1
        if (owner, name) not in self.repos:
            raise RemoteLookupError(f"GET /repos/{owner}/{name}", "HTTP 404: Not Found")
        return self.repos[(owner, name)]

    async def get_labels_and_issues(self, owner: str, repository: str) -> Tuple[List[Label], List[Issue]]:
        self.calls[("get_labels_and_issues", owner, repository)] += 1
        return self.labels_and_issues.get((owner, repository), ([], []))

    async def close(self) -> None:
        self.closed = True

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())


@pytest.fixture
def sample_labels_and_issues():
    """Labels {bug, docs} with three issues."""
    labels = [Label("bug"), Label("docs")]
    issues = [
        Issue(state="open", labels=("bug",)),
        Issue(state="closed", labels=()),
        Issue(state="open", labels=("bug", "docs")),
    ]
    return labels, issues
