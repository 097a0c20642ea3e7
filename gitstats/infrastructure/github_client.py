"""GitHub REST and GraphQL API client implementation with retry logic."""
import asyncio
import logging
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Tuple
import aiohttp
from gql import gql, Client
from gql.transport.aiohttp import AIOHTTPTransport
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type
)
from gitstats.domain.exceptions import RemoteLookupError
from gitstats.domain.github_interface import IGitHubClient, Payload
from gitstats.domain.models import Issue, Label


logger = logging.getLogger(__name__)


API_URL = "https://api.github.com"
GRAPHQL_URL = "https://api.github.com/graphql"


class RateLimitException(Exception):
    """Exception raised when rate limit is hit."""
    pass


class ServerErrorException(Exception):
    """Exception raised when GitHub answers with a 5xx status."""
    pass


TRANSIENT_ERRORS = (
    RateLimitException,
    ServerErrorException,
    asyncio.TimeoutError,
    aiohttp.ClientConnectionError,
)


class GitHubClient(IGitHubClient):
    """GitHub API client with retry mechanisms.

    Profiles, organizations and repositories come from the REST API, which is
    the only one exposing network, subscriber and disk usage counters. Labels
    and issues come from the GraphQL API, which pages them with cursors and
    leaves pull requests out of the issue list.

    Implements the IGitHubClient port, providing an anti-corruption layer
    between the domain and GitHub's API.
    """

    LABELS_QUERY = gql("""
        query RepositoryLabels($owner: String!, $name: String!, $cursor: String) {
            repository(owner: $owner, name: $name) {
                labels(first: 100, after: $cursor) {
                    pageInfo {
                        hasNextPage
                        endCursor
                    }
                    nodes {
                        name
                    }
                }
            }
        }
    """)

    ISSUES_QUERY = gql("""
        query RepositoryIssues($owner: String!, $name: String!, $cursor: String) {
            repository(owner: $owner, name: $name) {
                issues(first: 100, after: $cursor) {
                    pageInfo {
                        hasNextPage
                        endCursor
                    }
                    nodes {
                        state
                        labels(first: 100) {
                            nodes {
                                name
                            }
                        }
                    }
                }
            }
        }
    """)

    def __init__(
        self,
        access_token: str,
        page_size: int = 100,
        timeout: float = 30.0,
        api_url: str = API_URL,
        graphql_url: str = GRAPHQL_URL
    ):
        """Initialize GitHub client.

        Args:
            access_token: GitHub personal access token
            page_size: Number of items to fetch per REST page (max 100)
            timeout: Total timeout of a single HTTP request in seconds
            api_url: Base URL of the REST API
            graphql_url: URL of the GraphQL endpoint
        """
        self._access_token = access_token
        self._page_size = min(page_size, 100)  # GitHub max is 100
        self._timeout = timeout
        self._api_url = api_url.rstrip("/")
        self._graphql_url = graphql_url
        self._session: Optional[aiohttp.ClientSession] = None
        self._transport: Optional[AIOHTTPTransport] = None
        self._client: Optional[Client] = None

    @property
    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._access_token}",
            "Accept": "application/vnd.github+json",
        }

    async def _init_session(self) -> None:
        """Initialize the REST session (lazy initialization)."""
        if self._session is None:
            self._session = aiohttp.ClientSession(
                headers=self._headers,
                timeout=aiohttp.ClientTimeout(total=self._timeout)
            )

    async def _init_client(self) -> None:
        """Initialize the GraphQL client (lazy initialization)."""
        if self._client is None:
            self._transport = AIOHTTPTransport(
                url=self._graphql_url,
                headers={"Authorization": f"Bearer {self._access_token}"}
            )
            self._client = Client(
                transport=self._transport,
                fetch_schema_from_transport=False
            )

    @staticmethod
    def _is_rate_limited(status: int, headers: Mapping[str, str]) -> bool:
        if status == 429:
            return True
        return status == 403 and headers.get("X-RateLimit-Remaining") == "0"

    @retry(
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        stop=stop_after_attempt(5),
        wait=wait_exponential(multiplier=1, min=4, max=60),
        reraise=True
    )
    async def _get_json(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        """Execute a REST GET request with retry logic.

        Args:
            path: API path starting with '/'
            params: Query string parameters

        Returns:
            Decoded JSON body

        Raises:
            RateLimitException: When rate limit is hit
            ServerErrorException: When GitHub answers with a 5xx status
            RemoteLookupError: When GitHub answers with any other error status
        """
        await self._init_session()

        async with self._session.get(f"{self._api_url}{path}", params=params) as response:
            if self._is_rate_limited(response.status, response.headers):
                logger.warning(f"Rate limit hit on {path}")
                raise RateLimitException(f"rate limit hit on {path}")
            if response.status >= 500:
                logger.warning(f"GitHub returned {response.status} for {path}")
                raise ServerErrorException(f"GET {path} returned {response.status}")
            if response.status >= 400:
                body = await response.text()
                raise RemoteLookupError(f"GET {path}", f"HTTP {response.status}: {body[:200]}")
            return await response.json()

    async def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        try:
            return await self._get_json(path, params)
        except RemoteLookupError as e:
            logger.error(f"Error calling GitHub REST API: {e}")
            raise
        except (aiohttp.ClientError, *TRANSIENT_ERRORS) as e:
            logger.error(f"Error calling GitHub REST API: {e}")
            raise RemoteLookupError(f"GET {path}", str(e)) from e

    async def get_authenticated_identity(self) -> Payload:
        return await self._get("/user")

    async def get_identity(self, login: str) -> Payload:
        return await self._get(f"/users/{login}")

    async def get_organization_detail(self, login: str) -> Payload:
        return await self._get(f"/orgs/{login}")

    async def get_repository(self, owner: str, name: str) -> Payload:
        return await self._get(f"/repos/{owner}/{name}")

    async def list_owned_repositories(self, owner: str) -> List[Payload]:
        """List repositories owned by ``owner``, following every page."""
        repositories: List[Payload] = []
        page = 1

        while True:
            batch = await self._get(
                f"/users/{owner}/repos",
                {"type": "owner", "per_page": str(self._page_size), "page": str(page)}
            )
            repositories.extend(batch)
            if len(batch) < self._page_size:
                break
            page += 1

        logger.info(f"Listed {len(repositories)} repositories of {owner}")
        return repositories

    @retry(
        retry=retry_if_exception_type((RateLimitException, asyncio.TimeoutError)),
        stop=stop_after_attempt(5),
        wait=wait_exponential(multiplier=1, min=4, max=60),
        reraise=True
    )
    async def _execute_query(self, query, variables: Dict[str, Any]) -> dict:
        """Execute GraphQL query with retry logic.

        Raises:
            RateLimitException: When rate limit is hit
        """
        await self._init_client()

        try:
            async with self._client as session:
                return await session.execute(query, variable_values=variables)
        except Exception as e:
            logger.error(f"Error executing GraphQL query: {e}")
            if "rate limit" in str(e).lower():
                raise RateLimitException(str(e))
            raise

    async def _paginate(
        self,
        query,
        owner: str,
        name: str,
        connection: str
    ) -> AsyncIterator[dict]:
        """Yield every node of a repository connection, page by page."""
        cursor = None

        while True:
            result = await self._execute_query(
                query,
                {"owner": owner, "name": name, "cursor": cursor}
            )
            repository = result.get("repository")
            if repository is None:
                raise RemoteLookupError(f"query {connection} of {owner}/{name}", "repository not found")

            page = repository.get(connection) or {}
            for node in page.get("nodes") or []:
                if node:
                    yield node

            page_info = page.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                break
            cursor = page_info.get("endCursor")

    @staticmethod
    def _to_label(node: Mapping[str, Any]) -> Label:
        return Label(name=node.get("name") or "")

    @staticmethod
    def _to_issue(node: Mapping[str, Any]) -> Issue:
        label_nodes = (node.get("labels") or {}).get("nodes") or []
        return Issue(
            state=str(node.get("state") or "").lower(),
            labels=tuple(label["name"] for label in label_nodes if label and label.get("name"))
        )

    async def get_labels_and_issues(
        self, owner: str, repository: str
    ) -> Tuple[List[Label], List[Issue]]:
        try:
            labels = [
                self._to_label(node)
                async for node in self._paginate(self.LABELS_QUERY, owner, repository, "labels")
            ]
            issues = [
                self._to_issue(node)
                async for node in self._paginate(self.ISSUES_QUERY, owner, repository, "issues")
            ]
        except RemoteLookupError:
            raise
        except Exception as e:
            logger.error(f"Error fetching labels and issues of {owner}/{repository}: {e}")
            raise RemoteLookupError(f"get labels and issues of {owner}/{repository}", str(e)) from e

        logger.info(f"Fetched {len(labels)} labels and {len(issues)} issues of {owner}/{repository}")
        return labels, issues

    async def close(self) -> None:
        """Close the REST session and the GraphQL transport."""
        if self._session:
            await self._session.close()
            self._session = None
        if self._transport:
            await self._transport.close()
            self._transport = None
            self._client = None
