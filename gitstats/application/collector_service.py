"""Collector service running one metric collection cycle."""
import logging
import time
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence, Tuple
from gitstats.application.namespace_router import NamespaceRouter
from gitstats.domain.catalog import CONFIG_POLICY, ConfigRule, MetricTemplate, metric_templates
from gitstats.domain.exceptions import ConfigurationError
from gitstats.domain.github_interface import IGitHubClient
from gitstats.domain.models import CollectorConfig, MetricRecord, MetricRequest


logger = logging.getLogger(__name__)


class GitstatsCollector:
    """Application service exposing the collector to its host.

    Declares the metric catalog and configuration policy, and runs
    collection cycles. Every cycle gets a fresh client and a fresh cache.
    """

    def __init__(self, client_factory: Callable[[str], IGitHubClient]):
        """Initialize collector service.

        Args:
            client_factory: Builds a GitHub client from an access token
        """
        self._client_factory = client_factory

    def get_metric_types(self) -> List[MetricTemplate]:
        """Return the metric templates this collector can resolve."""
        return metric_templates()

    def get_config_policy(self) -> Tuple[ConfigRule, ...]:
        """Return the options this collector accepts."""
        return CONFIG_POLICY

    async def collect_metrics(
        self,
        requests: Sequence[MetricRequest],
        config: Optional[CollectorConfig] = None
    ) -> List[MetricRecord]:
        """Resolve a batch of metric requests.

        Args:
            requests: Requested namespaces, possibly with wildcard segments
            config: Configuration of the batch; defaults to the configuration
                carried by the first request

        Returns:
            Resolved metric records, all sharing one timestamp

        Raises:
            ConfigurationError: When no valid configuration is available
            RemoteLookupError: When any GitHub lookup fails
            UnsupportedNamespaceShape: When a request matches no template
        """
        if not requests:
            return []

        if config is None:
            config = requests[0].config
        if config is None:
            raise ConfigurationError("no configuration supplied for the batch")
        config.validate()

        start_time = time.time()
        collected_at = datetime.now(timezone.utc)
        logger.info(f"Starting collection of {len(requests)} metric requests")

        github_client = self._client_factory(config.access_token)
        try:
            router = NamespaceRouter(github_client, config, collected_at)
            records = await router.route(requests)
        except Exception as e:
            logger.error(f"Error during collection: {e}")
            raise
        finally:
            await github_client.close()

        duration = time.time() - start_time
        logger.info(
            f"Collection completed: {len(records)} metrics in {duration:.2f} seconds"
        )
        return records
