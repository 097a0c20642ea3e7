"""Main entry point for the gitstats collector.

Runs one collection cycle for the metric paths given on the command line and
writes the resulting records as CSV.

    python collect_stats.py "repo/acme/*/stars" "user/*/followers"
"""
import asyncio
import csv
import os
import sys
import logging
from typing import List, TextIO
from dotenv import load_dotenv
from gitstats.application.collector_service import GitstatsCollector
from gitstats.domain.catalog import NAMESPACE_PREFIX
from gitstats.domain.exceptions import ConfigurationError
from gitstats.domain.models import CollectorConfig, MetricRecord, MetricRequest
from gitstats.infrastructure.github_client import GitHubClient

# Load environment variables from .env or env file
load_dotenv('.env') or load_dotenv('env')


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def parse_metric_path(path: str) -> MetricRequest:
    """Build a request from a '/'-separated path, adding the prefix if absent."""
    segments = tuple(s for s in path.strip().split("/") if s)
    if segments[:len(NAMESPACE_PREFIX)] != NAMESPACE_PREFIX:
        segments = NAMESPACE_PREFIX + segments
    return MetricRequest(namespace=segments)


def write_csv(records: List[MetricRecord], stream: TextIO) -> None:
    """Write records as CSV rows of namespace, value, timestamp and version."""
    writer = csv.writer(stream)
    writer.writerow(['namespace', 'value', 'timestamp', 'version'])
    for record in records:
        writer.writerow([record.path, record.value, record.timestamp.isoformat(), record.version])


async def main():
    """Execute one collection cycle."""
    paths = sys.argv[1:] or [p for p in os.getenv("GITSTATS_METRICS", "").split(",") if p.strip()]
    if not paths:
        logger.error("No metric paths given on the command line or in GITSTATS_METRICS")
        sys.exit(1)

    config = CollectorConfig.from_env()
    try:
        config.validate()
    except ConfigurationError as e:
        logger.error(f"{e} (set GITHUB_TOKEN)")
        sys.exit(1)

    requests = [parse_metric_path(path) for path in paths]
    collector = GitstatsCollector(client_factory=GitHubClient)

    try:
        records = await collector.collect_metrics(requests, config)
    except Exception as e:
        logger.error(f"Collection failed: {e}", exc_info=True)
        sys.exit(1)

    output_file = os.getenv("GITSTATS_OUTPUT")
    if output_file:
        with open(output_file, 'w', newline='', encoding='utf-8') as f:
            write_csv(records, f)
        logger.info(f"Exported {len(records)} metrics to {output_file}")
    else:
        write_csv(records, sys.stdout)


def run():
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
