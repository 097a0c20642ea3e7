"""Exceptions raised by the gitstats collector.

Any of these aborts the whole collection cycle; the collector never
returns partial results.
"""
from typing import Optional, Sequence


class GitstatsException(Exception):
    """Base exception for all collector errors."""
    pass


class ConfigurationError(GitstatsException):
    """Raised when the collector configuration is missing or invalid."""
    pass


class RemoteLookupError(GitstatsException):
    """Raised when a GitHub lookup fails for any reason.

    Network failures, authentication problems, missing entities and rate
    limits are not distinguished. The underlying exception is chained as
    ``__cause__``.
    """

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        super().__init__(f"{operation} failed: {message}" if message else f"{operation} failed")


class UnsupportedNamespaceShape(GitstatsException):
    """Raised when a requested namespace matches no declared metric template."""

    def __init__(self, namespace: Sequence[str], reason: str):
        self.namespace = tuple(namespace)
        super().__init__(f"unsupported namespace {'/'.join(self.namespace)}: {reason}")
