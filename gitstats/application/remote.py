"""Wrapping of remote GitHub calls into RemoteLookupError."""
import logging
from typing import Awaitable, TypeVar
from gitstats.domain.exceptions import RemoteLookupError


logger = logging.getLogger(__name__)

T = TypeVar("T")


async def remote_lookup(operation: str, call: Awaitable[T]) -> T:
    """Await a client call, converting any failure into RemoteLookupError.

    Args:
        operation: Human readable description used in logs and the error
        call: Awaitable returned by an IGitHubClient method

    Raises:
        RemoteLookupError: When the call fails for any reason
    """
    try:
        return await call
    except RemoteLookupError as e:
        logger.error(f"Failed to {operation}: {e}")
        raise
    except Exception as e:
        logger.error(f"Failed to {operation}: {e}")
        raise RemoteLookupError(operation, str(e)) from e
