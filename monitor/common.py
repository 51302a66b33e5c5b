"""Helpers shared by the PR aggregator and the workflow collector."""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Any, Callable


def split_repository(repository: str) -> tuple[str, str]:
    """Split "owner/name" into (owner, name).

    Raises:
        ValueError: If the identifier is not in owner/name form
    """
    owner, _, name = repository.partition("/")
    if not owner or not name:
        raise ValueError(f"Invalid repository identifier: '{repository}'")
    return owner, name


def parse_timestamp(value: str) -> datetime:
    """Parse a GitHub ISO 8601 timestamp ("2025-01-15T10:30:00Z")."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def run_concurrently(*calls: Callable[[], Any]) -> list[Any]:
    """Run zero-argument callables in parallel and return results in order.

    Blocks until every call has finished. The first exception raised by a
    call (in argument order) is re-raised.
    """
    with ThreadPoolExecutor(max_workers=len(calls)) as executor:
        futures = [executor.submit(call) for call in calls]
        return [future.result() for future in futures]
