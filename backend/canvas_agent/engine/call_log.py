"""Append-only, invocation-ordered log of emitted operations."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from canvas_agent.models.tools import Operation

logger = logging.getLogger(__name__)


class CallLog:
    """Operations collected during one command. Entries are never removed or reordered."""

    def __init__(self) -> None:
        self._operations: list[Operation] = []

    def append(self, operation: Operation) -> None:
        self._operations.append(operation)
        logger.debug("Queued operation #%d: %s", len(self._operations), operation.name.value)

    def snapshot(self) -> list[Operation]:
        return list(self._operations)

    def __len__(self) -> int:
        return len(self._operations)

    def __iter__(self) -> Iterator[Operation]:
        return iter(list(self._operations))
