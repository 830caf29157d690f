"""In-memory registry of actions awaiting user confirmation."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from loguru import logger

from voice2action.confirmations.models import PendingAction


class ConfirmationStore:
    """Keyed map of pending actions. Single process, nothing persisted.

    With ``ttl_seconds > 0`` actions older than the TTL count as expired;
    they are only removed by ``purge_expired`` or an explicit ``delete``.
    """

    def __init__(
        self,
        ttl_seconds: int = 0,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._pending: dict[str, PendingAction] = {}
        self._ttl = timedelta(seconds=ttl_seconds) if ttl_seconds > 0 else None
        self._clock = clock or (lambda: datetime.now(tz=UTC))

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, action_id: object) -> bool:
        return action_id in self._pending

    def create(self, action_id: str, action: PendingAction) -> None:
        self._pending[action_id] = action
        logger.debug(f"Pending action stored: {action_id} ({len(self._pending)} pending)")

    def get(self, action_id: str) -> PendingAction | None:
        return self._pending.get(action_id)

    def pop(self, action_id: str) -> PendingAction | None:
        """Remove and return an action; only one caller can ever claim it."""
        return self._pending.pop(action_id, None)

    def delete(self, action_id: str) -> None:
        self._pending.pop(action_id, None)

    def clear(self) -> None:
        self._pending.clear()

    def is_expired(self, action: PendingAction) -> bool:
        if self._ttl is None:
            return False
        return self._clock() - action.created_at >= self._ttl

    def purge_expired(self) -> int:
        """Delete every expired action; returns how many were removed."""
        expired = [aid for aid, action in self._pending.items() if self.is_expired(action)]
        for action_id in expired:
            del self._pending[action_id]
        if expired:
            logger.info(f"Purged {len(expired)} expired pending action(s)")
        return len(expired)
