"""
Fire-and-forget recording of fallback events.

Every time a payout is computed from the default percentages instead of
a configured bracket, an entry is written to the fallback log so that
operators can review which games or price levels lack settings.  Writes
run on a small thread pool; their failures only reach the log stream.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class FallbackLogEntry:
    game: str
    base_value: float
    reason: str
    user_id: Optional[str]
    created_at: str

    def to_row(self) -> Dict[str, Any]:
        return asdict(self)


class FallbackLogger:
    """Submit fallback log writes to a background pool.

    ``sink`` must provide ``insert_fallback_log(row: dict)``.
    """

    def __init__(self, sink, max_workers: int = 2) -> None:
        self.sink = sink
        self._executor = ThreadPoolExecutor(
            max_workers=max(max_workers, 1), thread_name_prefix="fallback-log"
        )

    def log_event(
        self, game: str, base_value: float, reason: str, user_id: Optional[str] = None
    ) -> Optional[Future]:
        """Queue a fallback log entry and return immediately.

        Returns the write's future, or None if the pool no longer accepts
        work.  The future never raises.
        """
        entry = FallbackLogEntry(
            game=game,
            base_value=base_value,
            reason=reason,
            user_id=user_id or None,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        logger.warning(
            "Fallback used: game=%s value=%s reason=%s user=%s",
            game,
            base_value,
            reason,
            user_id or "anonymous",
        )
        try:
            return self._executor.submit(self._write, entry)
        except RuntimeError as exc:
            logger.error("Failed to queue fallback event: %s", exc)
            return None

    def _write(self, entry: FallbackLogEntry) -> None:
        try:
            self.sink.insert_fallback_log(entry.to_row())
        except Exception as exc:
            logger.error("Failed to log fallback event: %s", exc)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting events and, by default, wait for queued writes."""
        self._executor.shutdown(wait=wait)
