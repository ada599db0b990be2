"""
Time-expiring in-process cache for bracket settings.

Entries are keyed by the lower-cased game name and are valid for five
minutes after they were filled.  Expiry is checked lazily on read.
Store errors are not caught here; they propagate to the caller.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .brackets import Bracket, parse_brackets

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 5 * 60


@dataclass
class CachedGameSettings:
    game: str
    settings: List[Bracket] = field(default_factory=list)
    timestamp: float = 0.0


class SettingsCache:
    """Cache in front of a settings store.

    ``store`` must provide ``fetch_settings(game) -> list[dict]``.
    ``clock`` returns seconds and defaults to :func:`time.monotonic`.
    """

    def __init__(
        self,
        store,
        ttl: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.store = store
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, CachedGameSettings] = {}

    def get(self, game: str) -> List[Bracket]:
        """Return the brackets for ``game``, reading the store on a miss."""
        key = game.lower()
        now = self._clock()
        entry = self._entries.get(key)
        if entry is not None and now - entry.timestamp < self.ttl:
            logger.debug("Using cached settings for %s, age %.1fs", key, now - entry.timestamp)
            return entry.settings

        logger.info("Settings cache miss for %s, reading store", key)
        brackets = parse_brackets(self.store.fetch_settings(key))
        self._entries[key] = CachedGameSettings(game=key, settings=brackets, timestamp=now)
        logger.info("Cached %d setting(s) for %s", len(brackets), key)
        return brackets

    def clear(self, game: Optional[str] = None) -> None:
        """Drop one game's entry, or every entry when ``game`` is None."""
        if game:
            key = game.lower()
            if self._entries.pop(key, None) is not None:
                logger.info("Cleared settings cache for %s", key)
        else:
            self._entries.clear()
            logger.info("Cleared entire settings cache")

    def __contains__(self, game: str) -> bool:
        entry = self._entries.get(game.lower())
        return entry is not None and self._clock() - entry.timestamp < self.ttl
