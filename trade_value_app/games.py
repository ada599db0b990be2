"""
Game name normalisation.

Cards arrive tagged with free-text game names ("Pokémon", "MTG",
"pokemon (japanese)", ...).  Settings are stored per canonical game, so
every name is mapped onto one of the supported identifiers first.
"""

from __future__ import annotations

import logging
import unicodedata
from typing import Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_GAME = "pokemon"

GAME_ALIASES: Dict[str, str] = {
    "pokémon": "pokemon",
    "pokemon": "pokemon",
    "pkmn": "pokemon",
    "pokemon-card": "pokemon",
    "japanese-pokemon": "japanese-pokemon",
    "japanese pokemon": "japanese-pokemon",
    "pokemon (japanese)": "japanese-pokemon",
    "pokemon japanese": "japanese-pokemon",
    "jp pokemon": "japanese-pokemon",
    "magic": "magic",
    "magic: the gathering": "magic",
    "magic the gathering": "magic",
    "mtg": "magic",
}

SUPPORTED_GAMES = ("pokemon", "japanese-pokemon", "magic")

# TCG category ids used by the catalogue lookups
CATEGORY_IDS: Dict[str, int] = {
    "pokemon": 2,
    "japanese-pokemon": 9,
    "magic": 1,
}


def normalize_game_type(game_type: Optional[str]) -> str:
    """Map a free-text game name to a canonical game identifier.

    Matching is case-insensitive and ignores surrounding whitespace.
    Missing or unrecognised names map to :data:`DEFAULT_GAME`.
    """
    if not game_type or not isinstance(game_type, str):
        return DEFAULT_GAME
    normalized = unicodedata.normalize("NFC", game_type).strip().lower()
    canonical = GAME_ALIASES.get(normalized)
    if canonical is None:
        logger.warning("Unsupported game type: %s, defaulting to %s", game_type, DEFAULT_GAME)
        return DEFAULT_GAME
    return canonical


def is_supported_game_type(game_type: Optional[str]) -> bool:
    """Return True if ``game_type`` names a supported game directly or by alias."""
    if not game_type or not isinstance(game_type, str):
        return False
    return unicodedata.normalize("NFC", game_type).strip().lower() in GAME_ALIASES


def get_category_id_for_game(game_type: Optional[str]) -> int:
    return CATEGORY_IDS[normalize_game_type(game_type)]
