from __future__ import annotations

import pytest

from trade_value_app.games import (
    get_category_id_for_game,
    is_supported_game_type,
    normalize_game_type,
)


@pytest.mark.parametrize("name", ["Pokémon", " pokemon ", "POKEMON", "pkmn", "Pokemon-Card"])
def test_pokemon_aliases(name) -> None:
    assert normalize_game_type(name) == "pokemon"


@pytest.mark.parametrize("name", ["Japanese Pokemon", "pokemon (japanese)", "JP Pokemon", "japanese-pokemon"])
def test_japanese_pokemon_aliases(name) -> None:
    assert normalize_game_type(name) == "japanese-pokemon"


@pytest.mark.parametrize("name", ["Magic", "MTG", "Magic: The Gathering", "magic the gathering"])
def test_magic_aliases(name) -> None:
    assert normalize_game_type(name) == "magic"


def test_decomposed_accent_matches() -> None:
    assert normalize_game_type("Poke\u0301mon") == "pokemon"


@pytest.mark.parametrize("name", [None, "", "yugioh", 42])
def test_unknown_defaults_to_pokemon(name) -> None:
    assert normalize_game_type(name) == "pokemon"


def test_supported_and_category_ids() -> None:
    assert is_supported_game_type("mtg")
    assert not is_supported_game_type("yugioh")
    assert get_category_id_for_game("Pokémon") == 2
    assert get_category_id_for_game("japanese pokemon") == 9
    assert get_category_id_for_game("magic") == 1
    assert get_category_id_for_game("lorcana") == 2
