"""Tests for the roster and the hunting chain."""

import pytest

from pechenka.characters import (
    Character,
    characters_for_player_count,
    hunt_chain,
    hunter_of,
    target_of,
)
from pechenka.errors import UnknownCharacterError


@pytest.mark.parametrize("n", [4, 5, 6])
def test_roster_size(n):
    chars = characters_for_player_count(n)
    assert len(chars) == n
    assert len(set(chars)) == n


def test_small_games_drop_characters():
    assert Character.PERSIANS not in characters_for_player_count(4)
    assert Character.COSINE not in characters_for_player_count(4)
    assert Character.PERSIANS in characters_for_player_count(5)
    assert Character.COSINE not in characters_for_player_count(5)
    assert set(characters_for_player_count(6)) == set(Character)


@pytest.mark.parametrize("n", [4, 5, 6])
def test_chain_is_a_single_cycle(n):
    for start in characters_for_player_count(n):
        seen = [start]
        current = target_of(start, n)
        for _ in range(n - 1):
            seen.append(current)
            current = target_of(current, n)
        assert current == start
        assert set(seen) == set(characters_for_player_count(n))


@pytest.mark.parametrize("n", [4, 5, 6])
def test_hunter_is_inverse_of_target(n):
    for c in characters_for_player_count(n):
        assert hunter_of(target_of(c, n), n) == c
        assert target_of(hunter_of(c, n), n) == c


def test_chain_closes_on_cookie():
    assert target_of(Character.THIRTY_SEVEN, 4) == Character.COOKIE
    assert target_of(Character.PERSIANS, 5) == Character.COOKIE
    assert target_of(Character.COSINE, 6) == Character.COOKIE
    assert target_of(Character.THIRTY_SEVEN, 6) == Character.PERSIANS
    assert hunter_of(Character.COOKIE, 4) == Character.THIRTY_SEVEN


def test_lookup_outside_roster_raises():
    with pytest.raises(UnknownCharacterError):
        target_of(Character.COSINE, 4)
    with pytest.raises(LookupError):
        hunter_of(Character.PERSIANS, 4)
    with pytest.raises(UnknownCharacterError):
        characters_for_player_count(3)


def test_hunt_chain_pairs():
    assert hunt_chain(4) == [
        (Character.COOKIE, Character.BLUE),
        (Character.BLUE, Character.STRONTIUM),
        (Character.STRONTIUM, Character.THIRTY_SEVEN),
        (Character.THIRTY_SEVEN, Character.COOKIE),
    ]
    assert len(hunt_chain(6)) == 6
