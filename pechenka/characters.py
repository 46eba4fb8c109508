"""Character roster and the hunting chain."""

from enum import Enum

from pechenka.errors import UnknownCharacterError


class Character(str, Enum):
    """Hidden identities a player can be dealt."""

    COOKIE = "cookie"
    BLUE = "blue"
    STRONTIUM = "strontium"
    THIRTY_SEVEN = "37"
    PERSIANS = "persians"
    COSINE = "cosine"


# Full roster in chain order: each character hunts the next one
ROSTER = (
    Character.COOKIE,
    Character.BLUE,
    Character.STRONTIUM,
    Character.THIRTY_SEVEN,
    Character.PERSIANS,
    Character.COSINE,
)

# Smaller games drop characters from the end of the roster; the chain closes on COOKIE
_ROSTER_SIZE = {4: 4, 5: 5, 6: 6}


def characters_for_player_count(player_count: int) -> list[Character]:
    """Return the in-play characters for a 4, 5 or 6 player game, in chain order."""
    if player_count not in _ROSTER_SIZE:
        raise UnknownCharacterError(f"No roster for {player_count} players")
    return list(ROSTER[: _ROSTER_SIZE[player_count]])


def _position(character: Character, player_count: int) -> tuple[list[Character], int]:
    in_play = characters_for_player_count(player_count)
    try:
        return in_play, in_play.index(Character(character))
    except ValueError:
        raise UnknownCharacterError(
            f"{character} is not in play with {player_count} players"
        ) from None


def target_of(character: Character, player_count: int) -> Character:
    """Return the character that `character` hunts."""
    in_play, idx = _position(character, player_count)
    return in_play[(idx + 1) % len(in_play)]


def hunter_of(character: Character, player_count: int) -> Character:
    """Return the character hunting `character`."""
    in_play, idx = _position(character, player_count)
    return in_play[(idx - 1) % len(in_play)]


def hunt_chain(player_count: int) -> list[tuple[Character, Character]]:
    """Return (hunter, target) pairs for the whole n-player cycle."""
    return [(c, target_of(c, player_count)) for c in characters_for_player_count(player_count)]
