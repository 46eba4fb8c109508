"""Game rules and constants for Pechenka."""

from enum import Enum


class CardKind(str, Enum):
    """Card types."""

    HINT = "hint"
    SWORD = "sword"
    SHIELD = "shield"
    HILL = "hill"


class Phase(str, Enum):
    """Engine lifecycle phase."""

    WAITING = "waiting"
    CIRCLE = "circle_phase"
    RESOLVING = "resolving_phase"
    ROUND_END = "round_end"
    GAME_END = "game_end"


class AwardReason(str, Enum):
    """Why coins were awarded at round end."""

    SWORD = "sword"
    SHIELD = "shield"
    HILL = "hill"


# Phases in which process_action accepts input
ACTIVE_PHASES = (Phase.CIRCLE, Phase.RESOLVING)

# Phases from which a new round may be started
ROUND_START_PHASES = (Phase.WAITING, Phase.ROUND_END)

# Cards that go to the resolution queue on reveal (the rest go to the revealed pile)
QUEUED_KINDS = (CardKind.SWORD, CardKind.SHIELD)

MIN_PLAYERS = 4
MAX_PLAYERS = 6

# Hill cards are only in the deck below this player count
HILL_PLAYER_LIMIT = 6

SWORD_REWARD = 3
SHIELD_REWARD = 2
HILL_REWARD = 1

# Sub-seeds for role, deck and hand shuffles are drawn from [0, SUBSEED_LIMIT)
SUBSEED_LIMIT = 1_000_000


def uses_hills(player_count: int) -> bool:
    """True when hill cards are dealt for this player count."""
    return player_count < HILL_PLAYER_LIMIT
