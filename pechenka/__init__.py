"""Rules engine for Pechenka, a 4-6 player hidden-role deduction card game."""

from pechenka.actions import (
    Action,
    ActionOutcome,
    ActionResult,
    HillAction,
    RevealAction,
    ShieldAction,
    SwordAction,
    action_from_dict,
)
from pechenka.characters import (
    Character,
    characters_for_player_count,
    hunt_chain,
    hunter_of,
    target_of,
)
from pechenka.deck import Card, Deck, build_cards
from pechenka.engine import Game
from pechenka.errors import (
    ErrorCode,
    GameFlowError,
    GameSetupError,
    InsufficientCardsError,
    PechenkaError,
    SnapshotError,
    UnknownCharacterError,
)
from pechenka.models import GameEndResult, GameOptions, GameStateView, PrivatePlayerView
from pechenka.player import Player
from pechenka.rng import SeededRandom, shuffled
from pechenka.rules import CardKind, Phase

__all__ = [
    "Action",
    "ActionOutcome",
    "ActionResult",
    "HillAction",
    "RevealAction",
    "ShieldAction",
    "SwordAction",
    "action_from_dict",
    "Character",
    "characters_for_player_count",
    "hunt_chain",
    "hunter_of",
    "target_of",
    "Card",
    "Deck",
    "build_cards",
    "Game",
    "ErrorCode",
    "GameFlowError",
    "GameSetupError",
    "InsufficientCardsError",
    "PechenkaError",
    "SnapshotError",
    "UnknownCharacterError",
    "GameEndResult",
    "GameOptions",
    "GameStateView",
    "PrivatePlayerView",
    "Player",
    "SeededRandom",
    "shuffled",
    "CardKind",
    "Phase",
]
