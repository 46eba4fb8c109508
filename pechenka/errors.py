"""Exceptions and rule-violation codes."""

from enum import Enum


class PechenkaError(Exception):
    """Base class for engine errors."""


class GameSetupError(PechenkaError, ValueError):
    """Raised when a game cannot be constructed (bad player list or options)."""


class GameFlowError(PechenkaError, RuntimeError):
    """Raised when a lifecycle operation is called out of sequence."""


class InsufficientCardsError(PechenkaError):
    """Raised when the deck cannot satisfy a draw."""

    def __init__(self, requested: int, available: int, message: str = ""):
        self.requested = requested
        self.available = available
        self.message = message or f"Not enough cards in deck: requested {requested}, available {available}"
        super().__init__(self.message)


class UnknownCharacterError(PechenkaError, LookupError):
    """Raised when a character is not part of the requested player count's roster."""


class SnapshotError(PechenkaError, ValueError):
    """Raised when a serialized game cannot be restored."""


class ErrorCode(str, Enum):
    """Rule violations reported by process_action (never raised)."""

    GAME_NOT_IN_PROGRESS = "game_not_in_progress"
    PLAYER_NOT_FOUND = "player_not_found"
    ALREADY_PLACED = "already_placed"
    INVALID_CARD_INDEX = "invalid_card_index"
    NOT_A_HINT = "not_a_hint"
    SWORD_ALREADY_USED = "sword_already_used"
    NO_SWORD = "no_sword"
    SHIELD_ALREADY_USED = "shield_already_used"
    NO_SHIELD = "no_shield"
    NO_HILL = "no_hill"
    UNKNOWN_ACTION = "unknown_action"
    QUEUE_EMPTY = "queue_empty"
    NOT_YOUR_TURN = "not_your_turn"
    WRONG_ACTION = "wrong_action"
    TARGET_REQUIRED = "target_required"
    TARGET_NOT_FOUND = "target_not_found"
    SELF_TARGET = "self_target"
    TARGET_SHIELDED = "target_shielded"
    CONTRADICTORY_DEFENSE = "contradictory_defense"


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.GAME_NOT_IN_PROGRESS: "Game is not in progress",
    ErrorCode.PLAYER_NOT_FOUND: "Player not found",
    ErrorCode.ALREADY_PLACED: "You have already placed a card in this circle",
    ErrorCode.INVALID_CARD_INDEX: "Invalid card index",
    ErrorCode.NOT_A_HINT: "Only hint cards can be revealed",
    ErrorCode.SWORD_ALREADY_USED: "Sword already used this round",
    ErrorCode.NO_SWORD: "No sword card in hand",
    ErrorCode.SHIELD_ALREADY_USED: "Shield already used this round",
    ErrorCode.NO_SHIELD: "No shield card in hand",
    ErrorCode.NO_HILL: "No hill card in hand",
    ErrorCode.UNKNOWN_ACTION: "Unknown action type",
    ErrorCode.QUEUE_EMPTY: "Resolution queue is empty",
    ErrorCode.NOT_YOUR_TURN: "Not your turn in the resolution phase",
    ErrorCode.WRONG_ACTION: "Action does not match the card you committed",
    ErrorCode.TARGET_REQUIRED: "A target is required for the sword",
    ErrorCode.TARGET_NOT_FOUND: "Target not found",
    ErrorCode.SELF_TARGET: "You cannot target yourself",
    ErrorCode.TARGET_SHIELDED: "You cannot attack a player who has already shielded against you",
    ErrorCode.CONTRADICTORY_DEFENSE: "You cannot defend against a player who attacked someone else",
}
