"""Game state types for Pechenka."""

from dataclasses import dataclass, field
from typing import Optional

from pechenka.actions import Action, ActionResult, ResultKind
from pechenka.deck import Card
from pechenka.player import Player
from pechenka.rules import AwardReason, CardKind, Phase


@dataclass(frozen=True)
class PlacedCard:
    """A face-down placement in the current circle."""

    card_index: int
    action: Action
    order: int  # placement order within the circle


@dataclass(frozen=True)
class QueueItem:
    """A committed sword or shield waiting for its target."""

    player_id: str
    kind: CardKind


@dataclass
class HistoryEntry:
    """One accepted action."""

    player_id: str
    action: Action
    result: ActionResult
    timestamp: int  # epoch milliseconds
    round: int
    circle: int

    @property
    def is_sword_resolution(self) -> bool:
        return self.result.kind == ResultKind.SWORD_USED

    @property
    def is_shield_resolution(self) -> bool:
        return self.result.kind == ResultKind.SHIELD_USED


@dataclass(frozen=True)
class ScoreAward:
    player_id: str
    reason: AwardReason
    coins: int


@dataclass
class RoundSummary:
    """Coin awards handed out at the end of one round."""

    round: int
    awards: list[ScoreAward] = field(default_factory=list)

    def coins_for(self, player_id: str, reason: Optional[AwardReason] = None) -> int:
        return sum(
            a.coins
            for a in self.awards
            if a.player_id == player_id and (reason is None or a.reason == reason)
        )


@dataclass
class GameState:
    """Full engine state. Players are kept in seating order."""

    players: list[Player] = field(default_factory=list)
    max_rounds: int = 0
    current_round: int = 0
    current_circle: int = 0
    current_player_index: int = 0  # nominal first player of the round
    phase: Phase = Phase.WAITING
    circle_cards: dict[str, PlacedCard] = field(default_factory=dict)
    revealed_circle_cards: dict[str, Card] = field(default_factory=dict)
    resolving_queue: list[QueueItem] = field(default_factory=list)
    history: list[HistoryEntry] = field(default_factory=list)
    round_summaries: list[RoundSummary] = field(default_factory=list)
    seat_index: dict[str, int] = field(default_factory=dict)  # player id -> seat

    def __post_init__(self):
        if not self.seat_index:
            self.seat_index = {p.id: i for i, p in enumerate(self.players)}

    @property
    def player_count(self) -> int:
        return len(self.players)

    def get_player(self, player_id: str) -> Optional[Player]:
        """Return player by id or None."""
        idx = self.seat_index.get(player_id)
        return self.players[idx] if idx is not None else None

    def relative_seat(self, player_id: str) -> int:
        """Clockwise distance from this round's first player."""
        return (self.seat_index[player_id] - self.current_player_index) % self.player_count

    def round_history(self, round_number: Optional[int] = None) -> list[HistoryEntry]:
        """History entries of one round (defaults to the current round)."""
        if round_number is None:
            round_number = self.current_round
        return [h for h in self.history if h.round == round_number]
