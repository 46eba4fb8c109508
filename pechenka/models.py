"""Pydantic models: engine options, public/private views, and serialized snapshots."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pechenka.actions import ActionResult, ResultKind, action_from_dict
from pechenka.characters import Character
from pechenka.deck import Card
from pechenka.player import Player
from pechenka.rules import AwardReason, CardKind, Phase
from pechenka.state import (
    GameState,
    HistoryEntry,
    PlacedCard,
    QueueItem,
    RoundSummary,
    ScoreAward,
)

SNAPSHOT_VERSION = 1


class GameOptions(BaseModel):
    """Options accepted when constructing a game."""

    model_config = ConfigDict(extra="forbid")

    max_rounds: int | None = Field(default=None, ge=1, description="Defaults to the player count")
    seed: int | None = Field(default=None, description="Defaults to the current time in milliseconds")
    enable_logging: bool = Field(default=False, description="Log to the module logger when no logger is injected")
    player_names: dict[str, str] | None = Field(default=None, description="Display names by player id")


# --- views -------------------------------------------------------------------


class CardView(BaseModel):
    kind: CardKind
    character: Character | None = None


class SeatView(BaseModel):
    id: str
    name: str
    coins: int
    revealed_cards: list[CardView]
    used_sword: bool
    used_shield: bool
    sword_target_id: str | None = None
    shield_target_id: str | None = None


class PublicPlayerView(SeatView):
    """What everyone may see about a player."""

    hand_size: int


class PlayedCardView(BaseModel):
    """A card on the table this circle; unrevealed placements are 'hidden' with no content."""

    player_id: str
    player_name: str
    card_kind: str = Field(..., pattern="^(hint|sword|shield|hill|hidden)$")
    character: Character | None = None
    order: int


class CircleInfo(BaseModel):
    current_circle: int
    max_circles: int
    players_placed: list[str]
    played_cards: list[PlayedCardView] = Field(default_factory=list)


class QueueItemView(BaseModel):
    player_id: str
    action_type: CardKind


class ScoreAwardView(BaseModel):
    player_id: str
    reason: AwardReason
    coins: int


class RoundSummaryView(BaseModel):
    round: int
    awards: list[ScoreAwardView]


class GameStateView(BaseModel):
    """Public game state, safe to broadcast."""

    players: list[PublicPlayerView]
    current_round: int
    max_rounds: int
    current_player_index: int
    phase: Phase
    circle: CircleInfo
    resolving_queue: list[QueueItemView]
    last_round_summary: RoundSummaryView | None = None


class PrivatePlayerView(BaseModel):
    """What only the player themself may see."""

    role: Character
    hand: list[CardView]
    target: Character
    hunter: Character


class PlayerScore(BaseModel):
    id: str
    name: str
    coins: int


class GameEndResult(BaseModel):
    winner: PlayerScore
    final_scores: list[PlayerScore]


def card_view(card: Card) -> CardView:
    return CardView(kind=card.kind, character=card.character)


def public_player_view(player: Player) -> PublicPlayerView:
    return PublicPlayerView(
        id=player.id,
        name=player.name,
        coins=player.coins,
        hand_size=len(player.hand),
        revealed_cards=[card_view(c) for c in player.revealed_cards],
        used_sword=player.used_sword,
        used_shield=player.used_shield,
        sword_target_id=player.sword_target_id,
        shield_target_id=player.shield_target_id,
    )


def round_summary_view(summary: RoundSummary) -> RoundSummaryView:
    return RoundSummaryView(
        round=summary.round,
        awards=[ScoreAwardView(player_id=a.player_id, reason=a.reason, coins=a.coins) for a in summary.awards],
    )


def game_state_to_public(state: GameState) -> GameStateView:
    """Build the public view; face-down placements never expose their card."""
    played: list[PlayedCardView] = []
    placements = sorted(state.circle_cards.items(), key=lambda item: item[1].order)
    for player_id, placed in placements:
        player = state.get_player(player_id)
        name = player.name if player else "Unknown"
        card = state.revealed_circle_cards.get(player_id)
        if card is None:
            played.append(PlayedCardView(player_id=player_id, player_name=name, card_kind="hidden", order=placed.order))
        else:
            played.append(
                PlayedCardView(
                    player_id=player_id,
                    player_name=name,
                    card_kind=card.kind.value,
                    character=card.character,
                    order=placed.order,
                )
            )
    return GameStateView(
        players=[public_player_view(p) for p in state.players],
        current_round=state.current_round,
        max_rounds=state.max_rounds,
        current_player_index=state.current_player_index,
        phase=state.phase,
        circle=CircleInfo(
            current_circle=state.current_circle,
            max_circles=state.player_count,
            players_placed=list(state.circle_cards.keys()),
            played_cards=played,
        ),
        resolving_queue=[QueueItemView(player_id=q.player_id, action_type=q.kind) for q in state.resolving_queue],
        last_round_summary=round_summary_view(state.round_summaries[-1]) if state.round_summaries else None,
    )


# --- snapshots -----------------------------------------------------------------


class PlayerSnapshot(SeatView):
    role: Character | None = None
    hand: list[CardView]


class PlacementSnapshot(BaseModel):
    player_id: str
    card_index: int
    action: dict[str, Any]
    order: int


class RevealedCardSnapshot(BaseModel):
    player_id: str
    card: CardView


class ResultSnapshot(BaseModel):
    kind: ResultKind
    target_id: str | None = None
    success: bool | None = None


class HistorySnapshot(BaseModel):
    player_id: str
    action: dict[str, Any]
    result: ResultSnapshot
    timestamp: int
    round: int
    circle: int


class GameSnapshot(BaseModel):
    """Everything needed to rebuild an engine."""

    version: int = SNAPSHOT_VERSION
    players: list[PlayerSnapshot]
    max_rounds: int = Field(..., ge=1)
    current_round: int = Field(..., ge=0)
    current_circle: int = Field(..., ge=0)
    current_player_index: int = Field(..., ge=0)
    phase: Phase
    random_state: int
    circle_cards: list[PlacementSnapshot] = Field(default_factory=list)
    revealed_circle_cards: list[RevealedCardSnapshot] = Field(default_factory=list)
    resolving_queue: list[QueueItemView] = Field(default_factory=list)
    history: list[HistorySnapshot] = Field(default_factory=list)
    round_summaries: list[RoundSummaryView] = Field(default_factory=list)
    end_result: GameEndResult | None = None

    @model_validator(mode="after")
    def indices_within_table(self) -> "GameSnapshot":
        n = len(self.players)
        if n and self.current_player_index >= n:
            raise ValueError(f"current_player_index ({self.current_player_index}) must be < player count ({n})")
        if self.current_circle > n:
            raise ValueError(f"current_circle ({self.current_circle}) must be <= player count ({n})")
        # placements point into hands only until the circle is revealed
        hand_sizes = {p.id: len(p.hand) for p in self.players} if self.phase == Phase.CIRCLE else {}
        for placement in self.circle_cards:
            size = hand_sizes.get(placement.player_id)
            if size is not None and not 0 <= placement.card_index < size:
                raise ValueError(f"card_index {placement.card_index} out of range for {placement.player_id}")
        return self


def _card(view: CardView) -> Card:
    return Card(kind=view.kind, character=view.character)


def snapshot_from_state(state: GameState, random_state: int, end_result: Optional[GameEndResult]) -> GameSnapshot:
    return GameSnapshot(
        players=[
            PlayerSnapshot(
                **public_player_view(p).model_dump(exclude={"hand_size"}),
                role=p.role,
                hand=[card_view(c) for c in p.hand],
            )
            for p in state.players
        ],
        max_rounds=state.max_rounds,
        current_round=state.current_round,
        current_circle=state.current_circle,
        current_player_index=state.current_player_index,
        phase=state.phase,
        random_state=random_state,
        circle_cards=[
            PlacementSnapshot(player_id=pid, card_index=pc.card_index, action=pc.action.to_dict(), order=pc.order)
            for pid, pc in state.circle_cards.items()
        ],
        revealed_circle_cards=[
            RevealedCardSnapshot(player_id=pid, card=card_view(c)) for pid, c in state.revealed_circle_cards.items()
        ],
        resolving_queue=[QueueItemView(player_id=q.player_id, action_type=q.kind) for q in state.resolving_queue],
        history=[
            HistorySnapshot(
                player_id=h.player_id,
                action=h.action.to_dict(),
                result=ResultSnapshot(kind=h.result.kind, target_id=h.result.target_id, success=h.result.success),
                timestamp=h.timestamp,
                round=h.round,
                circle=h.circle,
            )
            for h in state.history
        ],
        round_summaries=[round_summary_view(s) for s in state.round_summaries],
        end_result=end_result,
    )


def state_from_snapshot(snapshot: GameSnapshot) -> GameState:
    """Rebuild engine state. Raises ValueError on inconsistent references."""
    players = [
        Player(
            **p.model_dump(exclude={"hand", "revealed_cards"}),
            hand=[_card(c) for c in p.hand],
            revealed_cards=[_card(c) for c in p.revealed_cards],
        )
        for p in snapshot.players
    ]
    ids = {p.id for p in players}
    if len(ids) != len(players):
        raise ValueError("duplicate player ids in snapshot")
    referenced = (
        [c.player_id for c in snapshot.circle_cards]
        + [c.player_id for c in snapshot.revealed_circle_cards]
        + [q.player_id for q in snapshot.resolving_queue]
    )
    unknown = [pid for pid in referenced if pid not in ids]
    if unknown:
        raise ValueError(f"snapshot references unknown players: {unknown}")

    return GameState(
        players=players,
        max_rounds=snapshot.max_rounds,
        current_round=snapshot.current_round,
        current_circle=snapshot.current_circle,
        current_player_index=snapshot.current_player_index,
        phase=snapshot.phase,
        circle_cards={
            c.player_id: PlacedCard(card_index=c.card_index, action=action_from_dict(c.action), order=c.order)
            for c in snapshot.circle_cards
        },
        revealed_circle_cards={r.player_id: _card(r.card) for r in snapshot.revealed_circle_cards},
        resolving_queue=[QueueItem(player_id=q.player_id, kind=q.action_type) for q in snapshot.resolving_queue],
        history=[
            HistoryEntry(
                player_id=h.player_id,
                action=action_from_dict(h.action),
                result=ActionResult(kind=h.result.kind, target_id=h.result.target_id, success=h.result.success),
                timestamp=h.timestamp,
                round=h.round,
                circle=h.circle,
            )
            for h in snapshot.history
        ],
        round_summaries=[
            RoundSummary(
                round=s.round,
                awards=[ScoreAward(player_id=a.player_id, reason=a.reason, coins=a.coins) for a in s.awards],
            )
            for s in snapshot.round_summaries
        ],
    )
