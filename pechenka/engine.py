"""
Game engine: the phase state machine for Pechenka.

One `Game` instance owns its players and all round state. Every public method
runs to completion synchronously; callers serving concurrent clients must make
sure only one call is in flight per instance.
"""

import logging
import time
from typing import Any, Optional, Union

from pydantic import ValidationError

from pechenka.actions import (
    ACTION_TYPES,
    Action,
    ActionOutcome,
    ActionResult,
    HillAction,
    ResultKind,
    RevealAction,
    ShieldAction,
    SwordAction,
)
from pechenka.characters import characters_for_player_count
from pechenka.deck import Deck
from pechenka.errors import ErrorCode, GameFlowError, GameSetupError, SnapshotError
from pechenka.models import (
    GameEndResult,
    GameOptions,
    GameSnapshot,
    GameStateView,
    PlayerScore,
    PrivatePlayerView,
    card_view,
    game_state_to_public,
    snapshot_from_state,
    state_from_snapshot,
)
from pechenka.player import Player
from pechenka.rng import SeededRandom, shuffled
from pechenka.rules import (
    ACTIVE_PHASES,
    HILL_REWARD,
    MAX_PLAYERS,
    MIN_PLAYERS,
    QUEUED_KINDS,
    ROUND_START_PHASES,
    SHIELD_REWARD,
    SUBSEED_LIMIT,
    SWORD_REWARD,
    AwardReason,
    CardKind,
    Phase,
    uses_hills,
)
from pechenka.state import (
    GameState,
    HistoryEntry,
    PlacedCard,
    QueueItem,
    RoundSummary,
    ScoreAward,
)

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class Game:
    """A single Pechenka game for 4-6 players."""

    def __init__(
        self,
        player_ids: list[str],
        options: Optional[GameOptions] = None,
        log_sink: Optional[logging.Logger] = None,
        **option_kwargs: Any,
    ):
        if options is None:
            try:
                options = GameOptions(**option_kwargs)
            except ValidationError as e:
                raise GameSetupError(f"Invalid game options: {e}") from e
        elif option_kwargs:
            raise GameSetupError("Pass either a GameOptions instance or keyword options, not both")

        if not MIN_PLAYERS <= len(player_ids) <= MAX_PLAYERS:
            raise GameSetupError(f"The game supports {MIN_PLAYERS} to {MAX_PLAYERS} players, got {len(player_ids)}")
        if len(set(player_ids)) != len(player_ids):
            raise GameSetupError("Player ids must be unique")
        names = options.player_names or {}
        unknown = set(names) - set(player_ids)
        if unknown:
            raise GameSetupError(f"Names given for unknown players: {sorted(unknown)}")

        players = [Player(id=pid, name=names.get(pid, f"Player {pid}")) for pid in player_ids]
        self.state = GameState(players=players, max_rounds=options.max_rounds or len(players))
        self._random = SeededRandom(options.seed)
        self._log = log_sink if log_sink is not None else (logger if options.enable_logging else None)
        self._end_result: Optional[GameEndResult] = None

    # --- introspection -------------------------------------------------------

    @property
    def players(self) -> list[Player]:
        return self.state.players

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def current_round(self) -> int:
        return self.state.current_round

    @property
    def current_circle(self) -> int:
        return self.state.current_circle

    @property
    def max_rounds(self) -> int:
        return self.state.max_rounds

    @property
    def history(self) -> list[HistoryEntry]:
        return self.state.history

    @property
    def player_count(self) -> int:
        return self.state.player_count

    def get_player(self, player_id: str) -> Optional[Player]:
        return self.state.get_player(player_id)

    def get_current_player(self) -> Player:
        """The round's nominal first player."""
        return self.state.players[self.state.current_player_index]

    def get_next_resolving_player(self) -> Optional[Player]:
        """Player at the head of the resolution queue, or None outside the resolving phase."""
        if self.state.phase != Phase.RESOLVING or not self.state.resolving_queue:
            return None
        return self.state.get_player(self.state.resolving_queue[0].player_id)

    def get_resolving_queue(self) -> list[dict[str, str]]:
        return [{"player_id": q.player_id, "action_type": q.kind.value} for q in self.state.resolving_queue]

    def get_circle_info(self) -> dict[str, Any]:
        return {
            "current_circle": self.state.current_circle,
            "max_circles": self.player_count,
            "players_placed": list(self.state.circle_cards.keys()),
        }

    def get_round_summaries(self) -> list[RoundSummary]:
        return list(self.state.round_summaries)

    def get_game_state(self) -> GameStateView:
        """Public view: no roles, no hand contents, no face-down cards."""
        return game_state_to_public(self.state)

    def get_player_private_state(self, player_id: str) -> Optional[PrivatePlayerView]:
        """Role, hand, target and hunter. Only ever hand this to the player it belongs to."""
        player = self.state.get_player(player_id)
        if player is None or player.role is None:
            return None
        return PrivatePlayerView(
            role=player.role,
            hand=[card_view(c) for c in player.hand],
            target=player.target(self.player_count),
            hunter=player.hunter(self.player_count),
        )

    def _info(self, msg: str, *args: Any) -> None:
        if self._log is not None:
            self._log.info(msg, *args)

    # --- lifecycle -----------------------------------------------------------

    def start_game(self) -> None:
        """Start the first round."""
        if self.state.phase != Phase.WAITING:
            raise GameFlowError("Game already started")
        self.start_round()

    def start_round(self) -> None:
        """Rotate the first player, assign roles, deal and open circle 1."""
        state = self.state
        if state.phase not in ROUND_START_PHASES:
            raise GameFlowError(f"Cannot start a round during {state.phase.value}")
        if state.current_round >= state.max_rounds:
            raise GameFlowError("Maximum number of rounds reached")

        state.current_round += 1
        state.current_circle = 0
        state.current_player_index = (state.current_round - 1) % state.player_count
        self._info("Round %d started; first player %s", state.current_round, self.get_current_player().id)

        for player in state.players:
            player.reset_for_new_round()
        self._assign_roles()
        self._deal_cards()
        self._start_circle()

    def _assign_roles(self) -> None:
        characters = characters_for_player_count(self.player_count)
        roles = shuffled(characters, self._random.randrange(0, SUBSEED_LIMIT))
        for player, role in zip(self.state.players, roles):
            player.assign_role(role)
            self._info("Player %s was dealt %s", player.id, role.value)

    def _deal_cards(self) -> None:
        """
        Each player gets one hint for every in-play character except their own role,
        one sword, one shield and (below six players) one hill, in shuffled order.
        """
        n = self.player_count
        characters = characters_for_player_count(n)
        deck = Deck(n)
        deck.shuffle(self._random.randrange(0, SUBSEED_LIMIT))

        for player in self.state.players:
            cards = [deck.take(CardKind.HINT, c) for c in characters if c != player.role]
            cards.append(deck.take(CardKind.SWORD))
            cards.append(deck.take(CardKind.SHIELD))
            if uses_hills(n):
                cards.append(deck.take(CardKind.HILL))
            player.add_cards(shuffled(cards, self._random.randrange(0, SUBSEED_LIMIT)))
            self._info("Player %s received %d cards", player.id, len(cards))

        # Only the own-role hints are left: exactly one per in-play character
        leftover = sorted(c.character.value for c in deck.cards if c.is_hint)
        if deck.remaining != n or leftover != sorted(c.value for c in characters):
            raise RuntimeError(f"Deal left an unexpected deck: {deck.cards}")

    def _start_circle(self) -> None:
        state = self.state
        state.current_circle += 1
        state.circle_cards.clear()
        state.revealed_circle_cards.clear()
        state.resolving_queue.clear()
        state.phase = Phase.CIRCLE
        self._info("Circle %d of round %d", state.current_circle, state.current_round)

    # --- actions -------------------------------------------------------------

    def process_action(self, player_id: str, action: Action) -> ActionOutcome:
        """
        Apply one player action. Rule violations come back as a failed outcome
        and leave the state untouched; nothing here raises for bad input.
        """
        if self.state.phase not in ACTIVE_PHASES:
            return ActionOutcome.failure(ErrorCode.GAME_NOT_IN_PROGRESS)
        player = self.state.get_player(player_id)
        if player is None:
            return ActionOutcome.failure(ErrorCode.PLAYER_NOT_FOUND)
        if not isinstance(action, ACTION_TYPES):
            return ActionOutcome.failure(ErrorCode.UNKNOWN_ACTION)

        if self.state.phase == Phase.CIRCLE:
            return self._place_card(player, action)
        return self._resolve(player, action)

    def _validate_placement(self, player: Player, action: Action) -> Union[int, ErrorCode]:
        """Return the hand index of the card to place, or the violation."""
        if isinstance(action, RevealAction):
            if not isinstance(action.card_index, int) or not 0 <= action.card_index < len(player.hand):
                return ErrorCode.INVALID_CARD_INDEX
            if not player.hand[action.card_index].is_hint:
                return ErrorCode.NOT_A_HINT
            return action.card_index
        if isinstance(action, SwordAction):
            if player.used_sword:
                return ErrorCode.SWORD_ALREADY_USED
            if not player.has_sword():
                return ErrorCode.NO_SWORD
            return player.find_card(CardKind.SWORD)
        if isinstance(action, ShieldAction):
            if player.used_shield:
                return ErrorCode.SHIELD_ALREADY_USED
            if not player.has_shield():
                return ErrorCode.NO_SHIELD
            return player.find_card(CardKind.SHIELD)
        if isinstance(action, HillAction):
            if not player.has_hill():
                return ErrorCode.NO_HILL
            return player.find_card(CardKind.HILL)
        return ErrorCode.UNKNOWN_ACTION

    def _place_card(self, player: Player, action: Action) -> ActionOutcome:
        state = self.state
        if player.id in state.circle_cards:
            return ActionOutcome.failure(ErrorCode.ALREADY_PLACED)
        checked = self._validate_placement(player, action)
        if isinstance(checked, ErrorCode):
            return ActionOutcome.failure(checked)

        state.circle_cards[player.id] = PlacedCard(card_index=checked, action=action, order=len(state.circle_cards))
        result = ActionResult(kind=ResultKind.CARD_PLACED)
        self._record(player.id, action, result)

        if len(state.circle_cards) == state.player_count:
            self._reveal_circle()
        return ActionOutcome.ok(result)

    def _reveal_circle(self) -> None:
        """Flip every placement at once; swords and shields go to the queue in seating order."""
        state = self.state
        self._info("All players placed; revealing circle %d", state.current_circle)
        for player_id, placed in state.circle_cards.items():
            player = state.get_player(player_id)
            card = player.hand.pop(placed.card_index)
            state.revealed_circle_cards[player_id] = card
            if card.kind in QUEUED_KINDS:
                state.resolving_queue.append(QueueItem(player_id=player_id, kind=card.kind))
            else:
                player.revealed_cards.append(card)

        if state.resolving_queue:
            state.resolving_queue.sort(key=lambda q: state.relative_seat(q.player_id))
            state.phase = Phase.RESOLVING
        else:
            self._finish_circle()

    def _resolve(self, player: Player, action: Action) -> ActionOutcome:
        state = self.state
        if not state.resolving_queue:
            return ActionOutcome.failure(ErrorCode.QUEUE_EMPTY)
        head = state.resolving_queue[0]
        if head.player_id != player.id:
            return ActionOutcome.failure(ErrorCode.NOT_YOUR_TURN)

        if head.kind == CardKind.SWORD:
            if not isinstance(action, SwordAction):
                return ActionOutcome.failure(ErrorCode.WRONG_ACTION)
            if self._has_sword_target(player):
                error = self._check_sword_target(player, action)
                if error:
                    return ActionOutcome.failure(error)
                target = state.get_player(action.target_id)
                hit = target.role == player.target(self.player_count)
                player.used_sword = True
                player.sword_target_id = target.id
                result = ActionResult(kind=ResultKind.SWORD_USED, target_id=target.id, success=hit)
                self._info("Player %s struck %s (hit=%s)", player.id, target.id, hit)
            else:
                # everyone else is shielded against this player: the strike is forfeited
                player.used_sword = True
                player.sword_target_id = None
                result = ActionResult(kind=ResultKind.SWORD_USED, target_id=None, success=False)
                self._info("Player %s has no open target; sword forfeited", player.id)
        else:
            if not isinstance(action, ShieldAction):
                return ActionOutcome.failure(ErrorCode.WRONG_ACTION)
            error = self._check_shield_target(player, action)
            if error:
                return ActionOutcome.failure(error)
            player.used_shield = True
            player.shield_target_id = action.target_id
            result = ActionResult(kind=ResultKind.SHIELD_USED, target_id=action.target_id)
            self._info("Player %s shielded against %s", player.id, action.target_id or "nobody")

        self._record(player.id, action, result)
        state.resolving_queue.pop(0)
        if not state.resolving_queue:
            self._finish_circle()
        return ActionOutcome.ok(result)

    def _has_sword_target(self, player: Player) -> bool:
        return any(
            not (p.used_shield and p.shield_target_id == player.id) for p in self.state.players if p.id != player.id
        )

    def _check_sword_target(self, player: Player, action: SwordAction) -> Optional[ErrorCode]:
        if not action.target_id:
            return ErrorCode.TARGET_REQUIRED
        target = self.state.get_player(action.target_id)
        if target is None:
            return ErrorCode.TARGET_NOT_FOUND
        if target.id == player.id:
            return ErrorCode.SELF_TARGET
        if target.used_shield and target.shield_target_id == player.id:
            return ErrorCode.TARGET_SHIELDED
        return None

    def _check_shield_target(self, player: Player, action: ShieldAction) -> Optional[ErrorCode]:
        if not action.target_id:
            return None
        target = self.state.get_player(action.target_id)
        if target is None:
            return ErrorCode.TARGET_NOT_FOUND
        if target.id == player.id:
            return ErrorCode.SELF_TARGET
        if target.sword_target_id is not None and target.sword_target_id != player.id:
            return ErrorCode.CONTRADICTORY_DEFENSE
        return None

    def _record(self, player_id: str, action: Action, result: ActionResult) -> None:
        self.state.history.append(
            HistoryEntry(
                player_id=player_id,
                action=action,
                result=result,
                timestamp=_now_ms(),
                round=self.state.current_round,
                circle=self.state.current_circle,
            )
        )

    def _finish_circle(self) -> None:
        if self.state.current_circle >= self.player_count:
            self._end_round()
        else:
            self._start_circle()

    # --- scoring -------------------------------------------------------------

    def _end_round(self) -> None:
        state = self.state
        self._info("Round %d finished", state.current_round)
        state.round_summaries.append(self._calculate_scores())
        state.phase = Phase.ROUND_END
        if state.current_round >= state.max_rounds:
            self.end_game()

    def _calculate_scores(self) -> RoundSummary:
        """
        +3 for a sword that struck the hunted character, +2 for a shield naming the
        hunter whose sword came at you, +1 for a hill still in hand.
        """
        n = self.player_count
        history = self.state.round_history()
        summary = RoundSummary(round=self.state.current_round)

        def award(player: Player, reason: AwardReason, coins: int) -> None:
            player.coins += coins
            summary.awards.append(ScoreAward(player_id=player.id, reason=reason, coins=coins))
            self._info("Player %s +%d coins (%s)", player.id, coins, reason.value)

        for player in self.state.players:
            swords = [h for h in history if h.player_id == player.id and h.is_sword_resolution]
            if player.used_sword and swords and swords[-1].result.success:
                award(player, AwardReason.SWORD, SWORD_REWARD)

            if player.used_shield:
                hunter = next((p for p in self.state.players if p.target(n) == player.role), None)
                if hunter is not None and hunter.used_sword:
                    struck = any(
                        h.player_id == hunter.id and h.is_sword_resolution and h.result.target_id == player.id
                        for h in history
                    )
                    shields = [h for h in history if h.player_id == player.id and h.is_shield_resolution]
                    if struck and shields and shields[-1].result.target_id == hunter.id:
                        award(player, AwardReason.SHIELD, SHIELD_REWARD)

            if player.has_hill():
                award(player, AwardReason.HILL, HILL_REWARD)
        return summary

    def end_game(self) -> GameEndResult:
        """
        Finish the game and crown the richest player. Ties go to the earliest seat.
        Calling it again returns the same result.
        """
        if self._end_result is None:
            self.state.phase = Phase.GAME_END
            scores = [PlayerScore(id=p.id, name=p.name, coins=p.coins) for p in self.state.players]
            winner = max(scores, key=lambda s: s.coins)
            self._end_result = GameEndResult(winner=winner, final_scores=scores)
            self._info("Game over; winner %s with %d coins", winner.id, winner.coins)
        return self._end_result

    @property
    def winner(self) -> Optional[PlayerScore]:
        return self._end_result.winner if self._end_result else None

    # --- persistence ---------------------------------------------------------

    def snapshot(self) -> GameSnapshot:
        return snapshot_from_state(self.state, self._random.state, self._end_result)

    def serialize(self) -> str:
        """JSON snapshot of the whole engine, including private data."""
        return self.snapshot().model_dump_json()

    @classmethod
    def deserialize(
        cls,
        payload: Union[str, bytes, dict[str, Any], GameSnapshot],
        log_sink: Optional[logging.Logger] = None,
    ) -> "Game":
        """Rebuild a game from serialize() output."""
        try:
            if isinstance(payload, GameSnapshot):
                snapshot = payload
            elif isinstance(payload, dict):
                snapshot = GameSnapshot.model_validate(payload)
            else:
                snapshot = GameSnapshot.model_validate_json(payload)
            state = state_from_snapshot(snapshot)
        except (ValidationError, ValueError, KeyError, TypeError) as e:
            raise SnapshotError(f"Cannot restore game: {e}") from e
        if not MIN_PLAYERS <= state.player_count <= MAX_PLAYERS:
            raise SnapshotError(f"Snapshot has {state.player_count} players")

        game = cls.__new__(cls)
        game.state = state
        game._random = SeededRandom(snapshot.random_state)
        game._log = log_sink
        game._end_result = snapshot.end_result
        return game
