"""Helpers for driving a game through circles and resolutions in tests."""

from typing import Callable, Optional, Union

from pechenka.actions import Action, HillAction, RevealAction, ShieldAction, SwordAction
from pechenka.engine import Game
from pechenka.player import Player
from pechenka.rules import Phase

Override = Union[Action, Callable[[Player], Action]]


def make_game(n: int = 4, seed: int = 12345, start: bool = True, **options) -> Game:
    """Players p1..pn, seeded; started unless start=False."""
    game = Game([f"p{i + 1}" for i in range(n)], seed=seed, **options)
    if start:
        game.start_game()
    return game


def holder_of(game: Game, character) -> Player:
    """The player dealt `character` this round."""
    return next(p for p in game.players if p.role == character)


def hunted_by(game: Game, player: Player) -> Player:
    """The player holding the character `player` hunts."""
    return holder_of(game, player.target(game.player_count))


def hint_index(player: Player) -> int:
    return next(i for i, c in enumerate(player.hand) if c.is_hint)


def filler(player: Player) -> Action:
    """Hints first, then the hill, then the shield, then the sword."""
    for i, card in enumerate(player.hand):
        if card.is_hint:
            return RevealAction(card_index=i)
    if player.has_hill():
        return HillAction()
    if player.has_shield():
        return ShieldAction()
    return SwordAction()


def play_circle(game: Game, overrides: Optional[dict[str, Override]] = None) -> None:
    """Every player places once, in seating order."""
    overrides = overrides or {}
    for player in game.players:
        override = overrides.get(player.id)
        if override is None:
            action = filler(player)
        elif callable(override):
            action = override(player)
        else:
            action = override
        outcome = game.process_action(player.id, action)
        assert outcome.success, outcome.error


def first_open_target(game: Game, attacker: Player) -> Optional[str]:
    """Next player clockwise who has not shielded against the attacker, if any."""
    seat = game.players.index(attacker)
    n = game.player_count
    for step in range(1, n):
        candidate = game.players[(seat + step) % n]
        if not (candidate.used_shield and candidate.shield_target_id == attacker.id):
            return candidate.id
    return None


def resolve_all(game: Game, targets: Optional[dict[str, str]] = None) -> None:
    """Drain the resolution queue; swords default to the next open seat, shields to nobody."""
    targets = targets or {}
    while game.phase == Phase.RESOLVING:
        head = game.get_next_resolving_player()
        kind = game.get_resolving_queue()[0]["action_type"]
        if kind == "sword":
            action = SwordAction(target_id=targets.get(head.id) or first_open_target(game, head))
        else:
            action = ShieldAction(target_id=targets.get(head.id))
        outcome = game.process_action(head.id, action)
        assert outcome.success, outcome.error


def play_round(
    game: Game,
    plan: Optional[dict[int, dict[str, Override]]] = None,
    targets: Optional[dict[str, str]] = None,
) -> None:
    """Play the rest of the current round. plan maps circle number -> overrides."""
    plan = plan or {}
    round_number = game.current_round
    while game.phase in (Phase.CIRCLE, Phase.RESOLVING):
        if game.phase == Phase.CIRCLE:
            play_circle(game, plan.get(game.current_circle))
        resolve_all(game, targets)
    assert game.current_round == round_number
