"""Round-end scoring and game end."""

import pytest

from pechenka.actions import ShieldAction, SwordAction
from pechenka.errors import GameFlowError
from pechenka.rules import AwardReason, Phase
from tests.helpers import holder_of, hunted_by, make_game, play_round


def _sword_entries(game, player_id):
    return [h for h in game.history if h.player_id == player_id and h.is_sword_resolution]


def test_successful_hunt_scores_three():
    game = make_game(4, seed=12345)
    p1 = game.get_player("p1")
    victim = hunted_by(game, p1)
    play_round(game, plan={1: {"p1": SwordAction()}}, targets={"p1": victim.id})

    entries = _sword_entries(game, "p1")
    assert len(entries) == 1
    assert entries[0].result.success is True
    assert entries[0].result.target_id == victim.id
    summary = game.get_round_summaries()[-1]
    assert summary.coins_for("p1", AwardReason.SWORD) == 3
    # p1 never played the hill either
    assert p1.coins == 4
    assert all(p.coins == 0 for p in game.players if p.id != "p1")


def test_missed_hunt_scores_nothing():
    game = make_game(4, seed=12345)
    p1 = game.get_player("p1")
    wrong = next(p for p in game.players if p.id != "p1" and p.role != p1.target(4))
    play_round(game, plan={1: {"p1": SwordAction()}}, targets={"p1": wrong.id})

    assert _sword_entries(game, "p1")[0].result.success is False
    assert game.get_round_summaries()[-1].coins_for("p1", AwardReason.SWORD) == 0


def test_shield_against_hunter_scores_two():
    game = make_game(4, seed=12345)
    hunter = game.get_player("p1")
    prey = hunted_by(game, hunter)
    play_round(
        game,
        plan={1: {hunter.id: SwordAction()}, 2: {prey.id: ShieldAction()}},
        targets={hunter.id: prey.id, prey.id: hunter.id},
    )

    summary = game.get_round_summaries()[-1]
    assert summary.coins_for(prey.id, AwardReason.SHIELD) == 2
    assert summary.coins_for(hunter.id, AwardReason.SWORD) == 3
    # both kept their hills
    assert prey.coins == 3
    assert hunter.coins == 4


def test_shield_against_non_hunter_scores_nothing():
    game = make_game(4, seed=12345)
    hunter = game.get_player("p1")
    prey = hunted_by(game, hunter)
    bystander = next(p for p in game.players if p.id not in (hunter.id, prey.id))
    play_round(
        game,
        plan={1: {hunter.id: SwordAction()}, 2: {prey.id: ShieldAction()}},
        targets={hunter.id: prey.id, prey.id: bystander.id},
    )

    assert prey.shield_target_id == bystander.id
    assert game.get_round_summaries()[-1].coins_for(prey.id, AwardReason.SHIELD) == 0


def test_hill_retention_bonus():
    game = make_game(4, seed=12345)
    # p2 plays the shield in the last circle instead of the hill
    play_round(game, plan={4: {"p2": ShieldAction()}})

    summary = game.get_round_summaries()[-1]
    assert summary.coins_for("p2", AwardReason.HILL) == 1
    assert summary.coins_for("p2") == 1
    assert game.get_player("p2").coins == 1
    for pid in ("p1", "p3", "p4"):
        assert summary.coins_for(pid) == 0


def test_coins_persist_across_rounds():
    game = make_game(4, seed=99)
    play_round(game, plan={4: {"p3": ShieldAction()}})
    assert game.get_player("p3").coins == 1
    game.start_round()
    play_round(game, plan={4: {"p3": ShieldAction()}})
    assert game.get_player("p3").coins == 2
    assert [s.round for s in game.get_round_summaries()] == [1, 2]
    assert game.get_game_state().last_round_summary.round == 2


def test_game_ends_after_max_rounds():
    game = make_game(4, seed=2024, max_rounds=4)
    for round_number in range(1, 5):
        if round_number > 1:
            game.start_round()
        first = game.get_current_player()
        victim = holder_of(game, first.target(4))
        play_round(game, plan={1: {first.id: SwordAction()}}, targets={first.id: victim.id})

    assert game.phase == Phase.GAME_END
    assert game.current_round == 4
    result = game.end_game()
    assert all(result.winner.coins >= s.coins for s in result.final_scores)
    # every seat was first once: 3 for the hunt + 1 for the kept hill
    assert [s.coins for s in result.final_scores] == [4, 4, 4, 4]
    # ties go to the earliest seat
    assert result.winner.id == "p1"
    with pytest.raises(GameFlowError):
        game.start_round()


def test_end_game_early_and_idempotent():
    game = make_game()
    game.get_player("p3").coins = 2
    result = game.end_game()
    assert game.phase == Phase.GAME_END
    assert result.winner.id == "p3"
    assert game.winner.id == "p3"
    assert game.end_game() == result
    assert not game.process_action("p1", ShieldAction()).success


def test_max_rounds_option_limits_rounds():
    game = make_game(4, max_rounds=1)
    play_round(game)
    assert game.phase == Phase.GAME_END
    with pytest.raises(GameFlowError):
        game.start_round()
