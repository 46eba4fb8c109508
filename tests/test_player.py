"""Tests for the player record."""

from pechenka.characters import Character
from pechenka.deck import Card
from pechenka.player import Player
from pechenka.rules import CardKind


def _player_with_hand() -> Player:
    player = Player(id="p1", name="Alice")
    player.add_cards([Card(CardKind.HINT, Character.BLUE), Card(CardKind.SWORD), Card(CardKind.HILL)])
    return player


def test_capabilities():
    player = _player_with_hand()
    assert player.has_hint()
    assert player.has_sword()
    assert player.has_hill()
    assert not player.has_shield()
    assert player.find_card(CardKind.SWORD) == 1
    assert player.find_card(CardKind.SHIELD) == -1


def test_target_and_hunter_need_a_role():
    player = Player(id="p1", name="Alice")
    assert player.target(4) is None
    assert player.hunter(4) is None
    player.assign_role(Character.BLUE)
    assert player.target(4) == Character.STRONTIUM
    assert player.hunter(4) == Character.COOKIE


def test_reset_keeps_coins():
    player = _player_with_hand()
    player.coins = 5
    player.used_sword = True
    player.used_shield = True
    player.sword_target_id = "p2"
    player.shield_target_id = "p3"
    player.revealed_cards.append(Card(CardKind.HINT, Character.COOKIE))
    player.reset_for_new_round()
    assert player.coins == 5
    assert not player.used_sword
    assert not player.used_shield
    assert player.sword_target_id is None
    assert player.shield_target_id is None
    assert player.revealed_cards == []
    assert player.hand == []
