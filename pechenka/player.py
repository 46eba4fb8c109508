"""Per-seat player record."""

from dataclasses import dataclass, field
from typing import Optional

from pechenka.characters import Character, hunter_of, target_of
from pechenka.deck import Card
from pechenka.rules import CardKind


@dataclass
class Player:
    """A seat at the table. Coins persist across rounds; everything else is per round."""

    id: str
    name: str
    role: Optional[Character] = None
    hand: list[Card] = field(default_factory=list)
    revealed_cards: list[Card] = field(default_factory=list)
    coins: int = 0
    used_sword: bool = False
    used_shield: bool = False
    sword_target_id: Optional[str] = None
    shield_target_id: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"

    def assign_role(self, character: Character) -> None:
        self.role = character

    def add_cards(self, cards: list[Card]) -> None:
        self.hand.extend(cards)

    def find_card(self, kind: CardKind) -> int:
        """Return the hand index of the first card of `kind`, or -1."""
        for i, card in enumerate(self.hand):
            if card.kind == kind:
                return i
        return -1

    def has_sword(self) -> bool:
        return self.find_card(CardKind.SWORD) != -1

    def has_shield(self) -> bool:
        return self.find_card(CardKind.SHIELD) != -1

    def has_hint(self) -> bool:
        return self.find_card(CardKind.HINT) != -1

    def has_hill(self) -> bool:
        return self.find_card(CardKind.HILL) != -1

    def target(self, player_count: int) -> Optional[Character]:
        """Character this player must hunt, or None before roles are dealt."""
        if self.role is None:
            return None
        return target_of(self.role, player_count)

    def hunter(self, player_count: int) -> Optional[Character]:
        """Character hunting this player, or None before roles are dealt."""
        if self.role is None:
            return None
        return hunter_of(self.role, player_count)

    def reset_for_new_round(self) -> None:
        """Clear round-local state; coins are kept."""
        self.hand = []
        self.revealed_cards = []
        self.used_sword = False
        self.used_shield = False
        self.sword_target_id = None
        self.shield_target_id = None
