"""Cards and the per-round deck."""

from dataclasses import dataclass
from typing import Optional

from pechenka.characters import Character, characters_for_player_count
from pechenka.errors import InsufficientCardsError
from pechenka.rng import SeededRandom
from pechenka.rules import CardKind, uses_hills


@dataclass(frozen=True)
class Card:
    """A card. Only hints carry a character."""

    kind: CardKind
    character: Optional[Character] = None

    @property
    def is_hint(self) -> bool:
        return self.kind == CardKind.HINT

    @property
    def is_sword(self) -> bool:
        return self.kind == CardKind.SWORD

    @property
    def is_shield(self) -> bool:
        return self.kind == CardKind.SHIELD

    @property
    def is_hill(self) -> bool:
        return self.kind == CardKind.HILL


def build_cards(player_count: int) -> list[Card]:
    """
    Enumerate the card multiset for a round, unshuffled.
    Hints for every in-play character, then swords, shields and (below six players) hills;
    player_count copies of each.
    """
    cards: list[Card] = []
    for character in characters_for_player_count(player_count):
        cards.extend(Card(CardKind.HINT, character) for _ in range(player_count))
    cards.extend(Card(CardKind.SWORD) for _ in range(player_count))
    cards.extend(Card(CardKind.SHIELD) for _ in range(player_count))
    if uses_hills(player_count):
        cards.extend(Card(CardKind.HILL) for _ in range(player_count))
    return cards


class Deck:
    """Ordered, mutable sequence of cards built fresh each round."""

    def __init__(self, player_count: int, seed: Optional[int] = None):
        self.player_count = player_count
        self.cards: list[Card] = build_cards(player_count)
        self._random = SeededRandom(seed)

    def __len__(self) -> int:
        return len(self.cards)

    @property
    def remaining(self) -> int:
        return len(self.cards)

    def shuffle(self, seed: Optional[int] = None) -> None:
        """Fisher-Yates shuffle in place. Passing a seed restarts the generator."""
        if seed is not None:
            self._random = SeededRandom(seed)
        self._random.shuffle(self.cards)

    def draw(self, count: int) -> list[Card]:
        """Remove and return the first `count` cards; all or nothing."""
        if count > len(self.cards):
            raise InsufficientCardsError(count, len(self.cards))
        drawn = self.cards[:count]
        del self.cards[:count]
        return drawn

    def take(self, kind: CardKind, character: Optional[Character] = None) -> Card:
        """Remove and return the first card of the given kind (and character, for hints)."""
        for i, card in enumerate(self.cards):
            if card.kind == kind and card.character == character:
                return self.cards.pop(i)
        label = f"{kind.value} ({character.value})" if character else kind.value
        raise InsufficientCardsError(1, 0, f"No {label} card left in deck")
