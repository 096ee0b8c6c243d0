from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

SUITS = ("hearts", "diamonds", "clubs", "spades")
LOWER = "lower"
UPPER = "upper"
SET_TYPES = (LOWER, UPPER)
SET_RANKS: Dict[str, Tuple[str, ...]] = {
    LOWER: ("ace", "2", "3", "4", "5", "6"),
    UPPER: ("8", "9", "10", "jack", "queen", "king"),
}
RANKS = SET_RANKS[LOWER] + SET_RANKS[UPPER]
DECK_SIZE = len(SUITS) * len(RANKS)


@dataclass(frozen=True)
class Card:
    suit: str
    rank: str
    set_type: str

    def __post_init__(self) -> None:
        if self.suit not in SUITS:
            raise ValueError(f"Invalid suit: {self.suit}")
        if self.set_type not in SET_TYPES:
            raise ValueError(f"Invalid set type: {self.set_type}")
        if self.rank not in SET_RANKS[self.set_type]:
            raise ValueError(f"Rank {self.rank} is not part of the {self.set_type} set")

    @property
    def label(self) -> str:
        return f"{self.rank} of {self.suit}"

    def in_set(self, suit: str, set_type: str) -> bool:
        return self.suit == suit and self.set_type == set_type

    def to_payload(self) -> Dict[str, str]:
        return {"suit": self.suit, "rank": self.rank, "setType": self.set_type}


def set_cards(suit: str, set_type: str) -> List[Card]:
    return [Card(suit, rank, set_type) for rank in SET_RANKS[set_type]]


def ordered_deck() -> List[Card]:
    """All 48 cards, suit-major then set type then rank."""
    return [card for suit in SUITS for set_type in SET_TYPES for card in set_cards(suit, set_type)]


def build_deck(seed: Optional[int] = None) -> List[Card]:
    rng = random.Random(seed)
    deck = ordered_deck()
    rng.shuffle(deck)
    return deck


def deal(deck: List[Card], count: int) -> List[Card]:
    if len(deck) < count:
        raise ValueError("Not enough cards left in deck")
    cards = deck[:count]
    del deck[:count]
    return cards
