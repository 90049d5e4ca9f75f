import logging
import random
from dataclasses import dataclass
from typing import List, Optional

from .errors import DeckExhausted

logger = logging.getLogger(__name__)

COLORS = ('red', 'yellow', 'green', 'blue')
WILD_COLOR = 'black'
ACTION_VALUES = ('skip', 'reverse', '+2')
WILD_VALUES = ('wild', '+4')
DECK_SIZE = 108


@dataclass(frozen=True)
class Card:
    """A single UNO card. Wild cards stay black; the chosen color lives on the room."""
    color: str
    value: str
    kind: str

    @property
    def is_wild(self) -> bool:
        return self.kind == 'wild'

    def to_dict(self):
        return {'color': self.color, 'value': self.value, 'type': self.kind}

    def __str__(self):
        return f"{self.color} {self.value}"


def build_cards() -> List[Card]:
    """Return the 108 cards of a fresh deck in a fixed order."""
    cards = []
    for color in COLORS:
        cards.append(Card(color, '0', 'number'))
        for n in range(1, 10):
            cards.extend([Card(color, str(n), 'number')] * 2)
        for value in ACTION_VALUES:
            cards.extend([Card(color, value, 'action')] * 2)
    for _ in range(4):
        cards.append(Card(WILD_COLOR, 'wild', 'wild'))
        cards.append(Card(WILD_COLOR, '+4', 'wild'))
    return cards


class Deck:
    """Draw pile consumed from the front, refilled from the discard pile."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.cards: List[Card] = []

    def __len__(self):
        return len(self.cards)

    def generate(self) -> List[Card]:
        self.cards = build_cards()
        self.shuffle()
        return self.cards

    def shuffle(self) -> None:
        self.rng.shuffle(self.cards)

    def put_back(self, card: Card) -> None:
        self.cards.append(card)
        self.shuffle()

    def recycle(self, discard_pile: List[Card]) -> int:
        """Move every discard except the top card back into the deck.

        Mutates ``discard_pile`` in place and returns the number of cards moved.
        """
        if len(discard_pile) <= 1:
            return 0
        top = discard_pile[-1]
        recycled = discard_pile[:-1]
        self.rng.shuffle(recycled)
        self.cards.extend(recycled)
        discard_pile[:] = [top]
        logger.info(f"[deck-recycle] moved={len(recycled)} deck={len(self.cards)}")
        return len(recycled)

    def draw(self, n: int, discard_pile: Optional[List[Card]] = None, strict: bool = False) -> List[Card]:
        """Take ``n`` cards from the front, recycling the discard pile if short.

        When deck and discard pile together hold fewer than ``n`` cards the
        draw comes up short, unless ``strict`` is set, in which case nothing
        is drawn and ``DeckExhausted`` is raised.
        """
        if len(self.cards) < n and discard_pile is not None:
            self.recycle(discard_pile)
        if len(self.cards) < n:
            if strict:
                raise DeckExhausted()
            logger.warning(f"[deck-exhausted] wanted={n} available={len(self.cards)}")
        drawn = self.cards[:n]
        del self.cards[:n]
        return drawn
