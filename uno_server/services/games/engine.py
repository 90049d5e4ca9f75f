"""Turn rules: legality, card effects and turn-pointer arithmetic.

Everything here works on a ``Room``'s data and assumes the caller holds the
room lock and has already checked turn ownership.
"""

from typing import Optional

from .cards import COLORS, Card


def is_legal(card: Card, top: Card, current_color: Optional[str]) -> bool:
    """A card is playable if it is wild, matches the active color or matches the top value."""
    return card.is_wild or card.color == current_color or card.value == top.value


def step(room, steps: int = 1, direction: Optional[int] = None) -> int:
    """Index ``steps`` seats away from the current player, wrapping either way."""
    n = len(room.players)
    d = room.direction if direction is None else direction
    # Python's % already yields a value in [0, n) for negative operands
    return (room.current_player_index + d * steps) % n


def advance_turn(room, steps: int = 1) -> None:
    room.current_player_index = step(room, steps)


def give_cards(room, player, n: int):
    """Deal ``n`` cards to ``player`` from the deck. Any draw cancels an UNO call."""
    drawn = room.deck.draw(n, room.discard_pile)
    player.hand.extend(drawn)
    player.said_uno = False
    return drawn


def apply_effect(room, card: Card, chosen_color: Optional[str] = None) -> None:
    """Resolve ``card`` as if the current player had just discarded it."""
    if card.value == 'skip':
        room.current_color = card.color
        advance_turn(room, 2)
    elif card.value == 'reverse':
        room.current_color = card.color
        if len(room.players) == 2:
            advance_turn(room, 2)
        else:
            room.direction *= -1
            advance_turn(room, 1)
    elif card.value == '+2':
        room.current_color = card.color
        give_cards(room, room.players[step(room)], 2)
        advance_turn(room, 2)
    elif card.value == 'wild':
        room.current_color = chosen_color
        advance_turn(room, 1)
    elif card.value == '+4':
        room.current_color = chosen_color
        give_cards(room, room.players[step(room)], 4)
        advance_turn(room, 2)
    else:
        room.current_color = card.color
        advance_turn(room, 1)


def apply_opening_card(room, card: Card) -> None:
    """Resolve the first discard from pointer 0.

    Action cards run through the normal effect table as if player 0 had just
    played them: skip passes to seat 2, +2 makes seat 1 draw two and passes
    to seat 2, reverse flips direction so the last seat starts (two seated:
    player 0 starts again). Number cards only set the color.
    """
    room.current_color = card.color
    room.current_player_index = 0
    if card.kind == 'action':
        apply_effect(room, card)


def deal(room, hand_size: int = 7) -> Card:
    """Build a fresh deck, deal every hand and turn up an opening card."""
    room.deck.generate()
    room.discard_pile = []
    room.direction = 1
    room.current_player_index = 0
    for player in room.players:
        player.hand = room.deck.draw(hand_size, strict=True)
        player.said_uno = False

    first = room.deck.draw(1, strict=True)[0]
    while first.is_wild:
        room.deck.put_back(first)
        first = room.deck.draw(1, strict=True)[0]
    room.discard_pile.append(first)
    apply_opening_card(room, first)
    return first


def valid_wild_color(color: Optional[str]) -> bool:
    return color in COLORS
