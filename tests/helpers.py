"""Helpers for arranging rooms into exact positions without breaking card conservation."""

import random

from uno_server.services.games.cards import Card
from uno_server.services.games.room import Player, Room


def card(text):
    """``'red 5'``, ``'blue skip'``, ``'black wild'`` -> Card."""
    color, value = text.split(' ')
    if color == 'black':
        kind = 'wild'
    elif value.isdigit():
        kind = 'number'
    else:
        kind = 'action'
    return Card(color, value, kind)


def make_room(n=4, seed=7, code='TEST01'):
    room = Room(code, rng=random.Random(seed))
    for i in range(n):
        room.add_player(Player(id=f"p{i}", name=f"P{i}"))
    return room


def started_room(n=4, seed=7):
    room = make_room(n, seed)
    room.start('p0')
    return room


def _take(room, wanted, exclude=None):
    """Pull a copy of ``wanted`` out of the deck, or swap it out of a hand or the discard pile."""
    if wanted in room.deck.cards:
        room.deck.cards.remove(wanted)
        return wanted
    for p in room.players:
        if p is exclude or wanted not in p.hand:
            continue
        idx = p.hand.index(wanted)
        p.hand[idx] = next(c for c in room.deck.cards if c != wanted)
        room.deck.cards.remove(p.hand[idx])
        return wanted
    if wanted in room.discard_pile[:-1]:
        room.discard_pile.remove(wanted)
        return wanted
    if room.discard_pile and room.discard_pile[-1] == wanted:
        # The top keeps the table legal, so a colored card from the deck takes its place
        replacement = next(c for c in room.deck.cards if c != wanted and not c.is_wild)
        room.deck.cards.remove(replacement)
        room.discard_pile[-1] = replacement
        room.current_color = replacement.color
        return wanted
    raise ValueError(f"no copy of {wanted} available")


def set_hand(room, index, texts):
    player = room.players[index]
    room.deck.cards.extend(player.hand)
    player.hand = []
    player.hand = [_take(room, card(s), exclude=player) for s in texts]
    return player


def set_top(room, text, color=None):
    wanted = card(text)
    old_top = room.discard_pile.pop() if room.discard_pile else None
    taken = _take(room, wanted)
    if old_top is not None:
        room.discard_pile.append(old_top)
    room.discard_pile.append(taken)
    room.current_color = color or taken.color
    return taken


def put_on_deck(room, text):
    wanted = _take(room, card(text))
    room.deck.cards.insert(0, wanted)
    return wanted


def give_turn(room, index, direction=1):
    room.current_player_index = index
    room.direction = direction
    room.touch()
