"""Decision making for bot seats.

Bots act through the same operations in ``actions`` that human events use;
this module only decides which one to call.
"""

import random
from typing import List, Optional

from . import actions, engine
from .cards import COLORS


def legal_indices(room, player) -> List[int]:
    top = room.top_card
    return [i for i, card in enumerate(player.hand) if engine.is_legal(card, top, room.current_color)]


def choose_color(hand, rng=random) -> str:
    """Pick uniformly among the colors still held, or any color if none are."""
    held = sorted({c.color for c in hand if c.color in COLORS})
    return rng.choice(held or list(COLORS))


def take_turn(room, bot, uno_call_probability: float = 0.9, rng: Optional[random.Random] = None) -> str:
    """Play one bot turn. Caller holds the room lock and has checked it is ``bot``'s turn.

    Returns what the bot did: ``'play'``, ``'draw-keep'`` when the drawn card
    can be played on a follow-up turn, or ``'draw-pass'``.
    """
    rng = rng or random
    candidates = legal_indices(room, bot)
    if candidates:
        index = rng.choice(candidates)
        card = bot.hand[index]
        chosen = None
        if card.is_wild:
            rest = bot.hand[:index] + bot.hand[index + 1:]
            chosen = choose_color(rest, rng)
        actions.play_card(room, bot.id, index, chosen)
        if room.status == 'playing' and len(bot.hand) == 1 and rng.random() < uno_call_probability:
            actions.say_uno(room, bot.id)
        return 'play'

    outcome = actions.draw_card(room, bot.id)
    return 'draw-keep' if outcome.playable else 'draw-pass'
