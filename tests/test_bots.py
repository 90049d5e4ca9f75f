import random

from uno_server import registry
from uno_server.services.games import actions, bots, scheduler
from uno_server.services.games.cards import COLORS, DECK_SIZE
from helpers import card, give_turn, put_on_deck, set_hand, set_top


def _bot_table(seed=3):
    """Ann (human) plus three bots, started, with bot 1 to act."""
    room = registry.create_room('sid-ann', 'Ann', ai_mode=True)
    room.deck.rng = random.Random(seed)
    room.start('sid-ann')
    give_turn(room, 1)
    set_top(room, 'red 5')
    return room


def test_choose_color_prefers_held_colors():
    rng = random.Random(0)
    hand = [card('blue 1'), card('black wild'), card('green 4')]
    picks = {bots.choose_color(hand, rng) for _ in range(50)}
    assert picks == {'blue', 'green'}
    only_wild = [card('black +4')]
    assert bots.choose_color(only_wild, rng) in COLORS


def test_legal_indices(flask_app):
    room = _bot_table()
    bot = set_hand(room, 1, ['blue 1', 'red 9', 'green 5', 'black wild'])
    assert bots.legal_indices(room, bot) == [1, 2, 3]


def test_refresh_schedules_a_pending_bot_turn(flask_app):
    room = _bot_table()
    with room.lock:
        actions.refresh(room)
        actions.refresh(room)
    assert scheduler.pending_bot_turns(room.code) == [room.generation]


def test_no_schedule_when_a_human_is_up(flask_app):
    room = _bot_table()
    give_turn(room, 0)
    with room.lock:
        actions.refresh(room)
    assert scheduler.pending_bot_turns(room.code) == []


def test_bot_draws_a_playable_card_then_plays_it(flask_app):
    room = _bot_table()
    bot = set_hand(room, 1, ['blue 7', 'green 3'])
    drawn = put_on_deck(room, 'red 8')
    with room.lock:
        actions.refresh(room)

    first = scheduler.pending_bot_turns(room.code)
    assert len(first) == 1
    assert scheduler.run_bot_turn(flask_app, room.code, first[0])
    # Still the same bot's turn, holding the drawn card, with a fresh timer pending
    assert room.current_player is bot
    assert drawn in bot.hand and len(bot.hand) == 3
    second = scheduler.pending_bot_turns(room.code)
    assert second == [room.generation]

    assert scheduler.run_bot_turn(flask_app, room.code, second[0])
    assert room.top_card == drawn
    assert drawn not in bot.hand
    assert room.current_player_index == 2
    assert room.card_total() == DECK_SIZE


def test_bot_without_playable_draw_passes(flask_app):
    room = _bot_table()
    bot = set_hand(room, 1, ['blue 7', 'green 3'])
    put_on_deck(room, 'yellow 1')
    with room.lock:
        did = bots.take_turn(room, bot)
    assert did == 'draw-pass'
    assert room.current_player_index == 2


def test_stale_bot_turn_is_discarded(flask_app):
    room = _bot_table()
    bot = set_hand(room, 1, ['red 7', 'green 3'])
    with room.lock:
        actions.refresh(room)
    pending = scheduler.pending_bot_turns(room.code)[0]
    room.touch()
    assert not scheduler.run_bot_turn(flask_app, room.code, pending)
    assert len(bot.hand) == 2
    assert room.current_player is bot


def test_bot_turn_for_retired_room_is_discarded(flask_app):
    room = _bot_table()
    with room.lock:
        actions.refresh(room)
    pending = scheduler.pending_bot_turns(room.code)[0]
    registry.remove(room.code)
    assert not scheduler.run_bot_turn(flask_app, room.code, pending)


def test_bot_wild_picks_a_color_it_holds(flask_app):
    room = _bot_table()
    bot = set_hand(room, 1, ['black wild', 'green 3', 'green 4'])
    with room.lock:
        bots.take_turn(room, bot, rng=random.Random(1))
    assert room.top_card == card('black wild')
    assert room.current_color == 'green'


def test_bot_calls_uno_on_its_last_card(flask_app):
    room = _bot_table()
    bot = set_hand(room, 1, ['red 8', 'blue 2'])
    with room.lock:
        bots.take_turn(room, bot, uno_call_probability=1.0)
    assert [str(c) for c in bot.hand] == ['blue 2']
    assert bot.said_uno is True


def test_bot_can_forget_to_call_uno(flask_app):
    room = _bot_table()
    bot = set_hand(room, 1, ['red 8', 'blue 2'])
    with room.lock:
        bots.take_turn(room, bot, uno_call_probability=0.0)
    assert bot.said_uno is False
    room.catch_uno(bot.id)
    assert len(bot.hand) == 3


def test_bots_play_out_a_full_game(flask_app):
    room = registry.create_room('sid-ann', 'Ann', ai_mode=True)
    room.players[0].is_bot = True
    room.start('sid-ann')
    for _ in range(2000):
        pending = scheduler.pending_bot_turns(room.code)
        if room.status != 'playing':
            break
        if not pending:
            with room.lock:
                actions.refresh(room)
            continue
        scheduler.run_bot_turn(flask_app, room.code, pending[-1])
        assert room.card_total() == DECK_SIZE
    assert room.status == 'ended'
    assert room.winner is not None
