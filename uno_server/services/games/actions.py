"""Public game operations shared by socket handlers and bots.

Each operation applies a change to a room, pushes the resulting views out and
hands the turn to the bot scheduler. The caller holds ``room.lock`` from
validation through the broadcast.
"""

from flask import current_app

from uno_server import socketio
from .room import ENDED, PLAYING
from . import scheduler
from .scoring import record_result

NAMESPACE = '/'


def emit_to_room(room, event, payload) -> None:
    socketio.emit(event, payload, to=room.code, namespace=NAMESPACE)


def broadcast_roster(room) -> None:
    emit_to_room(room, 'playerListUpdate', room.roster())


def broadcast_state(room) -> None:
    """Send each connected human their own view. Hands never leave their owner."""
    for p in room.players:
        if p.is_bot or not p.connected:
            continue
        socketio.emit('gameStateUpdate', room.state_for(p), to=p.id, namespace=NAMESPACE)


def notify(room, message) -> None:
    emit_to_room(room, 'notification', {'message': message})


def refresh(room) -> None:
    broadcast_state(room)
    scheduler.schedule_bot_turn(current_app._get_current_object(), room)


def start_game(room, actor_id):
    first = room.start(actor_id)
    _announce_start(room)
    return first


def restart_game(room, actor_id):
    first = room.restart(actor_id)
    notify(room, 'A new round has started')
    _announce_start(room)
    return first


def _announce_start(room) -> None:
    emit_to_room(room, 'gameStart', {
        'discardPile': [c.to_dict() for c in room.discard_pile],
        'currentColor': room.current_color,
    })
    broadcast_roster(room)
    refresh(room)


def play_card(room, actor_id, card_index, chosen_color=None):
    outcome = room.play_card(actor_id, card_index, chosen_color)
    if outcome.winner is None:
        refresh(room)
        return outcome

    emit_to_room(room, 'gameOver', outcome.result)
    broadcast_state(room)
    broadcast_roster(room)
    current_app.logger.info(
        f"[game-over] room={room.code} winner={outcome.winner.name} score={outcome.result['score']}"
    )
    record_result(room, outcome.result)
    return outcome


def draw_card(room, actor_id):
    outcome = room.draw_card(actor_id)
    player = room.get_player(actor_id)
    if outcome.playable:
        notify(room, f"{player.name} drew a card")
    else:
        notify(room, f"{player.name} drew and passed.")
    refresh(room)
    return outcome


def pass_turn(room, actor_id) -> None:
    room.pass_turn(actor_id)
    notify(room, f"{room.get_player(actor_id).name} passed.")
    refresh(room)


def say_uno(room, actor_id) -> None:
    player = room.say_uno(actor_id)
    notify(room, f"{player.name} said UNO!")
    refresh(room)


def catch_uno(room, target_id) -> None:
    target = room.catch_uno(target_id)
    notify(room, f"{target.name} caught not saying UNO! Drawn 2 cards.")
    broadcast_roster(room)
    refresh(room)


def send_snapshot(room, player) -> None:
    """Bring one (re)connected seat up to date."""
    if room.status in (PLAYING, ENDED):
        socketio.emit('gameStateUpdate', room.state_for(player), to=player.id, namespace=NAMESPACE)
    socketio.emit('playerListUpdate', room.roster(), to=player.id, namespace=NAMESPACE)
