from functools import wraps
from typing import Dict

from flask import current_app, request
from flask_socketio import emit, join_room
from uno_server import registry, socketio
from uno_server.services.games import actions
from uno_server.services.games.errors import GameError, NotYourTurn, SilentRejection
import time


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _as_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def game_event(handler):
    """Run a handler, turning room errors into an ``error`` event for the caller.

    Out-of-turn and illegal moves are dropped without any reply.
    """
    @wraps(handler)
    def wrapper(data=None):
        try:
            return handler(data if isinstance(data, dict) else {})
        except SilentRejection as exc:
            current_app.logger.debug(f"[rejected] sid={_get_sid()} event={handler.__name__} reason={exc}")
        except GameError as exc:
            emit('error', {'message': str(exc)})
    return wrapper


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(*args):
    sid = _get_sid()
    room = registry.disconnect(sid)
    if room is None:
        return
    with room.lock:
        actions.broadcast_roster(room)
        idle = not room.has_connected_humans()
    if idle:
        _schedule_retire_if_idle(current_app._get_current_object(), room.code)


@game_event
def handle_create_room(data):
    name = str(data.get('name') or '').strip() or 'Anonymous'
    room = registry.create_room(_get_sid(), name, ai_mode=bool(data.get('aiMode')))
    join_room(room.code)
    emit('roomCreated', {'roomCode': room.code, 'name': name})
    with room.lock:
        actions.broadcast_roster(room)


@game_event
def handle_join_room(data):
    name = str(data.get('name') or '').strip() or 'Anonymous'
    code = str(data.get('roomCode') or '').strip().upper()
    current_app.logger.info(f"[join-attempt] name={name} room={code} sid={_get_sid()}")
    room, reconnected = registry.join_room(_get_sid(), name, code)
    join_room(room.code)
    _cancel_scheduled_retire(room.code)
    emit('roomJoined', {'roomCode': room.code})
    with room.lock:
        if reconnected:
            actions.send_snapshot(room, room.get_player(_get_sid()))
            actions.broadcast_roster(room)
            actions.refresh(room)
        else:
            actions.broadcast_roster(room)


@game_event
def handle_add_bot(data):
    room = registry.get(data.get('roomCode'))
    registry.add_bot(room.code)
    with room.lock:
        actions.broadcast_roster(room)


@game_event
def handle_start_game(data):
    room = registry.get(data.get('roomCode'))
    with room.lock:
        actions.start_game(room, _get_sid())


@game_event
def handle_restart_game(data):
    room = registry.get(data.get('roomCode'))
    with room.lock:
        actions.restart_game(room, _get_sid())


@game_event
def handle_play_card(data):
    room = registry.get(data.get('roomCode'))
    with room.lock:
        actions.play_card(room, _get_sid(), _as_int(data.get('cardIndex')), data.get('chosenColor'))


@game_event
def handle_draw_card(data):
    room = registry.get(data.get('roomCode'))
    with room.lock:
        actions.draw_card(room, _get_sid())


@game_event
def handle_pass_turn(data):
    room = registry.get(data.get('roomCode'))
    with room.lock:
        actions.pass_turn(room, _get_sid())


@game_event
def handle_say_uno(data):
    room = registry.get(data.get('roomCode'))
    with room.lock:
        actions.say_uno(room, _get_sid())


@game_event
def handle_catch_uno(data):
    room = registry.get(data.get('roomCode'))
    with room.lock:
        if room.get_player(_get_sid()) is None:
            raise NotYourTurn()
        actions.catch_uno(room, data.get('targetId'))


@game_event
def handle_sync_game_state(data):
    room = registry.get(data.get('roomCode'))
    with room.lock:
        player = room.get_player(_get_sid())
        if player is not None:
            emit('gameStateUpdate', room.state_for(player))
            emit('playerListUpdate', room.roster())
        else:
            emit('roomStateForNewcomer', {
                'status': room.status,
                'players': room.roster(),
                'isPlayer': False,
            })

# ---- Idle room retirement ----

_retire_deadline: Dict[str, float] = {}

def _retire(code: str) -> None:
    room = registry.find(code)
    _retire_deadline.pop(code, None)
    if room is None:
        return
    with room.lock:
        if room.has_connected_humans():
            return
    registry.remove(code)

def _schedule_retire_if_idle(app, code: str) -> None:
    grace = float(app.config.get('ROOM_IDLE_GRACE_SEC', 60))
    if grace <= 0:
        _retire(code)
        return
    if app.config.get('TESTING'):
        return
    _retire_deadline[code] = time.time() + grace

    def _runner(room_code: str, deadline: float):
        sleep_for = max(0.0, deadline - time.time())
        if sleep_for:
            socketio.sleep(sleep_for)
        if _retire_deadline.get(room_code) == deadline:
            _retire(room_code)

    socketio.start_background_task(_runner, code, _retire_deadline[code])

def _cancel_scheduled_retire(code: str) -> None:
    _retire_deadline.pop(code, None)


EVENTS = {
    'connect': handle_connect,
    'disconnect': handle_disconnect,
    'createRoom': handle_create_room,
    'joinRoom': handle_join_room,
    'addBot': handle_add_bot,
    'startGame': handle_start_game,
    'restartGame': handle_restart_game,
    'playCard': handle_play_card,
    'drawCard': handle_draw_card,
    'passTurn': handle_pass_turn,
    'sayUno': handle_say_uno,
    'catchUno': handle_catch_uno,
    'syncGameState': handle_sync_game_state,
}


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on the default namespace."""
    for event, handler in EVENTS.items():
        socketio.on_event(event, handler, namespace=actions.NAMESPACE)
