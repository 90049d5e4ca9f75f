import random
from typing import List, Set, Tuple

from uno_server import registry, socketio
from . import bots
from .room import PLAYING


_scheduled_turn_keys: Set[Tuple[str, int]] = set()
_rng = random.Random()


def schedule_bot_turn(app, room) -> None:
    """Schedule the next bot move if the turn now belongs to a bot.

    - Caller holds the room lock
    - One timer per (room code, generation); any later mutation makes it stale
    - In TESTING mode only the key is recorded unless ENABLE_BOTS_IN_TESTS is set,
      so tests can fire turns themselves with ``run_bot_turn``
    """
    if room.status != PLAYING:
        return
    bot = room.current_player
    if bot is None or not bot.is_bot:
        return

    key = (room.code, room.generation)
    if key in _scheduled_turn_keys:
        app.logger.info(f"[bot-skip] room={room.code} gen={room.generation} already scheduled")
        return
    _scheduled_turn_keys.add(key)

    delay = float(app.config.get('BOT_THINK_DELAY_SEC', 1.5))
    app.logger.info(f"[bot-set] room={room.code} gen={room.generation} bot={bot.name} delay={delay}s")

    if app.config.get('TESTING') and not app.config.get('ENABLE_BOTS_IN_TESTS'):
        return
    socketio.start_background_task(_worker, app, room.code, room.generation, delay)


def _worker(app, code: str, generation: int, delay: float) -> None:
    socketio.sleep(delay)
    run_bot_turn(app, code, generation)


def run_bot_turn(app, code: str, generation: int) -> bool:
    """Fire a scheduled bot turn. Returns False when the premise went stale."""
    _scheduled_turn_keys.discard((code, generation))
    with app.app_context():
        room = registry.find(code)
        if room is None:
            app.logger.info(f"[bot-abort] room={code} gen={generation} room gone")
            return False
        with room.lock:
            bot = room.current_player
            if room.status != PLAYING or room.generation != generation or bot is None or not bot.is_bot:
                app.logger.info(
                    f"[bot-abort] room={code} expected_gen={generation} actual_gen={room.generation} status={room.status}"
                )
                return False
            did = bots.take_turn(
                room,
                bot,
                uno_call_probability=float(app.config.get('BOT_UNO_CALL_PROBABILITY', 0.9)),
                rng=_rng,
            )
            app.logger.info(f"[bot-fire] room={code} gen={generation} bot={bot.name} action={did}")
            return True


def pending_bot_turns(code: str) -> List[int]:
    """Generations with a bot turn still waiting to fire for room ``code``."""
    return sorted(g for c, g in _scheduled_turn_keys if c == code)


def clear_pending() -> None:
    _scheduled_turn_keys.clear()
