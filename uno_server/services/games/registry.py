import logging
import random
import string
import threading
import uuid
from typing import Dict, Optional, Tuple

from .errors import AlreadySeated, GameInProgress, NameTaken, RoomFull, RoomNotFound
from .room import Player, Room, WAITING

logger = logging.getLogger(__name__)

BOT_NAMES = ('Ada', 'Grace', 'Linus', 'Alan', 'Barbara', 'Dennis')
AI_MODE_BOTS = 3


class RoomRegistry:
    """Process-wide index of live rooms and of which connection sits where.

    The index lock only guards the two dicts; room state is guarded by each
    room's own lock.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.capacity = 6
        self.hand_size = 7
        self.min_players = 2
        self.code_length = 6
        self._rooms: Dict[str, Room] = {}
        self._conn_to_code: Dict[str, str] = {}
        self._lock = threading.Lock()

    def init_app(self, app) -> None:
        self.capacity = int(app.config.get('ROOM_CAPACITY', 6))
        self.hand_size = int(app.config.get('HAND_SIZE', 7))
        self.min_players = int(app.config.get('MIN_PLAYERS', 2))
        self.code_length = int(app.config.get('ROOM_CODE_LENGTH', 6))
        app.extensions['uno_registry'] = self

    def clear(self) -> None:
        with self._lock:
            self._rooms.clear()
            self._conn_to_code.clear()

    def __len__(self):
        return len(self._rooms)

    def _generate_code(self) -> str:
        # Called with the index lock held, so a free code stays free until inserted
        alphabet = string.ascii_uppercase + string.digits
        while True:
            code = ''.join(self.rng.choices(alphabet, k=self.code_length))
            if code not in self._rooms:
                return code

    # ---- lookups ----

    def find(self, code) -> Optional[Room]:
        if not code:
            return None
        with self._lock:
            return self._rooms.get(str(code).strip().upper())

    def get(self, code) -> Room:
        room = self.find(code)
        if room is None:
            raise RoomNotFound()
        return room

    def room_for(self, conn_id) -> Optional[Room]:
        with self._lock:
            code = self._conn_to_code.get(conn_id)
            return self._rooms.get(code) if code else None

    def _bind(self, conn_id, code) -> None:
        with self._lock:
            self._conn_to_code[conn_id] = code

    # ---- lifecycle ----

    def create_room(self, conn_id, host_name, ai_mode=False) -> Room:
        with self._lock:
            if conn_id in self._conn_to_code:
                raise AlreadySeated()
            code = self._generate_code()
            room = Room(code, capacity=self.capacity, hand_size=self.hand_size,
                        min_players=self.min_players, rng=random.Random(self.rng.random()))
            # Seated before it is indexed, so a failed setup leaves nothing behind
            room.add_player(Player(id=conn_id, name=host_name))
            if ai_mode:
                for _ in range(AI_MODE_BOTS):
                    self._seat_bot(room)
            self._rooms[code] = room
            self._conn_to_code[conn_id] = code
        logger.info(f"[room-create] room={code} host={host_name} ai_mode={bool(ai_mode)}")
        return room

    def join_room(self, conn_id, name, code) -> Tuple[Room, bool]:
        """Seat ``name`` in room ``code``.

        Returns ``(room, reconnected)``. A name held by a disconnected player
        is a reconnection: that seat is rebound to ``conn_id`` in place. A
        connection holds at most one seat across all rooms.
        """
        if self.room_for(conn_id) is not None:
            raise AlreadySeated()
        room = self.get(code)
        with room.lock:
            if room.get_player(conn_id) is not None:
                raise AlreadySeated()
            existing = room.get_player_by_name(name)
            if existing is not None:
                if existing.connected:
                    raise NameTaken()
                old_id = existing.id
                room.reconnect(existing, conn_id)
                with self._lock:
                    self._conn_to_code.pop(old_id, None)
                    self._conn_to_code[conn_id] = room.code
                logger.info(f"[room-reconnect] room={room.code} name={name}")
                return room, True
            if room.status != WAITING:
                raise GameInProgress()
            if len(room.players) >= room.capacity:
                raise RoomFull()
            room.add_player(Player(id=conn_id, name=name))
        self._bind(conn_id, room.code)
        logger.info(f"[room-join] room={room.code} name={name} players={len(room.players)}")
        return room, False

    def add_bot(self, code) -> Player:
        room = self.get(code)
        with room.lock:
            if room.status != WAITING:
                raise GameInProgress()
            if len(room.players) >= room.capacity:
                raise RoomFull()
            return self._seat_bot(room)

    def _seat_bot(self, room: Room) -> Player:
        taken = {p.name for p in room.players}
        name = next((n for n in BOT_NAMES if n not in taken), None)
        while name is None or name in taken:
            name = f"Bot-{self.rng.randint(100, 999)}"
        bot = Player(id=f"bot-{uuid.uuid4().hex[:8]}", name=name, is_bot=True)
        room.add_player(bot)
        logger.info(f"[room-bot] room={room.code} name={name}")
        return bot

    def disconnect(self, conn_id) -> Optional[Room]:
        """Mark the seat bound to ``conn_id`` as offline. Hand and turn order are kept."""
        with self._lock:
            code = self._conn_to_code.pop(conn_id, None)
            room = self._rooms.get(code) if code else None
        if room is None:
            return None
        with room.lock:
            player = room.get_player(conn_id)
            if player is None:
                return None
            player.connected = False
        logger.info(f"[room-disconnect] room={room.code} name={player.name} status={room.status}")
        return room

    def remove(self, code) -> Optional[Room]:
        with self._lock:
            room = self._rooms.pop(code, None)
            if room is not None:
                for conn_id in [c for c, rc in self._conn_to_code.items() if rc == code]:
                    del self._conn_to_code[conn_id]
        if room is not None:
            logger.info(f"[room-retire] room={code}")
        return room
