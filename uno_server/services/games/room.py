"""A single game room: the aggregate every event mutates.

Callers must hold ``room.lock`` for the whole validate, mutate and broadcast
cycle. Rejections are raised before anything is touched, so a failed call
never leaves a room half-updated.
"""

import logging
import random
import threading
import time
from dataclasses import dataclass, field
from typing import List, Optional

from . import engine
from .cards import Card, Deck
from .errors import GameInProgress, IllegalCard, NotEnoughPlayers, NotYourTurn, RoomFull
from .scoring import compute_score

logger = logging.getLogger(__name__)

WAITING = 'waiting'
PLAYING = 'playing'
ENDED = 'ended'


@dataclass
class Player:
    id: str
    name: str
    hand: List[Card] = field(default_factory=list)
    said_uno: bool = False
    connected: bool = True
    is_bot: bool = False

    def to_dict(self):
        """Public view of a seat. Never includes the hand."""
        return {
            'id': self.id,
            'name': self.name,
            'cardCount': len(self.hand),
            'saidUno': self.said_uno,
            'connected': self.connected,
            'isBot': self.is_bot,
        }


@dataclass
class PlayOutcome:
    card: Card
    winner: Optional[Player] = None
    result: Optional[dict] = None


@dataclass
class DrawOutcome:
    card: Optional[Card]
    playable: bool


class Room:
    def __init__(self, code: str, capacity: int = 6, hand_size: int = 7,
                 min_players: int = 2, rng: Optional[random.Random] = None):
        self.code = code
        self.capacity = capacity
        self.hand_size = hand_size
        self.min_players = min_players
        self.players: List[Player] = []
        self.deck = Deck(rng)
        self.discard_pile: List[Card] = []
        self.current_player_index = 0
        self.direction = 1
        self.current_color: Optional[str] = None
        self.status = WAITING
        self.winner: Optional[str] = None
        self.last_result: Optional[dict] = None
        self.generation = 0
        self.created_at = time.time()
        self.started_at: Optional[float] = None
        self.lock = threading.RLock()

    # ---- lookups ----

    @property
    def host(self) -> Optional[Player]:
        return self.players[0] if self.players else None

    @property
    def current_player(self) -> Optional[Player]:
        if self.status == WAITING or not self.players:
            return None
        return self.players[self.current_player_index]

    @property
    def top_card(self) -> Optional[Card]:
        return self.discard_pile[-1] if self.discard_pile else None

    def get_player(self, player_id) -> Optional[Player]:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def get_player_by_name(self, name) -> Optional[Player]:
        for p in self.players:
            if p.name == name:
                return p
        return None

    def has_connected_humans(self) -> bool:
        return any(p.connected and not p.is_bot for p in self.players)

    def card_total(self) -> int:
        return len(self.deck) + len(self.discard_pile) + sum(len(p.hand) for p in self.players)

    def touch(self) -> None:
        """Mark a mutation. Pending bot turns scheduled before this become stale."""
        self.generation += 1

    # ---- seating ----

    def add_player(self, player: Player) -> Player:
        if self.status != WAITING:
            raise GameInProgress()
        if len(self.players) >= self.capacity:
            raise RoomFull()
        self.players.append(player)
        self.touch()
        return player

    def reconnect(self, player: Player, new_id: str) -> None:
        player.id = new_id
        player.connected = True
        self.touch()

    # ---- game flow ----

    def start(self, actor_id) -> Card:
        if self.status != WAITING or not self.host or self.host.id != actor_id:
            raise NotYourTurn()
        if len(self.players) < self.min_players:
            raise NotEnoughPlayers(f"At least {self.min_players} players are required to start")
        return self._begin()

    def restart(self, actor_id) -> Card:
        if self.status != ENDED or not self.host or self.host.id != actor_id:
            raise NotYourTurn()
        return self._begin()

    def _begin(self) -> Card:
        first = engine.deal(self, self.hand_size)
        self.status = PLAYING
        self.winner = None
        self.last_result = None
        self.started_at = time.time()
        self.touch()
        logger.info(
            f"[room-start] room={self.code} players={len(self.players)} first={first} "
            f"starter={self.players[self.current_player_index].name}"
        )
        return first

    def _require_turn(self, actor_id) -> Player:
        if self.status != PLAYING:
            raise NotYourTurn()
        player = self.current_player
        if player is None or player.id != actor_id:
            raise NotYourTurn()
        return player

    def play_card(self, actor_id, card_index, chosen_color=None) -> PlayOutcome:
        player = self._require_turn(actor_id)
        if not isinstance(card_index, int) or not 0 <= card_index < len(player.hand):
            raise IllegalCard()
        card = player.hand[card_index]
        if not engine.is_legal(card, self.top_card, self.current_color):
            raise IllegalCard()
        if card.is_wild and not engine.valid_wild_color(chosen_color):
            raise IllegalCard('A color must be chosen for a wild card')

        player.hand.pop(card_index)
        self.discard_pile.append(card)
        engine.apply_effect(self, card, chosen_color)
        self.touch()
        outcome = PlayOutcome(card=card)

        if not player.hand:
            self.status = ENDED
            self.winner = player.name
            self.last_result = compute_score(self.players, player)
            outcome.winner = player
            outcome.result = self.last_result
            logger.info(f"[room-win] room={self.code} winner={player.name} score={self.last_result['score']}")
        return outcome

    def draw_card(self, actor_id) -> DrawOutcome:
        player = self._require_turn(actor_id)
        drawn = engine.give_cards(self, player, 1)
        self.touch()
        if not drawn:
            engine.advance_turn(self)
            return DrawOutcome(card=None, playable=False)
        card = drawn[0]
        playable = engine.is_legal(card, self.top_card, self.current_color)
        if not playable:
            engine.advance_turn(self)
        return DrawOutcome(card=card, playable=playable)

    def pass_turn(self, actor_id) -> None:
        self._require_turn(actor_id)
        engine.advance_turn(self)
        self.touch()

    # ---- UNO calls ----

    def say_uno(self, actor_id) -> Player:
        player = self.get_player(actor_id)
        if self.status != PLAYING or player is None or len(player.hand) > 2:
            raise IllegalCard('Cannot call UNO now')
        player.said_uno = True
        self.touch()
        return player

    def catch_uno(self, target_id) -> Player:
        target = self.get_player(target_id)
        if self.status != PLAYING or target is None or len(target.hand) != 1 or target.said_uno:
            raise IllegalCard('Nothing to catch')
        engine.give_cards(self, target, 2)
        self.touch()
        return target

    # ---- views ----

    def roster(self):
        return [p.to_dict() for p in self.players]

    def state_for(self, player: Player):
        """Snapshot for one seat: the full hand of ``player`` and counts for everyone else."""
        top = self.top_card
        current = self.current_player
        return {
            'roomCode': self.code,
            'hand': [c.to_dict() for c in player.hand],
            'opponents': [p.to_dict() for p in self.players if p is not player],
            'discardPile': [c.to_dict() for c in self.discard_pile],
            'topCard': top.to_dict() if top else None,
            'currentColor': self.current_color,
            'currentPlayerName': current.name if current else None,
            'direction': self.direction,
            'saidUno': player.said_uno,
            'status': self.status,
            'deckCount': len(self.deck),
            'isPlayer': True,
        }
