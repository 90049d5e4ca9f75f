"""Errors raised by the room services.

Handlers turn a ``GameError`` into an ``error`` event for the caller.
``SilentRejection`` subclasses (out-of-turn and illegal moves) are dropped
without any reply.
"""


class GameError(Exception):
    message = 'Something went wrong'

    def __init__(self, message=None):
        super().__init__(message or self.message)


class RoomNotFound(GameError):
    message = 'Room not found'


class NameTaken(GameError):
    message = 'Name already taken and player is online'


class GameInProgress(GameError):
    message = 'Game has already started'


class RoomFull(GameError):
    message = 'Room is full'


class AlreadySeated(GameError):
    message = 'You are already seated in a room'


class NotEnoughPlayers(GameError):
    message = 'At least 2 players are required to start'


class DeckExhausted(GameError):
    message = 'Not enough cards left to deal'


class SilentRejection(GameError):
    pass


class NotYourTurn(SilentRejection):
    message = 'Not your turn'


class IllegalCard(SilentRejection):
    message = 'Card cannot be played'
