"""Error taxonomy shared by the HTTP routes and socket handlers.

Every error is local to one operation: raised before any state is
touched, surfaced to the caller, never retried.
"""


class GameError(Exception):
    status_code = 400
    error_code = 'game_error'
    default_message = 'Invalid request'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {'error': self.message, 'code': self.error_code}


# ---- input validation ----

class InvalidMove(GameError):
    error_code = 'invalid_move'
    default_message = 'Row and column must be 0-8 and value 0-9'


class CellIsGiven(InvalidMove):
    error_code = 'cell_is_given'
    default_message = 'Given cells cannot be modified'


class InvalidDifficulty(GameError):
    error_code = 'invalid_difficulty'
    default_message = 'Unknown difficulty'


class GameAlreadyCompleted(GameError):
    error_code = 'game_completed'
    default_message = 'This game is already over'


class HintsDisabled(GameError):
    error_code = 'hints_disabled'
    default_message = 'Hints are disabled for this game'


class TimeLimitExceeded(GameError):
    error_code = 'time_limit_exceeded'
    default_message = 'Time is up'


class AlreadyStarted(GameError):
    error_code = 'already_started'
    default_message = 'The match has already started'


class RoomFull(GameError):
    error_code = 'room_full'
    default_message = 'Room is full'


class AlreadyJoined(GameError):
    error_code = 'already_joined'
    default_message = 'You are already in this room'


class NotEnoughPlayers(GameError):
    error_code = 'not_enough_players'
    default_message = 'Not enough players to start'


class RoomNotActive(GameError):
    error_code = 'room_not_active'
    default_message = 'The match is not active'


class PlayerEliminated(GameError):
    error_code = 'player_eliminated'
    default_message = 'You have been eliminated'


# ---- resource not found ----

class GameNotFound(GameError):
    status_code = 404
    error_code = 'game_not_found'
    default_message = 'Game not found'


class LevelNotFound(GameError):
    status_code = 404
    error_code = 'level_not_found'
    default_message = 'Tournament level not found'


class RoomNotFound(GameError):
    status_code = 404
    error_code = 'room_not_found'
    default_message = 'Room not found'


class PlayerNotFound(GameError):
    status_code = 404
    error_code = 'player_not_found'
    default_message = 'You are not a player in this room'


# ---- authorization ----

class NotHost(GameError):
    status_code = 403
    error_code = 'not_host'
    default_message = 'Only the host can start the match'


class LevelLocked(GameError):
    status_code = 403
    error_code = 'level_locked'
    default_message = 'This level is still locked'


# ---- generation exhaustion ----

class RoomCodeExhausted(GameError):
    status_code = 500
    error_code = 'room_code_exhausted'
    default_message = 'Could not generate a unique room code'
