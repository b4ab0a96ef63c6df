"""
Room state machine for the Atlas game

A Room owns one game's players, turn pointer, play history and letter in play.
Every rejected operation raises GameRuleError before touching any state, so a
failed call never leaves the room half-updated.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from atlas.core.errors import ErrorCode, GameRuleError
from atlas.place_validator import PlaceValidator

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class Player:
    """A connected participant. Unique within a room by connection_id."""
    connection_id: str
    username: str
    score: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.connection_id,
            'username': self.username,
            'score': self.score
        }


@dataclass(frozen=True)
class HistoryEntry:
    """One accepted play."""
    player: str
    place: str
    timestamp: int = field(default_factory=_now_ms)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'player': self.player,
            'place': self.place,
            'timestamp': self.timestamp
        }


class Room:
    """One game instance: LOBBY until started, then IN_PROGRESS until everyone leaves."""

    def __init__(self, room_id: str, place_validator: PlaceValidator,
                 max_players: int = 0, host_only_start: bool = False):
        """
        Args:
            room_id: Identifier assigned by the registry
            place_validator: Oracle for place-name validity
            max_players: Player cap, 0 for unlimited
            host_only_start: Restrict start() to the room's host
        """
        self.room_id = room_id
        self.place_validator = place_validator
        self.max_players = max_players
        self.host_only_start = host_only_start

        self.players: List[Player] = []
        self.history: List[HistoryEntry] = []
        self.current_player_index = 0
        self.letter_in_play = ''
        self.started = False
        self.host_id: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.players

    @property
    def current_player(self) -> Optional[Player]:
        if not self.players:
            return None
        return self.players[self.current_player_index]

    def find_player_index(self, connection_id: str) -> int:
        """Index of the player owning ``connection_id``, or -1."""
        for index, player in enumerate(self.players):
            if player.connection_id == connection_id:
                return index
        return -1

    def get_player(self, connection_id: str) -> Optional[Player]:
        index = self.find_player_index(connection_id)
        return self.players[index] if index != -1 else None

    def add_player(self, connection_id: str, username: str) -> Player:
        """
        Append a new player at the end of the turn order.

        Raises:
            GameRuleError: GAME_ALREADY_STARTED, ROOM_FULL or ALREADY_IN_ROOM
        """
        if self.started:
            raise GameRuleError(ErrorCode.GAME_ALREADY_STARTED, 'Game already started')

        if self.max_players and len(self.players) >= self.max_players:
            raise GameRuleError(
                ErrorCode.ROOM_FULL,
                'Room is full',
                {'max_players': self.max_players}
            )

        if self.find_player_index(connection_id) != -1:
            raise GameRuleError(ErrorCode.ALREADY_IN_ROOM, 'You are already in this room')

        player = Player(connection_id=connection_id, username=username)
        self.players.append(player)
        if self.host_id is None:
            self.host_id = connection_id
        logger.info(f"Player {username} ({connection_id}) joined room {self.room_id}")
        return player

    def start(self, connection_id: Optional[str] = None) -> bool:
        """
        Start the game.

        Returns:
            True if the room was started by this call, False if it was already running

        Raises:
            GameRuleError: NOT_HOST when host-only start is enabled
        """
        if self.host_only_start and connection_id != self.host_id:
            raise GameRuleError(ErrorCode.NOT_HOST, 'Only the room host can start the game')

        # A running game keeps its letter in play and turn
        if self.started:
            return False

        self.started = True
        self.letter_in_play = ''
        logger.info(f"Game started in room {self.room_id} with {len(self.players)} players")
        return True

    def submit(self, connection_id: str, place_name: str) -> HistoryEntry:
        """
        Play ``place_name`` on behalf of ``connection_id``.

        Checks run in a fixed order and the first failure is reported:
        turn, place validity, starting letter, duplicate.

        Raises:
            GameRuleError: NOT_YOUR_TURN, INVALID_PLACE, WRONG_LETTER or ALREADY_USED
        """
        player = self.current_player
        if player is None or player.connection_id != connection_id:
            raise GameRuleError(ErrorCode.NOT_YOUR_TURN, 'Not your turn')

        place_name = place_name.strip()

        if not self.place_validator.is_valid(place_name):
            raise GameRuleError(
                ErrorCode.INVALID_PLACE,
                'Invalid place name',
                {'place': place_name}
            )

        if self.letter_in_play and place_name[:1].lower() != self.letter_in_play.lower():
            raise GameRuleError(
                ErrorCode.WRONG_LETTER,
                f"Place name must start with '{self.letter_in_play}'",
                {'letter_in_play': self.letter_in_play}
            )

        lowered = place_name.lower()
        if any(entry.place.lower() == lowered for entry in self.history):
            raise GameRuleError(
                ErrorCode.ALREADY_USED,
                'This place has already been used',
                {'place': place_name}
            )

        entry = HistoryEntry(player=player.username, place=place_name)
        self.letter_in_play = place_name[-1].upper()
        self.history.append(entry)
        player.score += 1
        self.current_player_index = (self.current_player_index + 1) % len(self.players)

        logger.info(f"Player {player.username} played {place_name} in room {self.room_id}, "
                    f"next letter {self.letter_in_play}")
        return entry

    def remove_player(self, connection_id: str) -> Optional[Player]:
        """
        Remove a player and repair the turn pointer.

        When the removed index is at or before the pointer (and the pointer is
        not already 0) the pointer moves back by one; otherwise it stays put.

        Returns:
            The removed Player, or None if the connection was not a member
        """
        index = self.find_player_index(connection_id)
        if index == -1:
            return None

        player = self.players.pop(index)

        if index <= self.current_player_index and self.current_player_index > 0:
            self.current_player_index -= 1

        if self.host_id == connection_id:
            self.host_id = self.players[0].connection_id if self.players else None

        logger.info(f"Player {player.username} ({connection_id}) left room {self.room_id}")
        return player

    def to_dict(self) -> Dict[str, Any]:
        """Full snapshot in the shape clients expect."""
        return {
            'roomId': self.room_id,
            'players': [player.to_dict() for player in self.players],
            'history': [entry.to_dict() for entry in self.history],
            'currentPlayerIndex': self.current_player_index,
            'letterInPlay': self.letter_in_play,
            'started': self.started,
            'hostId': self.host_id
        }
