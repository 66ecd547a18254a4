"""In-memory match records.

Nothing here is persisted; records live for as long as the process does.
"""
import enum
from dataclasses import dataclass, field
from typing import List, Optional

STARTING_LIVES = 3
LEVEL_COUNT = 5
COLLECTIBLE_COUNT = 12


class Slot(enum.Enum):
    A = 'player1'
    B = 'player2'

    @property
    def label(self) -> str:
        return self.value

    @property
    def other(self) -> 'Slot':
        return Slot.B if self is Slot.A else Slot.A


@dataclass(frozen=True)
class Participant:
    connection_id: str
    channel: str
    nickname: str
    character: str

    def profile(self):
        return {'nickname': self.nickname, 'character': self.character}


# A waiting entry carries exactly what a participant will
WaitingEntry = Participant


@dataclass
class Position:
    x: float
    y: float
    vel_x: float = 0
    anim: str = 'turn'

    def to_dict(self):
        return {'x': self.x, 'y': self.y, 'velX': self.vel_x, 'anim': self.anim}


@dataclass(frozen=True)
class Hazard:
    x: int
    y: int
    vel_x: int

    def to_dict(self):
        return {'x': self.x, 'y': self.y, 'velX': self.vel_x}


def _fresh_collectibles() -> List[bool]:
    return [True] * COLLECTIBLE_COUNT


@dataclass
class MatchState:
    lives_a: int = STARTING_LIVES
    lives_b: int = STARTING_LIVES
    pos_a: Position = field(default_factory=lambda: Position(x=100, y=450))
    pos_b: Position = field(default_factory=lambda: Position(x=700, y=450))
    current_level: int = 0
    collectibles: List[bool] = field(default_factory=_fresh_collectibles)
    hazards: List[Hazard] = field(default_factory=list)
    game_over: bool = False
    winner: Optional[Slot] = None

    def lives(self, slot: Slot) -> int:
        return self.lives_a if slot is Slot.A else self.lives_b

    def set_lives(self, slot: Slot, value: int) -> None:
        if slot is Slot.A:
            self.lives_a = value
        else:
            self.lives_b = value

    def set_position(self, slot: Slot, position: Position) -> None:
        if slot is Slot.A:
            self.pos_a = position
        else:
            self.pos_b = position

    def remaining_collectibles(self) -> int:
        return sum(1 for flag in self.collectibles if flag)

    def reset_collectibles(self) -> None:
        self.collectibles = _fresh_collectibles()

    def lives_payload(self):
        return {'player1Lives': self.lives_a, 'player2Lives': self.lives_b}


@dataclass
class Session:
    id: str
    participant_a: Participant
    participant_b: Participant
    state: MatchState = field(default_factory=MatchState)

    def __post_init__(self):
        if self.participant_a.connection_id == self.participant_b.connection_id:
            raise ValueError('a session needs two distinct connections')

    def participant(self, slot: Slot) -> Participant:
        return self.participant_a if slot is Slot.A else self.participant_b

    def slot_of(self, connection_id: str) -> Optional[Slot]:
        if self.participant_a.connection_id == connection_id:
            return Slot.A
        if self.participant_b.connection_id == connection_id:
            return Slot.B
        return None

    def has(self, connection_id: str) -> bool:
        return self.slot_of(connection_id) is not None

    def channels(self):
        return (self.participant_a.channel, self.participant_b.channel)
