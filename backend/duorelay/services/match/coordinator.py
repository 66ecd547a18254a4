import random
import threading
from typing import Optional

from duorelay.models import Participant
from .lifecycle import handle_connection_closed
from .queue import MatchmakingQueue
from .rules import MatchRules
from .store import SessionStore


class MatchCoordinator:
    """Owns the waiting slot and the session map for one app.

    Every entry point runs under one lock so events apply one at a time,
    whichever async mode Socket.IO runs in.
    """

    def __init__(self, broadcaster, rng: Optional[random.Random] = None,
                 game_over_guard: bool = True):
        rng = rng or random.Random()
        self.broadcaster = broadcaster
        self.store = SessionStore(rng=rng)
        self.queue = MatchmakingQueue(self.store, broadcaster)
        self.rules = MatchRules(self.store, broadcaster, rng=rng,
                                game_over_guard=game_over_guard)
        self._lock = threading.RLock()

    def seek(self, connection_id, channel, nickname, character):
        seeker = Participant(connection_id=connection_id, channel=channel,
                             nickname=nickname, character=character)
        with self._lock:
            return self.queue.seek(seeker)

    def cancel(self, connection_id):
        with self._lock:
            return self.queue.cancel(connection_id)

    def update_position(self, session_id, connection_id, x, y, vel_x, anim):
        with self._lock:
            return self.rules.apply_position_update(session_id, connection_id, x, y, vel_x, anim)

    def collect(self, session_id, index, player_x):
        with self._lock:
            return self.rules.apply_collect(session_id, index, player_x)

    def hit(self, session_id, connection_id, hazard_index):
        with self._lock:
            return self.rules.apply_hit(session_id, connection_id, hazard_index)

    def disconnect(self, connection_id):
        with self._lock:
            return handle_connection_closed(connection_id, self.queue, self.store, self.broadcaster)

    def stats(self):
        with self._lock:
            return {'waiting': len(self.queue), 'active_sessions': len(self.store)}
