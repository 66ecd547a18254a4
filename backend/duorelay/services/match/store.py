import random
import string
from typing import Dict, List, Optional

from duorelay.models import Session


class SessionStore:
    """Live sessions keyed by session id."""

    def __init__(self, rng: Optional[random.Random] = None):
        self._sessions: Dict[str, Session] = {}
        self._rng = rng or random.Random()

    def __len__(self):
        return len(self._sessions)

    def new_id(self, length: int = 8) -> str:
        """Generate a session id not held by any live session."""
        while True:
            token = ''.join(self._rng.choices(string.ascii_lowercase + string.digits, k=length))
            session_id = f"game_{token}"
            if session_id not in self._sessions:
                return session_id

    def add(self, session: Session) -> Session:
        if session.id in self._sessions:
            raise KeyError(f"session {session.id} already exists")
        self._sessions[session.id] = session
        return session

    def get(self, session_id) -> Optional[Session]:
        if not isinstance(session_id, str):
            return None
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> Optional[Session]:
        return self._sessions.pop(session_id, None)

    def find_by_connection(self, connection_id: str) -> List[Session]:
        return [s for s in self._sessions.values() if s.has(connection_id)]
