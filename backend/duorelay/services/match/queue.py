import logging
from typing import Optional

from duorelay.models import Participant, Session, WaitingEntry

logger = logging.getLogger(__name__)


class MatchmakingQueue:
    """Single waiting slot that pairs the next seeker into a session."""

    def __init__(self, store, broadcaster):
        self.store = store
        self.broadcaster = broadcaster
        self.waiting: Optional[WaitingEntry] = None

    def __len__(self):
        return 1 if self.waiting else 0

    def is_waiting(self, connection_id: str) -> bool:
        return self.waiting is not None and self.waiting.connection_id == connection_id

    def seek(self, seeker: Participant) -> Optional[Session]:
        """Pair ``seeker`` with whoever is waiting, or make it the waiting entry.

        Returns the new session when a pair was made. A seeker never pairs
        with its own waiting entry; re-seeking just refreshes its profile.
        A connection already playing in a live session is not queued again.
        """
        if self.store.find_by_connection(seeker.connection_id):
            logger.info(f"[seek-ignored] sid={seeker.connection_id} reason=in-session")
            return None

        waiting = self.waiting
        if waiting is None or waiting.connection_id == seeker.connection_id:
            self.waiting = seeker
            logger.info(f"[seek-wait] sid={seeker.connection_id} nickname={seeker.nickname!r}")
            return None

        self.waiting = None
        session = self.store.add(Session(
            id=self.store.new_id(),
            participant_a=waiting,
            participant_b=seeker,
        ))
        self._notify_match_found(session)
        logger.info(
            f"[match-created] session={session.id} "
            f"player1={waiting.nickname!r} player2={seeker.nickname!r}"
        )
        return session

    def _notify_match_found(self, session: Session) -> None:
        for me, opponent, is_player1 in (
            (session.participant_a, session.participant_b, True),
            (session.participant_b, session.participant_a, False),
        ):
            self.broadcaster.send(me.channel, 'match-found', {
                'sessionId': session.id,
                'isPlayer1': is_player1,
                'opponent': opponent.profile(),
                'myCharacter': me.character,
            })

    def cancel(self, connection_id: str) -> bool:
        """Drop the waiting entry if it belongs to ``connection_id``."""
        if not self.is_waiting(connection_id):
            return False
        self.waiting = None
        logger.info(f"[seek-cancel] sid={connection_id}")
        return True

    def remove_if_waiting(self, connection_id: str) -> bool:
        # Disconnect path; same effect as cancel without the log line
        if not self.is_waiting(connection_id):
            return False
        self.waiting = None
        return True
