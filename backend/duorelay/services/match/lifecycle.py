import logging
from typing import List

logger = logging.getLogger(__name__)


def handle_connection_closed(connection_id: str, queue, store, broadcaster) -> List[str]:
    """Clean up after a dropped connection.

    Removes it from the waiting slot, then ends every session it was part
    of, telling the remaining participant who won. Returns the removed
    session ids.
    """
    queue.remove_if_waiting(connection_id)

    removed = []
    for session in store.find_by_connection(connection_id):
        leaving = session.slot_of(connection_id)
        remaining = session.participant(leaving.other)
        broadcaster.send(remaining.channel, 'opponent-disconnected', {
            'winner': leaving.other.label,
        })
        store.remove(session.id)
        removed.append(session.id)
        logger.info(f"[session-removed] session={session.id} left={leaving.label}")
    return removed
