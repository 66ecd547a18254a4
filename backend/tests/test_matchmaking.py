import pytest

from duorelay.models import Participant, Session
from duorelay.services.match.store import SessionStore


def test_first_seeker_waits(coordinator, broadcaster):
    assert coordinator.seek('sid-a', 'sid-a', 'Alice', 'knight') is None
    assert coordinator.queue.is_waiting('sid-a')
    assert len(coordinator.store) == 0
    assert broadcaster.sent == []


def test_second_seeker_pairs_and_notifies_both(coordinator, broadcaster):
    coordinator.seek('sid-a', 'sid-a', 'Alice', 'knight')
    session = coordinator.seek('sid-b', 'sid-b', 'Bob', 'mage')

    assert session is not None
    assert coordinator.queue.waiting is None
    assert coordinator.store.get(session.id) is session
    assert session.participant_a.connection_id == 'sid-a'
    assert session.participant_b.connection_id == 'sid-b'

    assert broadcaster.to('sid-a') == [('match-found', {
        'sessionId': session.id,
        'isPlayer1': True,
        'opponent': {'nickname': 'Bob', 'character': 'mage'},
        'myCharacter': 'knight',
    })]
    assert broadcaster.to('sid-b') == [('match-found', {
        'sessionId': session.id,
        'isPlayer1': False,
        'opponent': {'nickname': 'Alice', 'character': 'knight'},
        'myCharacter': 'mage',
    })]


def test_new_session_has_default_state(paired):
    state = paired.state
    assert (state.lives_a, state.lives_b) == (3, 3)
    assert state.current_level == 0
    assert state.collectibles == [True] * 12
    assert state.hazards == []
    assert state.game_over is False and state.winner is None
    assert (state.pos_a.x, state.pos_a.y, state.pos_a.anim) == (100, 450, 'turn')
    assert (state.pos_b.x, state.pos_b.y) == (700, 450)


def test_reseek_never_pairs_with_itself(coordinator, broadcaster):
    coordinator.seek('sid-a', 'sid-a', 'Alice', 'knight')
    assert coordinator.seek('sid-a', 'sid-a', 'Alicia', 'archer') is None

    assert len(coordinator.store) == 0
    assert coordinator.queue.waiting.connection_id == 'sid-a'
    # profile refreshed in place
    assert coordinator.queue.waiting.nickname == 'Alicia'
    assert coordinator.queue.waiting.character == 'archer'
    assert broadcaster.sent == []


def test_arrival_order_decides_pairs(coordinator):
    coordinator.seek('sid-a', 'sid-a', 'Alice', 'knight')
    first = coordinator.seek('sid-b', 'sid-b', 'Bob', 'mage')
    assert coordinator.seek('sid-c', 'sid-c', 'Cara', 'rogue') is None
    second = coordinator.seek('sid-d', 'sid-d', 'Dan', 'monk')

    assert first.id != second.id
    assert second.participant_a.connection_id == 'sid-c'
    assert second.participant_b.connection_id == 'sid-d'
    assert len(coordinator.store) == 2


def test_cancel_only_by_owner(coordinator):
    coordinator.seek('sid-a', 'sid-a', 'Alice', 'knight')

    assert coordinator.cancel('sid-b') is False
    assert coordinator.queue.is_waiting('sid-a')

    assert coordinator.cancel('sid-a') is True
    assert coordinator.queue.waiting is None


def test_cancelled_seeker_is_not_paired(coordinator):
    coordinator.seek('sid-a', 'sid-a', 'Alice', 'knight')
    coordinator.cancel('sid-a')
    assert coordinator.seek('sid-b', 'sid-b', 'Bob', 'mage') is None
    assert coordinator.queue.is_waiting('sid-b')


def test_stats_counts_waiting_and_sessions(coordinator):
    assert coordinator.stats() == {'waiting': 0, 'active_sessions': 0}
    coordinator.seek('sid-a', 'sid-a', 'Alice', 'knight')
    assert coordinator.stats() == {'waiting': 1, 'active_sessions': 0}
    coordinator.seek('sid-b', 'sid-b', 'Bob', 'mage')
    assert coordinator.stats() == {'waiting': 0, 'active_sessions': 1}


def test_store_ids_are_unique_and_prefixed():
    store = SessionStore()
    ids = {store.new_id() for _ in range(200)}
    assert len(ids) == 200
    assert all(i.startswith('game_') for i in ids)


def test_store_rejects_duplicate_ids():
    store = SessionStore()
    a = Participant('sid-a', 'sid-a', 'Alice', 'knight')
    b = Participant('sid-b', 'sid-b', 'Bob', 'mage')
    store.add(Session(id='game_x', participant_a=a, participant_b=b))
    with pytest.raises(KeyError):
        store.add(Session(id='game_x', participant_a=a, participant_b=b))


def test_session_needs_distinct_connections():
    a = Participant('sid-a', 'sid-a', 'Alice', 'knight')
    with pytest.raises(ValueError):
        Session(id='game_x', participant_a=a, participant_b=a)


def test_player_in_a_session_cannot_queue_again(coordinator, broadcaster, paired):
    assert coordinator.seek('sid-a', 'sid-a', 'Alice', 'knight') is None
    assert coordinator.queue.waiting is None

    # the next seeker waits instead of pairing with a busy player
    assert coordinator.seek('sid-c', 'sid-c', 'Cara', 'rogue') is None
    assert coordinator.queue.is_waiting('sid-c')
    assert len(coordinator.store) == 1
    assert coordinator.store.find_by_connection('sid-a') == [paired]
    assert broadcaster.sent == []


def test_player_can_queue_again_after_opponent_leaves(coordinator, paired):
    coordinator.disconnect('sid-b')
    coordinator.seek('sid-a', 'sid-a', 'Alice', 'knight')
    assert coordinator.queue.is_waiting('sid-a')
