"""Per-session gameplay transitions.

A session only ever moves from active to game over; finishing a level is
an internal cycle (new level, fresh collectibles, one more hazard). Every
operation looks the session up first and quietly does nothing when the id
is unknown, so stale clients never see an error.
"""
import logging
import random
from typing import Optional

from duorelay.models import COLLECTIBLE_COUNT, LEVEL_COUNT, Hazard, Position, Session

logger = logging.getLogger(__name__)

# Playfield is split in two halves; hazards spawn on the far side
WORLD_WIDTH = 800
HAZARD_SPAWN_Y = 16
HAZARD_MAX_SPEED = 200


def spawn_hazard(player_x: float, rng: random.Random) -> Hazard:
    """Hazard dropped on the half of the field away from ``player_x``."""
    half = WORLD_WIDTH // 2
    if player_x < half:
        x = half + rng.randrange(half)
    else:
        x = rng.randrange(half)
    vel_x = -HAZARD_MAX_SPEED + rng.randrange(2 * HAZARD_MAX_SPEED)
    return Hazard(x=x, y=HAZARD_SPAWN_Y, vel_x=vel_x)


class MatchRules:
    def __init__(self, store, broadcaster, rng: Optional[random.Random] = None,
                 game_over_guard: bool = True):
        self.store = store
        self.broadcaster = broadcaster
        self.rng = rng or random.Random()
        self.game_over_guard = game_over_guard

    def _resolve(self, session_id) -> Optional[Session]:
        session = self.store.get(session_id)
        if session is None:
            logger.debug(f"[unknown-session] session={session_id!r}")
        return session

    def _finished(self, session: Session) -> bool:
        return self.game_over_guard and session.state.game_over

    def apply_position_update(self, session_id, connection_id, x, y, vel_x, anim) -> bool:
        session = self._resolve(session_id)
        if session is None:
            return False
        slot = session.slot_of(connection_id)
        if slot is None:
            return False

        position = Position(x=x, y=y, vel_x=vel_x, anim=anim)
        session.state.set_position(slot, position)
        sender = session.participant(slot).channel
        self.broadcaster.to_group(session.channels(), 'opponent-update',
                                  position.to_dict(), exclude=sender)
        return True

    def apply_collect(self, session_id, index: int, player_x: float) -> bool:
        session = self._resolve(session_id)
        if session is None or self._finished(session):
            return False
        state = session.state
        if not 0 <= index < COLLECTIBLE_COUNT:
            raise IndexError(f"collectible index {index} out of range")

        state.collectibles[index] = False
        if state.remaining_collectibles() > 0:
            self.broadcaster.to_group(session.channels(), 'star-collected', {'itemIndex': index})
            return True

        state.current_level = (state.current_level + 1) % LEVEL_COUNT
        state.reset_collectibles()
        hazard = spawn_hazard(player_x, self.rng)
        state.hazards.append(hazard)
        logger.info(
            f"[level-complete] session={session.id} level={state.current_level} "
            f"hazards={len(state.hazards)}"
        )
        self.broadcaster.to_group(session.channels(), 'level-complete', {
            'newLevel': state.current_level,
            'hazards': [h.to_dict() for h in state.hazards],
        })
        return True

    def apply_hit(self, session_id, connection_id, hazard_index) -> bool:
        session = self._resolve(session_id)
        if session is None or self._finished(session):
            return False
        slot = session.slot_of(connection_id)
        if slot is None:
            return False
        state = session.state

        lives = state.lives(slot) - 1
        state.set_lives(slot, lives)
        if lives > 0:
            self.broadcaster.to_group(session.channels(), 'lives-update', {
                **state.lives_payload(),
                'hazardIndex': hazard_index,
            })
            return True

        state.game_over = True
        state.winner = slot.other
        logger.info(
            f"[game-over] session={session.id} winner={state.winner.label} "
            f"player1Lives={state.lives_a} player2Lives={state.lives_b}"
        )
        self.broadcaster.to_group(session.channels(), 'game-over', {
            'winner': state.winner.label,
            **state.lives_payload(),
        })
        return True
