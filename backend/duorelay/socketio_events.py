from functools import wraps
from numbers import Number

from flask import current_app, request
from flask_socketio import emit

from duorelay import get_coordinator, socketio
from duorelay.models import COLLECTIBLE_COUNT


class MalformedEvent(ValueError):
    """Inbound payload is missing fields or carries the wrong types."""


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


# ---- Payload helpers ----

def _payload(data) -> dict:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise MalformedEvent('payload must be an object')
    return data


def _text(data: dict, key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise MalformedEvent(f"{key} must be a string")
    return value


def _number(data: dict, key: str):
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, Number):
        raise MalformedEvent(f"{key} must be a number")
    return value


def _integer(data: dict, key: str) -> int:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedEvent(f"{key} must be an integer")
    return value


def _session_id(data: dict) -> str:
    session_id = data.get('sessionId')
    if not isinstance(session_id, str) or not session_id:
        raise MalformedEvent('sessionId is required')
    return session_id


def _isolated(event: str):
    """Keep a bad event from escaping its own handler."""
    def decorator(handler):
        @wraps(handler)
        def wrapper(data=None):
            try:
                return handler(data)
            except MalformedEvent as exc:
                current_app.logger.warning(f"[event-rejected] event={event} sid={_get_sid()} reason={exc}")
                emit('error', {'event': event, 'message': str(exc)})
            except Exception:
                current_app.logger.exception(f"[event-failed] event={event} sid={_get_sid()}")
        return wrapper
    return decorator


# ---- Handlers ----

def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")
    emit('connected', {'sid': _get_sid()})


def handle_disconnect(reason=None):
    sid = _get_sid()
    try:
        removed = get_coordinator().disconnect(sid)
    except Exception:
        current_app.logger.exception(f"[event-failed] event=disconnect sid={sid}")
        return
    current_app.logger.info(f"[disconnect] sid={sid} sessions_removed={len(removed)}")


@_isolated('seek-match')
def handle_seek_match(data):
    data = _payload(data)
    nickname = _text(data, 'nickname')
    character = _text(data, 'character')
    sid = _get_sid()
    get_coordinator().seek(sid, sid, nickname, character)


@_isolated('cancel-seek')
def handle_cancel_seek(data):
    get_coordinator().cancel(_get_sid())


@_isolated('update-position')
def handle_update_position(data):
    data = _payload(data)
    session_id = _session_id(data)
    x = _number(data, 'x')
    y = _number(data, 'y')
    vel_x = _number(data, 'velX')
    anim = _text(data, 'anim')
    get_coordinator().update_position(session_id, _get_sid(), x, y, vel_x, anim)


@_isolated('collect-item')
def handle_collect_item(data):
    data = _payload(data)
    session_id = _session_id(data)
    index = _integer(data, 'itemIndex')
    if not 0 <= index < COLLECTIBLE_COUNT:
        raise MalformedEvent(f"itemIndex must be in [0, {COLLECTIBLE_COUNT})")
    player_x = _number(data, 'playerX')
    get_coordinator().collect(session_id, index, player_x)


@_isolated('hit-hazard')
def handle_hit_hazard(data):
    data = _payload(data)
    session_id = _session_id(data)
    hazard_index = _integer(data, 'hazardIndex')
    get_coordinator().hit(session_id, _get_sid(), hazard_index)


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register the relay's Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('seek-match', handle_seek_match, namespace=namespace)
    socketio.on_event('cancel-seek', handle_cancel_seek, namespace=namespace)
    socketio.on_event('update-position', handle_update_position, namespace=namespace)
    socketio.on_event('collect-item', handle_collect_item, namespace=namespace)
    socketio.on_event('hit-hazard', handle_hit_hazard, namespace=namespace)
