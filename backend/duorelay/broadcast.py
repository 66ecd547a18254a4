"""Outbound fan-out for session events.

A session's broadcast group is just its two participant channels, so
"everyone" and "everyone but the sender" are plain iterations with an
identity filter rather than Socket.IO rooms.
"""
from typing import Iterable, Optional


class Broadcaster:
    """Base fan-out; subclasses implement ``send`` for a single channel."""

    def send(self, channel: str, event: str, payload: dict) -> None:
        raise NotImplementedError

    def to_group(self, channels: Iterable[str], event: str, payload: dict,
                 exclude: Optional[str] = None) -> None:
        for channel in channels:
            if exclude is not None and channel == exclude:
                continue
            self.send(channel, event, payload)


class SocketIOBroadcaster(Broadcaster):
    """Emits through the Flask-SocketIO server to one sid at a time."""

    def __init__(self, socketio, namespace='/'):
        self.socketio = socketio
        self.namespace = namespace

    def send(self, channel, event, payload):
        # Use socketio.emit since the recipient is not always the current request
        self.socketio.emit(event, payload, to=channel, namespace=self.namespace)
