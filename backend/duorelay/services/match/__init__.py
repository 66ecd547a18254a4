"""Match domain services: pairing, session state and cleanup.

Pure in-memory logic used by the socket handlers, keeping transport
concerns separated from the match rules.
"""
from .coordinator import MatchCoordinator

__all__ = ['MatchCoordinator']
