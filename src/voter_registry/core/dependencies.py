"""FastAPI dependencies for the store and vote mirror.

Both are constructed once in the application lifespan and kept on
``app.state``; handlers receive them through these dependencies so tests can
override them.
"""

from fastapi import Request

from voter_registry.lib.sheets.mirror import VoteMirror
from voter_registry.lib.store import VoterStore


def get_voter_store(request: Request) -> VoterStore:
    """Return the application's voter store."""
    return request.app.state.store


def get_vote_mirror(request: Request) -> VoteMirror:
    """Return the application's vote mirror."""
    return request.app.state.vote_mirror
