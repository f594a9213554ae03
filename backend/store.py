"""
In-memory session table for the log receiver.

One SessionStore is created per application and handed to the routes
through app.state. Sessions never leave the process; a restart forgets
them all. Every method is synchronous, so a lookup followed by a mutation
inside one request handler cannot interleave with another request.
"""

import logging
import time
import uuid
from typing import Callable, Optional

from models.session import Session

logger = logging.getLogger(__name__)


class SessionStore:
    def __init__(
        self,
        ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            ttl: seconds of inactivity after which a session is forgotten.
                 None keeps abandoned sessions forever.
            clock: monotonic time source, replaceable in tests.
        """
        self.ttl = ttl
        self._clock = clock
        self._sessions: dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return self.get(session_id) is not None

    def create(self) -> Session:
        self.purge_expired()
        session_id = str(uuid.uuid4())
        while session_id in self._sessions:
            session_id = str(uuid.uuid4())

        session = Session(session_id=session_id, last_active=self._clock())
        self._sessions[session_id] = session
        return session

    def get(self, session_id: str) -> Optional[Session]:
        self.purge_expired()
        return self._sessions.get(session_id)

    def advance(self, session: Session) -> int:
        """Accept one chunk for `session`; returns the new expected sequence."""
        session.next_sequence += 1
        session.last_active = self._clock()
        return session.next_sequence

    def remove(self, session_id: str) -> Optional[Session]:
        return self._sessions.pop(session_id, None)

    def purge_expired(self) -> int:
        """Drop sessions idle for longer than the TTL. Returns how many went."""
        if self.ttl is None:
            return 0

        cutoff = self._clock() - self.ttl
        expired = [sid for sid, s in self._sessions.items() if s.last_active < cutoff]
        for sid in expired:
            del self._sessions[sid]
            logger.info("expired session %s", sid)
        return len(expired)
