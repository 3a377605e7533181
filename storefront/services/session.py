from __future__ import annotations

import asyncio
import itertools
import logging
import secrets
from dataclasses import dataclass
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    access_token: str
    user_id: str


@dataclass(frozen=True)
class SessionState:
    session: Optional[Session]
    version: int


AuthCallback = Callable[[str, SessionState], None]


class Subscription:
    def __init__(self, provider: "SessionProvider", key: int) -> None:
        self._provider = provider
        self._key = key

    def unsubscribe(self) -> None:
        self._provider._listeners.pop(self._key, None)


class SessionProvider:
    """
    Identity source for one browser.

    Every change bumps ``version``; listeners get the event name
    ("SIGNED_IN" / "SIGNED_OUT") and the new state.
    """

    def __init__(self) -> None:
        self._session: Optional[Session] = None
        self._version = 0
        self._listeners: Dict[int, AuthCallback] = {}
        self._keys = itertools.count(1)

    def _state(self) -> SessionState:
        return SessionState(session=self._session, version=self._version)

    async def get_session(self) -> SessionState:
        state = self._state()
        await asyncio.sleep(0)
        return state

    def on_auth_state_change(self, callback: AuthCallback) -> Subscription:
        key = next(self._keys)
        self._listeners[key] = callback
        return Subscription(self, key)

    def sign_in(self, user_id: str) -> Session:
        self._session = Session(access_token=secrets.token_urlsafe(24), user_id=user_id)
        self._emit("SIGNED_IN")
        return self._session

    def sign_out(self) -> None:
        self._session = None
        self._emit("SIGNED_OUT")

    def _emit(self, event: str) -> None:
        self._version += 1
        state = self._state()
        logger.info("auth event %s (version=%s)", event, state.version)
        for cb in list(self._listeners.values()):
            cb(event, state)
