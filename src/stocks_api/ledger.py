"""
# ledger.py

Ledger: thread-safe session store for one API version. It maps session
tokens to per-symbol share holdings and serializes every read and write
behind a single lock.

Usage:
    ledger = Ledger('v2')
    token = ledger.auth()
    ledger.credit(token, 'AAPL', 10)
    ledger.debit(token, 'AAPL', 4)
    ledger.holdings(token)     # {'AAPL': 6}

Each API version that supports sessions owns its own Ledger, so tokens
issued by one version are unknown to every other.
"""

from __future__ import annotations

import logging
import uuid
from threading import Lock
from typing import Callable, Dict, Optional

from .errors import BadRequest, Unauthorized

logger = logging.getLogger(__name__)


class Ledger:
    """Per-version mapping of session token -> holdings.

    Parameters:
        name: label used in log messages (e.g. 'v2').
        token_fn: optional callable returning a new uuid.UUID; defaults to
            uuid.uuid4. Tests inject a scripted sequence here.
    """

    def __init__(self, name: str = 'ledger', token_fn: Optional[Callable[[], uuid.UUID]] = None) -> None:
        self.name = name
        self._token_fn = token_fn if token_fn is not None else uuid.uuid4
        self._lock = Lock()
        self._sessions: Dict[uuid.UUID, Dict[str, int]] = {}

    # --- Sessions ---------------------------------------------------
    def auth(self) -> uuid.UUID:
        """Issue a new token with empty holdings and return it."""
        with self._lock:
            token = self._token_fn()
            while token in self._sessions:
                token = self._token_fn()
            self._sessions[token] = {}
        logger.info("issued %s session %s", self.name, token)
        return token

    def check_auth(self, param: Optional[str]) -> Optional[uuid.UUID]:
        """Resolve a token string from a request.

        Returns None for a missing or empty param (anonymous). Raises
        Unauthorized if the param is not a UUID or is not a session of this
        ledger.
        """
        with self._lock:
            if not param:
                return None
            try:
                token = uuid.UUID(param)
            except ValueError:
                logger.warning("%s rejected malformed token %r", self.name, param)
                raise Unauthorized()
            if token not in self._sessions:
                logger.warning("%s rejected unknown token %s", self.name, token)
                raise Unauthorized()
            return token

    # --- Holdings ---------------------------------------------------
    def _session(self, token: uuid.UUID) -> Dict[str, int]:
        # caller holds the lock
        try:
            return self._sessions[token]
        except KeyError:
            raise Unauthorized() from None

    def credit(self, token: uuid.UUID, symbol: str, quantity: int) -> int:
        """Add quantity shares of symbol; returns the new holding."""
        with self._lock:
            held = self._session(token)
            held[symbol] = held.get(symbol, 0) + quantity
            return held[symbol]

    def debit(self, token: uuid.UUID, symbol: str, quantity: int) -> int:
        """Remove quantity shares of symbol; returns the new holding.

        Raises BadRequest and leaves the holding untouched if fewer than
        quantity shares are held.
        """
        with self._lock:
            held = self._session(token)
            current = held.get(symbol, 0)
            if current < quantity:
                raise BadRequest()
            held[symbol] = current - quantity
            return held[symbol]

    def holdings(self, token: uuid.UUID) -> Dict[str, int]:
        """Return a copy of the holdings for token."""
        with self._lock:
            return dict(self._session(token))

    def quantity(self, token: uuid.UUID, symbol: str) -> int:
        with self._lock:
            return self._session(token).get(symbol, 0)

    def __contains__(self, token: object) -> bool:
        with self._lock:
            return token in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __repr__(self) -> str:
        return f"Ledger(name={self.name!r}, sessions={len(self)})"


__all__ = ['Ledger']
