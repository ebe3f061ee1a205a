"""
# dispatcher.py

Dispatcher: routes a request by path segment to the right API version and
action, enforces the host name and session tokens, and encodes results.

Path grammar:

    /{version}/{action}[/{symbol}]?quantity=N&user=TOKEN

  v1          ''  (info page), list
  v2, v3      ''  (info page), list, buy/{symbol}, sell/{symbol}, auth

v2 and v3 each own a separate Ledger; v3 additionally runs every
authorized action through a FaultInjector. Handlers raise ApiError
subclasses and never build error responses themselves.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional
from urllib.parse import parse_qs, urlsplit

from starlette.responses import HTMLResponse, JSONResponse, Response

from .catalog import StockCatalog
from .errors import InternalServerError, NotFound, Unauthorized
from .faults import FaultInjector
from .ledger import Ledger
from .pages import Frame
from .routing import shift
from .trading import TradingEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiRequest:
    """The parts of an HTTP request the dispatcher looks at."""

    host: str
    path: str
    query: Mapping[str, List[str]] = field(default_factory=dict)

    @classmethod
    def from_target(cls, host: str, target: str) -> 'ApiRequest':
        """Build from a request target such as '/v2/buy/AAPL?quantity=1'."""
        parts = urlsplit(target)
        return cls(host=host, path=parts.path, query=parse_qs(parts.query, keep_blank_values=True))

    def param(self, name: str) -> str:
        """First value of a query parameter, or '' if absent."""
        values = self.query.get(name)
        return values[0] if values else ''


@dataclass(frozen=True)
class ApiVersion:
    """Static description of one API version."""

    name: str
    number: int
    title: str
    ledger: Optional[Ledger] = None
    faults: Optional[FaultInjector] = None


Route = Callable[[ApiRequest, str], Response]
SessionAction = Callable[[ApiVersion, Optional[uuid.UUID], ApiRequest, str], object]

INDEX_TITLE = 'Stocks API'


class Dispatcher:
    """Top-level request handler.

    Parameters:
        site: host name requests must be addressed to.
        catalog: listings served by `list` and traded by `buy`/`sell`.
        frame: page template for the index and info pages.
        engine: optional TradingEngine; defaults to one over catalog.
        ledgers: optional {'v2': Ledger, 'v3': Ledger}; missing ones are created.
        faults: optional FaultInjector for v3.
    """

    def __init__(
        self,
        site: str,
        catalog: StockCatalog,
        frame: Frame,
        engine: Optional[TradingEngine] = None,
        ledgers: Optional[Mapping[str, Ledger]] = None,
        faults: Optional[FaultInjector] = None,
    ) -> None:
        self.site = site
        self.catalog = catalog
        self.frame = frame
        self.engine = engine if engine is not None else TradingEngine(catalog)
        ledgers = dict(ledgers or {})

        self.v1 = ApiVersion('v1', 1, 'Stocks API Version 1: List')
        self.v2 = ApiVersion('v2', 2, 'Stocks API Version 2: List, Buy, and Sell',
                             ledger=ledgers.get('v2') or Ledger('v2'))
        self.v3 = ApiVersion('v3', 3, 'Stocks API Version 3: Flaky',
                             ledger=ledgers.get('v3') or Ledger('v3'),
                             faults=faults if faults is not None else FaultInjector())

        self.routes: Dict[str, Route] = {
            'v1': self._public_version,
            'v2': lambda req, rest: self._session_version(self.v2, req, rest),
            'v3': lambda req, rest: self._session_version(self.v3, req, rest),
            'favicon.ico': self._favicon,
        }
        self.public_actions: Dict[str, Callable[[], object]] = {
            'list': self.list,
        }
        self.session_actions: Dict[str, SessionAction] = {
            'list': lambda version, token, req, rest: self.list(),
            'buy': self._buy,
            'sell': self._sell,
            'auth': self._auth,
        }

    # --- Entry point ------------------------------------------------
    def handle(self, request: ApiRequest) -> Response:
        if request.host != self.site:
            logger.debug("host %r does not match %r", request.host, self.site)
            raise NotFound()
        head, rest = shift(request.path)
        route = self.routes.get(head, self._index)
        return route(request, rest)

    # --- Versions ---------------------------------------------------
    def _index(self, request: ApiRequest, rest: str) -> Response:
        return self.page(INDEX_TITLE, 0)

    def _favicon(self, request: ApiRequest, rest: str) -> Response:
        return Response(b'', media_type='image/x-icon')

    def _public_version(self, request: ApiRequest, rest: str) -> Response:
        action, _ = shift(rest)
        if action == '':
            return self.page(self.v1.title, self.v1.number)
        handler = self.public_actions.get(action)
        if handler is None:
            raise NotFound()
        return self.encode(handler())

    def _session_version(self, version: ApiVersion, request: ApiRequest, rest: str) -> Response:
        token = version.ledger.check_auth(request.param('user'))
        action, rest = shift(rest)
        if action == '':
            return self.page(version.title, version.number)
        if token is None and action != 'auth':
            raise Unauthorized()
        if version.faults is not None:
            version.faults.apply()
        handler = self.session_actions.get(action)
        if handler is None:
            raise NotFound()
        return self.encode(handler(version, token, request, rest))

    # --- Actions ----------------------------------------------------
    def list(self) -> List[Dict[str, str]]:
        return [listing.to_dict() for listing in self.catalog.sorted()]

    def _buy(self, version: ApiVersion, token: uuid.UUID, request: ApiRequest, rest: str) -> Dict[str, str]:
        symbol, _ = shift(rest)
        return self.engine.buy(version.ledger, token, symbol, request.param('quantity'))

    def _sell(self, version: ApiVersion, token: uuid.UUID, request: ApiRequest, rest: str) -> Dict[str, str]:
        symbol, _ = shift(rest)
        return self.engine.sell(version.ledger, token, symbol, request.param('quantity'))

    def _auth(self, version: ApiVersion, token: Optional[uuid.UUID], request: ApiRequest, rest: str) -> Dict[str, str]:
        return {'Token': str(version.ledger.auth())}

    # --- Encoding ---------------------------------------------------
    def encode(self, payload: object) -> Response:
        try:
            return JSONResponse(payload)
        except (TypeError, ValueError) as exc:
            logger.error("cannot encode response: %s", exc)
            raise InternalServerError() from exc

    def page(self, title: str, version: int) -> Response:
        return HTMLResponse(self.frame.render(title, version))


__all__ = ['Dispatcher', 'ApiRequest', 'ApiVersion']
