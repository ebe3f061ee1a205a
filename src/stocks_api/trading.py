"""
# trading.py

TradingEngine: validates buy/sell requests against the stock catalog and
applies them to a session's holdings in a Ledger.

The engine is intentionally thin: validation (quantity text, catalog
membership) happens here, the locked mutation happens in Ledger. Both
operations are applied atomically by the ledger or not at all.

Typical usage:
    engine = TradingEngine(catalog)
    engine.buy(ledger, token, 'AAPL', '10')   # {'AAPL': 'Bought 10 shares'}
    engine.sell(ledger, token, 'AAPL', '4')   # {'AAPL': 'Sold 4 shares'}
"""

from __future__ import annotations

import logging
import re
import uuid
from typing import Dict, Mapping, Optional

from .errors import BadRequest
from .ledger import Ledger

logger = logging.getLogger(__name__)

_QUANTITY_RE = re.compile(r'[+-]?[0-9]+')

# Signed 64-bit range
MIN_QUANTITY = -2 ** 63
MAX_QUANTITY = 2 ** 63 - 1


def parse_quantity(text: Optional[str]) -> int:
    """Parse a share quantity: an optional sign followed by ASCII digits.

    Raises BadRequest for anything else (empty, whitespace, decimals) and
    for values outside the signed 64-bit range.
    """
    if not isinstance(text, str) or not _QUANTITY_RE.fullmatch(text):
        raise BadRequest()
    try:
        qty = int(text)
    except ValueError:
        raise BadRequest() from None
    if not MIN_QUANTITY <= qty <= MAX_QUANTITY:
        raise BadRequest()
    return qty


class TradingEngine:
    """Execute buy and sell orders against per-session holdings.

    Parameters:
        catalog: mapping of tradable symbols; any other symbol is rejected.
        strict_quantities: if True, quantities <= 0 are rejected. Off by
            default, so a buy of zero or a negative amount is accepted and
            applied as-is.
    """

    def __init__(self, catalog: Mapping, strict_quantities: bool = False) -> None:
        self.catalog = catalog
        self.strict_quantities = bool(strict_quantities)

    def _validate(self, symbol: str, quantity: Optional[str]) -> int:
        qty = parse_quantity(quantity)
        if symbol not in self.catalog:
            raise BadRequest()
        if self.strict_quantities and qty <= 0:
            raise BadRequest()
        return qty

    def buy(self, ledger: Ledger, token: uuid.UUID, symbol: str, quantity: Optional[str]) -> Dict[str, str]:
        """Add quantity shares of symbol to the session's holdings."""
        qty = self._validate(symbol, quantity)
        held = ledger.credit(token, symbol, qty)
        logger.debug("%s %s bought %d %s (now %d)", ledger.name, token, qty, symbol, held)
        return {symbol: f"Bought {qty} shares"}

    def sell(self, ledger: Ledger, token: uuid.UUID, symbol: str, quantity: Optional[str]) -> Dict[str, str]:
        """Remove quantity shares of symbol; fails if fewer are held."""
        qty = self._validate(symbol, quantity)
        held = ledger.debit(token, symbol, qty)
        logger.debug("%s %s sold %d %s (now %d)", ledger.name, token, qty, symbol, held)
        return {symbol: f"Sold {qty} shares"}


__all__ = ['TradingEngine', 'parse_quantity']
