"""
# catalog.py

StockCatalog: read-only mapping of ticker symbol -> StockListing, loaded
once from a CSV file at startup.

The CSV layout is a header row followed by `symbol, price, market cap`
rows, e.g.:

    Symbol,Price,MarketCap
    AAPL,$172.50,$2.71T

Any problem reading the file raises CatalogError; the server refuses to
start without a complete catalog.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .money import InvalidMoneyError, Money

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Raised when the catalog source is missing or malformed."""


class StockListing(BaseModel):
    """A tradable symbol with its price and market capitalisation text."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, populate_by_name=True)

    symbol: str = Field(alias='Symbol', min_length=1)
    price: Money = Field(alias='Price')
    market_cap: str = Field(default='', alias='MarketCap')

    @field_validator('price', mode='before')
    @classmethod
    def _parse_price(cls, value):
        if isinstance(value, str):
            return Money.parse(value)
        return value

    @field_serializer('price')
    def _serialize_price(self, price: Money) -> str:
        return price.to_text()

    def to_dict(self) -> Dict[str, str]:
        """JSON-friendly form keyed the way clients expect."""
        return self.model_dump(by_alias=True, mode='json')


class StockCatalog(Mapping):
    """Immutable symbol -> StockListing mapping."""

    def __init__(self, listings: Iterable[StockListing] = ()) -> None:
        stocks: Dict[str, StockListing] = {}
        for listing in listings:
            if listing.symbol in stocks:
                raise CatalogError(f"duplicate symbol: {listing.symbol!r}")
            stocks[listing.symbol] = listing
        self._stocks = stocks

    def __getitem__(self, symbol: str) -> StockListing:
        return self._stocks[symbol]

    def __iter__(self) -> Iterator[str]:
        return iter(self._stocks)

    def __len__(self) -> int:
        return len(self._stocks)

    def sorted(self) -> List[StockListing]:
        """Return listings ordered ascending by symbol."""
        return [self._stocks[s] for s in sorted(self._stocks)]

    def __repr__(self) -> str:
        return f"StockCatalog(listings={len(self)})"


def load_catalog(path: Union[str, Path]) -> StockCatalog:
    """Read a catalog CSV, skipping the header row."""
    path = Path(path)
    listings: List[StockListing] = []
    try:
        with path.open(newline='', encoding='utf-8') as f:
            reader = csv.reader(f)
            for lineno, row in enumerate(reader, start=1):
                if lineno == 1 or not row:
                    continue
                if len(row) < 3:
                    raise CatalogError(f"{path}:{lineno}: expected 3 columns, got {len(row)}")
                symbol, price, market_cap = (c.strip() for c in row[:3])
                if not symbol:
                    raise CatalogError(f"{path}:{lineno}: empty symbol")
                try:
                    listings.append(StockListing(symbol=symbol, price=Money.parse(price), market_cap=market_cap))
                except InvalidMoneyError as exc:
                    raise CatalogError(f"{path}:{lineno}: {exc}") from exc
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise CatalogError(f"cannot read catalog {path}: {exc}") from exc

    catalog = StockCatalog(listings)
    logger.info("loaded %d listings from %s", len(catalog), path)
    return catalog


__all__ = ['StockListing', 'StockCatalog', 'CatalogError', 'load_catalog']
