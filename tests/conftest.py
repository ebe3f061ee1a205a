import pytest
from fastapi.testclient import TestClient

from stocks_api.app import create_app
from stocks_api.catalog import StockCatalog, StockListing
from stocks_api.dispatcher import Dispatcher
from stocks_api.faults import FaultInjector
from stocks_api.money import Money
from stocks_api.pages import Frame

SITE = 'stocks.test'


class ScriptedRandom:
    """Random source returning a fixed sequence of draws."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = []

    def randrange(self, stop):
        self.calls.append(stop)
        return self.values.pop(0)


class RecordingSleep:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def catalog():
    # deliberately unsorted
    return StockCatalog([
        StockListing(symbol='TSLA', price=Money.parse('$175.79'), market_cap='$559.9B'),
        StockListing(symbol='AAPL', price=Money.parse('$172.50'), market_cap='$2.71T'),
        StockListing(symbol='MSFT', price=Money.parse('$415.50'), market_cap='$3.09T'),
    ])


@pytest.fixture
def frame():
    return Frame('<title>$title</title><p>version $version</p>')


@pytest.fixture
def calm_faults():
    """A fault injector that never delays or fails."""
    return FaultInjector(sleep=RecordingSleep(), latency_percent=0, error_percent=0)


@pytest.fixture
def dispatcher(catalog, frame, calm_faults):
    return Dispatcher(SITE, catalog, frame, faults=calm_faults)


@pytest.fixture
def client(dispatcher):
    return TestClient(create_app(dispatcher=dispatcher), base_url=f'http://{SITE}')
