import threading
import uuid

import pytest

from stocks_api.errors import BadRequest, Unauthorized
from stocks_api.ledger import Ledger


def test_auth_issues_distinct_tokens_with_empty_holdings():
    ledger = Ledger('v2')
    t1 = ledger.auth()
    t2 = ledger.auth()

    assert isinstance(t1, uuid.UUID)
    assert t1 != t2
    assert t1 in ledger and t2 in ledger
    assert len(ledger) == 2
    assert ledger.holdings(t1) == {}


def test_auth_skips_tokens_already_in_use():
    first = uuid.UUID('00000000-0000-4000-8000-000000000001')
    second = uuid.UUID('00000000-0000-4000-8000-000000000002')
    tokens = iter([first, first, first, second])
    ledger = Ledger('v2', token_fn=lambda: next(tokens))

    assert ledger.auth() == first
    # the factory returns `first` twice more before a fresh token
    assert ledger.auth() == second
    assert len(ledger) == 2


@pytest.mark.parametrize('param', [None, ''])
def test_check_auth_missing_param_is_anonymous(param):
    assert Ledger().check_auth(param) is None


def test_check_auth_accepts_issued_token():
    ledger = Ledger()
    token = ledger.auth()
    assert ledger.check_auth(str(token)) == token


@pytest.mark.parametrize('param', ['not-a-uuid', '1234', 'zzzzzzzz-zzzz-zzzz-zzzz-zzzzzzzzzzzz'])
def test_check_auth_malformed_token_is_unauthorized(param):
    with pytest.raises(Unauthorized):
        Ledger().check_auth(param)


def test_check_auth_unknown_token_is_unauthorized():
    with pytest.raises(Unauthorized):
        Ledger().check_auth(str(uuid.uuid4()))


def test_tokens_are_not_shared_between_ledgers():
    v2, v3 = Ledger('v2'), Ledger('v3')
    t2 = v2.auth()
    t3 = v3.auth()

    with pytest.raises(Unauthorized):
        v3.check_auth(str(t2))
    with pytest.raises(Unauthorized):
        v2.check_auth(str(t3))
    with pytest.raises(Unauthorized):
        v3.credit(t2, 'AAPL', 1)


def test_credit_is_additive_and_debit_restores():
    ledger = Ledger()
    token = ledger.auth()

    assert ledger.credit(token, 'AAPL', 10) == 10
    assert ledger.credit(token, 'AAPL', 5) == 15
    assert ledger.debit(token, 'AAPL', 5) == 10
    assert ledger.holdings(token) == {'AAPL': 10}


def test_debit_more_than_held_leaves_holdings_unchanged():
    ledger = Ledger()
    token = ledger.auth()
    ledger.credit(token, 'AAPL', 10)

    with pytest.raises(BadRequest):
        ledger.debit(token, 'AAPL', 20)
    assert ledger.quantity(token, 'AAPL') == 10

    # never held at all
    with pytest.raises(BadRequest):
        ledger.debit(token, 'MSFT', 1)
    assert ledger.quantity(token, 'MSFT') == 0


def test_holdings_returns_a_copy():
    ledger = Ledger()
    token = ledger.auth()
    ledger.credit(token, 'AAPL', 1)

    snapshot = ledger.holdings(token)
    snapshot['AAPL'] = 100
    assert ledger.quantity(token, 'AAPL') == 1


def test_concurrent_credits_and_debits_are_serialized():
    ledger = Ledger()
    token = ledger.auth()
    ledger.credit(token, 'AAPL', 1000)

    def worker():
        for _ in range(500):
            ledger.credit(token, 'AAPL', 2)
            ledger.debit(token, 'AAPL', 1)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert ledger.quantity(token, 'AAPL') == 1000 + 8 * 500


def test_concurrent_auth_yields_unique_tokens():
    ledger = Ledger()
    issued = []
    lock = threading.Lock()

    def worker():
        for _ in range(100):
            token = ledger.auth()
            with lock:
                issued.append(token)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(set(issued)) == 400
    assert len(ledger) == 400
