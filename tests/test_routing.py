import pytest

from stocks_api.routing import clean, shift


@pytest.mark.parametrize('path, expected', [
    ('/a/b/c', ('a', '/b/c')),
    ('/', ('', '/')),
    ('', ('', '/')),
    ('/a', ('a', '/')),
    ('/a/', ('a', '/')),
    ('a/b', ('a', '/b')),
    ('//a//b//', ('a', '/b')),
    ('/a/../b', ('b', '/')),
    ('/./a/./b', ('a', '/b')),
    ('/../../etc/passwd', ('etc', '/passwd')),
    ('/v2/buy/AAPL', ('v2', '/buy/AAPL')),
])
def test_shift(path, expected):
    assert shift(path) == expected


def test_head_never_contains_slash_and_tail_is_rooted():
    for path in ['/x/y/z/', '///x', '/x/../../y/z', 'x']:
        head, tail = shift(path)
        assert '/' not in head
        assert tail.startswith('/')
        assert tail == '/' or not tail.endswith('/')


def test_repeated_shift_walks_every_segment():
    head, rest = shift('/v2/buy/AAPL')
    assert head == 'v2'
    head, rest = shift(rest)
    assert head == 'buy'
    head, rest = shift(rest)
    assert head == 'AAPL'
    assert shift(rest) == ('', '/')


def test_shift_is_unchanged_by_prior_normalization():
    for path in ['/a/./b/../c//d/', '//x/y', '../q']:
        assert shift(clean(path)) == shift(path)


@pytest.mark.parametrize('path, expected', [
    ('', '/'),
    ('//', '/'),
    ('///a', '/a'),
    ('//a', '/a'),
    ('/a/b/..', '/a'),
])
def test_clean(path, expected):
    assert clean(path) == expected
