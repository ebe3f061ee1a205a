"""
# routing.py

Path helper used by the dispatcher to peel one segment at a time off a
request path.
"""

from __future__ import annotations

import posixpath
from typing import Tuple


def clean(path: str) -> str:
    """Return path rooted, with '.'/'..' resolved and duplicate or trailing
    slashes removed. '..' never climbs above the root.
    """
    p = posixpath.normpath('/' + (path or ''))
    # POSIX keeps a leading '//' as-is
    if p.startswith('//'):
        p = '/' + p.lstrip('/')
    return p


def shift(path: str) -> Tuple[str, str]:
    """Split the first segment off path.

    Returns (head, tail): head never contains a slash and tail is always a
    rooted path without a trailing slash ('/' when nothing remains).

        shift('/a/b/c')   -> ('a', '/b/c')
        shift('/')        -> ('', '/')
        shift('/a/../b')  -> ('b', '/')
    """
    p = clean(path)
    i = p.find('/', 1)
    if i < 0:
        return p[1:], '/'
    return p[1:i], p[i:]


__all__ = ['shift', 'clean']
