"""
# pages.py

Frame: the HTML page shown for the site root and for each API version's
info page. The template is a string.Template with $title and $version
placeholders, read once at startup.
"""

from __future__ import annotations

import logging
from pathlib import Path
from string import Template
from typing import Union

from .errors import InternalServerError

logger = logging.getLogger(__name__)


class TemplateLoadError(Exception):
    """Raised when the page template cannot be read."""


class Frame:
    def __init__(self, source: str) -> None:
        self.template = Template(source)

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'Frame':
        try:
            return cls(Path(path).read_text(encoding='utf-8'))
        except (OSError, UnicodeDecodeError) as exc:
            raise TemplateLoadError(f"cannot read template {path}: {exc}") from exc

    def render(self, title: str, version: int) -> str:
        """Fill in the page; raises InternalServerError if the template is broken."""
        try:
            return self.template.substitute(title=title, version=version)
        except (KeyError, ValueError) as exc:
            logger.error("template render failed: %s", exc)
            raise InternalServerError() from exc


__all__ = ['Frame', 'TemplateLoadError']
