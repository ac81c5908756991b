"""Page number parsing and offset arithmetic shared by the repositories."""

from __future__ import annotations

import re

DEFAULT_PAGE_SIZE = 20

_INTEGER = re.compile(r"[+-]?[0-9]+")
_MAX_INT = 2**63 - 1


def parse_page(value: str | None) -> int:
    """Return the page number in ``value``, or 1 if it is missing, malformed or below 1."""
    if not value or not _INTEGER.fullmatch(value):
        return 1
    page = int(value)
    if page < 1 or page > _MAX_INT:
        return 1
    return page


def page_offset(page: int) -> int:
    """Return the number of rows that precede ``page``."""
    return (page - 1) * DEFAULT_PAGE_SIZE