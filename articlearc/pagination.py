"""Page/limit/offset normalisation and response metadata."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

RawParam = Union[int, str, None]


@dataclass(slots=True, frozen=True)
class PageParams:
    page: int
    limit: int
    skip: int


@dataclass(slots=True, frozen=True)
class PaginationMeta:
    page: int
    limit: int
    total_count: int
    total_pages: int
    has_next: bool
    has_prev: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page": self.page,
            "limit": self.limit,
            "totalCount": self.total_count,
            "totalPages": self.total_pages,
            "hasNext": self.has_next,
            "hasPrev": self.has_prev,
        }


def _as_int(value: RawParam) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def resolve(
    page: RawParam = None, limit: RawParam = None, offset: RawParam = None
) -> PageParams:
    """
    Normalise raw pagination parameters into a bounded (page, limit, skip) triple.

    Malformed values fall back to the defaults. An offset, when present,
    takes precedence over the page number.
    """
    parsed_page = _as_int(page)
    resolved_page = DEFAULT_PAGE if parsed_page is None else max(1, parsed_page)

    parsed_limit = _as_int(limit)
    resolved_limit = (
        DEFAULT_LIMIT
        if parsed_limit is None
        else min(MAX_LIMIT, max(1, parsed_limit))
    )

    parsed_offset = _as_int(offset)
    if parsed_offset is not None:
        resolved_page = max(0, parsed_offset) // resolved_limit + 1

    skip = (resolved_page - 1) * resolved_limit
    return PageParams(page=resolved_page, limit=resolved_limit, skip=skip)


def build_meta(page: int, limit: int, total_count: int) -> PaginationMeta:
    total_pages = math.ceil(total_count / limit) if limit > 0 else 0
    if total_pages == 0:
        return PaginationMeta(page, limit, total_count, 0, False, False)
    return PaginationMeta(
        page=page,
        limit=limit,
        total_count=total_count,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )
