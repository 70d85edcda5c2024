"""Helpers shared by the document stores."""

from __future__ import annotations

import functools
import re
from typing import Any, Callable, Type, TypeVar

import anyio
from bson import ObjectId

from articlearc.errors import InvalidIdentifier, ValidationFailure

T = TypeVar("T")

OBJECT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"
_OBJECT_ID_RE = re.compile(OBJECT_ID_PATTERN)


def is_object_id(value: Any) -> bool:
    return isinstance(value, ObjectId) or (
        isinstance(value, str) and bool(_OBJECT_ID_RE.fullmatch(value))
    )


def parse_object_id(
    value: Any,
    error: Type[ValidationFailure] = InvalidIdentifier,
    message: str | None = None,
) -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    if not is_object_id(value):
        raise error(message)
    return ObjectId(value)


async def run_sync(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a blocking driver call on a worker thread."""
    return await anyio.to_thread.run_sync(functools.partial(func, *args, **kwargs))
