"""Cap on the number of printed results."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def limit_results(results: Sequence[T], limit: int | None) -> list[T]:
    """Return the first ``limit`` results in their reduced order.

    ``None`` or ``0`` means unlimited.
    """
    if not limit:
        return list(results)
    return list(results[:limit])
