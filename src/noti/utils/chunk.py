"""Batch records for bulk page creation."""

from __future__ import annotations

from typing import TypeVar

T = TypeVar("T")


def chunk_records(records: list[T], size: int = 100) -> list[list[T]]:
    """Split *records* into consecutive batches of at most *size* items.

    An empty input returns an empty list (not ``[[]]``).

    Raises
    ------
    ValueError
        If *size* is less than 1.

    Examples
    --------
    >>> chunk_records([1, 2, 3, 4, 5], 2)
    [[1, 2], [3, 4], [5]]
    """
    if size < 1:
        raise ValueError(f"size must be >= 1, got {size}")

    if not records:
        return []

    return [records[i : i + size] for i in range(0, len(records), size)]
