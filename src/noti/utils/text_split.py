"""Character-safe string splitting.

Notion limits ``rich_text[].text.content`` to 2 000 characters.  Python
``str`` slicing works on code-points, so slicing never cuts a multi-byte
character or emoji in half and no byte-level handling is needed.
"""

from __future__ import annotations


def split_string(text: str, limit: int = 2000) -> list[str]:
    """Split *text* into chunks of at most *limit* characters.

    Returns an empty list for empty input; the concatenation of the
    chunks always equals *text*.

    Raises
    ------
    ValueError
        If *limit* is less than 1.

    Examples
    --------
    >>> split_string("hello world", 5)
    ['hello', ' worl', 'd']
    >>> split_string("", 100)
    []
    """
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")

    if not text:
        return []

    return [text[i : i + limit] for i in range(0, len(text), limit)]
