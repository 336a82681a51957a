"""Comment thread rendering."""

from __future__ import annotations

from collections.abc import Callable

from noti.converter.rich_text import plain_text

NO_COMMENTS = "No comments."


def render_comments(
    comments: list[dict],
    user_name: Callable[[str], str | None],
) -> str:
    """Render comment objects as a Markdown list.

    Each comment becomes ``- **<author>**: <text>`` followed by an
    indented, italic creation time.  *user_name* maps a user id to a
    display name; when it returns nothing the id is shown instead.
    """
    entries: list[str] = []
    for comment in comments:
        author_id = (comment.get("created_by") or {}).get("id", "")
        author = user_name(author_id) or author_id
        text = plain_text(comment.get("rich_text", []))
        created = comment.get("created_time", "")
        entries.append(f"- **{author}**: {text}\n  _{created}_")
    return "\n".join(entries) or NO_COMMENTS
