"""Build Notion rich_text runs from normalized inline tokens.

A run produced here has the shape::

    {
        "type": "text",
        "text": {"content": "hello"},
        "plain_text": "hello",
        "annotations": {"bold": true, "italic": false, "strikethrough": false,
                        "underline": false, "code": false, "color": "default"},
        "href": "https://..."
    }

``annotations`` is only attached when at least one flag deviates from
the default, and ``href`` only inside links.  ``plain_text`` always
mirrors ``text.content``.
"""

from __future__ import annotations

from noti.utils.text_split import split_string


def default_annotations() -> dict:
    """Return a fresh default Notion annotations dict."""
    return {
        "bold": False,
        "italic": False,
        "strikethrough": False,
        "underline": False,
        "code": False,
        "color": "default",
    }


def _merge_annotations(base: dict, **overrides: bool) -> dict:
    merged = dict(base)
    for key, value in overrides.items():
        if key in merged:
            # OR-merge: nested emphasis never clears an outer flag
            merged[key] = merged[key] or value
    return merged


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def make_text_run(
    content: str,
    annotations: dict | None = None,
    href: str | None = None,
) -> dict:
    """Create a single rich_text run for *content*."""
    run: dict = {
        "type": "text",
        "text": {"content": content},
        "plain_text": content,
    }
    if annotations is not None and _has_non_default_annotations(annotations):
        run["annotations"] = dict(annotations)
    if href:
        run["text"]["link"] = {"url": href}
        run["href"] = href
    return run


def build_rich_text(
    children: list[dict],
    *,
    annotations: dict | None = None,
    href: str | None = None,
) -> list[dict]:
    """Convert inline tokens to a rich_text array.

    Handles text, strong, emphasis, strikethrough, codespan, link, image
    (as ``[alt](url)`` text), soft and hard line breaks (both kept as a
    newline) and inline HTML (kept verbatim).  Unknown inline types are
    skipped.

    Parameters
    ----------
    children:
        Normalized inline tokens.
    annotations:
        Annotations inherited from an enclosing inline node.
    href:
        Link target inherited from an enclosing ``link`` node.
    """
    if annotations is None:
        annotations = default_annotations()

    runs: list[dict] = []

    for token in children:
        token_type = token.get("type", "")

        if token_type == "text":
            raw = token.get("raw", "")
            if raw:
                runs.append(make_text_run(raw, annotations, href))

        elif token_type in _WRAPPER_FLAGS:
            flag = _WRAPPER_FLAGS[token_type]
            runs.extend(build_rich_text(
                token.get("children", []),
                annotations=_merge_annotations(annotations, **{flag: True}),
                href=href,
            ))

        elif token_type == "codespan":
            runs.append(make_text_run(
                token.get("raw", ""),
                _merge_annotations(annotations, code=True),
                href,
            ))

        elif token_type == "link":
            runs.extend(build_rich_text(
                token.get("children", []),
                annotations=annotations,
                href=token.get("attrs", {}).get("url", ""),
            ))

        elif token_type == "image":
            alt = extract_text(token.get("children", []))
            url = token.get("attrs", {}).get("url", "")
            if not url:
                text = f"![{alt}]()"
            elif alt:
                text = f"[{alt}]({url})"
            else:
                text = url
            runs.append(make_text_run(text, annotations, href))

        elif token_type in ("softbreak", "linebreak"):
            runs.append(make_text_run("\n", annotations, href))

        elif token_type == "html_inline":
            raw = token.get("raw", "")
            if raw:
                runs.append(make_text_run(raw, annotations, href))

    return _coalesce(runs)


def split_rich_text(runs: list[dict], limit: int = 2000) -> list[dict]:
    """Split any run whose content exceeds *limit* characters.

    Each piece keeps the annotations and link of the original run.
    """
    output: list[dict] = []

    for run in runs:
        content = run.get("text", {}).get("content", "")

        if len(content) <= limit:
            output.append(run)
            continue

        for chunk in split_string(content, limit):
            piece = make_text_run(chunk, run.get("annotations"), run.get("href"))
            output.append(piece)

    return output


def plain_text(runs: list[dict]) -> str:
    """Concatenate the display text of *runs*.

    Locally built runs carry ``text.content``; API responses always carry
    ``plain_text``.  Either is accepted.
    """
    return "".join(run_text(run) for run in runs)


def run_text(run: dict) -> str:
    """Return the text of a single run, preferring ``text.content``."""
    content = run.get("text", {}).get("content")
    if content is None:
        content = run.get("plain_text", "")
    return content


def extract_text(children: list[dict]) -> str:
    """Recursively extract plain text from inline tokens."""
    parts: list[str] = []
    for token in children:
        token_type = token.get("type", "")
        if token_type == "text":
            parts.append(token.get("raw", ""))
        elif "children" in token:
            parts.append(extract_text(token["children"]))
        elif "raw" in token:
            parts.append(token["raw"])
    return "".join(parts)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

_WRAPPER_FLAGS: dict[str, str] = {
    "strong": "bold",
    "emphasis": "italic",
    "strikethrough": "strikethrough",
}


def _has_non_default_annotations(annotations: dict) -> bool:
    return (
        annotations.get("bold", False)
        or annotations.get("italic", False)
        or annotations.get("strikethrough", False)
        or annotations.get("underline", False)
        or annotations.get("code", False)
        or annotations.get("color", "default") != "default"
    )


def _coalesce(runs: list[dict]) -> list[dict]:
    """Merge adjacent runs that share annotations and link.

    mistune emits a separate text token for some punctuation, so
    ``Hello, world!`` can arrive as several tokens; Notion stores it as
    one run.
    """
    merged: list[dict] = []
    for run in runs:
        if merged and _same_style(merged[-1], run):
            content = merged[-1]["text"]["content"] + run["text"]["content"]
            merged[-1]["text"]["content"] = content
            merged[-1]["plain_text"] = content
        else:
            merged.append(run)
    return merged


def _same_style(a: dict, b: dict) -> bool:
    return a.get("annotations") == b.get("annotations") and a.get("href") == b.get("href")
