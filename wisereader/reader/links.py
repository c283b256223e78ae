"""Hyperlink detection on the line under the cursor."""

from __future__ import annotations

import re
from dataclasses import dataclass

LINK_RE = re.compile(
    r"\[(?P<label>[^\[\]]*)\]\((?P<url>[^\s()]+)\)"
    r"|(?P<bare>https?://[^\s()\[\]<>]*[^\s()\[\]<>.,;:!?'\"])"
)


@dataclass(frozen=True)
class Link:
    """A link found on one line; ``span_end`` is exclusive."""

    label: str
    url: str
    span_start: int
    span_end: int


def find_links(text: str) -> list[Link]:
    """Return every markdown or bare http(s) link in ``text``, left to right."""
    links: list[Link] = []
    for match in LINK_RE.finditer(text):
        bare = match.group("bare")
        if bare is not None:
            links.append(Link(label=bare, url=bare, span_start=match.start(), span_end=match.end()))
        else:
            links.append(
                Link(
                    label=match.group("label"),
                    url=match.group("url"),
                    span_start=match.start(),
                    span_end=match.end(),
                )
            )
    return links


def find_links_at(text: str, cursor_col: int) -> list[Link]:
    """Links whose span covers ``cursor_col``, allowing one column past the end.

    ``text`` must already be style-stripped.
    """
    return [link for link in find_links(text) if link.span_start <= cursor_col <= link.span_end]
