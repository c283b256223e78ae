from __future__ import annotations

from dataclasses import dataclass, field

from ..api import Document
from ..reader import Link, ReaderSession

LIST_VIEW = "list"
READER_VIEW = "reader"
MENU_VIEW = "menu"
OPEN_MENU_VIEW = "open-menu"

MENU_ACTIONS: tuple[tuple[str, str], ...] = (
    ("Move to Later", "later"),
    ("Move to Archive", "archive"),
    ("Delete", "delete"),
)


@dataclass(frozen=True)
class OpenMenuEntry:
    label: str
    url: str


def open_menu_entries(source_url: str, links: list[Link]) -> list[OpenMenuEntry]:
    entries: list[OpenMenuEntry] = []
    if source_url:
        entries.append(OpenMenuEntry(label=f"Source: {source_url}", url=source_url))
    entries.extend(OpenMenuEntry(label=f"Link: {link.url}", url=link.url) for link in links)
    return entries


@dataclass
class AppState:
    location: str
    rows: int
    columns: int
    view: str = LIST_VIEW
    documents: list[Document] = field(default_factory=list)
    selected_idx: int = 0
    list_start: int = 0
    document: Document | None = None
    session: ReaderSession = field(default_factory=ReaderSession)
    menu_selected: int = 0
    open_entries: list[OpenMenuEntry] = field(default_factory=list)
    loading_message: str = ""
    error_message: str = ""
    dirty: bool = True
    running: bool = True
