"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the shell chrome and for rendered documents.
Syntax highlighting of code blocks remains a separate Pygments style setting.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers.

    ``doc_link``, ``doc_code`` and ``doc_heading`` must only set the
    foreground color: rendered documents close them with ``ESC[39m``.
    """

    name: str
    reset: str
    reverse: str
    dim: str
    title_bar: str
    title_author: str
    list_marker: str
    list_selected: str
    hint: str
    status: str
    error: str
    loading: str
    doc_heading: str
    doc_link: str
    doc_code: str
    doc_quote: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    reverse="\033[7m",
    dim="\033[2m",
    title_bar="\033[1;97;46m",
    title_author="\033[38;5;245m",
    list_marker="\033[36m",
    list_selected="\033[36m",
    hint="\033[38;5;245m",
    status="\033[36m",
    error="\033[31m",
    loading="\033[33m",
    doc_heading="\033[36m",
    doc_link="\033[34m",
    doc_code="\033[33m",
    doc_quote="\033[38;5;245m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    reverse="\033[7m",
    dim="\033[2m",
    title_bar="\033[1;97;48;5;31m",
    title_author="\033[38;5;110m",
    list_marker="\033[38;5;39m",
    list_selected="\033[38;5;45m",
    hint="\033[2;38;5;110m",
    status="\033[38;5;45m",
    error="\033[38;5;203m",
    loading="\033[38;5;153m",
    doc_heading="\033[38;5;45m",
    doc_link="\033[38;5;39m",
    doc_code="\033[38;5;153m",
    doc_quote="\033[38;5;73m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    reverse="",
    dim="",
    title_bar="",
    title_author="",
    list_marker="",
    list_selected="",
    hint="",
    status="",
    error="",
    loading="",
    doc_heading="",
    doc_link="",
    doc_code="",
    doc_quote="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
