"""Command-line front door for wisereader.

Parses CLI options, resolves configuration and logging, then either stores
the access token, prints one rendered document, or launches the reader shell.
"""

from __future__ import annotations

import argparse
import getpass
import logging
import shutil
import sys
from collections.abc import Sequence
from pathlib import Path

from .api import ReadwiseClient
from .config import CONFIG_PATH, TOKEN_HELP_URL, ReaderConfig, load_reader_config, save_token
from .errors import WiseReaderError
from .logs import configure_logging
from .render import DocumentRenderer
from .runtime import run_app
from .ui_theme import available_theme_names, resolve_theme

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _default_render_width() -> int:
    """Resolve default render width from current terminal size."""
    term = shutil.get_terminal_size((80, 24))
    return max(1, term.columns)


def _add_logging_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--log-file", type=Path, default=None, help="Write logs to this file.")
    parser.add_argument("--debug", action="store_true", help="Log debug detail.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wisereader",
        description="Read your Readwise Reader inbox in the terminal. "
        "Run `wisereader config` first to store an access token.",
    )
    parser.add_argument("--location", default="new", help="Reader location to list (default: new).")
    parser.add_argument("--page-size", type=_positive_int, default=None, help="Number of documents to list.")
    parser.add_argument("--style", default=None, help="Pygments style name for code blocks.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--render", metavar="DOC_ID", help="Print one rendered document and exit.")
    parser.add_argument(
        "--max-cols",
        type=_positive_int,
        default=None,
        help="Column width for --render output (default: terminal width).",
    )
    _add_logging_arguments(parser)
    return parser


def build_config_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wisereader config",
        description=f"Store your Readwise access token (get one at {TOKEN_HELP_URL}).",
    )
    parser.add_argument("--token", default=None, help="Access token; prompted for when omitted.")
    _add_logging_arguments(parser)
    return parser


def render_document(config: ReaderConfig, document_id: str, max_cols: int, no_color: bool) -> str:
    """Fetch one document and render it the way the reader body shows it."""
    theme = resolve_theme(config.theme, no_color=no_color)
    renderer = DocumentRenderer(style=config.style, no_color=no_color, theme=theme)
    with ReadwiseClient(config) as client:
        document = client.fetch_document(document_id)
    out: list[str] = []
    for line in renderer.render_raw(document.content, max_cols):
        out.append(line)
        if "\033" in line:
            out.append("\033[0m")
        out.append("\n")
    return "".join(out)


def run_config(args: argparse.Namespace) -> None:
    token = args.token
    if token is None:
        print(f"Get your access token at {TOKEN_HELP_URL}")
        try:
            token = getpass.getpass("Readwise access token: ")
        except (EOFError, KeyboardInterrupt):
            raise SystemExit("No token entered.") from None
    if not save_token(token):
        raise SystemExit(f"Could not write {CONFIG_PATH}.")
    print(f"Token saved to {CONFIG_PATH}.")


def main(argv: Sequence[str] | None = None) -> None:
    """Parse CLI arguments and dispatch.

    ``argv`` is primarily for tests; when omitted ``sys.argv`` is used.
    Configuration and API failures exit with a message instead of a traceback.
    """
    argv = list(sys.argv[1:] if argv is None else argv)
    try:
        if argv[:1] == ["config"]:
            args = build_config_parser().parse_args(argv[1:])
            configure_logging(args.log_file, args.debug)
            run_config(args)
            return

        args = build_parser().parse_args(argv)
        configure_logging(args.log_file, args.debug)
        config = load_reader_config(style=args.style, theme=args.theme)

        if args.render is not None:
            max_cols = args.max_cols if args.max_cols is not None else _default_render_width()
            sys.stdout.write(render_document(config, args.render, max_cols, args.no_color))
            return

        run_app(config, location=args.location, page_size=args.page_size, no_color=args.no_color)
    except WiseReaderError as exc:
        logger.error("%s", exc)
        raise SystemExit(str(exc)) from None


if __name__ == "__main__":
    main()
