"""
presmgrctl — CLI for the presentation manager.

Commands:
    dev      Pick a presentation and start its dev server
    export   Pick a presentation and export it
    list     Print the runnable options for an action
    show     Print every discovered presentation folder
"""

import argparse
import json
import locale
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from presentation_manager.config import SelectorConfig, load_config, set_config

logger = logging.getLogger(__name__)

# ANSI color helpers (auto-disabled for non-TTY)
_USE_COLOR = sys.stdout.isatty()


def _c(code: str, text: str) -> str:
    if not _USE_COLOR:
        return text
    return f"\033[{code}m{text}\033[0m"


def _bold(text: str) -> str:
    return _c("1", text)


def _green(text: str) -> str:
    return _c("32", text)


def _yellow(text: str) -> str:
    return _c("33", text)


def _red(text: str) -> str:
    return _c("31", text)


def _cyan(text: str) -> str:
    return _c("36", text)


def _dim(text: str) -> str:
    return _c("2", text)


# ---------------------------------------------------------------------------
# Config resolution
# ---------------------------------------------------------------------------

def _resolve_config(args: argparse.Namespace) -> SelectorConfig:
    """Load the config file, then apply command-line overrides."""
    config = load_config(
        Path(args.config) if args.config else None,
        root=Path(args.root) if args.root else None,
    )
    if args.presentations_dir:
        config = replace(config, presentations_dir=args.presentations_dir)
    if not args.verbose:
        logging.getLogger().setLevel(config.log_level)
    set_config(config)
    return config


def _scan(config: SelectorConfig):
    from presentation_manager.scanner import load_presentation_metadata

    return load_presentation_metadata(
        config.root_path,
        config.presentations_path,
        manifest_name=config.manifest_name,
        slides_name=config.slides_name,
    )


# ---------------------------------------------------------------------------
# Commands: dev / export
# ---------------------------------------------------------------------------

def cmd_run(args: argparse.Namespace) -> int:
    """Select a presentation and run the requested action."""
    from presentation_manager.hooks import run_selector

    config = _resolve_config(args)
    return run_selector(args.command, config)


# ---------------------------------------------------------------------------
# Command: list
# ---------------------------------------------------------------------------

def cmd_list(args: argparse.Namespace) -> int:
    """Print the runnable options for an action."""
    from presentation_manager.resolver import create_key, format_label, resolve_all

    config = _resolve_config(args)
    options = resolve_all(_scan(config), args.action)

    if args.json:
        payload = []
        for option in options:
            d = option.to_dict()
            d["label"] = format_label(option)
            d["key"] = create_key(option, args.action)
            payload.append(d)
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    if not options:
        print(_yellow(f"No Slidev presentations with a {args.action} entrypoint were found."))
        print(_dim(f"Searched: {config.presentations_path}"))
        return 1

    print(_bold(f"Presentations ({args.action}) — {config.presentations_path}"))
    for option in options:
        print(f"  {_cyan(format_label(option))}")
    return 0


# ---------------------------------------------------------------------------
# Command: show
# ---------------------------------------------------------------------------

def cmd_show(args: argparse.Namespace) -> int:
    """Print every discovered presentation folder."""
    config = _resolve_config(args)
    metadata = _scan(config)

    print(_bold("Presentation Manager — Discovered Presentations"))
    print(f"Path: {_dim(str(config.presentations_path))}")
    print()

    if not metadata:
        print(f"  {_dim('none')}")
        return 0

    for meta in metadata:
        print(f"  {_bold(meta.folder)}")
        print(f"    title: {meta.title or _dim('(none)')}")
        print(f"    workspace: {meta.workspace or _dim('(none)')}")
        if meta.scripts:
            print(f"    scripts: {', '.join(sorted(meta.scripts))}")
        else:
            print(f"    scripts: {_dim('(none)')}")
        if meta.relative_slides_path:
            print(f"    slides: {_green(meta.relative_slides_path)}")
        else:
            print(f"    slides: {_dim('(none)')}")

    print()
    print(f"Total: {_bold(str(len(metadata)))}")
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("--root", default=None, help="Workspace root (default: config or cwd)")
    p.add_argument(
        "-d", "--presentations-dir", default=None,
        help="Presentations directory, relative to root (default: presentations)"
    )
    p.add_argument("-c", "--config", default=None, help="Path to presentation-manager.yaml")
    p.add_argument(
        "-v", "--verbose", action="store_true", default=argparse.SUPPRESS,
        help="Verbose output"
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the presmgrctl argument parser."""
    parser = argparse.ArgumentParser(
        prog="presmgrctl",
        description="Presentation manager — pick a Slidev deck and run or export it",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output"
    )

    sub = parser.add_subparsers(dest="command", help="Available commands")

    # --- dev ---
    p_dev = sub.add_parser("dev", help="Select a presentation and start its dev server")
    _add_common(p_dev)
    p_dev.set_defaults(func=cmd_run)

    # --- export ---
    p_export = sub.add_parser("export", help="Select a presentation and export it")
    _add_common(p_export)
    p_export.set_defaults(func=cmd_run)

    # --- list ---
    p_list = sub.add_parser("list", help="List runnable presentations for an action")
    _add_common(p_list)
    p_list.add_argument(
        "-a", "--action", default="dev",
        choices=["dev", "export"],
        help="Action to resolve options for (default: dev)"
    )
    p_list.add_argument("--json", action="store_true", help="Print JSON")
    p_list.set_defaults(func=cmd_list)

    # --- show ---
    p_show = sub.add_parser("show", help="Show all discovered presentation folders")
    _add_common(p_show)
    p_show.set_defaults(func=cmd_show)

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for presmgrctl."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="%(message)s")

    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logger.debug(f"Keeping default collation: {e}")

    if not args.command:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except (ValueError, OSError) as e:
        print(_red(f"Error: {e}"))
        return 1


if __name__ == "__main__":
    sys.exit(main())
