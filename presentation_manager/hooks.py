"""
Build-tool lifecycle hooks.

A host build tool calls these on dev-server start and on production build;
they run the presentation selector instead of the host's own step:

    on_dev_server_start  -> select a deck and start its dev server
    on_build_start       -> select a deck and export it (production builds only)

Both return the exit status the host should terminate with, or None when
the host should carry on.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Callable, List, Mapping, Optional

from presentation_manager.config import SelectorConfig, get_config
from presentation_manager.launcher import run_command
from presentation_manager.models import Action, Cancelled, Selected
from presentation_manager.resolver import ActionLike, resolve_all
from presentation_manager.scanner import load_presentation_metadata
from presentation_manager.selector import select_presentation

logger = logging.getLogger(__name__)


def run_selector(
    action: ActionLike,
    config: Optional[SelectorConfig] = None,
    *,
    selector: Callable = select_presentation,
    launcher: Callable = run_command,
) -> int:
    """Scan, resolve, let the user pick, then launch.

    Returns:
        0 when the user cancels, the launcher's status after a selection,
        1 when nothing is runnable or anything fails along the way.
    """
    config = config or get_config()
    try:
        action = Action.coerce(action)
        metadata = load_presentation_metadata(
            config.root_path,
            config.presentations_path,
            manifest_name=config.manifest_name,
            slides_name=config.slides_name,
        )
        options = resolve_all(metadata, action)

        if not options:
            logger.error(f"No Slidev presentations with a {action.value} entrypoint were found.")
            return 1

        result = selector(options, action)
        if isinstance(result, Cancelled):
            logger.info("Selection cancelled")
            return 0
        if not isinstance(result, Selected):
            raise TypeError(f"Unexpected selector result: {result!r}")

        return launcher(result.option, action, config)

    except Exception as e:
        logger.error(f"Failed to run presentation selector: {e}")
        logger.debug("Selector failure", exc_info=True)
        return 1


def on_dev_server_start(config: Optional[SelectorConfig] = None) -> int:
    return run_selector(Action.DEV, config)


def should_intercept_build(
    argv: Optional[List[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> bool:
    """Production builds are intercepted, except when the host is itself
    running an export."""
    argv = sys.argv if argv is None else argv
    environ = os.environ if environ is None else environ
    is_build = environ.get("NODE_ENV") == "production" or "build" in argv
    return is_build and "export" not in argv


def on_build_start(
    config: Optional[SelectorConfig] = None,
    argv: Optional[List[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[int]:
    if not should_intercept_build(argv, environ):
        return None
    return run_selector(Action.EXPORT, config)
