"""
Launcher — Slidev / package-manager invocation.

Turns a resolved PresentationOption into a process invocation and runs it
with the terminal attached:

    workspace variant: <package manager> run <action> in that workspace
    slides variant:    slidev [export] <slides.md>, from the deck folder
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Dict, List, Optional

from presentation_manager.config import SelectorConfig
from presentation_manager.models import (
    Action,
    LaunchCommand,
    PresentationOption,
    SlidesRun,
    WorkspaceRun,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Command construction
# ---------------------------------------------------------------------------

def workspace_script_args(package_manager: str, workspace: str, script: str) -> List[str]:
    """Arguments running *script* inside *workspace* with a package manager."""
    if package_manager == "npm":
        return ["npm", "run", script, "--workspace", workspace]
    if package_manager == "pnpm":
        return ["pnpm", "--filter", workspace, "run", script]
    if package_manager == "yarn":
        return ["yarn", "workspace", workspace, "run", script]
    if package_manager == "bun":
        return ["bun", "run", "--filter", workspace, script]
    raise ValueError(f"Unsupported package manager: {package_manager!r}")


def resolve_slidev_command(config: SelectorConfig) -> List[str]:
    """Locate the Slidev executable.

    Priority:
        1. Explicit slidev_command from the configuration
        2. <root>/node_modules/.bin/slidev
        3. npx slidev
    """
    if config.slidev_command:
        return list(config.slidev_command)

    local_bin = config.root_path / "node_modules" / ".bin" / "slidev"
    if local_bin.exists():
        return [str(local_bin)]

    return ["npx", "slidev"]


def slides_args(slidev: List[str], slides_file: str, action: Action, config: SelectorConfig) -> List[str]:
    if action == Action.DEV:
        args = [*slidev, slides_file]
        if config.open_browser:
            args.append("--open")
        return args

    return [
        *slidev,
        "export",
        "--timeout", str(config.export_timeout_ms),
        "--wait-until", config.export_wait_until,
        slides_file,
    ]


def build_command(
    option: PresentationOption,
    action: Action,
    config: SelectorConfig,
    environ: Optional[Dict[str, str]] = None,
) -> LaunchCommand:
    """Derive the process invocation for *option*.

    Args:
        option: The selected option.
        action: Action to perform.
        config: Launcher settings (package manager, Slidev location, export flags).
        environ: Base environment (defaults to os.environ).

    Returns:
        LaunchCommand with args, working directory and environment.
    """
    action = Action.coerce(action)
    run = option.run
    base_env = dict(os.environ if environ is None else environ)

    if isinstance(run, WorkspaceRun):
        return LaunchCommand(
            args=workspace_script_args(config.package_manager, run.workspace, action.value),
            cwd=config.root_path,
            env=base_env,
        )

    if isinstance(run, SlidesRun):
        slides = Path(run.slides_path)
        return LaunchCommand(
            args=slides_args(resolve_slidev_command(config), slides.name, action, config),
            cwd=slides.parent,
            env={**base_env, "NODE_ENV": "development"},
        )

    raise TypeError(f"Unknown run variant: {type(run).__name__}")


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------

def run_command(
    option: PresentationOption,
    action: Action,
    config: SelectorConfig,
) -> int:
    """Run the invocation for *option* with inherited stdio.

    Returns:
        The child's exit code, or 1 when it could not be started.
    """
    action = Action.coerce(action)
    command = build_command(option, action, config)

    logger.info(f"[launcher] Running: {command.display()} (cwd={command.cwd})")

    try:
        result = subprocess.run(command.args, cwd=str(command.cwd), env=command.env)
    except OSError as e:
        logger.error(f"Failed to start {action.value}: {e}")
        return 1

    if result.returncode != 0:
        logger.warning(f"[launcher] {command.args[0]} exited with status {result.returncode}")
    return result.returncode
