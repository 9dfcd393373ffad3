"""
Presentation Manager Configuration
==================================

Loads presentation-manager.yaml with environment variable overrides.
"""

import logging
import os
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ("presentation-manager.yaml", ".presentation-manager.yaml")

PACKAGE_MANAGERS = ("npm", "pnpm", "yarn", "bun")
WAIT_UNTIL_EVENTS = ("domcontentloaded", "load", "networkidle", "none")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


# =============================================================================
# Configuration Data Class
# =============================================================================

@dataclass
class SelectorConfig:
    """Root configuration container."""
    root: str = "."
    presentations_dir: str = "presentations"   # relative to root unless absolute
    manifest_name: str = "package.json"
    slides_name: str = "slides.md"

    # Launcher
    package_manager: str = "npm"               # npm | pnpm | yarn | bun
    slidev_command: Optional[List[str]] = None  # None → node_modules/.bin/slidev or npx
    open_browser: bool = True
    export_timeout_ms: int = 60000
    export_wait_until: str = "domcontentloaded"

    log_level: str = "WARNING"

    def __post_init__(self):
        if self.package_manager not in PACKAGE_MANAGERS:
            raise ValueError(
                f"Invalid package_manager {self.package_manager!r}, must be one of {PACKAGE_MANAGERS}"
            )
        if self.export_wait_until not in WAIT_UNTIL_EVENTS:
            raise ValueError(
                f"Invalid export_wait_until {self.export_wait_until!r}, must be one of {WAIT_UNTIL_EVENTS}"
            )
        self.log_level = str(self.log_level).upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level {self.log_level!r}, must be one of {LOG_LEVELS}")
        if self.export_timeout_ms <= 0:
            raise ValueError(f"export_timeout_ms must be positive, got {self.export_timeout_ms}")
        if self.slidev_command is not None and not self.slidev_command:
            raise ValueError("slidev_command must not be empty")

    @property
    def root_path(self) -> Path:
        return Path(self.root).resolve()

    @property
    def presentations_path(self) -> Path:
        return self.root_path / self.presentations_dir

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": self.root,
            "presentations_dir": self.presentations_dir,
            "manifest_name": self.manifest_name,
            "slides_name": self.slides_name,
            "package_manager": self.package_manager,
            "slidev_command": self.slidev_command,
            "open_browser": self.open_browser,
            "export_timeout_ms": self.export_timeout_ms,
            "export_wait_until": self.export_wait_until,
            "log_level": self.log_level,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SelectorConfig":
        defaults = cls()
        slidev_command = d.get("slidev_command", defaults.slidev_command)
        if isinstance(slidev_command, str):
            slidev_command = shlex.split(slidev_command)
        return cls(
            root=str(d.get("root") or defaults.root),
            presentations_dir=str(d.get("presentations_dir", defaults.presentations_dir)),
            manifest_name=d.get("manifest_name", defaults.manifest_name),
            slides_name=d.get("slides_name", defaults.slides_name),
            package_manager=d.get("package_manager", defaults.package_manager),
            slidev_command=slidev_command,
            open_browser=_parse_bool(d.get("open_browser", defaults.open_browser)),
            export_timeout_ms=int(d.get("export_timeout_ms", defaults.export_timeout_ms)),
            export_wait_until=d.get("export_wait_until", defaults.export_wait_until),
            log_level=d.get("log_level", defaults.log_level),
        )


# =============================================================================
# Configuration Loader
# =============================================================================

def find_config_file(start_path: Optional[Path] = None) -> Optional[Path]:
    """
    Find presentation-manager.yaml by searching upward from start_path.

    Args:
        start_path: Starting directory (defaults to cwd)

    Returns:
        Path to config file or None if not found
    """
    if start_path is None:
        start_path = Path.cwd()

    current = Path(start_path).resolve()
    for _ in range(10):  # Max 10 levels up
        for name in CONFIG_FILENAMES:
            candidate = current / name
            if candidate.exists():
                return candidate

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def load_config(
    config_path: Optional[Path] = None,
    root: Optional[Path] = None,
) -> SelectorConfig:
    """
    Load configuration from YAML file with environment variable overrides.

    Environment variables override config file values:
    - PRESMGR_ROOT -> root
    - PRESMGR_PRESENTATIONS_DIR -> presentations_dir
    - PRESMGR_PACKAGE_MANAGER -> package_manager
    - PRESMGR_SLIDEV_COMMAND -> slidev_command (shell-split)
    - PRESMGR_OPEN_BROWSER -> open_browser
    - PRESMGR_LOG_LEVEL -> log_level

    A relative ``root`` read from a config file is taken relative to that
    file's directory; without any setting, root is the search start
    directory.

    Args:
        config_path: Path to config file (auto-detected if None)
        root: Directory to start the config search from (defaults to cwd)

    Returns:
        SelectorConfig instance

    Raises:
        ValueError: If a value (from file or environment) is invalid
    """
    start = Path(root).resolve() if root is not None else Path.cwd().resolve()
    data: Dict[str, Any] = {}

    if config_path is None:
        config_path = find_config_file(start)

    if config_path and Path(config_path).exists():
        config_path = Path(config_path)
        logger.info(f"Loading config from: {config_path}")
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
            if not isinstance(loaded, dict):
                raise ValueError(f"top-level YAML must be a mapping, got {type(loaded).__name__}")
            data = loaded
        except (OSError, yaml.YAMLError, ValueError) as e:
            logger.warning(f"Failed to load config: {e}, using defaults")
            data = {}
        base = config_path.resolve().parent
    else:
        logger.info("No config file found, using defaults")
        base = start

    if root is not None:
        data["root"] = str(start)
    else:
        data["root"] = str((base / str(data.get("root") or ".")).resolve())

    data = _apply_env_overrides(data)
    return SelectorConfig.from_dict(data)


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    """Apply environment variable overrides to a raw config mapping."""
    data = dict(data)

    if os.environ.get("PRESMGR_ROOT"):
        data["root"] = str(Path(os.environ["PRESMGR_ROOT"]).resolve())

    if os.environ.get("PRESMGR_PRESENTATIONS_DIR"):
        data["presentations_dir"] = os.environ["PRESMGR_PRESENTATIONS_DIR"]

    if os.environ.get("PRESMGR_PACKAGE_MANAGER"):
        data["package_manager"] = os.environ["PRESMGR_PACKAGE_MANAGER"]

    if os.environ.get("PRESMGR_SLIDEV_COMMAND"):
        data["slidev_command"] = shlex.split(os.environ["PRESMGR_SLIDEV_COMMAND"])

    if os.environ.get("PRESMGR_OPEN_BROWSER"):
        data["open_browser"] = _parse_bool(os.environ["PRESMGR_OPEN_BROWSER"])

    if os.environ.get("PRESMGR_LOG_LEVEL"):
        data["log_level"] = os.environ["PRESMGR_LOG_LEVEL"]

    return data


# =============================================================================
# Global Config Instance
# =============================================================================

_config: Optional[SelectorConfig] = None


def get_config() -> SelectorConfig:
    """Get global configuration (lazy-loaded)."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: SelectorConfig) -> None:
    """Set the global configuration."""
    global _config
    _config = config
