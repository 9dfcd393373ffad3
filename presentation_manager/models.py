"""
Core data models for the presentation manager.

All models are immutable dataclasses shared by the scanner, the resolver,
the terminal selector and the launcher. Records are JSON-serializable through
to_dict()/from_dict().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Action(str, Enum):
    """What the external presentation tool is asked to do."""
    DEV = "dev"             # start the dev server
    EXPORT = "export"       # export the deck (PDF by default)

    @classmethod
    def coerce(cls, value: Union["Action", str]) -> "Action":
        """Accept an Action or its string value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(a.value for a in cls)
            raise ValueError(f"Invalid action {value!r}, must be one of: {valid}") from None


class RunKind(str, Enum):
    """How a presentation option is launched."""
    WORKSPACE = "workspace"     # via a declared script in a workspace package
    SLIDES = "slides"           # directly against the content file


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ManifestInfo:
    """The few manifest fields the scanner consumes.

    Built by extracting each field individually from an untyped JSON
    document; fields with an unexpected type are left unset.
    """
    name: Optional[str] = None
    title: Optional[str] = None
    display_name: Optional[str] = None
    scripts: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "ManifestInfo":
        raw_scripts = data.get("scripts")
        scripts: Dict[str, str] = {}
        if isinstance(raw_scripts, dict):
            scripts = {
                k: v for k, v in raw_scripts.items()
                if isinstance(k, str) and isinstance(v, str)
            }
        return cls(
            name=_non_empty_str(data.get("name")),
            title=_non_empty_str(data.get("title")),
            display_name=_non_empty_str(data.get("displayName")),
            scripts=scripts,
        )


def _non_empty_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


# ---------------------------------------------------------------------------
# Scanner output
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PresentationMetadata:
    """Metadata discovered for one presentation folder."""
    folder: str
    workspace: Optional[str] = None
    scripts: Dict[str, str] = field(default_factory=dict)
    slides_path: Optional[str] = None           # absolute
    relative_slides_path: Optional[str] = None  # relative to the scan root
    title: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "folder": self.folder,
            "workspace": self.workspace,
            "scripts": dict(self.scripts),
            "slides_path": self.slides_path,
            "relative_slides_path": self.relative_slides_path,
            "title": self.title,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PresentationMetadata":
        return cls(
            folder=d["folder"],
            workspace=d.get("workspace"),
            scripts=dict(d.get("scripts") or {}),
            slides_path=d.get("slides_path"),
            relative_slides_path=d.get("relative_slides_path"),
            title=d.get("title"),
        )


# ---------------------------------------------------------------------------
# Resolver output
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WorkspaceRun:
    """Run the action through the script declared in a workspace package."""
    workspace: str
    action: Action

    @property
    def kind(self) -> RunKind:
        return RunKind.WORKSPACE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "workspace": self.workspace,
            "action": self.action.value,
        }


@dataclass(frozen=True)
class SlidesRun:
    """Run the presentation tool directly against the content file."""
    slides_path: str
    relative_slides_path: Optional[str]
    action: Action

    @property
    def kind(self) -> RunKind:
        return RunKind.SLIDES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "slides_path": self.slides_path,
            "relative_slides_path": self.relative_slides_path,
            "action": self.action.value,
        }


Run = Union[WorkspaceRun, SlidesRun]


@dataclass(frozen=True)
class PresentationOption:
    """A runnable choice offered to the user for one action."""
    folder: str
    workspace: Optional[str]
    title: Optional[str]
    run: Run
    slides_path: Optional[str] = None
    relative_slides_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "folder": self.folder,
            "workspace": self.workspace,
            "title": self.title,
            "run": self.run.to_dict(),
            "slides_path": self.slides_path,
            "relative_slides_path": self.relative_slides_path,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PresentationOption":
        run_d = d["run"]
        action = Action.coerce(run_d["action"])
        run: Run
        if run_d["kind"] == RunKind.WORKSPACE.value:
            run = WorkspaceRun(workspace=run_d["workspace"], action=action)
        else:
            run = SlidesRun(
                slides_path=run_d["slides_path"],
                relative_slides_path=run_d.get("relative_slides_path"),
                action=action,
            )
        return cls(
            folder=d["folder"],
            workspace=d.get("workspace"),
            title=d.get("title"),
            run=run,
            slides_path=d.get("slides_path"),
            relative_slides_path=d.get("relative_slides_path"),
        )


# ---------------------------------------------------------------------------
# Selector result
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Selected:
    option: PresentationOption


@dataclass(frozen=True)
class Cancelled:
    pass


Selection = Union[Selected, Cancelled]


# ---------------------------------------------------------------------------
# Launcher
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LaunchCommand:
    """A concrete process invocation."""
    args: List[str]
    cwd: Path
    env: Optional[Dict[str, str]] = None    # None → inherit unchanged

    def display(self) -> str:
        return " ".join(self.args)
