"""
Presentation Manager — Slidev deck discovery and launcher

Discovers slide-deck projects under a workspace's presentations directory,
lets the user pick one from a terminal menu, and runs Slidev (dev server or
export) against it.

    scanner:   presentations/<folder>/{package.json,slides.md} → PresentationMetadata[]
    resolver:  PresentationMetadata → PresentationOption (workspace script | slides file)
    selector:  terminal menu → Selected(option) | Cancelled()
    launcher:  PresentationOption → package-manager script or slidev process
    hooks:     dev-server / build lifecycle entry points for a host build tool
"""

__version__ = "0.1.0"

from presentation_manager.models import (
    Action,
    Cancelled,
    PresentationMetadata,
    PresentationOption,
    RunKind,
    Selected,
    SlidesRun,
    WorkspaceRun,
)
from presentation_manager.resolver import create_key, create_option, format_label, resolve_all
from presentation_manager.scanner import load_presentation_metadata

__all__ = [
    "Action",
    "Cancelled",
    "PresentationMetadata",
    "PresentationOption",
    "RunKind",
    "Selected",
    "SlidesRun",
    "WorkspaceRun",
    "create_key",
    "create_option",
    "format_label",
    "load_presentation_metadata",
    "resolve_all",
]
