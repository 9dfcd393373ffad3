"""
Shared fixtures for presentation manager tests.

Builds throwaway workspaces of the form:

    <tmp>/presentations/<folder>/package.json
    <tmp>/presentations/<folder>/slides.md
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

import pytest


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep PRESMGR_* variables from the developer's shell out of the tests."""
    for var in (
        "PRESMGR_ROOT",
        "PRESMGR_PRESENTATIONS_DIR",
        "PRESMGR_PACKAGE_MANAGER",
        "PRESMGR_SLIDEV_COMMAND",
        "PRESMGR_OPEN_BROWSER",
        "PRESMGR_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def workspace_root(tmp_path) -> Path:
    root = tmp_path / "repo"
    root.mkdir()
    return root


@pytest.fixture
def make_deck(workspace_root):
    """Factory: make_deck(folder, manifest=None, slides=None, base="presentations")."""

    def _make(
        folder: str,
        manifest: Optional[Dict[str, Any]] = None,
        slides: Optional[str] = None,
        base: str = "presentations",
        raw_manifest: Optional[str] = None,
    ) -> Path:
        deck = workspace_root / base / folder
        deck.mkdir(parents=True, exist_ok=True)
        if raw_manifest is not None:
            (deck / "package.json").write_text(raw_manifest, encoding="utf-8")
        elif manifest is not None:
            (deck / "package.json").write_text(json.dumps(manifest), encoding="utf-8")
        if slides is not None:
            (deck / "slides.md").write_text(slides, encoding="utf-8")
        return deck

    return _make
