"""
Metadata scanner

Lists the immediate sub-folders of a presentations directory and builds one
PresentationMetadata record per folder that carries a manifest
(package.json), a content file (slides.md), or both.

Per-folder I/O failures never abort the scan: they are logged as warnings
and the affected field is left unset. Only a failure to list the
presentations directory itself (other than it not existing) propagates.
"""

from __future__ import annotations

import json
import locale
import logging
import os
import unicodedata
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

from presentation_manager.md_parse_utils import infer_title
from presentation_manager.models import ManifestInfo, PresentationMetadata

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

DEFAULT_PRESENTATIONS_DIR = "presentations"
DEFAULT_MANIFEST_NAME = "package.json"
DEFAULT_SLIDES_NAME = "slides.md"

_WARN_PREFIX = "[selector]"


# ---------------------------------------------------------------------------
# Per-folder probes
# ---------------------------------------------------------------------------

def read_manifest(manifest_path: Path) -> Optional[ManifestInfo]:
    """Read and parse a manifest. Returns None when missing or unusable."""
    try:
        raw = manifest_path.read_text(encoding="utf-8")
        data: Any = json.loads(raw)
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        logger.warning(f"{_WARN_PREFIX} Failed to read {manifest_path}: {e}")
        return None

    if not isinstance(data, dict):
        logger.warning(
            f"{_WARN_PREFIX} Failed to read {manifest_path}: "
            f"expected a JSON object, got {type(data).__name__}"
        )
        return None

    return ManifestInfo.from_json(data)


def slides_exist(slides_path: Path) -> bool:
    """Existence probe for the content file. Nothing is read."""
    try:
        slides_path.stat()
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.warning(f"{_WARN_PREFIX} Failed to check {slides_path}: {e}")
        return False


def infer_title_from_slides(slides_path: Path) -> Optional[str]:
    """Infer a title from the content file; None on any read failure."""
    try:
        text = slides_path.read_text(encoding="utf-8")
    except (OSError, ValueError) as e:
        logger.warning(f"{_WARN_PREFIX} Failed to read title from {slides_path}: {e}")
        return None
    return infer_title(text)


def inspect_presentation(
    folder: str,
    presentations_dir: Path,
    root: Path,
    manifest_name: str = DEFAULT_MANIFEST_NAME,
    slides_name: str = DEFAULT_SLIDES_NAME,
) -> Optional[PresentationMetadata]:
    """Build the metadata record for one folder, or None if it has neither
    a manifest nor a content file."""
    presentation_dir = presentations_dir / folder
    manifest = read_manifest(presentation_dir / manifest_name)
    slides_path = presentation_dir / slides_name
    has_slides = slides_exist(slides_path)

    if manifest is None and not has_slides:
        logger.debug(f"{_WARN_PREFIX} Skipping {presentation_dir}: no {manifest_name} or {slides_name}")
        return None

    title = None
    if manifest is not None:
        title = manifest.title or manifest.display_name
    if title is None and has_slides:
        title = infer_title_from_slides(slides_path)

    return PresentationMetadata(
        folder=folder,
        workspace=manifest.name if manifest else None,
        scripts=dict(manifest.scripts) if manifest else {},
        slides_path=str(slides_path) if has_slides else None,
        relative_slides_path=os.path.relpath(slides_path, root) if has_slides else None,
        title=title,
    )


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------

def _fold_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text.casefold())
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def folder_sort_key(folder: str) -> Tuple[str, str, str]:
    """Collation key for folder names.

    Base letters compare first, ignoring case and accents ("éclair" sorts
    between "Apple" and "zebra" even under the C locale). Ties fall back to
    the accented case-folded form, then to the exact name, so the order is
    total. Both folded forms go through ``locale.strxfrm`` and follow
    LC_COLLATE once the caller has set it.
    """
    folded = folder.casefold()
    return (locale.strxfrm(_fold_accents(folded)), locale.strxfrm(folded), folder)


# ---------------------------------------------------------------------------
# Scan
# ---------------------------------------------------------------------------

def load_presentation_metadata(
    root: PathLike,
    presentations_dir: Optional[PathLike] = None,
    *,
    manifest_name: str = DEFAULT_MANIFEST_NAME,
    slides_name: str = DEFAULT_SLIDES_NAME,
) -> List[PresentationMetadata]:
    """
    Scan *presentations_dir* (default ``<root>/presentations``) for decks.

    Args:
        root: Workspace root; relative slide paths are expressed against it.
        presentations_dir: Directory holding one sub-folder per deck. A
            relative path is resolved against *root*.
        manifest_name: Manifest file name inside each deck folder.
        slides_name: Content file name inside each deck folder.

    Returns:
        Metadata records sorted by folder name.

    Raises:
        OSError: The presentations directory exists but cannot be listed.
    """
    root_path = Path(root).resolve()
    if presentations_dir is None:
        pres_dir = root_path / DEFAULT_PRESENTATIONS_DIR
    else:
        pres_dir = root_path / Path(presentations_dir)

    try:
        with os.scandir(pres_dir) as it:
            folders = [e.name for e in it if e.is_dir(follow_symlinks=False)]
    except FileNotFoundError:
        logger.debug(f"{_WARN_PREFIX} No presentations directory at {pres_dir}")
        return []

    metadata: List[PresentationMetadata] = []
    for folder in folders:
        meta = inspect_presentation(folder, pres_dir, root_path, manifest_name, slides_name)
        if meta is not None:
            metadata.append(meta)

    metadata.sort(key=lambda m: folder_sort_key(m.folder))

    logger.info(f"{_WARN_PREFIX} {pres_dir}: {len(metadata)} presentations")
    return metadata


scan = load_presentation_metadata
