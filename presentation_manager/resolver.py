"""
Option resolver

Turns scanner metadata into runnable options for one action, and formats the
display label and identity key the selector shows for each option.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Union

from presentation_manager.models import (
    Action,
    PresentationMetadata,
    PresentationOption,
    RunKind,
    SlidesRun,
    WorkspaceRun,
)

ActionLike = Union[Action, str]


def create_option(
    meta: PresentationMetadata,
    action: ActionLike,
) -> Optional[PresentationOption]:
    """
    Resolve one metadata record for *action*.

    A workspace that declares a script named after the action wins; otherwise
    a content file makes the folder directly runnable; otherwise the folder
    has nothing to offer for this action.
    """
    action = Action.coerce(action)

    if meta.workspace and action.value in meta.scripts:
        run = WorkspaceRun(workspace=meta.workspace, action=action)
    elif meta.slides_path:
        run = SlidesRun(
            slides_path=meta.slides_path,
            relative_slides_path=meta.relative_slides_path,
            action=action,
        )
    else:
        return None

    return PresentationOption(
        folder=meta.folder,
        workspace=meta.workspace,
        title=meta.title,
        run=run,
        slides_path=meta.slides_path,
        relative_slides_path=meta.relative_slides_path,
    )


resolve = create_option


def resolve_all(
    metadata: Iterable[PresentationMetadata],
    action: ActionLike,
) -> List[PresentationOption]:
    """Resolve every record, dropping the unrunnable ones. Order is kept."""
    action = Action.coerce(action)
    options = []
    for meta in metadata:
        option = create_option(meta, action)
        if option is not None:
            options.append(option)
    return options


def workspace_slug(workspace: Optional[str]) -> str:
    """Last path segment of a workspace name (``@org/deck`` -> ``deck``)."""
    name = workspace or ""
    if "/" in name:
        return name.rsplit("/", 1)[-1]
    return name


def format_label(option: PresentationOption) -> str:
    workspace_name = option.workspace or ""
    slug = workspace_slug(workspace_name)
    is_workspace = option.run.kind == RunKind.WORKSPACE

    base_title = option.title if option.title is not None else option.folder
    if is_workspace:
        detail = workspace_name
    else:
        detail = option.run.relative_slides_path or ""
    prefix = "[workspace]" if is_workspace else "[slides]"

    # Exact comparison: a title differing from the slug only by case still
    # shows both.
    if is_workspace and option.title and slug and option.title != slug:
        return f"{prefix} {base_title} ({slug})"

    if is_workspace and slug and slug != option.folder:
        return f"{prefix} {option.folder} ({workspace_name})"

    return f"{prefix} {base_title} ({detail})"


def create_key(option: PresentationOption, action: ActionLike) -> str:
    action = Action.coerce(action)
    run = option.run
    if isinstance(run, WorkspaceRun):
        detail = run.workspace or option.folder
    else:
        detail = run.relative_slides_path or ""
    return f"{action.value}::{option.folder}::{run.kind.value}::{detail}"
