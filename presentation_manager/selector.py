"""
Terminal selector for presentation options.

select_presentation() is a single blocking call that shows the options and
returns Selected(option) or Cancelled().

    interactive (TTY):  arrow keys / j k to move, 1-9 to jump, Enter to pick,
                        Esc, q or Ctrl-C to cancel
    fallback (pipe):    numbered list and a line prompt
"""

from __future__ import annotations

import os
import select
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Optional, TextIO

from presentation_manager.models import (
    Action,
    Cancelled,
    PresentationOption,
    Selected,
    Selection,
)
from presentation_manager.resolver import ActionLike, create_key, format_label

KEY_UP = "up"
KEY_DOWN = "down"
KEY_ENTER = "enter"
KEY_ESCAPE = "escape"
KEY_INTERRUPT = "interrupt"
KEY_EOF = "eof"

_ESCAPE_SEQUENCES = {
    b"[A": KEY_UP,
    b"[B": KEY_DOWN,
    b"OA": KEY_UP,
    b"OB": KEY_DOWN,
}

_HEADINGS = {
    Action.DEV: "Select a Slidev presentation to run",
    Action.EXPORT: "Select a Slidev presentation to export",
}

_HELP_TEXTS = {
    Action.DEV: "Use arrow keys to pick a presentation, press Enter to launch, or Q to cancel.",
    Action.EXPORT: "Use arrow keys to pick a presentation, press Enter to export, or Q to cancel.",
}

POINTER = "❯"


def default_heading(action: ActionLike) -> str:
    return _HEADINGS[Action.coerce(action)]


def default_help_text(action: ActionLike) -> str:
    return _HELP_TEXTS[Action.coerce(action)]


def _style(code: str, text: str, color: bool) -> str:
    if not color:
        return text
    return f"\033[{code}m{text}\033[0m"


# ---------------------------------------------------------------------------
# Menu state
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MenuItem:
    label: str
    key: str
    value: PresentationOption


class PresentationMenu:
    """Cursor state and key handling, independent of any terminal."""

    def __init__(
        self,
        options: List[PresentationOption],
        action: ActionLike,
        heading: Optional[str] = None,
        help_text: Optional[str] = None,
    ):
        if not options:
            raise ValueError("No presentation options to select from")
        self.action = Action.coerce(action)
        self.heading = heading if heading is not None else default_heading(self.action)
        self.help_text = help_text if help_text is not None else default_help_text(self.action)
        self.items = [
            MenuItem(label=format_label(o), key=create_key(o, self.action), value=o)
            for o in options
        ]
        self.cursor = 0

    def move(self, delta: int) -> None:
        self.cursor = (self.cursor + delta) % len(self.items)

    def handle_key(self, key: str) -> Optional[Selection]:
        """Apply one key press; returns a result once the menu is done."""
        if key in (KEY_UP, "k"):
            self.move(-1)
        elif key in (KEY_DOWN, "j"):
            self.move(1)
        elif key == KEY_ENTER:
            return Selected(self.items[self.cursor].value)
        elif key in ("q", "Q", KEY_ESCAPE, KEY_INTERRUPT, KEY_EOF):
            return Cancelled()
        elif len(key) == 1 and key in "123456789" and int(key) <= len(self.items):
            self.cursor = int(key) - 1
        return None

    def render(self, color: bool = False) -> List[str]:
        lines = [
            _style("1;36", self.heading, color),
            _style("2", self.help_text, color),
            "",
        ]
        for i, item in enumerate(self.items):
            if i == self.cursor:
                lines.append(_style("36", f"{POINTER} {item.label}", color))
            else:
                lines.append(f"  {item.label}")
        return lines


# ---------------------------------------------------------------------------
# Interactive loop
# ---------------------------------------------------------------------------

def run_menu(
    menu: PresentationMenu,
    keys: Iterable[str],
    stdout: TextIO,
    color: bool = False,
) -> Selection:
    """Draw *menu*, feed it *keys* and redraw after each one.

    Running out of keys counts as a cancellation.
    """
    drawn = 0
    try:
        for key in _prepend_none(keys):
            if key is not None:
                result = menu.handle_key(key)
                if result is not None:
                    return result
            if drawn:
                # Move to the start of the previous frame and clear below it
                stdout.write(f"\033[{drawn}F\033[J")
            lines = menu.render(color)
            stdout.write("\n".join(lines) + "\n")
            stdout.flush()
            drawn = len(lines)
    except KeyboardInterrupt:
        return Cancelled()
    return Cancelled()


def _prepend_none(keys: Iterable[str]) -> Iterator[Optional[str]]:
    yield None
    yield from keys


def read_keys(fd: int) -> Iterator[str]:
    """Yield normalized key names read from a cbreak-mode terminal."""
    while True:
        ch = os.read(fd, 1)
        if not ch:
            yield KEY_EOF
            return
        if ch == b"\x1b":
            ready, _, _ = select.select([fd], [], [], 0.05)
            if not ready:
                yield KEY_ESCAPE
                continue
            seq = os.read(fd, 2)
            key = _ESCAPE_SEQUENCES.get(seq)
            if key:
                yield key
            continue
        if ch in (b"\r", b"\n"):
            yield KEY_ENTER
        elif ch == b"\x03":
            yield KEY_INTERRUPT
        else:
            yield ch.decode("utf-8", errors="ignore")


@contextmanager
def _cbreak(fd: int, stdout: TextIO):
    import termios
    import tty

    saved = termios.tcgetattr(fd)
    stdout.write("\033[?25l")  # hide cursor
    try:
        tty.setcbreak(fd)
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)
        stdout.write("\033[?25h")
        stdout.flush()


def _supports_raw_input() -> bool:
    return sys.platform != "win32"


# ---------------------------------------------------------------------------
# Line-prompt fallback
# ---------------------------------------------------------------------------

def prompt_menu(menu: PresentationMenu, stdin: TextIO, stdout: TextIO) -> Selection:
    """Numbered-list selection for non-interactive terminals."""
    stdout.write(menu.heading + "\n\n")
    for i, item in enumerate(menu.items, start=1):
        stdout.write(f"  {i}. {item.label}\n")
    stdout.write("\n")

    count = len(menu.items)
    while True:
        stdout.write(f"Select [1-{count}] or q to cancel: ")
        stdout.flush()
        line = stdin.readline()
        if not line:
            return Cancelled()
        answer = line.strip()
        if answer.lower() in ("", "q"):
            return Cancelled()
        if answer.isdecimal() and 1 <= int(answer) <= count:
            return Selected(menu.items[int(answer) - 1].value)
        stdout.write(f"Invalid choice: {answer}\n")


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

Selector = Callable[..., Selection]


def select_presentation(
    options: List[PresentationOption],
    action: ActionLike,
    *,
    heading: Optional[str] = None,
    help_text: Optional[str] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> Selection:
    """
    Let the user pick one option.

    Args:
        options: Options to offer (must not be empty).
        action: Action the options were resolved for.
        heading: Title line (defaults per action).
        help_text: Usage hint (defaults per action).
        stdin: Input stream (defaults to sys.stdin).
        stdout: Output stream (defaults to sys.stdout).

    Returns:
        Selected(option) or Cancelled().

    Raises:
        ValueError: If *options* is empty.
    """
    menu = PresentationMenu(options, action, heading, help_text)
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    if not (_supports_raw_input() and stdin.isatty() and stdout.isatty()):
        return prompt_menu(menu, stdin, stdout)

    fd = stdin.fileno()
    with _cbreak(fd, stdout):
        return run_menu(menu, read_keys(fd), stdout, color=True)
