"""
Terminal Display - paints frames as colored ASCII art with blessed.

The whole terminal is used: a box border frames the viewport, the title is
shown in the top border and the status line in the bottom border.

Example:
    from asciiplay.display import TerminalDisplay

    display = TerminalDisplay(refresh_rate=40)
    display.render().load(frame_set)

Controls:
    Space           - Pause / Resume
    Enter           - Stop
    ?               - Show / hide help
    Q / Escape      - Quit
"""

from __future__ import annotations

import asyncio
import logging
import sys
from contextlib import ExitStack
from typing import TYPE_CHECKING, Callable

from blessed import Terminal

from ..config import settings
from ..dimension import Dimension
from .display import Display

if TYPE_CHECKING:
    from ..frames import Frame

logger = logging.getLogger(__name__)

# ANSI escape codes
ESC = "\033"
CLEAR_SCREEN = f"{ESC}[2J"
RESET = f"{ESC}[0m"
BOLD = f"{ESC}[1m"
BORDER_COLOR = f"{ESC}[38;2;100;150;200m"
TEXT_COLOR = f"{ESC}[38;2;200;200;255m"

# Box drawing characters for the viewport border
BOX_TL = "┌"
BOX_TR = "┐"
BOX_BL = "└"
BOX_BR = "┘"
BOX_H = "─"
BOX_V = "│"

# Seconds between two keyboard polls
KEY_POLL_INTERVAL = 0.02


def move(x: int, y: int) -> str:
    """Cursor movement to 0-based column ``x`` and row ``y``."""
    return f"{ESC}[{y + 1};{x + 1}H"


class KeyboardHandler:
    """Dispatch key presses read from a blessed Terminal to bound handlers."""

    def __init__(self, terminal: Terminal):
        self.terminal = terminal
        self._bindings: dict[str, Callable[[], None]] = {}
        self._char_bindings: dict[str, Callable[[], None]] = {}

    def bind(self, key: str, handler: Callable[[], None]) -> None:
        """Bind a handler to a key.

        Key can be a key name (e.g., 'KEY_ENTER', 'KEY_ESCAPE') or a character.
        """
        if key.startswith("KEY_"):
            self._bindings[key] = handler
        else:
            self._char_bindings[key] = handler

    def unbind(self, key: str) -> None:
        """Remove a key binding."""
        if key.startswith("KEY_"):
            self._bindings.pop(key, None)
        else:
            self._char_bindings.pop(key, None)

    def process(self, timeout: float | None = 0) -> bool:
        """Read one key press and call its handler.

        :param timeout: Seconds to wait for a key (0 = do not block)
        :return: True if a bound key was pressed
        """
        key = self.terminal.inkey(timeout=timeout)
        if not key:
            return False

        # Named keys (enter, escape, ...) take precedence over characters
        if key.name and key.name in self._bindings:
            self._bindings[key.name]()
            return True

        char = str(key)
        if char in self._char_bindings:
            self._char_bindings[char]()
            return True

        logger.debug(f"Unbound key {key!r}")
        return False


class HelpOverlay:
    """Box listing the keyboard shortcuts, centered on the screen."""

    TITLE = "Help Instructions"

    SHORTCUTS = (
        ("Pause", "Space"),
        ("Resume", "Space"),
        ("Stop", "Enter (same as Quit)"),
        ("Show/Hide Help", "?"),
        ("Quit", "Esc, Q, Control+C"),
    )

    @classmethod
    def lines(cls) -> list[str]:
        """Text lines of the overlay without border."""
        label_width = max(len(label) for label, _ in cls.SHORTCUTS)
        lines = [cls.TITLE, "", "Keyboard Shortcuts:"]
        lines += [f"{label.ljust(label_width)} - {keys}" for label, keys in cls.SHORTCUTS]
        return lines

    @classmethod
    def render(cls, term_w: int, term_h: int) -> str:
        """Render the overlay centered on a ``term_w`` x ``term_h`` screen."""
        lines = cls.lines()
        inner_width = max(len(line) for line in lines) + 2
        box_width = inner_width + 2
        box_height = len(lines) + 2

        start_x = max(0, (term_w - box_width) // 2)
        start_y = max(0, (term_h - box_height) // 2)

        output = [move(start_x, start_y), BORDER_COLOR, BOX_TL, BOX_H * inner_width, BOX_TR]
        for i, line in enumerate(lines):
            text = f" {line} ".ljust(inner_width)
            if i == 0:
                text = f"{BOLD}{TEXT_COLOR}{text}{RESET}{BORDER_COLOR}"
            else:
                text = f"{TEXT_COLOR}{text}{BORDER_COLOR}"
            output.append(f"{move(start_x, start_y + i + 1)}{BOX_V}{text}{BOX_V}")
        output.append(f"{move(start_x, start_y + box_height - 1)}{BOX_BL}{BOX_H * inner_width}{BOX_BR}")
        output.append(RESET)
        return "".join(output)


class TerminalDisplay(Display):
    """Display painting into the full terminal using blessed.

    :param refresh_rate: Milliseconds between two painted frames
    :param title: Title shown while nothing is loaded
    :param status: Initial status text
    :param terminal: Terminal to draw on (created on render if None)
    :param fill_character: Character drawn for colored cells
    """

    def __init__(
        self,
        refresh_rate: int | None = None,
        title: str | None = None,
        status: str | None = None,
        *,
        terminal: Terminal | None = None,
        fill_character: str | None = None,
    ):
        self._terminal = terminal
        self._exit_stack: ExitStack | None = None
        self._keyboard: KeyboardHandler | None = None
        self._key_task: asyncio.Task | None = None
        self._showing_help = False
        self._last_size: tuple[int, int] = (0, 0)
        self._rows: list[str] = []
        self.fill_character = fill_character or settings.FILL_CHARACTER
        super().__init__(refresh_rate, title, status)

    # -------------------------------------------------------------------------
    # Display
    # -------------------------------------------------------------------------

    def get_dimension(self) -> Dimension | None:
        if not self.is_rendered():
            return None
        return Dimension(max(self._terminal.width - 2, 0), max(self._terminal.height - 2, 0))

    def is_rendered(self) -> bool:
        return self._exit_stack is not None

    def is_showing_help(self) -> bool:
        return self._showing_help

    def render(self) -> "TerminalDisplay":
        """Enter fullscreen mode and start listening for keys.

        Rendering an already rendered display just redraws it.
        """
        if self.is_rendered():
            self.update()
            return self

        if self._terminal is None:
            self._terminal = Terminal()
        term = self._terminal

        stack = ExitStack()
        stack.enter_context(term.fullscreen())
        stack.enter_context(term.cbreak())
        stack.enter_context(term.hidden_cursor())
        self._exit_stack = stack

        self._keyboard = KeyboardHandler(term)
        self._setup_keyboard_bindings()
        try:
            self._key_task = asyncio.get_running_loop().create_task(self._poll_keys())
        except RuntimeError:
            logger.debug("No running event loop, keyboard input disabled")

        self._last_size = (0, 0)
        self.update()
        return self

    def paint(self, frame: "Frame", previous_frame: "Frame | None") -> None:
        paint = frame.get_paint(self.get_dimension(), previous_frame, self.fill_character)
        self._rows = list(paint.rows)
        self.update()

    def update(self) -> None:
        term = self._terminal
        width, height = term.width, term.height
        output = []

        # Full redraw after resizes and when the help overlay was closed
        if (width, height) != self._last_size:
            self._last_size = (width, height)
            output.append(CLEAR_SCREEN)

        output.append(self._draw_border(width, height))
        for i, row in enumerate(self._rows[: max(height - 2, 0)]):
            output.append(f"{move(1, i + 1)}{row}")

        if self._showing_help:
            output.append(HelpOverlay.render(width, height))

        sys.stdout.write("".join(output))
        sys.stdout.flush()

    def show_help(self) -> "TerminalDisplay":
        self._showing_help = True
        if self.is_rendered():
            self.update()
        return self

    def hide_help(self) -> "TerminalDisplay":
        self._showing_help = False
        if self.is_rendered():
            self._last_size = (0, 0)
            self.update()
        return self

    def unload(self) -> "TerminalDisplay":
        self._rows = []
        super().unload()
        return self

    def destroy(self) -> None:
        """Restore the terminal and release the loaded frame set."""
        self._teardown()
        super().destroy()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _teardown(self) -> None:
        if self._key_task is not None:
            self._key_task.cancel()
            self._key_task = None
        self._keyboard = None
        self._showing_help = False
        if self._exit_stack is not None:
            stack, self._exit_stack = self._exit_stack, None
            stack.close()

    def _setup_keyboard_bindings(self) -> None:
        kb = self._keyboard
        if not kb:
            return

        kb.bind(" ", self._on_toggle)
        kb.bind("KEY_ENTER", self._on_stop)
        kb.bind("?", self._on_help)

        kb.bind("q", self._on_quit)
        kb.bind("Q", self._on_quit)
        kb.bind("KEY_ESCAPE", self._on_quit)
        kb.bind("\x03", self._on_quit)  # Ctrl+C when delivered as a character

    async def _poll_keys(self) -> None:
        while self._keyboard is not None:
            try:
                self._keyboard.process(timeout=0)
            except Exception as e:
                logger.exception("Key handler failed")
                if self.controller is not None:
                    self.controller.abort(e)
                return
            await asyncio.sleep(KEY_POLL_INTERVAL)

    def _on_toggle(self) -> None:
        controller = self.controller
        if controller is None:
            return
        if controller.player.playing:
            controller.pause()
        else:
            controller.resume()

    def _on_stop(self) -> None:
        if self.controller is not None:
            self.controller.stop()

    def _on_help(self) -> None:
        if self.controller is not None:
            self.controller.help()

    def _on_quit(self) -> None:
        if self.controller is not None:
            self.controller.destroy()
        else:
            self.destroy()

    def _draw_border(self, width: int, height: int) -> str:
        """Box border with the title on top and the status at the bottom."""
        if width < 2 or height < 2:
            return ""

        inner = width - 2
        top = self._border_line(BOX_TL, BOX_TR, inner, self.title, center=True)
        bottom = self._border_line(BOX_BL, BOX_BR, inner, self.status, center=False)

        output = [f"{move(0, 0)}{BORDER_COLOR}{top}"]
        for row in range(1, height - 1):
            output.append(f"{move(0, row)}{BOX_V}{move(width - 1, row)}{BOX_V}")
        output.append(f"{move(0, height - 1)}{bottom}{RESET}")
        return "".join(output)

    @staticmethod
    def _border_line(left: str, right: str, inner: int, text: str, center: bool) -> str:
        label = f" {text} " if text else ""
        if len(label) > inner - 2:
            label = label[: max(inner - 2, 0)]
        if not label:
            return left + BOX_H * inner + right

        start = (inner - len(label)) // 2 if center else 1
        return (
            left
            + BOX_H * start
            + TEXT_COLOR
            + label
            + BORDER_COLOR
            + BOX_H * (inner - start - len(label))
            + right
        )


__all__ = ["TerminalDisplay", "KeyboardHandler", "HelpOverlay"]
