"""Terminal output helpers for the hue-adapter command line."""

from __future__ import annotations

import platform
from collections.abc import Callable
from typing import TypeVar

# Check if we're running on Windows
COLORS_ENABLED = platform.system() != "Windows"

# ANSI color/style codes - used only if COLORS_ENABLED is True
RESET = "\033[0m"
BOLD = "\033[1m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
RED = "\033[31m"
BLUE = "\033[34m"
CYAN = "\033[36m"
MAGENTA = "\033[35m"


def styled_text(text: str, *styles: str) -> str:
    """Apply ANSI styles to text if colors are enabled.

    Args:
        text: The text to style
        *styles: ANSI style codes to apply

    Returns:
        The styled text, or the original text if colors are disabled
    """
    if not COLORS_ENABLED or not styles:
        return text

    style = "".join(styles)
    return f"{style}{text}{RESET}"


def color_swatch(hex_color: str, width: int = 2) -> str:
    """Render a block in the given ``#rrggbb`` color using a 24-bit background.

    Falls back to an empty string when colors are disabled.
    """
    if not COLORS_ENABLED:
        return ""
    digits = hex_color.lstrip("#")
    r, g, b = (int(digits[i : i + 2], 16) for i in (0, 2, 4))
    return f"\033[48;2;{r};{g};{b}m{' ' * width}{RESET}"


T = TypeVar("T")


class TerminalUI:
    """A simple UI class for terminal-based interfaces."""

    @staticmethod
    def header(title: str) -> None:
        print(f"\n{styled_text('╔' + '═' * 50 + '╗', BLUE, BOLD)}")
        print(
            f"{styled_text('║', BLUE, BOLD)} {styled_text(title.center(48), CYAN, BOLD)} {styled_text('║', BLUE, BOLD)}"
        )
        print(f"{styled_text('╚' + '═' * 50 + '╝', BLUE, BOLD)}")

    @staticmethod
    def success(message: str) -> None:
        print(f"{styled_text(f'✓ {message}', GREEN, BOLD)}")

    @staticmethod
    def info(message: str) -> None:
        print(f"{styled_text(message, CYAN)}")

    @staticmethod
    def error(message: str) -> None:
        print(f"{styled_text(f'✗ {message}', RED, BOLD)}")

    @staticmethod
    def warning(message: str) -> None:
        print(f"{styled_text(f'⚠ {message}', YELLOW, BOLD)}")

    @staticmethod
    def table(
        items: list[T], formatter: Callable[[T], str], border_style: str = CYAN
    ) -> None:
        """Print a simple table of items.

        Args:
            items: List of items to display
            formatter: Function to format each item
            border_style: ANSI style code for the table border
        """
        if not items:
            print(styled_text("No items to display", CYAN))
            return

        print(f"{styled_text('╭─ Items ' + '─' * 40 + '╮', border_style)}")
        for item in items:
            print(f"{styled_text('│', border_style)} {formatter(item)}")
        print(f"{styled_text('╰' + '─' * 48 + '╯', border_style)}")


console = TerminalUI()
