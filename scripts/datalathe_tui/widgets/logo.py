"""
DataLathe logo for the connect screen, plus the compact header wordmark.

The art is a character map scaled to the terminal with nearest-neighbour
sampling: '=' cyan bar, '*' violet arc, '#'/'%' indigo leaf.
"""

from rich.text import Text
from textual.widget import Widget

from .theme import CYAN, VIOLET

INDIGO = "#6366f1"

BLOCK = "\u2588"  # █

LOGO_LINES = [
    "     ==================          ******",
    "     ===================       **********",
    "     ===================      ************",
    "                              *************",
    "=========================     **************",
    "=========================     ***************",
    "                              ***************",
    "      ==================      **************",
    "      ==================      ************",
    "",
    "     ===============       %%%%%%%%%%%%%%%%%%%",
    "     ==============      %####################",
    "     ============      %#####################%",
    "                     %######################",
    "       =======     %######################%",
    "       =====     %######################",
    "               %#####################%",
    "              %##################%",
]

SOURCE_WIDTH = max(len(line) for line in LOGO_LINES)
SOURCE_HEIGHT = len(LOGO_LINES)

COLORS = {"=": CYAN, "*": VIOLET, "#": INDIGO, "%": INDIGO}


def scale_logo(width: int, height: int) -> list[str]:
    """Resample the character map to ``width`` x ``height``."""
    padded = [line.ljust(SOURCE_WIDTH) for line in LOGO_LINES]
    rows = []
    for r in range(height):
        src = padded[r * SOURCE_HEIGHT // height]
        rows.append("".join(src[c * SOURCE_WIDTH // width] for c in range(width)))
    return rows


def logo_text(max_width: int, max_height: int) -> Text:
    scale = min(max_width / SOURCE_WIDTH, max_height / SOURCE_HEIGHT, 1.0)
    width = max(20, round(SOURCE_WIDTH * scale))
    height = max(8, round(SOURCE_HEIGHT * scale))

    text = Text()
    for i, row in enumerate(scale_logo(width, height)):
        if i:
            text.append("\n")
        for ch in row.rstrip():
            color = COLORS.get(ch)
            text.append(BLOCK if color else " ", style=color or "")
    return text


def wordmark() -> Text:
    return Text.assemble(("Data", f"bold {CYAN}"), ("Lathe", f"bold {VIOLET}"))


class Logo(Widget):
    """Logo sized to about two thirds of the width and half of the height of the screen."""

    DEFAULT_CSS = """
    Logo {
        width: auto;
        height: auto;
    }
    """

    def render(self) -> Text:
        size = self.app.size
        return logo_text(int(size.width * 0.65), int(size.height * 0.5))
