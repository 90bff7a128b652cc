"""
Palette and glyphs shared by DataLathe TUI widgets and screens.
"""

# Brand palette (Rich color names / hex)
CYAN = "#22d3ee"
VIOLET = "#a78bfa"
MUTED = "#8b949e"
BORDER = "#3b4252"
SUCCESS = "#4ade80"
ERROR = "#f87171"

# Glyphs
PROMPT = "\u276f"  # ❯
CURSOR = "\u203a"  # ›
CHECKED = "\u2611"  # ☑
UNCHECKED = "\u2610"  # ☐
DOT = "\u25cf"  # ●
MIDDLE_DOT = "\u00b7"  # ·
EXPANDED = "\u25be"  # ▾
COLLAPSED = "\u25b8"  # ▸
BRANCH = "\u251c\u2500"  # ├─
LAST_BRANCH = "\u2514\u2500"  # └─
ARROW_UP = "\u2191"  # ↑
ARROW_DOWN = "\u2193"  # ↓
