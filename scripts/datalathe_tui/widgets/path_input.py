"""
File path input with shell-style Tab completion.

Tab completes a unique match outright, otherwise extends the value to the
longest common prefix and lists up to MAX_SHOWN candidates.
"""

import os

from textual.binding import Binding
from textual.message import Message
from textual.widgets import Input

MAX_SHOWN = 5


def path_completions(text: str) -> list[str]:
    """
    Filesystem entries matching ``text``, sorted, directories with a trailing "/".

    Unreadable or missing directories yield no completions.
    """
    if text.endswith("/"):
        directory, prefix = text, ""
    else:
        directory, prefix = os.path.dirname(text), os.path.basename(text)
    try:
        entries = list(os.scandir(directory or "."))
    except OSError:
        return []

    matches = []
    for entry in entries:
        if not entry.name.startswith(prefix):
            continue
        full = os.path.join(directory, entry.name)
        try:
            is_dir = entry.is_dir()
        except OSError:
            is_dir = False
        matches.append(full + "/" if is_dir else full)
    return sorted(matches)


def common_prefix(strings: list[str]) -> str:
    if not strings:
        return ""
    return os.path.commonprefix(strings)


class PathInput(Input):
    """An Input that completes file paths on Tab."""

    BINDINGS = [
        Binding("tab", "complete", "Complete", show=False),
    ]

    class Completed(Message):
        """Tab was pressed; ``completions`` holds the candidates to list (may be empty)."""

        def __init__(self, path_input: "PathInput", completions: list[str]) -> None:
            super().__init__()
            self.path_input = path_input
            self.completions = completions

    def __init__(self, value: str = "", **kwargs):
        kwargs.setdefault("placeholder", "/path/to/file.csv")
        super().__init__(value=value, **kwargs)
        self.completions: list[str] = []

    def complete(self) -> list[str]:
        """Apply Tab completion to the current value and return candidates to show."""
        matches = path_completions(self.value)
        if len(matches) == 1:
            self._set_value(matches[0])
            self.completions = []
        elif matches:
            shared = common_prefix(matches)
            if len(shared) > len(self.value):
                self._set_value(shared)
            self.completions = matches[:MAX_SHOWN]
        else:
            self.completions = []
        return self.completions

    def _set_value(self, value: str) -> None:
        self.value = value
        self.cursor_position = len(value)

    def action_complete(self) -> None:
        self.post_message(self.Completed(self, self.complete()))

    def watch_value(self, value: str) -> None:
        # Typing invalidates any listed candidates
        if self.completions and not any(c.startswith(value) for c in self.completions):
            self.completions = []
            self.post_message(self.Completed(self, []))
