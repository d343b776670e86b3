"""In-memory stand-in for the editor that owns the text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass
class TextBuffer:
    """Text with a cursor, an optional selection and an optional narrowing.

    ``selection`` is an absolute ``(start, end)`` range. ``restriction``
    limits scans to a sub-range the way an editor's narrowing does.
    """

    text: str = ""
    cursor: int = 0
    selection: Optional[Tuple[int, int]] = None
    restriction: Optional[Tuple[int, int]] = None

    def __post_init__(self) -> None:
        self.cursor = max(0, min(self.cursor, len(self.text)))

    @property
    def accessible(self) -> Tuple[int, int]:
        if self.restriction is None:
            return 0, len(self.text)
        return self.restriction

    def narrow(self, start: int, end: int) -> None:
        if not 0 <= start <= end <= len(self.text):
            raise ValueError(f"cannot narrow to {start}..{end} of {len(self.text)} characters")
        self.restriction = (start, end)
        self.cursor = max(start, min(self.cursor, end))

    def widen(self) -> None:
        self.restriction = None

    def region(self) -> Optional[Tuple[int, int]]:
        """Active selection clipped to the accessible range, if any."""
        if self.selection is None:
            return None
        lower, upper = self.accessible
        start, end = sorted(self.selection)
        return max(start, lower), min(end, upper)

    def substring(self, start: int, end: int) -> str:
        return self.text[start:end]

    def replace(self, start: int, end: int, new: str) -> None:
        """Replace ``text[start:end]`` and shift the cursor and restriction."""
        delta = len(new) - (end - start)
        self.text = self.text[:start] + new + self.text[end:]
        if self.cursor >= end:
            self.cursor += delta
        elif self.cursor > start:
            self.cursor = start + len(new)
        if self.restriction is not None:
            lower, upper = self.restriction
            self.restriction = (lower, upper + delta)

    def insert(self, new: str) -> None:
        at = self.cursor
        self.replace(at, at, new)
        self.cursor = at + len(new)

    def rewrite(self, new_text: str, start: int, end: int) -> None:
        """Install ``new_text``, which differs from the current text only in
        ``start..end``; the cursor stays where it was when it sat inside.
        """
        delta = len(new_text) - len(self.text)
        self.text = new_text
        if self.cursor >= end:
            self.cursor += delta
        else:
            self.cursor = min(self.cursor, end + delta)
        if self.restriction is not None:
            lower, upper = self.restriction
            self.restriction = (lower, upper + delta)
        if self.selection is not None:
            sel_start, sel_end = sorted(self.selection)
            if sel_end >= end:
                sel_end += delta
            self.selection = (sel_start, sel_end)
