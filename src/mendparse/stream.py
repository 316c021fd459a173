"""Immutable input windows over a shared backing string."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace

from mendparse.config import DEFAULT_CONFIG, RepairConfig
from mendparse.errors import GrammarError


def _clamp(text: str, start: int, end: int) -> tuple[int, int]:
    end = min(max(end, 0), len(text))
    start = min(max(start, 0), len(text))
    if start > end:
        start = end  # flipped positions collapse onto end
    return start, end


def _single_char(char: str) -> None:
    if len(char) != 1:
        raise GrammarError(f"expected a single character, got {char!r}")


@dataclass(frozen=True)
class Stream:
    """A window ``text[start:end]`` that never copies ``text`` on slicing.

    ``eof`` marks a window whose end coincides with the physical end of the
    input. It is cleared on construction whenever ``end`` falls short of
    ``len(text)``.
    """

    text: str
    start: int = 0
    end: int | None = None
    eof: bool = True
    config: RepairConfig = field(default=DEFAULT_CONFIG, compare=False, repr=False)

    def __post_init__(self) -> None:
        end = len(self.text) if self.end is None else self.end
        start, end = _clamp(self.text, self.start, end)
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)
        # only a window reaching the end of its text can be at EOF
        object.__setattr__(self, "eof", self.eof and end == len(self.text))

    @classmethod
    def of(cls, text: str, config: RepairConfig | None = None) -> Stream:
        """Window over all of ``text``, the entry point of every parse."""
        return cls(text, 0, len(text), True, config or DEFAULT_CONFIG)

    def _window(self, text: str, start: int, end: int, eof: bool) -> Stream:
        return Stream(text, start, end, eof, self.config)

    # ── Queries ──────────────────────────────────────────────────

    def is_eof(self) -> bool:
        return self.eof and self.start == len(self.text)

    def is_empty(self) -> bool:
        return self.start == self.end

    def __len__(self) -> int:
        return self.end - self.start

    def __str__(self) -> str:
        return self.text[self.start:self.end]

    # ── Slicing ──────────────────────────────────────────────────

    def peek(self, n: int) -> Stream:
        """The next ``n`` characters without advancing.

        Returns this window unchanged when fewer than ``n`` remain.
        """
        if self.start + n > self.end:
            return self
        eof = self.eof and self.start + n == self.end
        return self._window(self.text, self.start, self.start + n, eof)

    def advance(self, n: int) -> Stream:
        if self.start + n > self.end:
            return self._window(self.text, self.end, self.end, self.eof)
        return self._window(self.text, self.start + n, self.end, self.eof)

    def head(self) -> Stream:
        if self.is_empty():
            raise GrammarError("cannot take the head of an empty window")
        eof = self.eof and self.start + 1 == self.end
        return self._window(self.text, self.start, self.start + 1, eof)

    def tail(self) -> Stream:
        if self.is_empty():
            raise GrammarError("cannot take the tail of an empty window")
        return self._window(self.text, self.start + 1, self.end, self.eof)

    def substring(self, start: int, end: int) -> Stream:
        """Slice by offsets relative to this window's start."""
        abs_start = self.start + start
        abs_end = min(self.start + end, self.end)
        eof = self.eof and abs_end == self.end
        return self._window(self.text, abs_start, abs_end, eof)

    def rebase(self, start: int) -> Stream:
        """Same backing text and end, starting at absolute offset ``start``."""
        return replace(self, start=start)

    # ── Materializing ────────────────────────────────────────────

    def concat(self, other: Stream) -> Stream:
        """Join two windows into a fresh string; ``eof`` follows ``other``."""
        s = str(self) + str(other)
        return self._window(s, 0, len(s), other.eof)

    @staticmethod
    def concat_all(streams: Iterable[Stream]) -> Stream:
        streams = list(streams)
        if not streams:
            return Stream("", 0, 0, False)
        joined = streams[0]
        for s in streams[1:]:
            joined = joined.concat(s)
        return joined

    def replace_char_at(self, index: int, char: str) -> Stream:
        _single_char(char)
        s = self.text[:index] + char + self.text[index + 1:]
        return self._window(s, self.start, self.end, self.eof)

    def insert_char_at(self, index: int, char: str) -> Stream:
        _single_char(char)
        s = self.text[:index] + char + self.text[index:]
        return self._window(s, self.start, self.end + 1, self.eof)

    def delete_char_at(self, index: int, char: str) -> Stream:
        _single_char(char)
        s = self.text[:index] + self.text[index + 1:]
        return self._window(s, self.start, self.end - 1, self.eof)
