"""Source text and span tracking for diagnostics."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Span:
    """A range within a source text, 1-indexed and inclusive."""

    file: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def __str__(self) -> str:
        return f"{self.file}:{self.start_line}:{self.start_col}"


class SourceText:
    """Input text with line access for diagnostics."""

    def __init__(self, content: str, filename: str = "<input>") -> None:
        self.filename = filename
        self.content = content
        self.lines = content.splitlines()

    def line_at(self, n: int) -> str:
        """Return the 1-indexed line, or empty string if out of range."""
        if 1 <= n <= len(self.lines):
            return self.lines[n - 1]
        return ""

    def position(self, offset: int) -> tuple[int, int]:
        """Line and column of a character offset."""
        offset = min(max(offset, 0), len(self.content))
        line = self.content.count("\n", 0, offset) + 1
        # rfind returns -1 on the first line, which gives the right column
        column = offset - self.content.rfind("\n", 0, offset)
        return line, column

    def span(self, offset: int, length: int = 1) -> Span:
        start_line, start_col = self.position(offset)
        end_line, end_col = self.position(offset + max(length, 1) - 1)
        return Span(self.filename, start_line, start_col, end_line, end_col)

    def span_text(self, span: Span) -> str:
        """Extract the text covered by a span."""
        if span.start_line == span.end_line:
            line = self.line_at(span.start_line)
            return line[span.start_col - 1 : span.end_col]
        parts = []
        for ln in range(span.start_line, span.end_line + 1):
            line = self.line_at(ln)
            if ln == span.start_line:
                parts.append(line[span.start_col - 1 :])
            elif ln == span.end_line:
                parts.append(line[: span.end_col])
            else:
                parts.append(line)
        return "\n".join(parts)
