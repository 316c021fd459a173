"""Parse error variants and Rust-style diagnostic rendering."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar, Union

from mendparse.edits import edit_distance
from mendparse.source import SourceText, Span

if TYPE_CHECKING:
    from mendparse.outcome import Failure
    from mendparse.stream import Stream


class GrammarError(Exception):
    """A combinator was misused. Never turned into a parse failure."""


class InfiniteLoopError(GrammarError):
    """A repeated parser succeeded without consuming input."""


# ── Error variants ───────────────────────────────────────────────


@dataclass(frozen=True, kw_only=True)
class ParseError:
    """What a failing parser wanted and what repairing the input cost."""

    code: ClassVar[str] = "E000"

    edit_count: int = 0
    repaired: Stream | None = field(default=None, compare=False)
    causes: tuple[ParseError, ...] | None = None

    def expected_str(self) -> str:
        raise NotImplementedError

    def explain(self) -> str:
        raise NotImplementedError

    def root_causes(self) -> tuple[ParseError, ...] | None:
        return self.causes

    def min_edit(self, actual: str, expected: str) -> int:
        """Edits needed to turn ``actual`` into ``expected``.

        Errors that went through repair already know the answer.
        """
        if self.repaired is not None:
            return self.edit_count
        return edit_distance(actual, expected)

    def with_repair(self, edit_count: int, repaired: Stream | None) -> ParseError:
        return replace(self, edit_count=edit_count, repaired=repaired)

    def describe(self) -> str:
        msg = f"expected {self.explain()}"
        if self.edit_count:
            plural = "" if self.edit_count == 1 else "s"
            msg += f", {self.edit_count} edit{plural} required"
        return msg

    def __str__(self) -> str:
        return f"{type(self).__name__} -> {self.explain()}"


@dataclass(frozen=True, kw_only=True)
class ItemError(ParseError):
    code: ClassVar[str] = "E100"

    def expected_str(self) -> str:
        return ""

    def explain(self) -> str:
        return "any character"


@dataclass(frozen=True)
class SatError(ParseError):
    code: ClassVar[str] = "E101"

    char_class: frozenset[str]

    def expected_str(self) -> str:
        return min(self.char_class) if self.char_class else ""

    def explain(self) -> str:
        chars = sorted(self.char_class)
        shown = ", ".join(repr(c) for c in chars[:5])
        if len(chars) > 5:
            shown += f", ... ({len(chars)} total)"
        return f"one of {shown}"


@dataclass(frozen=True)
class CharError(ParseError):
    code: ClassVar[str] = "E102"

    char: str
    edit_count: int = field(kw_only=True)
    repaired: Stream | None = field(kw_only=True, compare=False)

    def expected_str(self) -> str:
        return self.char

    def explain(self) -> str:
        return f"character {self.char!r}"


@dataclass(frozen=True, kw_only=True)
class LetterError(ParseError):
    code: ClassVar[str] = "E103"

    edit_count: int
    repaired: Stream | None = field(compare=False)

    def expected_str(self) -> str:
        return "a"

    def explain(self) -> str:
        return "letter"


@dataclass(frozen=True, kw_only=True)
class DigitError(ParseError):
    code: ClassVar[str] = "E104"

    edit_count: int
    repaired: Stream | None = field(compare=False)

    def expected_str(self) -> str:
        return "0"

    def explain(self) -> str:
        return "digit"


@dataclass(frozen=True, kw_only=True)
class WhitespaceError(ParseError):
    code: ClassVar[str] = "E105"

    edit_count: int
    repaired: Stream | None = field(compare=False)

    def expected_str(self) -> str:
        return " "

    def explain(self) -> str:
        return "whitespace"


@dataclass(frozen=True)
class StringError(ParseError):
    code: ClassVar[str] = "E106"

    literal: str
    edit_count: int = field(kw_only=True)
    repaired: Stream | None = field(kw_only=True, compare=False)
    label: str | None = field(default=None, kw_only=True)

    def expected_str(self) -> str:
        return self.literal

    def explain(self) -> str:
        return self.label or repr(self.literal)


@dataclass(frozen=True)
class BetweenLeftError(ParseError):
    code: ClassVar[str] = "E107"

    cause: ParseError

    def expected_str(self) -> str:
        return self.cause.expected_str()

    def explain(self) -> str:
        return f"opening {self.cause.explain()}"

    def root_causes(self) -> tuple[ParseError, ...] | None:
        return (self.cause, *(self.causes or ()))


@dataclass(frozen=True)
class BetweenRightError(ParseError):
    code: ClassVar[str] = "E108"

    cause: ParseError

    def expected_str(self) -> str:
        return self.cause.expected_str()

    def explain(self) -> str:
        return f"closing {self.cause.explain()}"

    def root_causes(self) -> tuple[ParseError, ...] | None:
        return (self.cause, *(self.causes or ()))


@dataclass(frozen=True, kw_only=True)
class BindError(ParseError):
    """Both the first attempt and the retry on repaired input failed."""

    code: ClassVar[str] = "E109"

    causes: tuple[ParseError, ...]

    def expected_str(self) -> str:
        return self.causes[0].expected_str()

    def explain(self) -> str:
        return self.causes[0].explain()


AnyParseError = Union[
    ItemError, SatError, CharError, LetterError, DigitError,
    WhitespaceError, StringError, BetweenLeftError, BetweenRightError,
    BindError,
]


# ── Diagnostics ──────────────────────────────────────────────────


class Severity(Enum):
    ERROR = "error"


# ANSI color codes
_COLORS = {
    Severity.ERROR: "\033[1;31m",  # bold red
}
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"


@dataclass(frozen=True)
class DiagnosticLabel:
    """Points to a specific source location."""

    span: Span
    message: str


@dataclass(frozen=True)
class Suggestion:
    """A suggested fix."""

    message: str
    replacement: str


@dataclass
class Diagnostic:
    """A single diagnostic message with optional labels and suggestions."""

    severity: Severity
    code: str
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)
    suggestions: list[Suggestion] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)


def _label_message(error: AnyParseError) -> str:
    match error:
        case ItemError():
            return "input ends here"
        case (SatError() | CharError() | LetterError() | DigitError()
              | WhitespaceError() | StringError()):
            return f"{error.explain()} needed here"
        case BetweenLeftError() | BetweenRightError():
            return f"unbalanced: {error.explain()} needed here"
        case BindError():
            return f"first of {len(error.causes)} failures"
    return error.explain()


def _flatten_causes(error: ParseError) -> list[ParseError]:
    found: list[ParseError] = []
    for cause in error.root_causes() or ():
        found.append(cause)
        found.extend(_flatten_causes(cause))
    return found


def diagnose(failure: Failure, source: str, filename: str = "<input>") -> Diagnostic:
    """Build a diagnostic for a failure against the original ``source``."""
    error = failure.error
    text = SourceText(source, filename)
    expected = error.expected_str()
    span = text.span(failure.position, max(len(expected), 1))
    diag = Diagnostic(
        severity=Severity.ERROR,
        code=error.code,
        message=error.describe(),
        labels=[DiagnosticLabel(span, _label_message(error))],
    )
    found = text.span_text(span)
    if found and found != expected:
        diag.notes.append(f"found {found!r}")
    for cause in _flatten_causes(error):
        diag.notes.append(f"caused by: {cause.describe()}")
    if error.repaired is not None and error.edit_count:
        repaired = str(error.repaired).split("\n", 1)[0][:40]
        diag.suggestions.append(Suggestion("repaired input", repaired))
    return diag


class DiagnosticRenderer:
    """Renders diagnostics in Rust-style format with colors."""

    def __init__(self, *, color: bool = True) -> None:
        self.color = color
        self._file_cache: dict[str, list[str]] = {}

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def add_source(self, filename: str, content: str) -> None:
        """Register in-memory text so labels on ``filename`` show source lines."""
        self._file_cache[filename] = content.splitlines()

    def _get_source_line(self, filename: str, line_num: int) -> str | None:
        """Load and cache source file, return the 1-indexed line."""
        if filename not in self._file_cache:
            try:
                path = Path(filename)
                if path.is_file():
                    self._file_cache[filename] = path.read_text().splitlines()
                else:
                    self._file_cache[filename] = []
            except OSError:
                self._file_cache[filename] = []
        lines = self._file_cache[filename]
        if 1 <= line_num <= len(lines):
            return lines[line_num - 1]
        return None

    def render(self, diag: Diagnostic) -> str:
        lines: list[str] = []
        sev = diag.severity
        color = _COLORS[sev]

        # Header: error[E102]: message
        lines.append(
            f"{self._c(color)}{sev.value}[{diag.code}]{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        )

        for label in diag.labels:
            span = label.span
            lines.append(f"  {self._c(_BLUE)}-->{self._c(_RESET)} {span}")
            gutter = f"{span.start_line:>4}"
            lines.append(f"  {self._c(_BLUE)}   |{self._c(_RESET)}")

            source_line = self._get_source_line(span.file, span.start_line)
            if source_line is not None:
                lines.append(
                    f"  {self._c(_BLUE)}{gutter} |{self._c(_RESET)} {source_line}"
                )

            if span.start_line == span.end_line:
                caret_len = max(1, span.end_col - span.start_col + 1)
                padding = " " * (span.start_col - 1)
                carets = "^" * caret_len
                lines.append(
                    f"  {self._c(_BLUE)}   |{self._c(_RESET)} "
                    f"{padding}{self._c(color)}{carets}{self._c(_RESET)}"
                )

            if label.message:
                lines.append(
                    f"  {self._c(_BLUE)}   |{self._c(_RESET)}   "
                    f"{self._c(color)}{label.message}{self._c(_RESET)}"
                )

        for note in diag.notes:
            lines.append(f"  {self._c(_BLUE)}={self._c(_RESET)} note: {note}")

        for suggestion in diag.suggestions:
            lines.append(
                f"  {self._c(_BLUE)}try:{self._c(_RESET)} {suggestion.replacement}"
            )

        return "\n".join(lines)


class ParseFailed(Exception):
    """Raised by ``parse_value`` when the input could not be parsed."""

    def __init__(self, failure: Failure, diagnostic: Diagnostic) -> None:
        self.failure = failure
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)
