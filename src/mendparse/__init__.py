"""Parser combinators that repair malformed input by minimum edit distance."""

from __future__ import annotations

from typing import Any, TypeVar

from mendparse.combinators import (
    EOF,
    EOFMark,
    appfun,
    between,
    bind,
    char,
    choice,
    choices,
    delay,
    digit,
    eof,
    fail,
    fresult,
    item,
    left,
    letter,
    lower,
    many,
    many1,
    nl,
    result,
    right,
    sat,
    seq,
    str_sat,
    string,
    succeed,
    upper,
    ws,
    ws1,
    zero,
)
from mendparse.config import DEFAULT_CONFIG, RepairConfig, find_config, load_config
from mendparse.edits import EditOp, EditScript, apply_edits, edit_distance, edit_script
from mendparse.errors import (
    AnyParseError,
    BetweenLeftError,
    BetweenRightError,
    BindError,
    CharError,
    Diagnostic,
    DiagnosticRenderer,
    DigitError,
    GrammarError,
    InfiniteLoopError,
    ItemError,
    LetterError,
    ParseError,
    ParseFailed,
    SatError,
    StringError,
    WhitespaceError,
    diagnose,
)
from mendparse.outcome import Failure, Outcome, Parser, Success
from mendparse.repair import RepairResult, edit_parse, expect, repair_failure
from mendparse.stream import Stream

__version__ = "0.3.0"

T = TypeVar("T")


def parse(parser: Parser[T], text: str, *, config: RepairConfig | None = None) -> Outcome[T]:
    """Run ``parser`` over the whole of ``text``."""
    return parser(Stream.of(text, config))


def parse_value(
    parser: Parser[T],
    text: str,
    *,
    config: RepairConfig | None = None,
    filename: str = "<input>",
) -> T:
    """Run ``parser`` and return its value, raising ``ParseFailed`` on failure."""
    outcome: Outcome[Any] = parse(parser, text, config=config)
    if outcome:
        return outcome.value
    raise ParseFailed(outcome, diagnose(outcome, text, filename))


__all__ = [
    "AnyParseError", "BetweenLeftError", "BetweenRightError", "BindError",
    "CharError", "DEFAULT_CONFIG", "Diagnostic", "DiagnosticRenderer",
    "DigitError", "EOF", "EOFMark", "EditOp", "EditScript", "Failure",
    "GrammarError", "InfiniteLoopError", "ItemError", "LetterError",
    "Outcome", "ParseError", "ParseFailed", "Parser", "RepairConfig",
    "RepairResult", "SatError", "Stream", "StringError", "Success",
    "WhitespaceError", "appfun", "apply_edits", "between", "bind", "char",
    "choice", "choices", "delay", "diagnose", "digit", "edit_distance",
    "edit_parse", "edit_script", "eof", "expect", "fail", "find_config",
    "fresult", "item", "left", "letter", "load_config", "lower", "many",
    "many1", "nl", "parse", "parse_value", "repair_failure", "result",
    "right", "sat", "seq", "str_sat", "string", "succeed", "upper", "ws",
    "ws1", "zero",
]
