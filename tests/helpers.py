"""Shared test helpers for the mendparse test suite."""

from __future__ import annotations

from mendparse import Failure, Parser, RepairConfig, Success, parse


def run_ok(parser: Parser, text: str, config: RepairConfig | None = None) -> Success:
    """Parse ``text``, asserting success."""
    outcome = parse(parser, text, config=config)
    assert outcome, f"expected success on {text!r}, got {outcome.error.describe()}"
    return outcome


def run_fails(parser: Parser, text: str, config: RepairConfig | None = None) -> Failure:
    """Parse ``text``, asserting failure."""
    outcome = parse(parser, text, config=config)
    assert not outcome, f"expected failure on {text!r}, got {outcome.value!r}"
    return outcome


def matched(parser: Parser, text: str) -> str:
    """Parse ``text`` and return the matched window as a string."""
    return str(run_ok(parser, text).value)
