"""Input repair for failing parsers.

When a parser wrapped by ``expect`` fails, the input at the failure offset
is compared against what the error says was expected. The resulting edit
script is applied one operation at a time to a copy of the input, and the
parser is re-run after each step until it succeeds or the script runs out.
The failure that comes back carries the repaired window and the number of
edits spent, so enclosing combinators can carry on from the healed text.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any

from mendparse.edits import EditOp, EditScript, edit_script
from mendparse.errors import ParseError
from mendparse.outcome import Failure, Outcome, Parser
from mendparse.stream import Stream

logger = logging.getLogger(__name__)

ErrorMapper = Callable[[ParseError], ParseError]


@dataclass(frozen=True)
class RepairResult:
    """Where ``edit_parse`` stopped.

    ``steps`` counts applied edits, a replacement counting once.
    """

    window: Stream
    edit_count: int
    steps: int
    succeeded: bool


def _is_replacement(op: EditOp, nxt: EditOp | None) -> bool:
    return (
        nxt is not None
        and op.is_insertion
        and not nxt.is_insertion
        and nxt.position == op.position
    )


def edit_parse(parser: Parser[Any], window: Stream, script: EditScript) -> RepairResult:
    """Apply ``script`` to ``window`` until ``parser`` accepts the result.

    Op positions are relative to ``window.start``. The original text is
    never touched; every step yields a new window over a new string.
    """
    config = window.config
    ops = script.ops
    patched = window
    shift = 0
    cost = 0
    steps = 0
    i = 0
    while i < len(ops):
        if config.max_edits is not None and steps >= config.max_edits:
            break
        op = ops[i]
        nxt = ops[i + 1] if i + 1 < len(ops) else None
        index = window.start + op.position + shift
        if _is_replacement(op, nxt):
            patched = patched.replace_char_at(index, op.char)
            cost += config.replace_cost
            i += 2
        elif op.is_insertion:
            patched = patched.insert_char_at(index, op.char)
            shift += 1
            cost += 1
            i += 1
        else:
            patched = patched.delete_char_at(index, op.char)
            shift -= 1
            cost += 1
            i += 1
        steps += 1
        logger.debug("applied %s at %d, cost now %d", op, index, cost)
        if parser(patched):
            return RepairResult(patched, cost, steps, True)
    return RepairResult(patched, cost, steps, False)


def repair_failure(
    parser: Parser[Any],
    window: Stream,
    failure: Failure,
    mapper: ErrorMapper | None = None,
    *,
    at: int | None = None,
) -> Failure:
    """Type the error of ``failure`` and attach a repair of ``window``.

    The input is compared against the expectation at absolute offset
    ``at``, by default ``window.start``. ``parser`` is always re-run from
    ``window.start``.
    """
    error = failure.error if mapper is None else mapper(failure.error)
    position = window.start if at is None else at
    if not window.config.repair:
        return Failure(window, position, error.with_repair(0, None))

    offset = position - window.start
    expected = error.expected_str()
    observed = str(window.advance(offset).peek(len(expected)))
    script = edit_script(observed, expected)
    if offset:
        ops = tuple(replace(op, position=op.position + offset) for op in script.ops)
        script = EditScript(ops, script.cost)
    result = edit_parse(parser, window, script)
    logger.debug(
        "repair of %s at %d: %r -> %r, %d edit(s)%s",
        error.explain(), position, observed, expected, result.edit_count,
        "" if result.succeeded else ", parser still fails",
    )
    if not result.steps:
        return Failure(window, position, error.with_repair(0, None))
    return Failure(
        result.window,
        position,
        error.with_repair(result.edit_count, result.window),
    )


def expect(parser: Parser[Any], mapper: ErrorMapper | None = None) -> Parser[Any]:
    """Run ``parser``; on failure retype its error and repair the input."""

    def parse(stream: Stream) -> Outcome[Any]:
        outcome = parser(stream)
        if outcome:
            return outcome
        return repair_failure(parser, stream, outcome, mapper)

    return Parser(parse)
