"""Combinator library.

Every combinator returns a ``Parser``: a pure function from a ``Stream``
to an ``Outcome``. Values produced by the character-level parsers are
``Stream`` windows; use ``str()`` on them for the matched text.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from string import ascii_letters, ascii_lowercase, ascii_uppercase, digits
from typing import Any, TypeVar

from mendparse.errors import (
    BetweenLeftError,
    BetweenRightError,
    BindError,
    CharError,
    DigitError,
    GrammarError,
    InfiniteLoopError,
    ItemError,
    LetterError,
    SatError,
    StringError,
    WhitespaceError,
)
from mendparse.outcome import Failure, Outcome, Parser, Success
from mendparse.repair import ErrorMapper, expect, repair_failure
from mendparse.stream import Stream

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")
V = TypeVar("V")


@dataclass(frozen=True)
class EOFMark:
    """Value produced by ``eof()``."""

    def __repr__(self) -> str:
        return "EOF"


EOF = EOFMark()

_EMPTY = Stream("", 0, 0, False)


# ── Primitives ───────────────────────────────────────────────────


def succeed(value: T) -> Parser[T]:
    """Consume nothing and produce ``value``."""
    return Parser(lambda stream: Success(stream, value))


def fail(message: str) -> Parser[Any]:
    """Consume nothing and fail with ``message`` as the expectation."""
    return Parser(
        lambda stream: Failure(
            stream, stream.start, StringError(message, edit_count=0, repaired=None)
        )
    )


result = succeed
zero = fail


def item() -> Parser[Stream]:
    """Consume any single character."""

    def parse(stream: Stream) -> Outcome[Stream]:
        if stream.is_empty():
            return Failure(stream, stream.start, ItemError())
        return Success(stream.tail(), stream.head())

    return Parser(parse)


def sat(char_class: Iterable[str]) -> Parser[Stream]:
    """Consume one character if it is in ``char_class``."""
    chars = frozenset(char_class)
    any_char = item()

    def parse(stream: Stream) -> Outcome[Stream]:
        outcome = any_char(stream)
        if not outcome:
            return outcome
        if str(outcome.value) in chars:
            return outcome
        return Failure(stream, stream.start, SatError(chars))

    return Parser(parse)


def eof() -> Parser[EOFMark]:
    """Succeed only at the end of the input."""

    def parse(stream: Stream) -> Outcome[EOFMark]:
        if stream.is_eof():
            return Success(stream, EOF)
        error = StringError("", edit_count=0, repaired=None, label="end of input")
        return Failure(stream, stream.start, error)

    return Parser(parse)


# ── Sequencing ───────────────────────────────────────────────────


def bind(p: Parser[T], f: Callable[[T], Parser[U]]) -> Parser[U]:
    """Run ``p``, then the parser ``f`` builds from its value.

    When the second parser fails with a repaired window it is run once more
    on that window. A successful retry means the first repair was enough
    and its failure is reported; a second failure is chained with the first
    into a ``BindError``. Repaired windows leaving a bind start at the
    bind's own entry offset.
    """

    def parse(stream: Stream) -> Outcome[U]:
        first = p(stream)
        if not first:
            return first
        second = f(first.value)
        outcome = second(first.remaining)
        if outcome:
            return outcome
        repaired = outcome.error.repaired
        if repaired is None:
            return outcome

        retry = second(repaired)
        if retry:
            error = outcome.error
            deepest = repaired
        else:
            deepest = retry.error.repaired
            if deepest is None:
                deepest = repaired
            error = BindError(
                causes=(outcome.error, retry.error),
                edit_count=outcome.error.edit_count + retry.error.edit_count,
            )
        deepest = deepest.rebase(stream.start)
        return Failure(deepest, outcome.position, error.with_repair(error.edit_count, deepest))

    return Parser(parse)


def seq(p: Parser[T], q: Parser[U], combine: Callable[[T, U], V]) -> Parser[V]:
    """Run ``p`` then ``q`` and combine both values."""
    return bind(p, lambda x: bind(q, lambda y: succeed(combine(x, y))))


def appfun(p: Parser[T], f: Callable[[T], U]) -> Parser[U]:
    """Apply ``f`` to the value of ``p`` when it succeeds."""

    def parse(stream: Stream) -> Outcome[U]:
        outcome = p(stream)
        if not outcome:
            return outcome
        return Success(outcome.remaining, f(outcome.value))

    return Parser(parse)


def fresult(p: Parser[Any], x: T) -> Parser[T]:
    """Run ``p`` and produce ``x`` instead of its value."""
    return bind(p, lambda _: succeed(x))


def left(p: Parser[T], q: Parser[Any]) -> Parser[T]:
    """Run ``p`` then ``q``, keeping the value of ``p``."""
    return bind(p, lambda t: fresult(q, t))


def right(p: Parser[Any], q: Parser[U]) -> Parser[U]:
    """Run ``p`` then ``q``, keeping the value of ``q``."""
    return bind(p, lambda _: q)


def between(popen: Parser[Any], pclose: Parser[Any], p: Parser[T]) -> Parser[T]:
    """``popen``, ``p``, ``pclose`` in sequence; produce the value of ``p``."""
    close = expect(pclose, lambda e: BetweenRightError(e))
    open_ = expect(popen, lambda e: BetweenLeftError(e))
    return right(open_, left(p, close))


def delay(thunk: Callable[[], Parser[T]]) -> Parser[T]:
    """Resolve the parser on first use, for recursive grammars."""
    return Parser(lambda stream: thunk()(stream))


# ── Repetition ───────────────────────────────────────────────────


def many(p: Parser[T]) -> Parser[list[T]]:
    """Zero or more ``p``. Never fails.

    Raises ``InfiniteLoopError`` if ``p`` succeeds without consuming input.
    """

    def parse(stream: Stream) -> Outcome[list[T]]:
        current = stream
        values: list[T] = []
        while not current.is_empty():
            outcome = p(current)
            if not outcome:
                break
            if outcome.remaining == current:
                raise InfiniteLoopError(
                    f"parser succeeded without consuming input at offset {current.start}"
                )
            values.append(outcome.value)
            current = outcome.remaining
        return Success(current, values)

    return Parser(parse)


def many1(p: Parser[T], mapper: ErrorMapper | None = None) -> Parser[list[T]]:
    """One or more ``p``."""
    return expect(seq(p, many(p), lambda x, xs: [x, *xs]), mapper)


# ── Choice ───────────────────────────────────────────────────────


def choice(p1: Parser[T], p2: Parser[T]) -> Parser[T]:
    """Ordered choice.

    If both sides fail, the one needing fewer edits is returned together
    with its repaired window; ``p1`` wins ties. A side that failed without
    a repair is repaired here, at the offset where it failed.
    """

    def parse(stream: Stream) -> Outcome[T]:
        o1 = p1(stream)
        if o1:
            return o1
        o2 = p2(stream)
        if o2:
            return o2
        f1 = _settle(p1, stream, o1)
        f2 = _settle(p2, stream, o2)
        c1 = _cost(stream, f1)
        c2 = _cost(stream, f2)
        winner = f2 if c2 < c1 else f1
        logger.debug(
            "choice at %d: %s (%d) vs %s (%d), picked %s",
            stream.start, f1.error.explain(), c1,
            f2.error.explain(), c2, winner.error.explain(),
        )
        return winner

    return Parser(parse)


def _settle(p: Parser[Any], stream: Stream, failure: Failure) -> Failure:
    if failure.error.repaired is not None:
        return failure
    return repair_failure(p, stream, failure, at=failure.position)


def _cost(stream: Stream, failure: Failure) -> int:
    # without a computed repair this falls back to plain edit distance
    expected = failure.error.expected_str()
    at = stream.advance(failure.position - stream.start)
    observed = str(at.peek(len(expected)))
    return failure.error.min_edit(observed, expected)


def choices(*parsers: Parser[T]) -> Parser[T]:
    """Ordered choice over any number of parsers, folded from the right."""
    if not parsers:
        raise GrammarError("choices needs at least one parser")
    combined = parsers[-1]
    for p in reversed(parsers[:-1]):
        combined = choice(p, combined)
    return combined


# ── Characters and strings ───────────────────────────────────────


def char(c: str) -> Parser[Stream]:
    if len(c) != 1:
        raise GrammarError(f"char takes a single character, got {c!r}")
    return expect(sat(c), lambda e: CharError(c, edit_count=0, repaired=None))


def letter() -> Parser[Stream]:
    """One ASCII letter, either case."""
    return expect(sat(ascii_letters), lambda e: LetterError(edit_count=0, repaired=None))


def digit() -> Parser[Stream]:
    """One of 0-9. The value is a window, not a number."""
    return expect(sat(digits), lambda e: DigitError(edit_count=0, repaired=None))


def upper() -> Parser[Stream]:
    return sat(ascii_uppercase)


def lower() -> Parser[Stream]:
    return sat(ascii_lowercase)


def string(s: str) -> Parser[Stream]:
    """The literal ``s``, reported as one failure if any character differs."""
    p: Parser[Stream] = succeed(_EMPTY)
    for c in s:
        p = seq(p, char(c), lambda a, b: a.concat(b))
    return expect(p, lambda e: StringError(s, edit_count=0, repaired=None))


def nl() -> Parser[Stream]:
    return choice(string("\n"), string("\r\n"))


def _ws_char() -> Parser[Stream]:
    return choice(sat(" \t"), nl())


def ws() -> Parser[Stream]:
    """Zero or more spaces, tabs and newlines, as one window. Never fails."""
    return appfun(many(_ws_char()), Stream.concat_all)


def ws1() -> Parser[Stream]:
    """One or more spaces, tabs and newlines, as one window."""
    whitespace = many1(
        _ws_char(), lambda e: WhitespaceError(edit_count=0, repaired=None)
    )
    return appfun(whitespace, Stream.concat_all)


def str_sat(candidates: Iterable[str]) -> Parser[Stream]:
    """The longest of ``candidates`` found at the current position."""
    by_size: dict[int, list[str]] = {}
    for cand in candidates:
        by_size.setdefault(len(cand), []).append(cand)
    sizes = sorted(by_size, reverse=True)
    classes = {size: frozenset(by_size[size]) for size in sizes}
    # repairs aim at the first candidate of the longest class
    target = min(by_size[sizes[0]]) if sizes else ""
    shown = ", ".join(repr(c) for size in sizes for c in sorted(by_size[size]))

    def parse(stream: Stream) -> Outcome[Stream]:
        for size in sizes:
            peek = stream.peek(size)
            if str(peek) in classes[size]:
                return Success(stream.advance(size), peek)
        error = StringError(target, edit_count=0, repaired=None, label=f"one of {shown}")
        return Failure(stream, stream.start, error)

    return Parser(parse)
