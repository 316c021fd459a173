"""Parse outcomes and the parser wrapper."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar, Union

from mendparse.errors import ParseError
from mendparse.stream import Stream

T = TypeVar("T")
U = TypeVar("U")
T_co = TypeVar("T_co", covariant=True)


@dataclass(frozen=True)
class Success(Generic[T]):
    """The parser matched; ``remaining`` is the input after the match."""

    remaining: Stream
    value: T

    def __bool__(self) -> Literal[True]:
        return True


@dataclass(frozen=True)
class Failure:
    """The parser did not match.

    ``window`` is the input handed to the failing parser, or its repaired
    version once a repair has been computed. ``position`` is the absolute
    offset the error is reported at.
    """

    window: Stream
    position: int
    error: ParseError

    def __bool__(self) -> Literal[False]:
        return False

    @property
    def repaired(self) -> Stream | None:
        return self.error.repaired

    @property
    def edit_count(self) -> int:
        return self.error.edit_count


Outcome = Union[Success[T], Failure]


@dataclass(frozen=True)
class Parser(Generic[T_co]):
    """A pure function from a window to an outcome."""

    parse_function: Callable[[Stream], Outcome[Any]]

    def __call__(self, stream: Stream) -> Outcome[T_co]:
        return self.parse_function(stream)

    # ``p + q``: both in sequence, results paired
    def __add__(self, other: Parser[U]) -> Parser[tuple[T_co, U]]:
        from mendparse.combinators import seq
        return seq(self, other, lambda x, y: (x, y))

    # ``p | q``: ordered choice
    def __or__(self, other: Parser[Any]) -> Parser[Any]:
        from mendparse.combinators import choice
        return choice(self, other)

    # ``p >> q``: keep the right result
    def __rshift__(self, other: Parser[U]) -> Parser[U]:
        from mendparse.combinators import right
        return right(self, other)

    # ``p << q``: keep the left result
    def __lshift__(self, other: Parser[Any]) -> Parser[T_co]:
        from mendparse.combinators import left
        return left(self, other)

    # ``p > f``: map the result
    def __gt__(self, f: Callable[[T_co], U]) -> Parser[U]:
        from mendparse.combinators import appfun
        return appfun(self, f)
