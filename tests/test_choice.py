"""Tests for ordered choice and ambiguity resolution."""

from __future__ import annotations

import pytest

from mendparse import (
    DigitError,
    GrammarError,
    SatError,
    StringError,
    char,
    choice,
    choices,
    digit,
    letter,
    parse,
    sat,
    seq,
    string,
)
from tests.helpers import matched, run_fails


def literal_of(failure) -> str:
    assert isinstance(failure.error, StringError)
    return failure.error.literal


class TestChoice:
    def test_first_success_wins(self):
        assert matched(choice(string("ab"), string("a")), "ab") == "ab"

    def test_second_tried_on_first_failure(self):
        assert matched(choice(char("x"), char("y")), "y") == "y"

    def test_tie_goes_left(self):
        failure = run_fails(choice(string("cat"), string("car")), "cap")
        assert literal_of(failure) == "cat"
        assert failure.error.edit_count == 1

    def test_tie_goes_left_regardless_of_order(self):
        failure = run_fails(choice(string("car"), string("cat")), "cap")
        assert literal_of(failure) == "car"

    def test_fewer_edits_wins_on_right(self):
        failure = run_fails(choice(string("dog"), string("cap")), "cab")
        assert literal_of(failure) == "cap"
        assert failure.error.edit_count == 1
        assert str(failure.window) == "cap"

    def test_fewer_edits_wins_on_left(self):
        failure = run_fails(choice(string("cat"), string("xyz")), "cab")
        assert literal_of(failure) == "cat"

    def test_losing_side_does_not_leak(self):
        failure = run_fails(choice(string("dog"), string("cap")), "cab")
        assert failure.error.root_causes() is None

    def test_without_repair_uses_edit_distance(self, no_repair):
        failure = run_fails(choice(string("dog"), string("cap")), "cab", config=no_repair)
        assert literal_of(failure) == "cap"
        assert failure.error.edit_count == 0

    def test_choice_position_is_entry_offset(self):
        p = choice(string("dog"), string("cap"))
        failure = p(parse(string("> "), "> cab").remaining)
        assert failure.position == 2
        assert failure.window.text == "> cap"

    def test_partial_match_keeps_its_own_repair(self):
        pair = seq(string("abc"), string("xyz"), lambda a, b: a.concat(b))
        failure = run_fails(choice(pair, string("aXX")), "abcxyq")
        assert literal_of(failure) == "xyz"
        assert failure.error.edit_count == 1
        assert failure.position == 3
        assert str(failure.error.repaired) == "abcxyz"

    def test_partial_match_repaired_window(self):
        pair = seq(letter(), digit(), lambda a, b: a.concat(b))
        failure = run_fails(choice(pair, string("zzzz")), "ab")
        assert isinstance(failure.error, DigitError)
        assert failure.error.edit_count == 1
        assert str(failure.error.repaired) == "a0"
        assert str(failure.window) == "a0"

    def test_unrepaired_side_repaired_where_it_failed(self):
        pair = seq(char("a"), sat("xy"), lambda a, b: a.concat(b))
        failure = run_fails(choice(pair, string("qqq")), "ab")
        assert isinstance(failure.error, SatError)
        assert failure.error.edit_count == 1
        assert failure.position == 1
        assert str(failure.error.repaired) == "ax"

    def test_partial_match_without_repair(self, no_repair):
        pair = seq(string("abc"), string("xyz"), lambda a, b: a.concat(b))
        failure = run_fails(choice(pair, string("aXX")), "abcxyq", config=no_repair)
        assert literal_of(failure) == "xyz"
        assert failure.position == 3
        assert failure.error.edit_count == 0


class TestChoices:
    def test_empty_raises(self):
        with pytest.raises(GrammarError):
            choices()

    def test_single(self):
        assert matched(choices(char("a")), "a") == "a"

    def test_first_match(self):
        p = choices(string("if"), string("in"), string("is"))
        assert matched(p, "is") == "is"

    def test_closest_failure_across_many(self):
        p = choices(string("dog"), string("cow"), string("cat"))
        failure = run_fails(p, "cap")
        assert literal_of(failure) == "cat"
        assert failure.error.edit_count == 1
