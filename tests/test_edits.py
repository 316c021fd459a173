"""Tests for edit scripts and edit distance."""

from __future__ import annotations

import pytest

from mendparse import EditOp, EditScript, apply_edits, edit_distance, edit_script


class TestEditDistance:
    def test_classic(self):
        assert edit_distance("kitten", "sitting") == 3

    def test_empty_sides(self):
        assert edit_distance("", "abc") == 3
        assert edit_distance("abc", "") == 3

    def test_identical(self):
        assert edit_distance("abc", "abc") == 0


class TestEditScript:
    def test_substitution_is_insert_then_delete(self):
        script = edit_script("cap", "cat")
        assert script.ops == (EditOp(2, True, "t"), EditOp(2, False, "p"))
        assert script.cost == 1

    def test_insertion_into_empty(self):
        script = edit_script("", ")")
        assert script.ops == (EditOp(0, True, ")"),)
        assert script.cost == 1

    def test_deletion(self):
        script = edit_script("abxc", "abc")
        assert script.ops == (EditOp(2, False, "x"),)

    def test_identical_strings_give_empty_script(self):
        script = edit_script("same", "same")
        assert not script
        assert len(script) == 0
        assert script.cost == 0

    def test_ops_ordered_by_position(self):
        script = edit_script("xbcy", "abcd")
        positions = [op.position for op in script.ops]
        assert positions == sorted(positions)

    @pytest.mark.parametrize("observed,expected", [
        ("cap", "cat"),
        ("hello", "help"),
        ("", "abc"),
        ("abcdef", "azced"),
        ("(5", "(5)"),
    ])
    def test_script_reaches_expected(self, observed, expected):
        script = edit_script(observed, expected)
        assert apply_edits(observed, script.ops) == expected
        assert script.cost == edit_distance(observed, expected)

    def test_apply_with_offset(self):
        script = edit_script("cap", "cat")
        assert apply_edits("my cap", script.ops, offset=3) == "my cat"

    def test_op_str(self):
        assert str(EditOp(2, True, "t")) == "+'t'@2"
        assert str(EditOp(0, False, "x")) == "-'x'@0"

    def test_empty_script_default(self):
        assert EditScript() == EditScript((), 0)
