"""Tests for source text and span tracking."""

from __future__ import annotations

from mendparse.source import SourceText, Span


class TestSourceText:
    def test_position_first_line(self):
        assert SourceText("abc").position(0) == (1, 1)
        assert SourceText("abc").position(2) == (1, 3)

    def test_position_later_line(self):
        text = SourceText("ab\ncd\nef")
        assert text.position(3) == (2, 1)
        assert text.position(7) == (3, 2)

    def test_position_clamped(self):
        assert SourceText("ab").position(99) == (1, 3)

    def test_line_at(self):
        text = SourceText("one\ntwo")
        assert text.line_at(2) == "two"
        assert text.line_at(3) == ""

    def test_span(self):
        span = SourceText("hello world", "greet.txt").span(6, 5)
        assert span == Span("greet.txt", 1, 7, 1, 11)
        assert str(span) == "greet.txt:1:7"

    def test_span_text_single_line(self):
        text = SourceText("hello world")
        assert text.span_text(text.span(6, 5)) == "world"

    def test_span_text_multi_line(self):
        text = SourceText("ab\ncd\nef")
        assert text.span_text(text.span(1, 6)) == "b\ncd\ne"
