"""
Tests for paragraph segmentation.
"""
import pytest

from blog_composer.content import segment


class TestSegment:
    """Tests for segment()."""

    def test_multiple_blank_lines_are_one_boundary(self):
        body = "Para one.\n\nPara two.\n\n\nPara three."
        assert segment(body) == ["Para one.", "Para two.", "Para three."]

    def test_whitespace_only_lines_are_blank(self):
        body = "First.\n   \t\nSecond."
        assert segment(body) == ["First.", "Second."]

    def test_leading_and_trailing_blank_lines_ignored(self):
        assert segment("\n\n  \nOnly one.\n\n\n") == ["Only one."]

    def test_paragraphs_are_trimmed(self):
        assert segment("   padded   \n\n\tindented") == ["padded", "indented"]

    def test_single_line_breaks_stay_inside_paragraph(self):
        assert segment("Line one\nline two\n\nNext") == ["Line one\nline two", "Next"]

    def test_windows_line_endings(self):
        assert segment("One.\r\n\r\nTwo.") == ["One.", "Two."]

    @pytest.mark.parametrize("body", ["", None, "\n\n", "   \n \t "])
    def test_empty_input(self, body):
        assert segment(body) == []

    @pytest.mark.parametrize(
        "body",
        [
            "Para one.\n\nPara two.\n\n\nPara three.",
            "  a\n b \n\n\n\n c  \n",
            "single paragraph\nwith two lines",
            "\n\n\nx\n \ny\n",
        ],
    )
    def test_resegmenting_is_stable(self, body):
        paragraphs = segment(body)
        assert segment("\n\n".join(paragraphs)) == paragraphs

    def test_old_mac_line_endings(self):
        assert segment("One.\r\rTwo.") == ["One.", "Two."]

    @pytest.mark.parametrize("separator", ["\u2028", "\u2029", "\x0c", "\x0b", "\x85"])
    def test_other_separators_are_not_line_breaks(self, separator):
        body = f"Before{separator}after.\n\nNext."
        assert segment(body) == [f"Before{separator}after.", "Next."]
