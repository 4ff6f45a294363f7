"""Tests for diff position parsing and truncation."""

import pytest

from src.core.text import truncate_text
from src.services.reviewer.patch_parser import count_patch_positions, is_valid_position
from tests.helpers import FILE_A_PATCH, FILE_B_PATCH


class TestCountPatchPositions:
    """Tests for count_patch_positions function."""

    def test_single_hunk(self):
        assert count_patch_positions(FILE_B_PATCH) == 2

    def test_positions_continue_through_later_hunks(self):
        """The second hunk header counts as a position too."""
        assert count_patch_positions(FILE_A_PATCH) == 7

    def test_trailing_newline_ignored(self):
        assert count_patch_positions(FILE_B_PATCH + "\n") == 2

    def test_lines_before_first_hunk_not_counted(self):
        patch = "diff --git a/x b/x\n--- a/x\n+++ b/x\n" + FILE_B_PATCH
        assert count_patch_positions(patch) == 2

    @pytest.mark.parametrize("patch", ["", "Binary files differ", "+no hunk header"])
    def test_no_hunk(self, patch):
        assert count_patch_positions(patch) == 0


class TestIsValidPosition:
    """Tests for is_valid_position function."""

    @pytest.mark.parametrize("position", [1, 3, 7])
    def test_inside_patch(self, position):
        assert is_valid_position(position, FILE_A_PATCH) is True

    @pytest.mark.parametrize("position", [0, -1, 8, 100])
    def test_outside_patch(self, position):
        assert is_valid_position(position, FILE_A_PATCH) is False

    def test_non_integer(self):
        assert is_valid_position("3", FILE_A_PATCH) is False
        assert is_valid_position(True, FILE_A_PATCH) is False

    def test_empty_patch_has_no_positions(self):
        assert is_valid_position(1, "") is False


class TestTruncateText:
    """Tests for truncate_text function."""

    def test_short_text_unchanged(self):
        assert truncate_text("hello", 10) == "hello"

    def test_cuts_at_character_limit(self):
        assert truncate_text("abcdefghij", 4) == "abcd"

    @pytest.mark.parametrize("text", ["", "short", "x" * 50, "ünïcödé " * 20])
    def test_idempotent(self, text):
        once = truncate_text(text, 17)
        assert truncate_text(once, 17) == once

    def test_none_is_empty(self):
        assert truncate_text(None, 5) == ""
