"""Tests for list item markers."""

import pytest

from markview.core.utils import list_item_prefix


@pytest.mark.parametrize(
    "ix,depth,expected",
    [
        (0, 0, "1. "),
        (1, 0, "2. "),
        (2, 0, "3. "),
        (10, 0, "11. "),
        (0, 1, "A. "),
        (1, 1, "B. "),
        (2, 1, "C. "),
        (0, 2, "a. "),
        (1, 2, "b. "),
        (6, 2, "g. "),
        (0, 5, "a. "),
    ],
)
def test_ordered_prefix(ix, depth, expected):
    """Test numbers at the top level and letters below it."""
    assert list_item_prefix(ix, True, depth) == expected


def test_ordered_letters_wrap():
    """Test that letters wrap after the end of the alphabet."""
    assert list_item_prefix(26, True, 1) == "A. "
    assert list_item_prefix(27, True, 2) == "b. "


def test_unordered_bullets_by_depth():
    """Test that each depth gets its own bullet and deep lists reuse the last."""
    assert list_item_prefix(0, False, 0) == "▪ "
    assert list_item_prefix(0, False, 1) == "• "
    assert list_item_prefix(0, False, 2) == "◦ "
    assert list_item_prefix(0, False, 3) == "‣ "
    assert list_item_prefix(0, False, 4) == "⁃ "
    assert list_item_prefix(3, False, 9) == "⁃ "
