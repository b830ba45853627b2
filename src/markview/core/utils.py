"""Utility functions for markview."""

import string

BULLETS = ("▪", "•", "◦", "‣", "⁃")


def list_item_prefix(ix: int, ordered: bool, depth: int) -> str:
    """
    Return the marker drawn before a list item.

    - Ordered, top level: `1. `, `2. `, ...
    - Ordered, depth 1: `A. `, `B. `, ... (wraps after Z)
    - Ordered, deeper: `a. `, `b. `, ...
    - Unordered: a bullet chosen by depth, the last one reused past the end

    Examples:
        >>> list_item_prefix(10, True, 0)
        '11. '
        >>> list_item_prefix(1, True, 1)
        'B. '
        >>> list_item_prefix(0, False, 2)
        '◦ '
    """
    if ordered:
        if depth == 0:
            return f"{ix + 1}. "
        letters = string.ascii_uppercase if depth == 1 else string.ascii_lowercase
        return f"{letters[ix % len(letters)]}. "

    bullet = BULLETS[min(depth, len(BULLETS) - 1)]
    return f"{bullet} "
