"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/selection.py
Parses the answer given to the interactive "which files to keep" prompt.

Accepted answers:
    "a" / "all"        keep every file
    "n" / "none"       remove every file
    "2" or "1 3"       keep the listed positions, remove the others

Anything else, including a list with a single bad token, is rejected as a
whole so that a malformed answer never leads to a partial removal.
"""

from typing import Optional

from dedup.core.models import KeepSelection

KEEP_ALL_ANSWERS = ("a", "all")
KEEP_NONE_ANSWERS = ("n", "none")


def parse_keep_selection(answer: str, group_size: int, index_base: int = 1) -> Optional[KeepSelection]:
    """
    Returns the KeepSelection for `answer`, or None if the answer is invalid.

    Args:
        answer: Raw text typed by the user
        group_size: Number of files shown for the group
        index_base: Number of the first file on screen (0 or 1)
    """
    text = answer.strip().lower()
    if text in KEEP_ALL_ANSWERS:
        return KeepSelection.all()
    if text in KEEP_NONE_ANSWERS:
        return KeepSelection.none()

    tokens = text.split()
    if not tokens:
        return None

    indices = set()
    for token in tokens:
        if not token.isdecimal():
            return None
        index = int(token) - index_base
        if index < 0 or index >= group_size:
            return None
        indices.add(index)

    return KeepSelection(indices=frozenset(indices))


def prompt_hint(group_size: int, index_base: int = 1) -> str:
    """The line shown under a group to tell the user what to type."""
    first = index_base
    last = group_size - 1 + index_base
    return f"Select the file(s) to keep: [{first}-{last}], [a]ll or [n]one"
