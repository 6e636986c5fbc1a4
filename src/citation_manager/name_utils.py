"""
Name parsing utilities.
"""
from typing import Sequence

UNKNOWN_AUTHOR = "Unknown Author"
UNKNOWN_SURNAME = "Unknown"


def surname(author: str) -> str:
    """
    Extract the surname from an author string.

    Examples:
        "Smith, John" -> "Smith"
        "John Smith" -> "Smith"
        "" -> "Unknown"
    """
    if not author or not author.strip():
        return UNKNOWN_SURNAME
    if "," in author:
        family = author.split(",", 1)[0].strip()
        return family or UNKNOWN_SURNAME
    parts = author.split()
    return parts[-1] if parts else UNKNOWN_SURNAME


def first_surname(authors: Sequence[str]) -> str:
    """Surname of the first author, or "Unknown" when there are none."""
    if not authors:
        return UNKNOWN_SURNAME
    return surname(authors[0])


def join_authors(authors: Sequence[str]) -> str:
    # "Lee, A., Kim, B." / "Unknown Author"
    if not authors:
        return UNKNOWN_AUTHOR
    return ", ".join(authors)
