"""BibTeX citation key generation."""
import re

from .models import SourceRecord
from .name_utils import first_surname

TITLE_WORDS = 3

# Function words are carried into the key but do not count towards TITLE_WORDS
STOP_WORDS = frozenset({
    "a", "an", "the", "of", "for", "and", "or", "in", "on", "at", "to",
    "by", "with", "from", "as", "is", "via",
})


def _title_fragment(title: str) -> str:
    words = re.sub(r"[^\w\s]", "", title.lower()).split()
    picked = []
    counted = 0
    for word in words:
        if counted == TITLE_WORDS:
            break
        picked.append(word)
        if word not in STOP_WORDS:
            counted += 1
    return "".join(picked)


def citation_key(record: SourceRecord) -> str:
    """
    Derive a BibTeX key from surname, year and the start of the title.

    Smith, John / 2023 / "Deep Learning for X" -> "smith2023deeplearningforx"

    Keys are stable for a given author/year/title but are not deduplicated:
    two records that agree on those fields share a key.
    """
    author = re.sub(r"\W", "", first_surname(record.authors).lower()) or "unknown"
    year = record.year or "nd"
    return f"{author}{year}{_title_fragment(record.title)}"
