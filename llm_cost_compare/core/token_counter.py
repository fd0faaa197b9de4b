"""
Token estimation from sample text.

Rough heuristic for filling usage fields: one token is about 4 characters
or about 0.75 words. Not used by the cost engine itself.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

CHAR_TO_TOKEN_RATIO = Decimal("4")
WORD_TO_TOKEN_RATIO = Decimal("0.75")


def estimate_tokens(text: Any) -> int:
    """Estimate the token count of ``text``.

    Averages a character-based and a word-based estimate and rounds half
    up to the nearest integer. Empty, blank or non-string input is 0.
    """
    if not text or not isinstance(text, str):
        return 0

    trimmed = text.strip()
    if not trimmed:
        return 0

    char_estimate = Decimal(len(trimmed)) / CHAR_TO_TOKEN_RATIO
    # str.split() with no separator already drops empty tokens
    word_estimate = Decimal(len(trimmed.split())) / WORD_TO_TOKEN_RATIO

    average = (char_estimate + word_estimate) / 2
    return int(average.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
