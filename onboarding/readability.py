"""Reading grade estimate for instructional text.

This is a placeholder heuristic, not a validated readability formula: it
only looks at the share of long words. It exists so the content policy toggle
("target reading grade <= 6") has something deterministic to check against.
"""

import re
from typing import Optional

from .util import round_half_up

MIN_GRADE = 2
MAX_GRADE = 14
HARD_WORD_LETTERS = 8

_NON_ALPHA = re.compile(r"[^a-zA-Z]")


def is_hard_word(word: str) -> bool:
    """A word is hard when it has at least eight ASCII letters, ignoring punctuation."""
    return len(_NON_ALPHA.sub("", word)) >= HARD_WORD_LETTERS


def estimate_grade_level(text: str) -> int:
    """Estimate a reading grade from the proportion of long words.

    grade = round(4 + hard_ratio * 12), clamped to [2, 14]. Text without any
    words has a ratio of 0, which puts it at grade 4.

    Args:
        text: Text to assess

    Returns:
        Integer grade level between 2 and 14
    """
    words = text.split()
    hard = sum(1 for w in words if is_hard_word(w))
    ratio = hard / len(words) if words else 0.0
    return min(MAX_GRADE, max(MIN_GRADE, round_half_up(4 + ratio * 12)))


def meets_grade_target(grade: int, target: Optional[int]) -> bool:
    """True when no target is enforced or the grade is at or below it."""
    if target is None:
        return True
    return grade <= target
