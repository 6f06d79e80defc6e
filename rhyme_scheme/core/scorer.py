"""Pairwise rhyme similarity between two feature bundles.

Scores are on a 0-100 scale. A base score comes from the first matching rhyme
key (perfect, near, slant, ending); pairs with no shared key fall back to
vowel-family matching plus a consonant-tail bonus. Flow bonuses are added on
top and the total is capped at 100. The constants were tuned by hand against
real lyrics and downstream thresholds depend on them exactly.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Dict, FrozenSet, Optional, Sequence, Tuple

from .features import (
    RhymeFeatures,
    stressed_syllable_count,
    strip_stress,
    trailing_consonants,
)

MAX_SCORE = 100

PERFECT_MATCH_SCORE = 100
NEAR_MATCH_SCORE = 80
SLANT_MATCH_SCORE = 60
ENDING_MATCH_SCORE = 45

SAME_VOWEL_SCORE = 85
VOWEL_FAMILY_SCORE = 75
# Vowel-family scores only lift bases below this value, minus the discount.
VOWEL_FAMILY_BASE_CEILING = 50
VOWEL_FAMILY_DISCOUNT = 10

CONSONANT_BONUS_WEIGHT = 10
SAME_CLASS_CONSONANT_CREDIT = 0.7
ONE_SIDED_CODA_RATIO = 0.3
LENGTH_MISMATCH_CODA_RATIO = 0.2

STRESS_COUNT_BONUS = 5
ING_PATTERN_BONUS = 10
D_ENDING_BONUS = 8
LY_PATTERN_BONUS = 8

VOWEL_FAMILIES: Dict[str, FrozenSet[str]] = {
    "long_oo": frozenset({"UW", "UH"}),
    "long_ee": frozenset({"IY", "IH"}),
    "ay_sound": frozenset({"AY", "EY"}),
    "oh_sound": frozenset({"OW", "AO"}),
    "ah_sound": frozenset({"AA", "AH"}),
    "eh_sound": frozenset({"EH", "AE"}),
    "er_sound": frozenset({"ER", "AH"}),
    "oy_sound": frozenset({"OY"}),
    "aw_sound": frozenset({"AW", "AO"}),
}

CONSONANT_CLASSES: Dict[str, FrozenSet[str]] = {
    "stops": frozenset({"B", "P", "D", "T", "G", "K"}),
    "fricatives": frozenset({"F", "V", "TH", "DH", "S", "Z", "SH", "ZH"}),
    "nasals": frozenset({"M", "N", "NG"}),
    "liquids": frozenset({"L", "R"}),
    "semivowels": frozenset({"W", "Y"}),
}

_ING_PATTERN = re.compile(r"\bI[HY] NG\b")
_LY_PATTERN = re.compile(r"\bL IY\b")


def _stripped(features: RhymeFeatures) -> str:
    return " ".join(strip_stress(token) for token in features.phonemes)


def vowel_family_score(vowel_a: str, vowel_b: str) -> int:
    """Score two stress stripped vowels: identical, same family, or unrelated."""

    if vowel_a == vowel_b:
        return SAME_VOWEL_SCORE
    for members in VOWEL_FAMILIES.values():
        if vowel_a in members and vowel_b in members:
            return VOWEL_FAMILY_SCORE
    return 0


def _consonant_class(symbol: str) -> Optional[str]:
    for name, members in CONSONANT_CLASSES.items():
        if symbol in members:
            return name
    return None


def consonant_similarity(coda_a: Sequence[str], coda_b: Sequence[str]) -> float:
    """Return a 0-1 similarity ratio for two trailing consonant runs."""

    if tuple(coda_a) == tuple(coda_b):
        return 1.0
    if not coda_a or not coda_b:
        return ONE_SIDED_CODA_RATIO
    if len(coda_a) != len(coda_b):
        return LENGTH_MISMATCH_CODA_RATIO

    credit = 0.0
    for left, right in zip(coda_a, coda_b):
        if left == right:
            credit += 1.0
            continue
        left_class = _consonant_class(left)
        if left_class is not None and left_class == _consonant_class(right):
            credit += SAME_CLASS_CONSONANT_CREDIT
    return credit / len(coda_a)


def _base_score(a: RhymeFeatures, b: RhymeFeatures) -> Tuple[float, bool]:
    if a.perfect == b.perfect:
        return PERFECT_MATCH_SCORE, False
    if a.near == b.near:
        return NEAR_MATCH_SCORE, False
    if a.slant == b.slant:
        return SLANT_MATCH_SCORE, False
    if a.ending == b.ending:
        return ENDING_MATCH_SCORE, False

    base = 0.0
    family = vowel_family_score(a.rhyme_vowel, b.rhyme_vowel)
    if base < VOWEL_FAMILY_BASE_CEILING:
        base = max(base, family - VOWEL_FAMILY_DISCOUNT)
    return base, family > 0


def flow_bonus(a: RhymeFeatures, b: RhymeFeatures) -> int:
    """Bonuses for shared stress counts and common lyrical endings."""

    bonus = 0
    if stressed_syllable_count(a) == stressed_syllable_count(b):
        bonus += STRESS_COUNT_BONUS

    stripped_a = _stripped(a)
    stripped_b = _stripped(b)
    if _ING_PATTERN.search(stripped_a) and _ING_PATTERN.search(stripped_b):
        bonus += ING_PATTERN_BONUS
    if strip_stress(a.ending) == "D" and strip_stress(b.ending) == "D":
        bonus += D_ENDING_BONUS
    if _LY_PATTERN.search(stripped_a) and _LY_PATTERN.search(stripped_b):
        bonus += LY_PATTERN_BONUS
    return bonus


@lru_cache(maxsize=65536)
def score_similarity(a: RhymeFeatures, b: RhymeFeatures) -> float:
    """Return how strongly two words rhyme, from 0 to 100.

    The computation is symmetric in ``a`` and ``b``.
    """

    score, family_matched = _base_score(a, b)

    if family_matched:
        ratio = consonant_similarity(trailing_consonants(a), trailing_consonants(b))
        score += ratio * CONSONANT_BONUS_WEIGHT

    score += flow_bonus(a, b)
    return float(min(MAX_SCORE, round(score, 6)))


__all__ = [
    "CONSONANT_CLASSES",
    "MAX_SCORE",
    "VOWEL_FAMILIES",
    "consonant_similarity",
    "flow_bonus",
    "score_similarity",
    "vowel_family_score",
]
