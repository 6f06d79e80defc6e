"""Rhyme feature bundles derived from a single pronunciation."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, List, Optional, Tuple

from .cmudict_loader import VOWEL_PHONEMES

_DIGIT_PATTERN = re.compile(r"\d")
_STRESSED_DIGITS = ("1", "2")


def strip_stress(token: str) -> str:
    """Return ``token`` without its stress digit (``AE1`` -> ``AE``)."""

    return _DIGIT_PATTERN.sub("", token)


def is_vowel(token: str) -> bool:
    return strip_stress(token) in VOWEL_PHONEMES


def is_stressed_vowel(token: str) -> bool:
    return token.endswith(_STRESSED_DIGITS) and is_vowel(token)


@dataclass(frozen=True)
class RhymeFeatures:
    """Graduated rhyme keys for one word.

    ``perfect`` starts at the last stressed vowel, ``near`` one phoneme
    earlier, ``slant`` holds the last two phonemes and ``ending`` the last
    one. ``full_phonetic`` keeps the whole pronunciation for flow checks.
    """

    perfect: str
    near: str
    slant: str
    ending: str
    full_phonetic: str

    @property
    def phonemes(self) -> Tuple[str, ...]:
        return tuple(self.full_phonetic.split())

    @property
    def rhyme_vowel(self) -> str:
        """Base symbol of the vowel the ``perfect`` key starts with."""

        return strip_stress(self.perfect.split()[0])

    def as_dict(self) -> Dict[str, Any]:
        return {
            "perfect": self.perfect,
            "near": self.near,
            "slant": self.slant,
            "ending": self.ending,
            "fullPhonetic": self.full_phonetic,
        }


def _find_split_point(tokens: List[str]) -> Optional[int]:
    for index in range(len(tokens) - 1, -1, -1):
        if is_stressed_vowel(tokens[index]):
            return index

    for index in range(len(tokens) - 1, -1, -1):
        if is_vowel(tokens[index]):
            return index

    return None


@lru_cache(maxsize=4096)
def extract_rhyme_features(phonemes: Optional[str]) -> Optional[RhymeFeatures]:
    """Derive :class:`RhymeFeatures` from a space separated phoneme string.

    Empty, malformed or vowel-less pronunciations yield ``None``; the word is
    then simply not rhymable.
    """

    if not phonemes or not isinstance(phonemes, str):
        return None

    tokens = phonemes.split()
    if not tokens:
        return None

    split = _find_split_point(tokens)
    if split is None:
        return None

    return RhymeFeatures(
        perfect=" ".join(tokens[split:]),
        near=" ".join(tokens[max(0, split - 1):]),
        slant=" ".join(tokens[-2:]),
        ending=tokens[-1],
        full_phonetic=" ".join(tokens),
    )


def stressed_syllable_count(features: RhymeFeatures) -> int:
    """Count phonemes carrying primary or secondary stress."""

    return sum(1 for token in features.phonemes if token.endswith(_STRESSED_DIGITS))


def trailing_consonants(features: RhymeFeatures) -> Tuple[str, ...]:
    """Return the stress stripped phonemes after the last vowel."""

    tokens = [strip_stress(token) for token in features.phonemes]
    for index in range(len(tokens) - 1, -1, -1):
        if tokens[index] in VOWEL_PHONEMES:
            return tuple(tokens[index + 1:])
    return tuple(tokens)


__all__ = [
    "RhymeFeatures",
    "extract_rhyme_features",
    "is_stressed_vowel",
    "is_vowel",
    "strip_stress",
    "stressed_syllable_count",
    "trailing_consonants",
]
