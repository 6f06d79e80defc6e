"""Turn raw lyrics into ordered word occurrences with rhyme features."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Dict, List, Optional

from .features import RhymeFeatures, extract_rhyme_features

# Function words never treated as rhyme candidates, even with a pronunciation.
STOP_WORDS: frozenset[str] = frozenset(
    {
        "a", "an", "and", "are", "as", "at", "be", "but", "by", "for",
        "from", "had", "has", "have", "he", "her", "his", "i", "i'm", "if",
        "in", "into", "is", "it", "it's", "its", "of", "on", "or", "our",
        "she", "so", "than", "that", "the", "their", "them", "then", "there",
        "these", "they", "this", "those", "to", "was", "we", "were", "what",
        "when", "where", "which", "who", "will", "with", "would", "you",
        "your", "my", "me", "us", "him", "do", "did", "does", "not", "just",
        "can", "could", "should", "oh", "yeah", "uh", "um",
    }
)

_WHITESPACE_SPLIT = re.compile(r"(\s+)")
_DISALLOWED_CHARS = re.compile(r"[^\w'\-]")
_POSSESSIVE_SUFFIX = re.compile(r"'s$")
_INTERNAL_WHITESPACE = re.compile(r"\s+")
_TYPOGRAPHIC_APOSTROPHES = str.maketrans({"’": "'", "‘": "'", "ʼ": "'"})


@dataclass(frozen=True)
class WordOccurrence:
    """One non-whitespace token of the lyrics and its rhyme features."""

    line_index: int
    word_index: int
    raw_text: str
    cleaned_text: str
    features: Optional[RhymeFeatures] = None

    @property
    def is_rhymable(self) -> bool:
        return self.features is not None


def clean_word(token: str) -> str:
    """Normalise a raw token for dictionary lookup.

    Lowercases, keeps word characters plus internal apostrophes and hyphens,
    and drops a trailing possessive ``'s``.
    """

    normalized = (token or "").translate(_TYPOGRAPHIC_APOSTROPHES).lower()
    normalized = _INTERNAL_WHITESPACE.sub(" ", normalized).strip()
    normalized = _DISALLOWED_CHARS.sub("", normalized)
    normalized = _POSSESSIVE_SUFFIX.sub("", normalized)
    return normalized.strip("'-")


def tokenize_line(line: str) -> List[str]:
    """Split ``line`` on whitespace, keeping the whitespace runs as tokens."""

    return [token for token in _WHITESPACE_SPLIT.split(line) if token]


def lookup_features(cleaned: str, dictionary: Mapping) -> Optional[RhymeFeatures]:
    if not cleaned or cleaned in STOP_WORDS:
        return None
    return extract_rhyme_features(dictionary.get(cleaned))


def collect_words(lyrics: str, dictionary: Mapping) -> List[List[WordOccurrence]]:
    """Return one list of :class:`WordOccurrence` per lyrics line.

    Whitespace-only lyrics produce no lines at all. Inside a document, blank
    lines are kept as empty lists so line indices match the source text.
    """

    if not lyrics or not lyrics.strip():
        return []

    lines: List[List[WordOccurrence]] = []
    for line_index, line in enumerate(lyrics.splitlines()):
        occurrences: List[WordOccurrence] = []
        for token in tokenize_line(line):
            if token.isspace():
                continue
            cleaned = clean_word(token)
            occurrences.append(
                WordOccurrence(
                    line_index=line_index,
                    word_index=len(occurrences),
                    raw_text=token,
                    cleaned_text=cleaned,
                    features=lookup_features(cleaned, dictionary),
                )
            )
        lines.append(occurrences)
    return lines


def rhyme_candidates(lines: List[List[WordOccurrence]]) -> List[WordOccurrence]:
    """Flatten ``lines`` into the ordered list of rhymable occurrences."""

    return [occurrence for line in lines for occurrence in line if occurrence.is_rhymable]


def distinct_words(
    lines: List[List[WordOccurrence]], *, rhymable_only: bool = False
) -> List[str]:
    """Return the non-empty cleaned words of ``lines`` once each, in order."""

    seen: Dict[str, None] = {}
    for line in lines:
        for occurrence in line:
            if not occurrence.cleaned_text:
                continue
            if rhymable_only and not occurrence.is_rhymable:
                continue
            seen.setdefault(occurrence.cleaned_text, None)
    return list(seen)


__all__ = [
    "STOP_WORDS",
    "WordOccurrence",
    "clean_word",
    "collect_words",
    "distinct_words",
    "lookup_features",
    "rhyme_candidates",
    "tokenize_line",
]
