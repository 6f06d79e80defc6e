"""Document level rhyme statistics.

The end word of each line (its last rhymable word) drives the rhyme scheme
counts; the other rhymable words of a line are internal words. End words are
compared pairwise, internal words within their own line, and a bounded sample
of end words against internal words catches internal-to-end rhymes without
quadratic blow-up on long songs.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Set, Tuple

from .collector import WordOccurrence, distinct_words
from .consolidation import CENTROID_MERGE_SIMILARITY, endings_compatible
from .features import RhymeFeatures
from .scorer import score_similarity

PERFECT = "perfect"
NEAR = "near"
SOUNDS_LIKE = "sounds_like"

# Highest threshold first; the first tier reached wins.
END_PAIR_TIERS: Tuple[Tuple[str, float], ...] = (
    (PERFECT, 82),
    (NEAR, 80),
    (SOUNDS_LIKE, 78),
)
CROSS_PAIR_TIERS: Tuple[Tuple[str, float], ...] = (
    (PERFECT, 82),
    (NEAR, 68),
    (SOUNDS_LIKE, 55),
)

INTERNAL_RHYME_THRESHOLD = 75
INTERNAL_MIN_WORD_LENGTH = 4
CROSS_END_SAMPLE = 20
CROSS_INTERNAL_SAMPLE = 10
MAX_GROUP_MERGE_PASSES = 100


@dataclass(frozen=True)
class RhymeGroupSummary:
    sound: str
    words: Tuple[str, ...]

    @property
    def count(self) -> int:
        return len(self.words)

    def as_dict(self) -> Dict[str, Any]:
        return {"sound": self.sound, "words": list(self.words), "count": self.count}


@dataclass
class RhymeStatistics:
    """Aggregate rhyme counts for one set of lyrics."""

    total_rhymable_words: int = 0
    perfect_rhymes: int = 0
    near_rhymes: int = 0
    sounds_like: int = 0
    internal_rhymes: int = 0
    rhyme_density: float = 0.0
    rhyme_groups: List[RhymeGroupSummary] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "totalRhymableWords": self.total_rhymable_words,
            "perfectRhymes": self.perfect_rhymes,
            "nearRhymes": self.near_rhymes,
            "soundsLike": self.sounds_like,
            "internalRhymes": self.internal_rhymes,
            "rhymeDensity": self.rhyme_density,
            "rhymeGroups": [group.as_dict() for group in self.rhyme_groups],
        }


def classify_pair(score: float, tiers: Sequence[Tuple[str, float]]) -> Optional[str]:
    """Return the first tier whose threshold ``score`` reaches, if any."""

    for tier, threshold in tiers:
        if score >= threshold:
            return tier
    return None


def _pair_key(a: WordOccurrence, b: WordOccurrence) -> Optional[FrozenSet[str]]:
    if a.cleaned_text == b.cleaned_text:
        return None
    return frozenset((a.cleaned_text, b.cleaned_text))


def _score(a: WordOccurrence, b: WordOccurrence) -> float:
    if a.features is None or b.features is None:
        raise ValueError(f"cannot score unrhymable words {a.cleaned_text!r}, {b.cleaned_text!r}")
    return score_similarity(a.features, b.features)


def count_internal_rhymes(words: Sequence[WordOccurrence]) -> int:
    """Count distinct rhyming word pairs among one line's internal words."""

    candidates = [w for w in words if len(w.cleaned_text) >= INTERNAL_MIN_WORD_LENGTH]
    seen: Set[FrozenSet[str]] = set()
    total = 0
    for i in range(len(candidates)):
        for j in range(i + 1, len(candidates)):
            key = _pair_key(candidates[i], candidates[j])
            if key is None or key in seen:
                continue
            seen.add(key)
            if _score(candidates[i], candidates[j]) >= INTERNAL_RHYME_THRESHOLD:
                total += 1
    return total


def build_rhyme_groups(candidates: Sequence[WordOccurrence]) -> List[RhymeGroupSummary]:
    """Group rhymable words by their perfect rhyme key.

    Keys whose representatives share a final phoneme and score at least
    ``CENTROID_MERGE_SIMILARITY`` are folded together. Groups need two
    distinct words and are ordered by size, largest first.
    """

    buckets: Dict[str, Tuple[RhymeFeatures, List[str]]] = {}
    for occurrence in candidates:
        features = occurrence.features
        if features is None:
            continue
        _, words = buckets.setdefault(features.perfect, (features, []))
        if occurrence.cleaned_text not in words:
            words.append(occurrence.cleaned_text)

    groups = [(key, rep, list(words)) for key, (rep, words) in buckets.items()]
    for _ in range(MAX_GROUP_MERGE_PASSES):
        changed = False
        a = 0
        while a < len(groups):
            b = a + 1
            while b < len(groups):
                rep_a, rep_b = groups[a][1], groups[b][1]
                if (
                    endings_compatible(rep_a, rep_b)
                    and score_similarity(rep_a, rep_b) >= CENTROID_MERGE_SIMILARITY
                ):
                    merged = groups[a][2] + [w for w in groups[b][2] if w not in groups[a][2]]
                    groups[a] = (groups[a][0], rep_a, merged)
                    del groups[b]
                    changed = True
                else:
                    b += 1
            a += 1
        if not changed:
            break

    summaries = [
        RhymeGroupSummary(sound=key, words=tuple(words))
        for key, _, words in groups
        if len(words) >= 2
    ]
    return sorted(summaries, key=lambda group: -group.count)


def compute_statistics(lines: Sequence[Sequence[WordOccurrence]]) -> RhymeStatistics:
    """Compute :class:`RhymeStatistics` from collected lyric lines."""

    end_words: List[WordOccurrence] = []
    internal_words: List[WordOccurrence] = []
    rhymable: List[WordOccurrence] = []
    internal_rhymes = 0

    for line in lines:
        line_rhymable = [occurrence for occurrence in line if occurrence.is_rhymable]
        if not line_rhymable:
            continue
        rhymable.extend(line_rhymable)
        end_words.append(line_rhymable[-1])
        internal_words.extend(line_rhymable[:-1])
        internal_rhymes += count_internal_rhymes(line_rhymable[:-1])

    counts: Counter = Counter()
    compared: Set[FrozenSet[str]] = set()
    counted: Set[FrozenSet[str]] = set()

    for i in range(len(end_words)):
        for j in range(i + 1, len(end_words)):
            key = _pair_key(end_words[i], end_words[j])
            if key is None or key in compared:
                continue
            compared.add(key)
            tier = classify_pair(_score(end_words[i], end_words[j]), END_PAIR_TIERS)
            if tier is not None:
                counts[tier] += 1
                counted.add(key)

    for end_word in end_words[:CROSS_END_SAMPLE]:
        for internal in internal_words[:CROSS_INTERNAL_SAMPLE]:
            key = _pair_key(end_word, internal)
            if key is None or key in counted:
                continue
            tier = classify_pair(_score(end_word, internal), CROSS_PAIR_TIERS)
            if tier is not None:
                counts[tier] += 1
                counted.add(key)

    vocabulary = distinct_words(lines)
    rhymable_vocabulary = distinct_words(lines, rhymable_only=True)
    density = (
        round(len(rhymable_vocabulary) / len(vocabulary) * 100, 1) if vocabulary else 0.0
    )

    return RhymeStatistics(
        total_rhymable_words=len(rhymable_vocabulary),
        perfect_rhymes=counts[PERFECT],
        near_rhymes=counts[NEAR],
        sounds_like=counts[SOUNDS_LIKE],
        internal_rhymes=internal_rhymes,
        rhyme_density=density,
        rhyme_groups=build_rhyme_groups(rhymable),
    )


__all__ = [
    "CROSS_PAIR_TIERS",
    "END_PAIR_TIERS",
    "RhymeGroupSummary",
    "RhymeStatistics",
    "build_rhyme_groups",
    "classify_pair",
    "compute_statistics",
    "count_internal_rhymes",
]
