"""Consolidate raw rhyme clusters, filter weak pairs and assign group labels."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .clustering import SimilarityMatrix, internal_similarity
from .collector import WordOccurrence
from .features import RhymeFeatures, stressed_syllable_count, strip_stress
from .scorer import score_similarity

# Clusters with compatible endings merge only when their representatives
# score at least this high.
CENTROID_MERGE_SIMILARITY = 95
ENDING_PATTERN_LENGTH = 3
MAX_CONSOLIDATION_PASSES = 100

PAIR_SUFFIX_LENGTH = 2
MAX_PAIR_LENGTH_DIFFERENCE = 3

# Spelling endings that rhyme although they share no final letters.
COMPATIBLE_ENDINGS: Tuple[Tuple[str, str], ...] = (
    ("m", "nt"),
    ("oom", "ew"),
    ("est", "ed"),
    ("ight", "ite"),
    ("ew", "ue"),
    ("ough", "ow"),
)

SIZE_WEIGHT = 10
MAX_SIZE_SCORE = 50
COHESION_WEIGHT = 0.3
SHORT_WORD_MAX_STRESSES = 2
LONG_WORD_MIN_STRESSES = 3
MIXED_LENGTH_BONUS = 5
SYLLABLE_VARIETY_STEP = 5
MAX_SYLLABLE_VARIETY_BONUS = 15

LABEL_ALPHABET: Tuple[str, ...] = tuple(
    [chr(ord("A") + offset) for offset in range(26)]
    + [str(number) for number in range(1, 21)]
)


@dataclass
class Cluster:
    """A group of candidate indices judged to rhyme with one another."""

    members: List[int]
    occurrences: List[WordOccurrence] = field(default_factory=list, repr=False)
    priority: float = 0.0
    label: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def words(self) -> List[str]:
        return [occurrence.cleaned_text for occurrence in self.occurrences]

    @property
    def representative(self) -> RhymeFeatures:
        features = self.occurrences[0].features if self.occurrences else None
        if features is None:
            raise ValueError("cluster has no rhymable representative")
        return features

    def merged_with(self, other: "Cluster") -> "Cluster":
        return Cluster(
            members=self.members + other.members,
            occurrences=self.occurrences + other.occurrences,
        )


def build_clusters(
    member_lists: Sequence[Sequence[int]],
    candidates: Sequence[WordOccurrence],
) -> List[Cluster]:
    return [
        Cluster(members=list(members), occurrences=[candidates[i] for i in members])
        for members in member_lists
    ]


def _ending_pattern(features: RhymeFeatures) -> Tuple[str, ...]:
    return features.phonemes[-ENDING_PATTERN_LENGTH:]


def endings_compatible(a: RhymeFeatures, b: RhymeFeatures) -> bool:
    """Whether the last phonemes of two ending patterns agree."""

    last_a = _ending_pattern(a)[-1]
    last_b = _ending_pattern(b)[-1]
    return last_a == last_b or strip_stress(last_a) == strip_stress(last_b)


def _shares_word(a: Cluster, b: Cluster) -> bool:
    return bool({word.lower() for word in a.words} & {word.lower() for word in b.words})


def should_merge(a: Cluster, b: Cluster) -> bool:
    if _shares_word(a, b):
        return True
    rep_a, rep_b = a.representative, b.representative
    return (
        endings_compatible(rep_a, rep_b)
        and score_similarity(rep_a, rep_b) >= CENTROID_MERGE_SIMILARITY
    )


def consolidate_clusters(
    clusters: Sequence[Cluster],
    *,
    max_passes: int = MAX_CONSOLIDATION_PASSES,
) -> List[Cluster]:
    """Merge clusters sharing a word or a near-identical ending until stable."""

    current = list(clusters)
    for _ in range(max_passes):
        changed = False
        a = 0
        while a < len(current):
            b = a + 1
            while b < len(current):
                if should_merge(current[a], current[b]):
                    current[a] = current[a].merged_with(current[b])
                    del current[b]
                    changed = True
                else:
                    b += 1
            a += 1
        if not changed:
            break
    return current


def _has_compatible_endings(word_a: str, word_b: str) -> bool:
    for left, right in COMPATIBLE_ENDINGS:
        if word_a.endswith(left) and word_b.endswith(right):
            return True
        if word_a.endswith(right) and word_b.endswith(left):
            return True
    return False


def passes_quality_filter(cluster: Cluster) -> bool:
    """Reject two-word clusters whose spellings make the rhyme implausible."""

    if cluster.size != 2:
        return True

    word_a, word_b = (word.lower() for word in cluster.words)
    if _has_compatible_endings(word_a, word_b):
        return True

    if abs(len(word_a) - len(word_b)) > MAX_PAIR_LENGTH_DIFFERENCE:
        return False

    shares_suffix = (
        len(word_a) >= PAIR_SUFFIX_LENGTH
        and len(word_b) >= PAIR_SUFFIX_LENGTH
        and word_a[-PAIR_SUFFIX_LENGTH:] == word_b[-PAIR_SUFFIX_LENGTH:]
    )
    shares_last_char = bool(word_a) and bool(word_b) and word_a[-1] == word_b[-1]
    return shares_suffix or shares_last_char


def diversity_bonus(cluster: Cluster) -> int:
    """Reward clusters mixing short and long words and many syllable counts."""

    counts = [
        stressed_syllable_count(occurrence.features)
        for occurrence in cluster.occurrences
        if occurrence.features is not None
    ]
    bonus = 0
    has_short = any(count <= SHORT_WORD_MAX_STRESSES for count in counts)
    has_long = any(count >= LONG_WORD_MIN_STRESSES for count in counts)
    if has_short and has_long:
        bonus += MIXED_LENGTH_BONUS

    distinct = len(set(counts))
    if distinct >= 3:
        bonus += min(MAX_SYLLABLE_VARIETY_BONUS, SYLLABLE_VARIETY_STEP * (distinct - 2))
    return bonus


def cluster_priority(cluster: Cluster, matrix: SimilarityMatrix) -> float:
    size_score = min(cluster.size * SIZE_WEIGHT, MAX_SIZE_SCORE)
    cohesion = internal_similarity(matrix, cluster.members) * COHESION_WEIGHT
    return size_score + cohesion + diversity_bonus(cluster)


def rank_clusters(clusters: Sequence[Cluster], matrix: SimilarityMatrix) -> List[Cluster]:
    """Return clusters ordered by descending priority, then size (stable)."""

    for cluster in clusters:
        cluster.priority = cluster_priority(cluster, matrix)
    return sorted(clusters, key=lambda cluster: (-cluster.priority, -cluster.size))


def _reused_label(cluster: Cluster, labeled: Sequence[Cluster]) -> str:
    # Least similar labeled cluster wins; ties keep the earliest rank.
    best_label: Optional[str] = None
    best_score = 0.0
    for candidate in labeled:
        score = score_similarity(cluster.representative, candidate.representative)
        if best_label is None or score < best_score:
            best_label = candidate.label
            best_score = score
    if best_label is None:
        raise ValueError("no labeled cluster to share a label with")
    return best_label


def assign_labels(ranked: Sequence[Cluster]) -> Dict[int, str]:
    """Label clusters in rank order and map each member index to its label.

    The first ``len(LABEL_ALPHABET)`` clusters take the alphabet in order.
    Further clusters reuse the label of the already labeled cluster whose
    representative is least similar to theirs.
    """

    by_member: Dict[int, str] = {}
    primary = list(ranked[: len(LABEL_ALPHABET)])
    for rank, cluster in enumerate(ranked):
        if rank < len(LABEL_ALPHABET):
            cluster.label = LABEL_ALPHABET[rank]
        else:
            cluster.label = _reused_label(cluster, primary)
        for member in cluster.members:
            by_member[member] = cluster.label
    return by_member


__all__ = [
    "CENTROID_MERGE_SIMILARITY",
    "COMPATIBLE_ENDINGS",
    "Cluster",
    "LABEL_ALPHABET",
    "assign_labels",
    "build_clusters",
    "cluster_priority",
    "consolidate_clusters",
    "diversity_bonus",
    "endings_compatible",
    "passes_quality_filter",
    "rank_clusters",
    "should_merge",
]
