"""Average-linkage agglomerative clustering of rhyme candidates.

The engine works on an explicit similarity matrix so it can be exercised with
hand-built matrices as well as scorer output. Cost is cubic in the number of
candidates, which is fine for one song (a few hundred words) but not for
corpora; callers bound the candidate count before getting here.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence

from .features import RhymeFeatures
from .scorer import MAX_SCORE, score_similarity

DEFAULT_MIN_SIMILARITY = 77
MIN_CLUSTER_SIZE = 2

Scorer = Callable[[RhymeFeatures, RhymeFeatures], float]
SimilarityMatrix = List[List[float]]


def build_similarity_matrix(
    features: Sequence[RhymeFeatures],
    scorer: Scorer = score_similarity,
) -> SimilarityMatrix:
    """Score every pair once and mirror it; the diagonal is ``MAX_SCORE``."""

    size = len(features)
    matrix: SimilarityMatrix = [[0.0] * size for _ in range(size)]
    for i in range(size):
        matrix[i][i] = float(MAX_SCORE)
        for j in range(i + 1, size):
            value = float(scorer(features[i], features[j]))
            matrix[i][j] = value
            matrix[j][i] = value
    return matrix


def average_similarity(
    matrix: SimilarityMatrix,
    left: Sequence[int],
    right: Sequence[int],
) -> float:
    """Mean similarity over every cross pair of ``left`` and ``right``."""

    if not left or not right:
        return 0.0
    total = sum(matrix[i][j] for i in left for j in right)
    return total / (len(left) * len(right))


def internal_similarity(matrix: SimilarityMatrix, members: Sequence[int]) -> float:
    """Mean similarity over the distinct member pairs of one cluster."""

    pairs = [
        matrix[members[a]][members[b]]
        for a in range(len(members))
        for b in range(a + 1, len(members))
    ]
    if not pairs:
        return 0.0
    return sum(pairs) / len(pairs)


def agglomerate(
    matrix: SimilarityMatrix,
    min_similarity: float = DEFAULT_MIN_SIMILARITY,
    *,
    max_iterations: Optional[int] = None,
) -> List[List[int]]:
    """Merge clusters while the best average-linkage pair meets the threshold.

    Returns every cluster, singletons included, as lists of matrix indices.
    Among equally similar pairs the first in scan order wins, and a merged
    cluster takes the position of its left-hand parent, so the result is
    deterministic for a given matrix.
    """

    size = len(matrix)
    clusters: List[List[int]] = [[index] for index in range(size)]
    # sums[a][b]: total cross similarity between clusters a and b.
    sums: List[List[float]] = [list(row) for row in matrix]

    limit = max_iterations if max_iterations is not None else max(size - 1, 0)
    iterations = 0
    while len(clusters) > 1 and iterations < limit:
        iterations += 1
        best_value: Optional[float] = None
        best_pair = (-1, -1)
        for a in range(len(clusters)):
            for b in range(a + 1, len(clusters)):
                value = sums[a][b] / (len(clusters[a]) * len(clusters[b]))
                if best_value is None or value > best_value:
                    best_value = value
                    best_pair = (a, b)

        if best_value is None or best_value < min_similarity:
            break

        a, b = best_pair
        clusters[a] = clusters[a] + clusters[b]
        for row in range(len(sums)):
            sums[row][a] += sums[row][b]
        for column in range(len(sums)):
            sums[a][column] = sums[column][a]
        del clusters[b]
        del sums[b]
        for row in sums:
            del row[b]

    return clusters


def cluster_candidates(
    features: Sequence[RhymeFeatures],
    min_similarity: float = DEFAULT_MIN_SIMILARITY,
    *,
    matrix: Optional[SimilarityMatrix] = None,
) -> List[List[int]]:
    """Cluster ``features`` and drop clusters smaller than two members."""

    if matrix is None:
        matrix = build_similarity_matrix(features)
    return [
        members
        for members in agglomerate(matrix, min_similarity)
        if len(members) >= MIN_CLUSTER_SIZE
    ]


__all__ = [
    "DEFAULT_MIN_SIMILARITY",
    "MIN_CLUSTER_SIZE",
    "SimilarityMatrix",
    "agglomerate",
    "average_similarity",
    "build_similarity_matrix",
    "cluster_candidates",
    "internal_similarity",
]
