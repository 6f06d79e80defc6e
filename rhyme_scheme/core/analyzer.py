"""Entry points for rhyme scheme and rhyme statistics analysis."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence

from rhyme_scheme.config import AnalyzerSettings
from rhyme_scheme.utils.observability import (
    add_span_attributes,
    create_counter,
    create_histogram,
    get_logger,
    record_exception,
    start_span,
)
from rhyme_scheme.utils.telemetry import PhaseTelemetry

from .clustering import build_similarity_matrix, cluster_candidates
from .collector import WordOccurrence, collect_words, rhyme_candidates
from .consolidation import (
    assign_labels,
    build_clusters,
    consolidate_clusters,
    passes_quality_filter,
    rank_clusters,
)
from .errors import LyricsTooLargeError
from .statistics import (
    RhymeGroupSummary,
    RhymeStatistics,
    build_rhyme_groups,
    compute_statistics,
)

_ANALYSES_TOTAL = create_counter(
    "rhyme_scheme_analyses_total",
    "Rhyme analyses completed.",
    label_names=("kind",),
)
_ANALYSIS_FAILURES = create_counter(
    "rhyme_scheme_analysis_failures_total",
    "Rhyme analyses that raised an exception.",
    label_names=("kind",),
)
_ANALYSIS_SECONDS = create_histogram(
    "rhyme_scheme_analysis_seconds",
    "Latency of rhyme analyses.",
    label_names=("kind",),
)
_REJECTED_INPUTS = create_counter(
    "rhyme_scheme_rejected_inputs_total",
    "Analyses refused because the lyrics held too many rhymable words.",
)


@dataclass(frozen=True)
class LyricWord:
    """One displayed word and the rhyme group it was assigned to."""

    text: str
    cleaned: str
    rhyme_group: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "cleaned": self.cleaned, "rhymeGroup": self.rhyme_group}


class RhymeSchemeAnalyzer:
    """Analyse lyrics against one pronunciation dictionary.

    The analyzer keeps no per-song state: each call collects, clusters and
    labels from scratch. ``telemetry`` holds the phase timings of the most
    recent call for diagnostics.
    """

    def __init__(
        self,
        dictionary: Mapping,
        *,
        settings: Optional[AnalyzerSettings] = None,
        telemetry: Optional[PhaseTelemetry] = None,
    ) -> None:
        self.dictionary = dictionary
        self.settings = settings or AnalyzerSettings.from_env()
        self.telemetry = telemetry or PhaseTelemetry()
        self._logger = get_logger(__name__).bind(component="rhyme_scheme_analyzer")

    def _check_size(self, candidates: Sequence[WordOccurrence], limit: int) -> None:
        if len(candidates) > limit:
            _REJECTED_INPUTS.inc()
            self._logger.warning(
                "Lyrics rejected as too large",
                context={"candidates": len(candidates), "limit": limit},
            )
            raise LyricsTooLargeError(len(candidates), limit)

    def analyze_scheme(
        self,
        lyrics: str,
        *,
        min_similarity: Optional[float] = None,
        max_candidates: Optional[int] = None,
    ) -> List[List[LyricWord]]:
        """Label every word of ``lyrics`` with its rhyme group.

        Returns one list per line. ``rhyme_group`` is ``None`` for words that
        are not rhymable or found no partner.

        Raises:
            LyricsTooLargeError: More rhymable words than ``max_candidates``.
        """

        settings = self.settings.override(
            min_similarity=min_similarity, max_candidates=max_candidates
        )
        kind = "scheme"
        with start_span(
            "rhyme_scheme.analyze_scheme",
            {"lyrics.length": len(lyrics or ""), "min_similarity": settings.min_similarity},
        ) as span, _ANALYSIS_SECONDS.labels(kind=kind).time():
            try:
                result = self._analyze_scheme(lyrics, settings, span)
            except Exception as error:
                _ANALYSIS_FAILURES.labels(kind=kind).inc()
                record_exception(span, error)
                self._logger.error(
                    "Rhyme analysis failed",
                    context={"kind": kind, "error": type(error).__name__},
                )
                raise
        _ANALYSES_TOTAL.labels(kind=kind).inc()
        return result

    def _analyze_scheme(self, lyrics: str, settings: AnalyzerSettings, span: Any):
        telemetry = self.telemetry
        telemetry.start_trace("analyze_scheme")

        with telemetry.phase("collect"):
            lines = collect_words(lyrics, self.dictionary)
            candidates = rhyme_candidates(lines)
        self._check_size(candidates, settings.max_candidates)

        features = [candidate.features for candidate in candidates]
        with telemetry.phase("matrix"):
            matrix = build_similarity_matrix(features)
        with telemetry.phase("cluster"):
            member_lists = cluster_candidates(
                features, settings.min_similarity, matrix=matrix
            )
        with telemetry.phase("consolidate"):
            clusters = consolidate_clusters(build_clusters(member_lists, candidates))
            clusters = [cluster for cluster in clusters if passes_quality_filter(cluster)]
        with telemetry.phase("label"):
            labels = assign_labels(rank_clusters(clusters, matrix))

        group_by_position = {
            (candidates[index].line_index, candidates[index].word_index): label
            for index, label in labels.items()
        }
        result = [
            [
                LyricWord(
                    text=occurrence.raw_text,
                    cleaned=occurrence.cleaned_text,
                    rhyme_group=group_by_position.get(
                        (occurrence.line_index, occurrence.word_index)
                    ),
                )
                for occurrence in line
            ]
            for line in lines
        ]

        telemetry.annotate("lines", len(lines))
        telemetry.increment("candidates", len(candidates))
        telemetry.increment("clusters", len(clusters))
        add_span_attributes(
            span,
            {
                "lines": len(lines),
                "candidates": len(candidates),
                "clusters": len(clusters),
            },
        )
        self._logger.info(
            "Rhyme scheme analysed",
            context={
                "lines": len(lines),
                "candidates": len(candidates),
                "raw_clusters": len(member_lists),
                "clusters": len(clusters),
            },
        )
        return result

    def analyze_statistics(
        self,
        lyrics: str,
        *,
        max_candidates: Optional[int] = None,
    ) -> RhymeStatistics:
        """Compute :class:`RhymeStatistics` for ``lyrics``.

        Raises:
            LyricsTooLargeError: More rhymable words than ``max_candidates``.
        """

        settings = self.settings.override(max_candidates=max_candidates)
        kind = "statistics"
        with start_span(
            "rhyme_scheme.analyze_statistics",
            {"lyrics.length": len(lyrics or "")},
        ) as span, _ANALYSIS_SECONDS.labels(kind=kind).time():
            try:
                self.telemetry.start_trace("analyze_statistics")
                with self.telemetry.phase("collect"):
                    lines = collect_words(lyrics, self.dictionary)
                self._check_size(rhyme_candidates(lines), settings.max_candidates)
                with self.telemetry.phase("statistics"):
                    statistics = compute_statistics(lines)
                self.telemetry.annotate("lines", len(lines))
            except Exception as error:
                _ANALYSIS_FAILURES.labels(kind=kind).inc()
                record_exception(span, error)
                self._logger.error(
                    "Rhyme analysis failed",
                    context={"kind": kind, "error": type(error).__name__},
                )
                raise
            add_span_attributes(
                span,
                {
                    "rhymable_words": statistics.total_rhymable_words,
                    "rhyme_density": statistics.rhyme_density,
                },
            )
        _ANALYSES_TOTAL.labels(kind=kind).inc()
        self._logger.info(
            "Rhyme statistics computed",
            context={
                "rhymable_words": statistics.total_rhymable_words,
                "perfect": statistics.perfect_rhymes,
                "near": statistics.near_rhymes,
                "sounds_like": statistics.sounds_like,
                "internal": statistics.internal_rhymes,
            },
        )
        return statistics

    def build_rhyming_dictionary(self, songs: Iterable[str]) -> List[RhymeGroupSummary]:
        """Group the rhymable words of every song in ``songs`` by rhyme key.

        Words are taken in song order and kept once per group. Groups with a
        single distinct word are left out; the largest groups come first.
        """

        kind = "rhyming_dictionary"
        timer = _ANALYSIS_SECONDS.labels(kind=kind).time()
        with start_span("rhyme_scheme.build_rhyming_dictionary") as span, timer:
            self.telemetry.start_trace("build_rhyming_dictionary")
            candidates: List[WordOccurrence] = []
            song_count = 0
            with self.telemetry.phase("collect"):
                for lyrics in songs:
                    song_count += 1
                    candidates.extend(rhyme_candidates(collect_words(lyrics, self.dictionary)))
            with self.telemetry.phase("group"):
                groups = build_rhyme_groups(candidates)
            self.telemetry.annotate("songs", song_count)
            add_span_attributes(span, {"songs": song_count, "groups": len(groups)})
        _ANALYSES_TOTAL.labels(kind=kind).inc()
        self._logger.info(
            "Rhyming dictionary built",
            context={"songs": song_count, "candidates": len(candidates), "groups": len(groups)},
        )
        return groups


def analyze_rhyme_scheme(
    lyrics: str,
    dictionary: Mapping,
    *,
    min_similarity: Optional[float] = None,
    max_candidates: Optional[int] = None,
) -> List[List[LyricWord]]:
    """Label the words of ``lyrics`` with rhyme groups (see :class:`RhymeSchemeAnalyzer`)."""

    return RhymeSchemeAnalyzer(dictionary).analyze_scheme(
        lyrics, min_similarity=min_similarity, max_candidates=max_candidates
    )


def analyze_rhyme_statistics(
    lyrics: str,
    dictionary: Mapping,
    *,
    max_candidates: Optional[int] = None,
) -> RhymeStatistics:
    """Compute rhyme statistics for ``lyrics``."""

    return RhymeSchemeAnalyzer(dictionary).analyze_statistics(
        lyrics, max_candidates=max_candidates
    )


def build_rhyming_dictionary(
    songs: Iterable[str], dictionary: Mapping
) -> List[RhymeGroupSummary]:
    """Group the rhymable words of several songs by perfect rhyme key."""

    return RhymeSchemeAnalyzer(dictionary).build_rhyming_dictionary(songs)


def rhyme_group_words(lines: Sequence[Sequence[LyricWord]]) -> Dict[str, List[str]]:
    """Map each rhyme group label to its distinct lowercase words, in order."""

    groups: Dict[str, List[str]] = {}
    for line in lines:
        for word in line:
            if not word.rhyme_group or not word.cleaned:
                continue
            members = groups.setdefault(word.rhyme_group, [])
            cleaned = word.cleaned.lower()
            if cleaned not in members:
                members.append(cleaned)
    return groups


__all__ = [
    "LyricWord",
    "RhymeSchemeAnalyzer",
    "analyze_rhyme_scheme",
    "build_rhyming_dictionary",
    "analyze_rhyme_statistics",
    "rhyme_group_words",
]
