"""Rhyme scheme detection and rhyme statistics for song lyrics."""

from .core import (
    CMUDictLoader,
    LyricWord,
    LyricsTooLargeError,
    RhymeFeatures,
    RhymeGroupSummary,
    RhymeSchemeAnalyzer,
    RhymeStatistics,
    analyze_rhyme_scheme,
    analyze_rhyme_statistics,
    build_rhyming_dictionary,
    extract_rhyme_features,
    load_pronouncing_dictionary,
    rhyme_group_words,
    score_similarity,
)
from .config import AnalyzerSettings

__version__ = "0.1.0"

__all__ = [
    "AnalyzerSettings",
    "CMUDictLoader",
    "LyricWord",
    "LyricsTooLargeError",
    "RhymeFeatures",
    "RhymeGroupSummary",
    "RhymeSchemeAnalyzer",
    "RhymeStatistics",
    "analyze_rhyme_scheme",
    "analyze_rhyme_statistics",
    "build_rhyming_dictionary",
    "extract_rhyme_features",
    "load_pronouncing_dictionary",
    "rhyme_group_words",
    "score_similarity",
]
