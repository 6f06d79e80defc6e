"""Phonetic rhyme analysis engine."""

from .analyzer import (
    LyricWord,
    RhymeSchemeAnalyzer,
    analyze_rhyme_scheme,
    analyze_rhyme_statistics,
    build_rhyming_dictionary,
    rhyme_group_words,
)
from .cmudict_loader import CMUDictLoader, VOWEL_PHONEMES, load_pronouncing_dictionary
from .collector import STOP_WORDS, WordOccurrence, clean_word, collect_words
from .errors import LyricsTooLargeError
from .features import RhymeFeatures, extract_rhyme_features
from .scorer import score_similarity
from .statistics import RhymeGroupSummary, RhymeStatistics

__all__ = [
    "CMUDictLoader",
    "LyricWord",
    "LyricsTooLargeError",
    "RhymeFeatures",
    "RhymeGroupSummary",
    "RhymeSchemeAnalyzer",
    "RhymeStatistics",
    "STOP_WORDS",
    "VOWEL_PHONEMES",
    "WordOccurrence",
    "analyze_rhyme_scheme",
    "analyze_rhyme_statistics",
    "build_rhyming_dictionary",
    "clean_word",
    "collect_words",
    "extract_rhyme_features",
    "load_pronouncing_dictionary",
    "rhyme_group_words",
    "score_similarity",
]
