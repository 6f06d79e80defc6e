import logging

import pytest

from rhyme_scheme import RhymeSchemeAnalyzer
from rhyme_scheme.config import (
    DEFAULT_MAX_CANDIDATES,
    MAX_CANDIDATES_ENV,
    MIN_SIMILARITY_ENV,
    AnalyzerSettings,
)


def test_defaults_without_environment():
    settings = AnalyzerSettings.from_env({})

    assert settings.min_similarity == 77
    assert settings.max_candidates == DEFAULT_MAX_CANDIDATES


def test_environment_values_are_parsed():
    settings = AnalyzerSettings.from_env(
        {MIN_SIMILARITY_ENV: " 85.5 ", MAX_CANDIDATES_ENV: "120"}
    )

    assert settings.min_similarity == 85.5
    assert settings.max_candidates == 120


def test_invalid_environment_values_fall_back_with_a_warning(caplog):
    caplog.set_level(logging.WARNING, logger="rhyme_scheme.config")

    settings = AnalyzerSettings.from_env(
        {MIN_SIMILARITY_ENV: "high", MAX_CANDIDATES_ENV: "-4"}
    )

    assert settings == AnalyzerSettings()
    messages = [record.getMessage() for record in caplog.records]
    assert any("Ignoring invalid numeric setting" in message for message in messages)
    assert any("Ignoring negative or non-finite" in message for message in messages)


def test_override_only_replaces_given_values():
    base = AnalyzerSettings(min_similarity=80, max_candidates=10)

    assert base.override() is base
    assert base.override(max_candidates=20) == AnalyzerSettings(80, 20)
    assert base.override(min_similarity=90).min_similarity == 90.0


@pytest.mark.parametrize("raw", ["nan", "inf", "-inf"])
def test_non_finite_similarity_falls_back_to_default(caplog, raw):
    caplog.set_level(logging.WARNING, logger="rhyme_scheme.config")

    settings = AnalyzerSettings.from_env({MIN_SIMILARITY_ENV: raw})

    assert settings.min_similarity == 77
    assert any("non-finite" in record.getMessage() for record in caplog.records)


def test_non_finite_similarity_keeps_unrelated_words_apart(dictionary):
    settings = AnalyzerSettings.from_env({MIN_SIMILARITY_ENV: "nan"})
    analyzer = RhymeSchemeAnalyzer(dictionary, settings=settings)

    lines = analyzer.analyze_scheme("cat dog\nboat running")

    assert [word.rhyme_group for line in lines for word in line] == [None] * 4


@pytest.mark.parametrize("value", [float("nan"), float("inf"), -1])
def test_override_rejects_unusable_similarity(value):
    with pytest.raises(ValueError):
        AnalyzerSettings().override(min_similarity=value)
