import itertools

import pytest

from rhyme_scheme.core.features import RhymeFeatures, extract_rhyme_features
from rhyme_scheme.core.scorer import (
    consonant_similarity,
    flow_bonus,
    score_similarity,
    vowel_family_score,
)

from conftest import PRONUNCIATIONS


@pytest.mark.parametrize(
    ("left", "right", "expected"),
    [
        ("cat", "hat", 100),  # perfect key match, capped
        ("see", "free", 100),
        ("happy", "sloppy", 65),  # slant 60 + equal stress count 5
        ("cat", "boat", 50),  # shared final phoneme 45 + 5
        ("time", "game", 50),
        ("cat", "back", 87),  # same vowel 75 + stop/stop coda 7 + 5
        ("bite", "cake", 77),  # ay-sound family 65 + 7 + 5
        ("see", "bit", 73),  # long-ee family 65 + one-sided coda 3 + 5
        ("go", "saw", 80),  # oh-sound family 65 + empty codas 10 + 5
        ("cat", "ask", 82),  # same vowel 75 + coda length mismatch 2 + 5
        ("running", "jumping", 75),  # slant 60 + 5 + -ing 10
        ("played", "loved", 58),  # ending 45 + 5 + D ending 8
        ("happily", "lovely", 73),  # slant 60 + 5 + L IY 8
        ("cat", "dog", 5),  # nothing shared but the stress count
    ],
)
def test_reference_scores(features, left, right, expected):
    assert score_similarity(features(left), features(right)) == pytest.approx(expected)


def test_near_key_match_scores_eighty_before_bonuses():
    left = RhymeFeatures("AA1", "K AA1", "K AA1", "AA1", "K AA1")
    right = RhymeFeatures("AA2", "K AA1", "K AA2", "AA2", "K AA2")

    # near keys are compared before slant and ending; stress counts match.
    assert score_similarity(left, right) == pytest.approx(85)


def test_score_is_symmetric_and_bounded_for_every_dictionary_pair():
    bundles = [
        extract_rhyme_features(phones)
        for phones in PRONUNCIATIONS.values()
        if extract_rhyme_features(phones) is not None
    ]

    for left, right in itertools.combinations(bundles, 2):
        forward = score_similarity(left, right)
        assert forward == score_similarity(right, left)
        assert 0 <= forward <= 100


def test_single_phoneme_features_stay_in_range():
    vowel = extract_rhyme_features("AH0")
    other = extract_rhyme_features("OW1")

    assert 0 <= score_similarity(vowel, other) <= 100
    assert score_similarity(vowel, vowel) == 100


@pytest.mark.parametrize(
    ("vowels", "expected"),
    [
        (("AE", "AE"), 85),
        (("AY", "EY"), 75),
        (("AO", "AW"), 75),
        (("AH", "ER"), 75),
        (("ER", "AA"), 0),
        (("IY", "UW"), 0),
    ],
)
def test_vowel_family_score(vowels, expected):
    assert vowel_family_score(*vowels) == expected


@pytest.mark.parametrize(
    ("left", "right", "expected"),
    [
        ((), (), 1.0),
        (("T",), ("T",), 1.0),
        ((), ("T",), 0.3),
        (("T",), ("S", "K"), 0.2),
        (("M",), ("N",), 0.7),
        (("T",), ("S",), 0.0),
        (("T", "Z"), ("D", "Z"), 0.85),
    ],
)
def test_consonant_similarity(left, right, expected):
    assert consonant_similarity(left, right) == pytest.approx(expected)
    assert consonant_similarity(right, left) == pytest.approx(expected)


def test_flow_bonus_stacks_independent_patterns(features):
    assert flow_bonus(features("running"), features("jumping")) == 15
    assert flow_bonus(features("played"), features("loved")) == 13
    assert flow_bonus(features("cat"), features("acrobat")) == 0
