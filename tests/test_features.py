import pytest

from rhyme_scheme.core.features import (
    RhymeFeatures,
    extract_rhyme_features,
    stressed_syllable_count,
    strip_stress,
    trailing_consonants,
)


def test_primary_stress_starts_the_perfect_key():
    features = extract_rhyme_features("K AE1 T")

    assert features == RhymeFeatures(
        perfect="AE1 T",
        near="K AE1 T",
        slant="AE1 T",
        ending="T",
        full_phonetic="K AE1 T",
    )


def test_last_stressed_vowel_wins_over_later_unstressed_vowels():
    features = extract_rhyme_features("HH EH1 L OW0")

    assert features.perfect == "EH1 L OW0"
    assert features.near == "HH EH1 L OW0"
    assert features.slant == "L OW0"
    assert features.ending == "OW0"


def test_secondary_stress_counts_as_stressed():
    features = extract_rhyme_features("AE1 K R AH0 B AE2 T")

    assert features.perfect == "AE2 T"
    assert features.near == "B AE2 T"


def test_unstressed_word_falls_back_to_last_vowel():
    features = extract_rhyme_features("DH AH0")

    assert features.perfect == "AH0"
    assert features.near == "DH AH0"


def test_bare_vowel_symbol_is_recognised():
    features = extract_rhyme_features("S AA")

    assert features is not None
    assert features.perfect == "AA"


def test_single_phoneme_word_has_near_equal_to_perfect():
    features = extract_rhyme_features("AH0")

    assert features.perfect == features.near == features.slant == features.ending == "AH0"


@pytest.mark.parametrize("phonemes", ["B", "", "   ", None, "S T R"])
def test_vowelless_or_empty_pronunciations_have_no_features(phonemes):
    assert extract_rhyme_features(phonemes) is None


def test_extra_whitespace_is_normalised():
    assert extract_rhyme_features("  K   AE1  T ") == extract_rhyme_features("K AE1 T")


def test_helpers_describe_the_pronunciation():
    features = extract_rhyme_features("AE1 K R AH0 B AE2 T")

    assert strip_stress("AE2") == "AE"
    assert stressed_syllable_count(features) == 2
    assert trailing_consonants(features) == ("T",)
    assert trailing_consonants(extract_rhyme_features("S IY1")) == ()
    assert features.rhyme_vowel == "AE"


def test_as_dict_uses_caller_facing_keys():
    payload = extract_rhyme_features("K AE1 T").as_dict()

    assert payload["fullPhonetic"] == "K AE1 T"
    assert set(payload) == {"perfect", "near", "slant", "ending", "fullPhonetic"}
