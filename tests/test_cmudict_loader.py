from rhyme_scheme import analyze_rhyme_scheme
from rhyme_scheme.core import CMUDictLoader, load_pronouncing_dictionary

SAMPLE_DICT = """;;; sample entries
CAT  K AE1 T
HAT  HH AE1 T
HAT(2)  HH AH0 T
DOG  D AO1 G
"""


def test_loader_reads_first_pronunciation_per_word(tmp_path):
    dict_path = tmp_path / "cmudict.7b"
    dict_path.write_text(SAMPLE_DICT, encoding="utf-8")

    loader = CMUDictLoader(dict_path)

    assert loader["hat"] == "HH AE1 T"
    assert loader.get("Cat") == "K AE1 T"
    assert "dog" in loader
    assert "bird" not in loader
    assert sorted(loader) == ["cat", "dog", "hat"]
    assert len(loader) == 3


def test_loader_retries_after_file_creation(tmp_path):
    dict_path = tmp_path / "cmudict.7b"
    loader = CMUDictLoader(dict_path=dict_path)

    assert loader.get("cat") is None
    assert loader._loaded is False
    assert len(loader) == 0

    dict_path.write_text("CAT  K AE1 T\n", encoding="utf-8")

    assert loader.get("cat") == "K AE1 T"
    assert loader._loaded is True


def test_loader_feeds_the_analysis(tmp_path):
    dict_path = tmp_path / "cmudict.7b"
    dict_path.write_text(SAMPLE_DICT, encoding="utf-8")

    lines = analyze_rhyme_scheme("The cat wore a hat", CMUDictLoader(dict_path))

    assert [word.rhyme_group for word in lines[0]] == [None, "A", None, None, "A"]


def test_pronouncing_dictionary_can_be_restricted_to_a_vocabulary():
    mapping = load_pronouncing_dictionary(["cat", "hat", "notaword"])

    assert set(mapping) == {"cat", "hat"}
    assert mapping["cat"] == "K AE1 T"
