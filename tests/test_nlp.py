import pytest

from string_analyzer.errors import UnsatisfiableFilter
from string_analyzer.nlp import interpret_nl_query, translate


def test_single_word_only():
    assert translate("find single word strings").as_dict() == {"word_count": 1}


def test_palindromic_longer_than():
    parsed = translate("palindromic strings longer than 5").as_dict()
    assert parsed == {"is_palindrome": True, "length": {"gte": 6}}


def test_single_word_palindromic():
    q = "all single word palindromic strings"
    res = interpret_nl_query(q)
    assert res.original == q
    assert res.parsed_filters.word_count == 1
    assert res.parsed_filters.is_palindrome is True


def test_original_text_is_preserved():
    q = "Single Word PALINDROMES"
    dumped = interpret_nl_query(q).model_dump()
    assert dumped == {
        "original": q,
        "parsed_filters": {"word_count": 1, "is_palindrome": True},
    }


def test_strings_longer_than_number_word():
    # longer than 10 => length >= 11
    assert translate("strings longer than ten characters").length.gte == 11


def test_unknown_number_word_is_ignored():
    assert translate("strings longer than many characters").as_dict() == {}


def test_contains_letter_z():
    assert translate("strings containing the letter z").as_dict() == {"value_contains": "z"}


def test_contains_letter_without_article():
    assert translate("Strings containing letter Q").value_contains == "q"


def test_first_vowel_narrows_palindromes():
    parsed = translate("palindromic strings that contain the first vowel").as_dict()
    assert parsed == {"is_palindrome": True, "value_contains": "a"}


def test_first_vowel_overrides_letter():
    parsed = translate("palindromes containing the letter z with the first vowel")
    assert parsed.value_contains == "a"


def test_first_vowel_alone_adds_nothing():
    assert translate("strings that contain the first vowel").as_dict() == {}


def test_unrecognized_text_yields_no_predicates():
    assert translate("tell me something nice").as_dict() == {}


def test_shorter_than():
    assert translate("strings shorter than 4 characters").as_dict() == {"length": {"lte": 3}}


def test_longer_and_shorter_combine():
    parsed = translate("strings longer than 3 and shorter than 10")
    assert parsed.as_dict() == {"length": {"gte": 4, "lte": 9}}


def test_exact_word_count():
    assert translate("strings with 2 words").word_count == 2


@pytest.mark.parametrize(
    "query",
    [
        "strings with exactly 0 words",
        "strings with zero words",
        "single word strings with exactly zero words",
    ],
)
def test_non_positive_word_count_is_unsatisfiable(query):
    with pytest.raises(UnsatisfiableFilter):
        translate(query)


def test_conflicting_length_bounds_are_kept():
    parsed = translate("strings longer than 10 and shorter than 5")
    assert parsed.as_dict() == {"length": {"gte": 11, "lte": 4}}


def test_negative_length_bound_is_kept():
    assert translate("strings shorter than 0 characters").as_dict() == {"length": {"lte": -1}}


def test_non_string_query():
    with pytest.raises(TypeError):
        translate(None)  # type: ignore[arg-type]
