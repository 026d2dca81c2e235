import pytest

from dinematch.domain.matching.similarity import compare_two_strings


def test_identical_strings():
    assert compare_two_strings("wine tasting", "wine tasting") == 1.0


def test_known_pair():
    assert compare_two_strings("healed", "sealed") == pytest.approx(0.8)


def test_case_and_whitespace_are_ignored():
    assert compare_two_strings("Wine Tasting", "winetasting") == 1.0


def test_symmetric():
    a, b = "jazz brunch", "sunday jazz"
    assert compare_two_strings(a, b) == compare_two_strings(b, a)


def test_short_or_disjoint_strings_score_zero():
    assert compare_two_strings("a", "abc") == 0.0
    assert compare_two_strings("", "abc") == 0.0
    assert compare_two_strings("abc", "xyz") == 0.0


def test_score_is_bounded():
    score = compare_two_strings("italian dinner", "italian food")
    assert 0.0 < score < 1.0
