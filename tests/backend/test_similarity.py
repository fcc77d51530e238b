from __future__ import annotations

from backend.app.services.similarity import (
    calculate_name_similarity,
    calculate_string_similarity,
    levenshtein_distance,
)


def test_levenshtein_known_distances() -> None:
    assert levenshtein_distance("kitten", "sitting") == 3
    assert levenshtein_distance("flaw", "lawn") == 2
    assert levenshtein_distance("", "abc") == 3
    assert levenshtein_distance("abc", "") == 3


def test_levenshtein_is_symmetric_and_zero_on_identity() -> None:
    pairs = [("jonsmyth", "johnsmith"), ("kitten", "sitting"), ("a", "")]
    for left, right in pairs:
        assert levenshtein_distance(left, right) == levenshtein_distance(right, left)
        assert levenshtein_distance(left, left) == 0


def test_string_similarity_bounds() -> None:
    assert calculate_string_similarity("Jane", "jane") == 100
    assert calculate_string_similarity("", "anything") == 0
    assert calculate_string_similarity("kitten", "sitting") == 57


def test_string_similarity_rounds_half_up() -> None:
    # one edit over eight characters is exactly 87.5
    assert calculate_string_similarity("abcdefgh", "abcdefgx") == 88


def test_name_similarity_scores_close_spelling() -> None:
    assert calculate_name_similarity("Christopher", "Montgomery", "Christopher", "Montgomary") == 95
    assert calculate_name_similarity("Jon", "Smyth", "John", "Smith") == 78


def test_name_similarity_tolerates_swapped_fields() -> None:
    assert calculate_name_similarity("Jane", "Doe", "Doe", "Jane") == 100


def test_name_similarity_without_names_is_zero() -> None:
    assert calculate_name_similarity("", "", "", "") == 0
    assert calculate_name_similarity("Jane", "Doe", "", "") == 0
