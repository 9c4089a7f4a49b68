"""Tests for similarity scoring between solutions and answers."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from solutions.builder import build_from_naming_solutions
from solutions.matcher import (
    SolutionProfileCache,
    build_solution_profile,
    get_all_variations,
    get_best_matching_variations,
    get_matchable_words,
    get_string_matching_data,
    iter_path_scores,
    match_against_answer,
    merge_matching_data,
)
from solutions.models import Solution


def _complex():
    return Solution("en", "I like cats", (("I ",), ("like", "love"), (" cats",)), True)


def _simple(sentence="I like cats"):
    return build_from_naming_solutions([sentence], "en")[0]


def test_matchable_words_are_lowercased():
    assert get_matchable_words("I LIKE Cats!", "en") == ["i", "like", "cats"]
    assert get_matchable_words("Istanbul", "tr") == ["ıstanbul"]


def test_string_matching_data():
    data = get_string_matching_data("I like cats", "en")
    assert data.word_count == 3
    assert data.char_count == 9
    assert data.bigram_count == 7
    assert data.bigram_map["at"] == 1


def test_merge_matching_data():
    merged = merge_matching_data([
        get_string_matching_data("cat", "en"),
        get_string_matching_data("hat", "en"),
    ])
    assert merged.word_count == 2
    assert merged.bigram_map["at"] == 2
    assert merge_matching_data([]).bigram_count == 0


def test_profile_splits_shared_and_choices():
    profile = build_solution_profile(_complex())
    assert profile.choice_positions == [1]
    assert len(profile.choices) == 1
    assert len(profile.choices[0]) == 2
    assert profile.shared.word_count == 2


def test_self_similarity_simple():
    assert match_against_answer(_simple(), "I like cats") == pytest.approx(1.0)


def test_self_similarity_ignores_case_and_punctuation():
    assert match_against_answer(_simple(), "i like cats!!") == pytest.approx(1.0)


def test_self_similarity_complex():
    solution = _complex()
    assert match_against_answer(solution, "I like cats") == pytest.approx(1.0)
    assert match_against_answer(solution, "I love cats") == pytest.approx(1.0)


def test_score_bounds():
    solution = _complex()
    for answer in ["I hate dogs", "cats", "I I I I", "love love love", "xyz", "I like cats and dogs"]:
        score = match_against_answer(solution, answer)
        assert 0.0 <= score <= 1.0


def test_one_letter_words_stay_within_bounds():
    assert match_against_answer(_simple("a"), "a") == pytest.approx(1.0)
    # "a" and "b" count as one bigram each.
    assert match_against_answer(_simple("a b"), "a") == pytest.approx(2 / 3)


def test_partial_match_is_between_bounds():
    score = match_against_answer(_simple(), "I hate dogs")
    assert 0.0 < score < 1.0


def test_disjoint_answer_scores_zero():
    assert match_against_answer(_simple("ab"), "xyz") == 0.0


def test_closer_answer_scores_higher():
    solution = _simple()
    assert match_against_answer(solution, "I like cat") > match_against_answer(solution, "I hate dogs")


def test_optional_word():
    solution = Solution("en", "I really like", (("I",), (" ",), ("really ", ""), ("like",)), True)
    assert match_against_answer(solution, "I like") == pytest.approx(1.0)
    assert match_against_answer(solution, "I really like") == pytest.approx(1.0)


def test_iter_path_scores_yields_every_path():
    paths = dict(iter_path_scores(_complex(), "I love cats"))
    assert set(paths) == {(0,), (1,)}
    assert paths[(1,)] > paths[(0,)]


def test_iter_path_scores_without_choices():
    paths = list(iter_path_scores(_simple(), "I like cats"))
    assert len(paths) == 1
    assert paths[0][0] == ()


def test_all_variations():
    assert list(get_all_variations(_complex())) == ["I like cats", "I love cats"]


def test_best_matching_variations():
    assert get_best_matching_variations(_complex(), "I love dogs") == ["I love cats"]
    assert get_best_matching_variations(_simple(), "whatever") == ["I like cats"]


def test_profile_cache():
    cache = SolutionProfileCache()
    solution = _complex()
    match_against_answer(solution, "I like cats", cache)
    match_against_answer(solution, "I love cats", cache)
    assert len(cache) == 1
    cache.clear()
    assert len(cache) == 0
