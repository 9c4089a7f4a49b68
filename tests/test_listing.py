"""Tests for word filters, sorting and pagination."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from solutions.builder import build_from_naming_solutions
from solutions.listing import (
    PAGE_SIZE_ALL,
    SORT_DIRECTION_ASC,
    SORT_DIRECTION_DESC,
    SORT_TYPE_ALPHABETICAL,
    SORT_TYPE_SIMILARITY,
    WORD_MATCH_ANYWHERE,
    WORD_MATCH_END,
    WORD_MATCH_EXACT,
    WORD_MATCH_START,
    WordFilter,
    filter_solutions,
    get_available_sort_types,
    get_challenge_words,
    page_after_resize,
    paginate,
    parse_word_filter,
    sort_solutions,
)
from solutions.models import Solution


def _solutions():
    return build_from_naming_solutions(["I like cats", "I love dogs", "We like birds"], "en")


def _references(solutions):
    return [s.reference for s in solutions]


def _filtered(*queries):
    filters = [parse_word_filter(q, "en") for q in queries]
    return _references(filter_solutions(_solutions(), filters))


# ============================================================================
# Filters
# ============================================================================

def test_parse_word_filter_modes():
    assert parse_word_filter("cat", "en") == WordFilter("cat", WORD_MATCH_EXACT, False)
    assert parse_word_filter("cat*", "en") == WordFilter("cat", WORD_MATCH_START, False)
    assert parse_word_filter("*at", "en") == WordFilter("at", WORD_MATCH_END, False)
    assert parse_word_filter("*a*", "en") == WordFilter("a", WORD_MATCH_ANYWHERE, False)


def test_parse_word_filter_signs():
    assert parse_word_filter("-cat*", "en") == WordFilter("cat", WORD_MATCH_START, True)
    assert parse_word_filter("+Cats", "en") == WordFilter("cats", WORD_MATCH_EXACT, False)


def test_parse_word_filter_uses_first_word():
    assert parse_word_filter("  cat dog ", "en").word == "cat"


def test_parse_word_filter_without_words():
    assert parse_word_filter("", "en") is None
    assert parse_word_filter("!!!", "en") is None
    assert parse_word_filter("*", "en") is None
    assert parse_word_filter("-", "en") is None


def test_filter_exact_word():
    assert _filtered("like") == ["I like cats", "We like birds"]
    assert _filtered("cat") == []


def test_filter_partial_words():
    assert _filtered("cat*") == ["I like cats"]
    assert _filtered("*ogs") == ["I love dogs"]
    assert _filtered("*ird*") == ["We like birds"]


def test_filter_exclusion():
    assert _filtered("-like") == ["I love dogs"]


def test_filters_must_all_match():
    assert _filtered("like", "-cats") == ["We like birds"]
    assert _filtered() == ["I like cats", "I love dogs", "We like birds"]


def test_filter_matches_any_alternative():
    solution = Solution("en", "I like cats", (("I ",), ("like", "adore"), (" cats",)), True)
    assert filter_solutions([solution], [parse_word_filter("adore", "en")]) == [solution]


def test_challenge_words():
    assert get_challenge_words(_solutions()) == ["birds", "cats", "dogs", "i", "like", "love", "we"]


# ============================================================================
# Sorting
# ============================================================================

def test_available_sort_types():
    assert get_available_sort_types(True) == [SORT_TYPE_SIMILARITY, SORT_TYPE_ALPHABETICAL]
    assert get_available_sort_types(False) == [SORT_TYPE_ALPHABETICAL]


def test_sort_alphabetical():
    solutions = _solutions()
    assert _references(sort_solutions(solutions)) == ["I like cats", "I love dogs", "We like birds"]
    assert _references(sort_solutions(solutions, SORT_TYPE_ALPHABETICAL, SORT_DIRECTION_DESC)) == [
        "We like birds", "I love dogs", "I like cats",
    ]


def test_sort_by_similarity():
    solutions = _solutions()
    for solution, score in zip(solutions, [0.5, 0.9, 0.1]):
        solution.score = score
    assert _references(sort_solutions(solutions, SORT_TYPE_SIMILARITY)) == [
        "I love dogs", "I like cats", "We like birds",
    ]
    assert _references(sort_solutions(solutions, SORT_TYPE_SIMILARITY, SORT_DIRECTION_ASC)) == [
        "We like birds", "I like cats", "I love dogs",
    ]


def test_sort_by_similarity_without_scores_is_alphabetical():
    solutions = list(reversed(_solutions()))
    assert _references(sort_solutions(solutions, SORT_TYPE_SIMILARITY)) == [
        "I like cats", "I love dogs", "We like birds",
    ]


# ============================================================================
# Pagination
# ============================================================================

def test_paginate_last_page():
    page = paginate(list(range(1, 46)), page=3, page_size=20)
    assert page.items == [41, 42, 43, 44, 45]
    assert page.page == 3
    assert page.page_count == 3
    assert (page.first_index, page.last_index, page.total) == (41, 45, 45)


def test_paginate_clamps_pages():
    items = list(range(1, 46))
    assert paginate(items, page=10, page_size=20).page == 3
    assert paginate(items, page=0, page_size=20).items[0] == 1


def test_paginate_all():
    page = paginate(list(range(5)), page=2, page_size=PAGE_SIZE_ALL)
    assert page.items == [0, 1, 2, 3, 4]
    assert (page.page, page.page_count, page.first_index, page.last_index) == (1, 1, 1, 5)


def test_paginate_empty():
    page = paginate([], page=2, page_size=20)
    assert page.items == []
    assert (page.page, page.first_index, page.last_index, page.total) == (1, 0, 0, 0)


def test_page_after_resize_keeps_first_item_visible():
    # Page 3 of size 20 starts with item 41.
    assert page_after_resize(3, 20, 50, 100) == 1
    assert page_after_resize(3, 20, 10, 100) == 5
    assert page_after_resize(3, 20, 20, 100) == 3


def test_page_after_resize_with_all():
    assert page_after_resize(3, 20, PAGE_SIZE_ALL, 100) == 1
    assert page_after_resize(1, PAGE_SIZE_ALL, 10, 45) == 1
    assert page_after_resize(1, 20, 10, 0) == 1
