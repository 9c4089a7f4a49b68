"""
Browsing helpers for solution lists: word filters, sorting and pagination.

Word filter query syntax:
    word      solutions containing the exact word
    word*     ... a word starting with "word"
    *word     ... a word ending with "word"
    *word*    ... a word containing "word"
    -query    solutions NOT matching the query (a leading "+" is allowed and ignored)
"""

import math
import re
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import List, Optional, Sequence, Set, Union

from solutions.display import compare_by_reference, compare_by_score
from solutions.matcher import get_matchable_words
from solutions.models import Solution

WORD_MATCH_EXACT = 'exact'
WORD_MATCH_START = 'start'
WORD_MATCH_END = 'end'
WORD_MATCH_ANYWHERE = 'anywhere'

_MATCH_MODES = {
    ('', ''): WORD_MATCH_EXACT,
    ('', '*'): WORD_MATCH_START,
    ('*', ''): WORD_MATCH_END,
    ('*', '*'): WORD_MATCH_ANYWHERE,
}

_FILTER_QUERY_RE = re.compile(r'^([-+]?)(\*?)(.+?)(\*?)$', re.S)

SORT_TYPE_SIMILARITY = 'similarity'
SORT_TYPE_ALPHABETICAL = 'alphabetical'
SORT_DIRECTION_ASC = 'asc'
SORT_DIRECTION_DESC = 'desc'

PAGE_SIZE_ALL = 'all'
PAGE_SIZES = (10, 20, 50, 200, PAGE_SIZE_ALL)

PageSize = Union[int, str]


# ---- Filters ----

@dataclass
class WordFilter:
    word: str
    match_mode: str = WORD_MATCH_EXACT
    is_excluded: bool = False

    def matches_word(self, word: str) -> bool:
        if self.match_mode == WORD_MATCH_START:
            return word.startswith(self.word)
        if self.match_mode == WORD_MATCH_END:
            return word.endswith(self.word)
        if self.match_mode == WORD_MATCH_ANYWHERE:
            return self.word in word
        return word == self.word


def parse_word_filter(query: str, locale: str) -> Optional[WordFilter]:
    """Parse a filter query, or return None if it contains no usable word."""
    match = _FILTER_QUERY_RE.match((query or '').strip())
    if not match:
        return None
    sign, start, base, end = match.groups()
    words = get_matchable_words(base, locale)
    if not words:
        return None
    return WordFilter(
        word=words[0],
        match_mode=_MATCH_MODES[(start, end)],
        is_excluded=(sign == '-'),
    )


def get_solution_words(solution: Solution) -> Set[str]:
    """All the matchable words used by any variation of a solution."""
    words: Set[str] = set()
    for token in solution.tokens:
        for alternative in token:
            words.update(get_matchable_words(alternative, solution.locale))
    return words


def get_challenge_words(solutions: Sequence[Solution]) -> List[str]:
    """All the words used by a list of solutions, usable for filter suggestions."""
    words: Set[str] = set()
    for solution in solutions:
        words |= get_solution_words(solution)
    return sorted(words)


def matches_filters(solution: Solution, filters: Sequence[WordFilter]) -> bool:
    if not filters:
        return True
    words = get_solution_words(solution)
    for word_filter in filters:
        found = any(word_filter.matches_word(word) for word in words)
        if found == word_filter.is_excluded:
            return False
    return True


def filter_solutions(solutions: Sequence[Solution], filters: Sequence[WordFilter]) -> List[Solution]:
    return [s for s in solutions if matches_filters(s, filters)]


# ---- Sorting ----

def get_available_sort_types(is_score_available: bool) -> List[str]:
    if is_score_available:
        return [SORT_TYPE_SIMILARITY, SORT_TYPE_ALPHABETICAL]
    return [SORT_TYPE_ALPHABETICAL]


def sort_solutions(
    solutions: Sequence[Solution],
    sort_type: str = SORT_TYPE_ALPHABETICAL,
    direction: Optional[str] = None,
) -> List[Solution]:
    """
    Similarity sort puts the best scores first when descending (the default).
    Alphabetical sort is ascending by default. Similarity sort falls back to
    alphabetical sort when no solution has been scored.
    """
    is_score_available = any(s.score is not None for s in solutions)
    if sort_type not in get_available_sort_types(is_score_available):
        sort_type = SORT_TYPE_ALPHABETICAL

    if sort_type == SORT_TYPE_SIMILARITY:
        reverse = direction == SORT_DIRECTION_ASC
        compare = compare_by_score
    else:
        reverse = direction == SORT_DIRECTION_DESC
        compare = compare_by_reference

    return sorted(solutions, key=cmp_to_key(compare), reverse=reverse)


# ---- Pagination ----

@dataclass
class Page:
    items: List = field(default_factory=list)
    page: int = 1
    page_count: int = 1
    first_index: int = 0  # 1-based, 0 when empty
    last_index: int = 0
    total: int = 0


def paginate(items: Sequence, page: int = 1, page_size: PageSize = 20) -> Page:
    """Slice a page out of a list. Out-of-range pages are clamped."""
    total = len(items)
    if total == 0:
        return Page()

    if page_size == PAGE_SIZE_ALL:
        return Page(items=list(items), page=1, page_count=1, first_index=1, last_index=total, total=total)

    size = max(1, int(page_size))
    page_count = math.ceil(total / size)
    page = min(max(1, int(page)), page_count)
    start = (page - 1) * size
    end = min(total, page * size)

    return Page(
        items=list(items[start:end]),
        page=page,
        page_count=page_count,
        first_index=start + 1,
        last_index=end,
        total=total,
    )


def page_after_resize(page: int, old_size: PageSize, new_size: PageSize, total: int) -> int:
    """The page that keeps the first item of the current page visible after a page size change."""
    if new_size == PAGE_SIZE_ALL or total <= 0:
        return 1
    old = total if old_size == PAGE_SIZE_ALL else min(int(old_size), total)
    return max(1, math.ceil(((page - 1) * old + 1) / int(new_size)))
