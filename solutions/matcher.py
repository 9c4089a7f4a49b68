"""
Similarity matching between solutions and user answers.

Scores are Sørensen-Dice coefficients over word bigrams. Words shared by all
the variations of a solution are profiled once; for solutions with choices,
every combination of choices (path) is scored and the best one wins.

Precondition: at least one of the answer and the solution must contain a
word. Answers without any word are expected to be scored 0 by the caller
without calling match_against_answer().
"""

import itertools
import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from solutions.models import EMPTY_MATCHING_DATA, MatchingData, Solution
from solutions.strings import get_string_words, get_word_bigram_map, lower_for_locale, normalize_string

logger = logging.getLogger("solutions.matcher")


def _matching_cache_size() -> int:
    """Read config from env. Default 4096."""
    try:
        return int(os.environ.get("MATCHING_CACHE_SIZE", "4096"))
    except ValueError:
        return 4096


def get_matchable_words(s: str, locale: str) -> List[str]:
    """The words of a string, normalized and lower-cased for matching."""
    return get_string_words(lower_for_locale(normalize_string(s), locale))


def _build_matching_data(s: str, locale: str) -> MatchingData:
    words = get_matchable_words(s, locale)
    bigrams: Dict[str, int] = {}
    for word in words:
        for bigram, count in get_word_bigram_map(word).items():
            bigrams[bigram] = bigrams.get(bigram, 0) + count
    return MatchingData(
        char_count=sum(len(w) for w in words),
        word_count=len(words),
        bigram_map=bigrams,
    )


# Memoizes (string, locale) -> MatchingData. Eviction only costs recomputation.
get_string_matching_data = lru_cache(maxsize=_matching_cache_size())(_build_matching_data)


def merge_matching_data(profiles: Sequence[MatchingData]) -> MatchingData:
    """The union of several profiles."""
    if not profiles:
        return EMPTY_MATCHING_DATA
    if len(profiles) == 1:
        return profiles[0]
    bigrams: Dict[str, int] = {}
    for profile in profiles:
        for bigram, count in profile.bigram_map.items():
            bigrams[bigram] = bigrams.get(bigram, 0) + count
    return MatchingData(
        char_count=sum(p.char_count for p in profiles),
        word_count=sum(p.word_count for p in profiles),
        bigram_map=bigrams,
    )


# ---- Solution profiles ----

@dataclass
class SolutionProfile:
    """
    Matching data of a solution, split into:
        - shared: the words of the single-alternative tokens,
        - choices: for each choice token, the profile of each alternative,
        - choice_positions: the indices of the choice tokens in the solution.
    """
    shared: MatchingData = EMPTY_MATCHING_DATA
    choices: List[List[MatchingData]] = field(default_factory=list)
    choice_positions: List[int] = field(default_factory=list)

    @property
    def has_words(self) -> bool:
        return self.shared.bigram_count > 0 or any(
            alternative.bigram_count > 0 for alternatives in self.choices for alternative in alternatives
        )


def build_solution_profile(solution: Solution) -> SolutionProfile:
    shared_parts: List[MatchingData] = []
    profile = SolutionProfile()

    for index, token in enumerate(solution.tokens):
        alternatives = [a.strip() for a in token]
        if all(a == '' for a in alternatives):
            continue
        if len(alternatives) == 1:
            shared_parts.append(get_string_matching_data(alternatives[0], solution.locale))
        else:
            profile.choices.append([get_string_matching_data(a, solution.locale) for a in alternatives])
            profile.choice_positions.append(index)

    profile.shared = merge_matching_data(shared_parts)
    return profile


class SolutionProfileCache:
    """
    Per-solution profile memo, keyed by solution identity.
    Safe to clear at any time.
    """

    def __init__(self):
        self._profiles: Dict[str, SolutionProfile] = {}

    def get(self, solution: Solution) -> SolutionProfile:
        key = solution.key
        profile = self._profiles.get(key)
        if profile is None:
            profile = build_solution_profile(solution)
            self._profiles[key] = profile
        return profile

    def clear(self) -> None:
        logger.debug("Clearing %d cached solution profile(s)", len(self._profiles))
        self._profiles.clear()

    def __len__(self) -> int:
        return len(self._profiles)


_default_cache = SolutionProfileCache()


def get_solution_profile(solution: Solution, cache: Optional[SolutionProfileCache] = None) -> SolutionProfile:
    return (cache if cache is not None else _default_cache).get(solution)


def clear_caches() -> None:
    _default_cache.clear()
    get_string_matching_data.cache_clear()


# ---- Scoring ----

def _intersect(answer_bigrams: Dict[str, int], solution_bigrams: Dict[str, int]) -> Tuple[int, Dict[str, int]]:
    """
    Bigram-count overlap between an answer and a solution profile, and the
    answer counts left over after the overlap.
    """
    size = 0
    leftover: Dict[str, int] = {}
    for bigram, answer_count in answer_bigrams.items():
        solution_count = solution_bigrams.get(bigram, 0)
        if solution_count > 0:
            size += min(answer_count, solution_count)
            answer_count = max(0, answer_count - solution_count)
        leftover[bigram] = answer_count
    return size, leftover


def _dice(intersection_size: int, answer: MatchingData, solution: MatchingData) -> float:
    return 2.0 * intersection_size / (answer.bigram_count + solution.bigram_count)


def iter_path_scores(
    solution: Solution,
    answer: str,
    cache: Optional[SolutionProfileCache] = None,
) -> Iterator[Tuple[Tuple[int, ...], float]]:
    """
    Lazily yield (path, score) for each combination of choices of a solution.
    A path holds, for each choice token, the index of the chosen alternative.
    Solutions without choices yield a single empty path.
    """
    profile = get_solution_profile(solution, cache)
    answer_data = get_string_matching_data(answer, solution.locale)
    shared_size, leftover = _intersect(answer_data.bigram_map, profile.shared.bigram_map)

    if not profile.choices:
        yield (), _dice(shared_size, answer_data, profile.shared)
        return

    for path in itertools.product(*[range(len(alternatives)) for alternatives in profile.choices]):
        choice_data = merge_matching_data([alternatives[i] for alternatives, i in zip(profile.choices, path)])
        path_size, _ = _intersect(leftover, choice_data.bigram_map)
        path_data = merge_matching_data([profile.shared, choice_data])
        yield path, _dice(shared_size + path_size, answer_data, path_data)


def match_against_answer(
    solution: Solution,
    answer: str,
    cache: Optional[SolutionProfileCache] = None,
) -> float:
    """
    Similarity score (from 0 to 1) between a solution and an answer, using
    the variation of the solution that best fits the answer.
    """
    return max(score for _, score in iter_path_scores(solution, answer, cache))


# ---- Variations ----

def build_variation(solution: Solution, choice_positions: Sequence[int], path: Sequence[int]) -> str:
    chosen = dict(zip(choice_positions, path))
    return ''.join(token[chosen.get(i, 0)] for i, token in enumerate(solution.tokens))


def get_all_variations(solution: Solution) -> Iterator[str]:
    """Lazily yield every variation of a solution."""
    for choice in itertools.product(*solution.tokens):
        yield ''.join(choice)


def get_best_matching_variations(
    solution: Solution,
    answer: str,
    cache: Optional[SolutionProfileCache] = None,
) -> List[str]:
    """The variations of a solution whose choices best match the given answer."""
    if not solution.is_complex:
        return [solution.reference]
    if not solution.tokens:
        return []

    best_score = None
    best_paths: List[Tuple[int, ...]] = []

    for path, score in iter_path_scores(solution, answer, cache):
        if best_score is None or score > best_score:
            best_score = score
            best_paths = [path]
        elif score == best_score:
            best_paths.append(path)

    profile = get_solution_profile(solution, cache)
    return [build_variation(solution, profile.choice_positions, path) for path in best_paths]
