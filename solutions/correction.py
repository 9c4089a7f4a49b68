"""Selection of the correction diff shown for an answer."""

import logging
from typing import FrozenSet, Iterable, List, Optional, Sequence

from solutions.diffing import diff_strings
from solutions.matcher import SolutionProfileCache, get_all_variations, get_best_matching_variations
from solutions.models import Diff, Equivalent, Solution
from solutions.strings import base_locale

logger = logging.getLogger("solutions.correction")

# Locales for which per-token transliterations make diffs unreliable.
DEFAULT_EXCLUDED_LOCALES: FrozenSet[str] = frozenset(['ja'])


def is_correction_excluded(locale: str, excluded_locales: Iterable[str] = DEFAULT_EXCLUDED_LOCALES) -> bool:
    return base_locale(locale) in {base_locale(l) for l in excluded_locales}


def get_correction_variations(
    solutions: Sequence[Solution],
    answer: str,
    cache: Optional[SolutionProfileCache] = None,
) -> List[str]:
    """
    Candidate variations for a correction: the best matching variations of
    the best scored solutions, or every variation when nothing was scored.
    """
    scored = [s for s in solutions if s.score is not None]

    if scored:
        best_score = max(s.score for s in scored)
        candidates = (
            variation
            for s in scored
            if s.score == best_score
            for variation in get_best_matching_variations(s, answer, cache)
        )
    else:
        candidates = (variation for s in solutions for variation in get_all_variations(s))

    return list(dict.fromkeys(candidates))


def select_correction(
    solutions: Sequence[Solution],
    answer: str,
    locale: Optional[str] = None,
    excluded_locales: Iterable[str] = DEFAULT_EXCLUDED_LOCALES,
    cache: Optional[SolutionProfileCache] = None,
) -> Optional[Diff]:
    """
    The diff between the answer and the closest variation, or None when no
    correction should be shown.

    No correction is shown if any candidate variation is equivalent to the
    answer (regardless of the scores). Otherwise, the diff with the fewest
    significant characters wins, then the one with the fewest tokens.
    """
    if not solutions or not answer or answer.strip() == '':
        return None

    locale = locale if locale is not None else solutions[0].locale

    if is_correction_excluded(locale, excluded_locales):
        logger.debug("Skipping correction for excluded locale %r", locale)
        return None

    best: Optional[Diff] = None

    for variation in get_correction_variations(solutions, answer, cache):
        result = diff_strings(variation, answer, locale)
        if isinstance(result, Equivalent):
            return None
        if best is None or (result.significant_length, len(result.tokens)) < (best.significant_length, len(best.tokens)):
            best = result

    return best
