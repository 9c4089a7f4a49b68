"""Solution service wrappers -- return JSON-serializable dicts for the API."""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Union

_project_root = str(Path(__file__).resolve().parent.parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from server.config import Settings
from solutions.challenges import add_similarity_scores, evaluate_answer, get_challenge_locale, get_challenge_solutions
from solutions.diffing import diff_strings
from solutions.display import get_i18n_counts, get_reader_friendly_summary
from solutions.listing import (
    PAGE_SIZE_ALL,
    SORT_TYPE_ALPHABETICAL,
    SORT_TYPE_SIMILARITY,
    filter_solutions,
    paginate,
    parse_word_filter,
    sort_solutions,
)
from solutions.matcher import SolutionProfileCache
from solutions.models import Equivalent, Solution

logger = logging.getLogger("server")


def _solution_dict(solution: Solution) -> Dict:
    return {
        "reference": solution.reference,
        "tokens": [list(token) for token in solution.tokens],
        "is_complex": solution.is_complex,
        "summary": get_reader_friendly_summary(solution),
        "score": solution.score,
    }


def _counts_dict(solutions: List[Solution]) -> Dict:
    display, plural = get_i18n_counts(solutions)
    return {"display": display, "plural": plural}


def resolve_page_size(page_size: Optional[Union[int, str]], settings: Settings) -> Union[int, str]:
    """
    Page size requested by a client, clamped to the configured maximum.
    Raises ValueError for sizes that are neither a number nor "all".
    """
    if page_size is None:
        return settings.default_page_size
    if isinstance(page_size, str):
        if page_size.strip().lower() == PAGE_SIZE_ALL:
            return PAGE_SIZE_ALL
        try:
            page_size = int(page_size)
        except ValueError:
            raise ValueError(f"Invalid page size: {page_size!r}")
    return max(1, min(int(page_size), settings.max_page_size))


def _load(challenge: Dict, settings: Settings, locale: Optional[str]):
    default_locale = locale or settings.default_locale
    solutions = get_challenge_solutions(
        challenge,
        default_locale=default_locale,
        include_automatic=settings.include_automatic_vertices,
    )
    if not solutions:
        logger.warning("No usable solutions in challenge of type %r", challenge.get("type"))
    return get_challenge_locale(challenge, default_locale), solutions


def list_solutions(challenge: Dict, settings: Settings, locale: Optional[str] = None) -> Dict:
    """
    All the solutions of a raw challenge, in alphabetical order.

    Returns:
        {locale, solutions: [...], counts: {display, plural}}
    """
    challenge_locale, solutions = _load(challenge, settings, locale)
    ordered = sort_solutions(solutions, SORT_TYPE_ALPHABETICAL)
    return {
        "locale": challenge_locale,
        "solutions": [_solution_dict(s) for s in ordered],
        "counts": _counts_dict(solutions),
    }


def score_solutions(
    challenge: Dict,
    answer: str,
    settings: Settings,
    locale: Optional[str] = None,
    filters: Optional[List[str]] = None,
    sort_type: Optional[str] = None,
    sort_direction: Optional[str] = None,
    page: int = 1,
    page_size: Optional[Union[int, str]] = None,
) -> Dict:
    """
    Score the solutions of a challenge against an answer, then filter, sort
    and paginate them. Filter queries without any word are ignored.

    Raises ValueError on an invalid page size.
    """
    size = resolve_page_size(page_size, settings)
    challenge_locale, solutions = _load(challenge, settings, locale)
    # Profiles only live as long as the request.
    add_similarity_scores(solutions, answer, SolutionProfileCache())

    word_filters = [f for f in (parse_word_filter(q, challenge_locale) for q in (filters or [])) if f is not None]
    filtered = filter_solutions(solutions, word_filters)

    sort_type = sort_type or SORT_TYPE_SIMILARITY
    ordered = sort_solutions(filtered, sort_type, sort_direction)
    result_page = paginate(ordered, page, size)

    return {
        "locale": challenge_locale,
        "answer": answer,
        "sort_type": sort_type,
        "filters": [
            {"word": f.word, "match_mode": f.match_mode, "is_excluded": f.is_excluded}
            for f in word_filters
        ],
        "solutions": [_solution_dict(s) for s in result_page.items],
        "page": {
            "page": result_page.page,
            "page_count": result_page.page_count,
            "page_size": size,
            "first_index": result_page.first_index,
            "last_index": result_page.last_index,
            "total": result_page.total,
        },
        "counts": _counts_dict(filtered),
    }


def evaluate(
    challenge: Dict,
    answer: str,
    is_correct: bool,
    settings: Settings,
    locale: Optional[str] = None,
) -> Dict:
    """
    Closest solution for an incorrect answer, correction diff for a correct one.

    Returns:
        {closest: {...} | None, correction: [...] | None}
    """
    _, solutions = _load(challenge, settings, locale)
    evaluation = evaluate_answer(
        solutions,
        answer,
        is_correct,
        excluded_locales=settings.correction_excluded_locales,
        cache=SolutionProfileCache(),
    )
    return {
        "closest": _solution_dict(evaluation.closest) if evaluation.closest is not None else None,
        "correction": evaluation.correction.to_dicts() if evaluation.correction is not None else None,
    }


def diff(left: str, right: str, locale: str = "") -> Dict:
    result = diff_strings(left, right, locale)
    if isinstance(result, Equivalent):
        return {"equivalent": True, "tokens": [], "significant_length": 0}
    return {
        "equivalent": False,
        "tokens": result.to_dicts(),
        "significant_length": result.significant_length,
    }
