"""
Challenge-level operations: extracting the solutions of a raw challenge,
scoring them against an answer, and evaluating an answer once graded.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from solutions.builder import build_from_graph, build_from_naming_solutions, build_from_word_bank_tokens
from solutions.correction import DEFAULT_EXCLUDED_LOCALES, select_correction
from solutions.matcher import SolutionProfileCache, get_matchable_words, get_solution_profile, match_against_answer
from solutions.models import Diff, Solution

logger = logging.getLogger("solutions.challenges")

CHALLENGE_TYPE_NAME = 'name'
CHALLENGE_TYPE_LISTEN = 'listen'
CHALLENGE_TYPE_LISTEN_TAP = 'listenTap'
LISTENING_CHALLENGE_TYPES = (CHALLENGE_TYPE_LISTEN, CHALLENGE_TYPE_LISTEN_TAP)


def _clean_str(value) -> str:
    return value.strip() if isinstance(value, str) else ''


def get_challenge_locale(challenge: Dict, default_locale: str = 'en') -> str:
    """The language in which a challenge must be answered."""
    grader = challenge.get('grader') if isinstance(challenge.get('grader'), dict) else {}
    metadata = challenge.get('metadata') if isinstance(challenge.get('metadata'), dict) else {}
    candidates = (
        challenge.get('targetLanguage'),
        grader.get('language'),
        metadata.get('target_language'),
        metadata.get('language'),
    )
    for candidate in candidates:
        locale = _clean_str(candidate)
        if locale:
            return locale
    return default_locale


def get_challenge_solutions(
    challenge: Dict,
    default_locale: str = 'en',
    include_automatic: bool = False,
) -> List[Solution]:
    """
    All the solutions accepted by a raw challenge, or [] if the challenge
    carries no usable solution data.
    """
    if not isinstance(challenge, dict):
        return []

    locale = get_challenge_locale(challenge, default_locale)
    challenge_type = challenge.get('type')
    grader = challenge.get('grader') if isinstance(challenge.get('grader'), dict) else {}

    if challenge_type == CHALLENGE_TYPE_NAME and isinstance(challenge.get('correctSolutions'), list):
        return build_from_naming_solutions(challenge['correctSolutions'], locale)

    if isinstance(grader.get('vertices'), list) and grader['vertices']:
        return build_from_graph(
            grader['vertices'],
            locale,
            include_automatic=include_automatic,
            is_whitespace_delimited=bool(grader.get('whitespaceDelimited', False)),
        )

    if challenge_type in LISTENING_CHALLENGE_TYPES:
        if _clean_str(challenge.get('prompt')):
            return build_from_naming_solutions([challenge['prompt']], locale)
        if challenge_type == CHALLENGE_TYPE_LISTEN_TAP and isinstance(challenge.get('correctTokens'), list):
            return build_from_word_bank_tokens(challenge['correctTokens'], locale)

    logger.debug("No usable solution data in challenge of type %r", challenge_type)
    return []


def add_similarity_scores(
    solutions: Sequence[Solution],
    answer: str,
    cache: Optional[SolutionProfileCache] = None,
) -> List[Solution]:
    """
    Set the score of each solution against an answer. Answers and solutions
    without any word (blank or punctuation only) score 0.
    """
    for solution in solutions:
        if not get_matchable_words(answer or '', solution.locale):
            solution.score = 0.0
        elif not get_solution_profile(solution, cache).has_words:
            solution.score = 0.0
        else:
            solution.score = match_against_answer(solution, answer, cache)
    return list(solutions)


@dataclass
class AnswerEvaluation:
    closest: Optional[Solution] = None
    correction: Optional[Diff] = None


def evaluate_answer(
    solutions: Sequence[Solution],
    answer: str,
    is_correct: bool,
    excluded_locales: Iterable[str] = DEFAULT_EXCLUDED_LOCALES,
    cache: Optional[SolutionProfileCache] = None,
) -> AnswerEvaluation:
    """
    What to show once an answer has been graded:
        - for an incorrect answer, the closest solution (only useful when
          there is a choice between several solutions),
        - for a correct answer, the correction diff, unless a variation is
          equivalent to the answer. Scores ignore word order, so a score
          of 1 alone does not rule out a correction.
    """
    evaluation = AnswerEvaluation()
    if not solutions:
        return evaluation

    add_similarity_scores(solutions, answer, cache)

    if not is_correct:
        if len(solutions) > 1:
            evaluation.closest = max(solutions, key=lambda s: s.score or 0)
        return evaluation

    evaluation.correction = select_correction(
        solutions,
        answer,
        excluded_locales=excluded_locales,
        cache=cache,
    )
    return evaluation
