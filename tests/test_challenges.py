"""Tests for challenge solution extraction and answer evaluation."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from solutions.builder import build_from_naming_solutions
from solutions.challenges import (
    AnswerEvaluation,
    add_similarity_scores,
    evaluate_answer,
    get_challenge_locale,
    get_challenge_solutions,
)


def _graph_challenge():
    return {
        "type": "translate",
        "targetLanguage": "en",
        "grader": {
            "language": "fr",
            "vertices": [
                [{"lenient": "I ", "to": 1}],
                [{"lenient": "like", "to": 2}, {"lenient": "love", "to": 2}],
                [{"lenient": " cats", "to": 3}],
                [],
            ],
        },
    }


# ============================================================================
# Locales
# ============================================================================

def test_locale_precedence():
    assert get_challenge_locale(_graph_challenge()) == "en"
    assert get_challenge_locale({"grader": {"language": "fr"}}) == "fr"
    assert get_challenge_locale({"metadata": {"target_language": "de"}}) == "de"
    assert get_challenge_locale({"metadata": {"language": "it"}}) == "it"
    assert get_challenge_locale({"targetLanguage": "  "}, default_locale="pt") == "pt"


# ============================================================================
# Solutions
# ============================================================================

def test_graph_challenge():
    solutions = get_challenge_solutions(_graph_challenge())
    assert len(solutions) == 1
    assert solutions[0].is_complex
    assert solutions[0].locale == "en"


def test_naming_challenge():
    challenge = {"type": "name", "correctSolutions": ["el gato", "gato"], "grader": {"language": "es"}}
    solutions = get_challenge_solutions(challenge)
    assert sorted(s.reference for s in solutions) == ["el gato", "gato"]
    assert all(s.locale == "es" for s in solutions)


def test_listening_challenge_with_prompt():
    challenge = {"type": "listen", "prompt": " Bonjour ", "metadata": {"target_language": "fr"}}
    solutions = get_challenge_solutions(challenge)
    assert [s.reference for s in solutions] == ["Bonjour"]
    assert solutions[0].locale == "fr"


def test_word_bank_challenge():
    challenge = {"type": "listenTap", "correctTokens": ["I", "like", "cats"]}
    solutions = get_challenge_solutions(challenge, default_locale="en")
    assert [s.reference for s in solutions] == ["I like cats"]


def test_unusable_challenges():
    assert get_challenge_solutions({"type": "select"}) == []
    assert get_challenge_solutions({"type": "translate", "grader": {"vertices": []}}) == []
    assert get_challenge_solutions(None) == []
    assert get_challenge_solutions("not a challenge") == []


# ============================================================================
# Scores
# ============================================================================

def test_scores_for_blank_answer():
    solutions = build_from_naming_solutions(["I like cats", "I love dogs"], "en")
    add_similarity_scores(solutions, "   ")
    assert [s.score for s in solutions] == [0.0, 0.0]


def test_scores_for_answer():
    solutions = build_from_naming_solutions(["I like cats", "I love dogs"], "en")
    add_similarity_scores(solutions, "I like cats")
    assert solutions[0].score == 1.0
    assert 0.0 < solutions[1].score < 1.0


def test_scores_for_answer_without_words():
    solutions = build_from_naming_solutions(["I like cats"], "en")
    add_similarity_scores(solutions, "?!")
    assert solutions[0].score == 0.0


def test_scores_for_solution_without_words():
    solutions = build_from_naming_solutions(["?"], "en")
    add_similarity_scores(solutions, "!")
    assert solutions[0].score == 0.0

    add_similarity_scores(solutions, "I like cats")
    assert solutions[0].score == 0.0


# ============================================================================
# Evaluation
# ============================================================================

def test_incorrect_answer_shows_closest_solution():
    solutions = build_from_naming_solutions(["I like cats", "I love dogs"], "en")
    evaluation = evaluate_answer(solutions, "I love dog", is_correct=False)
    assert evaluation.closest.reference == "I love dogs"
    assert evaluation.correction is None


def test_incorrect_answer_with_single_solution():
    solutions = build_from_naming_solutions(["I like cats"], "en")
    assert evaluate_answer(solutions, "I hate dogs", is_correct=False) == AnswerEvaluation()


def test_correct_answer_shows_correction():
    solutions = build_from_naming_solutions(["I like cats", "I love dogs"], "en")
    evaluation = evaluate_answer(solutions, "I like cat", is_correct=True)
    assert evaluation.closest is None
    removed = [t.value for t in evaluation.correction.tokens if t.is_significant and t.removed]
    assert removed == ["s"]


def test_perfect_answer_has_no_correction():
    solutions = get_challenge_solutions(_graph_challenge())
    evaluation = evaluate_answer(solutions, "I love cats", is_correct=True)
    assert evaluation.correction is None


def test_reordered_answer_still_gets_correction():
    solutions = build_from_naming_solutions(["I like cats"], "en")
    evaluation = evaluate_answer(solutions, "cats like I", is_correct=True)
    # Same words, so the similarity score alone cannot tell them apart.
    assert solutions[0].score == 1.0
    assert evaluation.correction is not None
    assert evaluation.correction.significant_length > 0


def test_word_less_answer_is_evaluated():
    solutions = build_from_naming_solutions(["?", "!"], "en")
    evaluation = evaluate_answer(solutions, "...", is_correct=False)
    assert evaluation.closest is not None
    assert [s.score for s in solutions] == [0.0, 0.0]


def test_excluded_locale_has_no_correction():
    solutions = build_from_naming_solutions(["ねこがすきです"], "ja")
    evaluation = evaluate_answer(solutions, "ねこがすきでした", is_correct=True)
    assert evaluation.correction is None
    evaluation = evaluate_answer(solutions, "ねこがすきでした", is_correct=True, excluded_locales=[])
    assert evaluation.correction is not None


def test_no_solutions():
    assert evaluate_answer([], "anything", is_correct=True) == AnswerEvaluation()
