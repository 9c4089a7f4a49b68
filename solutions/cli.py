"""
Solution viewer CLI.

Usage:
    python -m solutions.cli solutions challenge.json
    python -m solutions.cli score challenge.json --answer "I like cats" [--top 10]
    python -m solutions.cli evaluate challenge.json --answer "I like cat" [--correct]
    python -m solutions.cli diff "I like cats" "I like cat"
"""

import sys
import json
import logging
import argparse
from pathlib import Path

from solutions.challenges import add_similarity_scores, evaluate_answer, get_challenge_solutions
from solutions.correction import DEFAULT_EXCLUDED_LOCALES
from solutions.diffing import diff_strings
from solutions.display import get_i18n_counts, get_reader_friendly_summary
from solutions.listing import SORT_TYPE_ALPHABETICAL, SORT_TYPE_SIMILARITY, sort_solutions
from solutions.models import Diff, Equivalent


def _load_challenge(path_str):
    path = Path(path_str)
    if not path.exists():
        print(f"Challenge file not found: {path}", file=sys.stderr)
        sys.exit(1)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        print(f"Invalid challenge file {path}: {e}", file=sys.stderr)
        sys.exit(1)


def _load_solutions(args):
    challenge = _load_challenge(args.challenge)
    solutions = get_challenge_solutions(
        challenge,
        default_locale=args.locale,
        include_automatic=args.include_automatic,
    )
    if not solutions:
        print("No solutions found in this challenge.")
    return solutions


def _format_diff(diff: Diff) -> str:
    """Inline rendering: [-removed-] and {+added+}, ignorable changes as [~removed~] and {~added~}."""
    parts = []
    for token in diff.tokens:
        if token.added:
            parts.append(("{+%s+}" if not token.ignorable else "{~%s~}") % token.value)
        elif token.removed:
            parts.append(("[-%s-]" if not token.ignorable else "[~%s~]") % token.value)
        else:
            parts.append(token.value)
    return ''.join(parts)


def cmd_solutions(args):
    """List the solutions of a challenge."""
    solutions = _load_solutions(args)
    if not solutions:
        return
    display_count, _ = get_i18n_counts(solutions)
    print(f"\n{display_count} solution(s):\n")
    for solution in sort_solutions(solutions, SORT_TYPE_ALPHABETICAL):
        print(f"  {get_reader_friendly_summary(solution)}")


def cmd_score(args):
    """Score the solutions of a challenge against an answer."""
    solutions = _load_solutions(args)
    if not solutions:
        return
    add_similarity_scores(solutions, args.answer)
    ranked = sort_solutions(solutions, SORT_TYPE_SIMILARITY)
    if args.top:
        ranked = ranked[:args.top]
    print(f"\nAnswer: {args.answer}\n")
    for solution in ranked:
        print(f"  {solution.score:.3f}  {get_reader_friendly_summary(solution)}")


def cmd_evaluate(args):
    """Show the closest solution or the correction for a graded answer."""
    solutions = _load_solutions(args)
    if not solutions:
        return
    excluded = args.excluded_locales.split(',') if args.excluded_locales is not None else DEFAULT_EXCLUDED_LOCALES
    evaluation = evaluate_answer(solutions, args.answer, args.correct, excluded)

    if evaluation.closest is not None:
        print(f"Closest solution: {get_reader_friendly_summary(evaluation.closest)}")
    elif evaluation.correction is not None:
        print(f"Correction: {_format_diff(evaluation.correction)}")
    else:
        print("Nothing to show.")


def cmd_diff(args):
    """Diff two strings."""
    result = diff_strings(args.left, args.right, args.locale)
    if isinstance(result, Equivalent):
        print("Equivalent.")
        return
    print(_format_diff(result))
    print(f"  ({result.significant_length} significant character(s) changed)")


def build_parser():
    parser = argparse.ArgumentParser(
        description="Solution viewer -- browse and compare the accepted solutions of a challenge",
        prog="python -m solutions.cli",
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    parser.add_argument('--locale', default='en',
                        help='Locale to use when a challenge does not specify one (default: en)')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    def add_challenge_args(sub):
        sub.add_argument('challenge', help='Path to a challenge JSON file')
        sub.add_argument('--include-automatic', action='store_true',
                         help='Include automatically derived vertices')

    add_challenge_args(subparsers.add_parser('solutions', help='List the solutions of a challenge'))

    score_parser = subparsers.add_parser('score', help='Score solutions against an answer')
    add_challenge_args(score_parser)
    score_parser.add_argument('--answer', required=True, help='The user answer')
    score_parser.add_argument('--top', type=int, default=0, help='Only show the N best solutions')

    evaluate_parser = subparsers.add_parser('evaluate', help='Evaluate a graded answer')
    add_challenge_args(evaluate_parser)
    evaluate_parser.add_argument('--answer', required=True, help='The user answer')
    evaluate_parser.add_argument('--correct', action='store_true',
                                 help='The answer was graded as correct')
    evaluate_parser.add_argument('--excluded-locales', default=None,
                                 help='Comma-separated locales without corrections (default: ja)')

    diff_parser = subparsers.add_parser('diff', help='Diff a solution against an answer')
    diff_parser.add_argument('left', help='The solution')
    diff_parser.add_argument('right', help='The answer')

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.command == 'solutions':
        cmd_solutions(args)
    elif args.command == 'score':
        cmd_score(args)
    elif args.command == 'evaluate':
        cmd_evaluate(args)
    elif args.command == 'diff':
        cmd_diff(args)
    else:
        parser.print_help()


if __name__ == '__main__':
    main()
