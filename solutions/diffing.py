"""
Character-level diffs between a solution variation and a user answer.

Differences in case, in spacing and in punctuation around a change are
kept in the diff but marked as ignorable. When nothing significant
remains, the strings are considered equivalent.
"""

from difflib import SequenceMatcher
from typing import Dict, List

from solutions.models import Diff, DiffResult, DiffToken, Equivalent
from solutions.strings import base_locale, is_punctuation_or_space, lower_preserving_length, normalize_string

# Per-locale letters that are commonly substituted for each other.
DIFF_IGNORABLE_VARIANTS: Dict[str, Dict[str, str]] = {
    'ru': {'ё': 'е'},
}


def _prepare(s: str, locale: str) -> str:
    """Lower-cased version of a (normalized) string, with the same length."""
    result = lower_preserving_length(s, locale)
    for variant, base in DIFF_IGNORABLE_VARIANTS.get(base_locale(locale), {}).items():
        result = result.replace(variant, base)
    return result


def diff_chars(left: str, right: str) -> List[DiffToken]:
    """
    Longest-matching-block diff of two strings, as a list of tokens.
    Removals come before additions for replaced spans.

    Matching is difflib's Ratcliff/Obershelp, not a minimal edit script
    (LCS / Myers): on some inputs the changed spans can be longer than
    strictly needed.
    """
    tokens = []
    matcher = SequenceMatcher(None, left, right, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == 'equal':
            tokens.append(DiffToken(left[i1:i2], i2 - i1))
            continue
        if tag in ('delete', 'replace'):
            tokens.append(DiffToken(left[i1:i2], i2 - i1, removed=True))
        if tag in ('insert', 'replace'):
            tokens.append(DiffToken(right[j1:j2], j2 - j1, added=True))
    return tokens


def split_change(token: DiffToken) -> List[DiffToken]:
    """
    Split an added / removed span into (leading punctuation and spaces),
    (core), (trailing punctuation and spaces). Only the core is significant.
    """
    value = token.value
    start = 0
    while start < len(value) and is_punctuation_or_space(value[start]):
        start += 1
    end = len(value)
    while end > start and is_punctuation_or_space(value[end - 1]):
        end -= 1

    parts = [(value[:start], True), (value[start:end], False), (value[end:], True)]
    result = [
        DiffToken(part, len(part), added=token.added, removed=token.removed, ignorable=ignorable)
        for part, ignorable in parts
        if part != ''
    ]
    return result or [token]


def diff_strings(x: str, y: str, locale: str = '') -> DiffResult:
    """
    Diff a solution variation (x) against an answer (y).

    Returns Equivalent() when the strings only differ by case, spacing or
    punctuation, otherwise a Diff whose tokens carry the original case.
    """
    left = normalize_string(x)
    right = normalize_string(y)

    tokens: List[DiffToken] = []
    for token in diff_chars(_prepare(left, locale), _prepare(right, locale)):
        if token.added or token.removed:
            tokens.extend(split_change(token))
        else:
            tokens.append(token)

    if not any(t.is_significant for t in tokens):
        return Equivalent()

    # Restore the original case, marking case differences as ignorable.
    result: List[DiffToken] = []
    left_index = 0
    right_index = 0

    for token in tokens:
        length = len(token.value)
        if token.added:
            token.value = right[right_index:right_index + length]
            right_index += length
            result.append(token)
        elif token.removed:
            token.value = left[left_index:left_index + length]
            left_index += length
            result.append(token)
        else:
            sub_tokens = diff_chars(
                left[left_index:left_index + length],
                right[right_index:right_index + length],
            )
            for sub_token in sub_tokens:
                if sub_token.added or sub_token.removed:
                    sub_token.ignorable = True
            result.extend(sub_tokens)
            left_index += length
            right_index += length

    return Diff(result)
