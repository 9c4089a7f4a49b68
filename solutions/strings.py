"""
String helpers shared by the solution builder and the similarity matcher.

Normalization, locale-aware lower-casing, word / bigram extraction, and the
collation capability used to sort token values. Collation is passed around
as a plain `collate(x, y, locale) -> int` callable so that it can be swapped
in tests without touching the rest of the pipeline.
"""

import re
import unicodedata
from functools import lru_cache
from typing import Callable, Dict, List, Tuple

# collate(x, y, locale) -> negative / 0 / positive
Collate = Callable[[str, str, str], int]

# Words are maximal runs of letters and / or numbers.
_WORD_RE = re.compile(r'[^\W_]+')
_DIGITS_RE = re.compile(r'(\d+)')
_REPEATED_SPACE_RE = re.compile(r'(\s)\1+')

# Locales whose solutions are not made of whitespace-separated words.
_NON_WORD_BASED_LOCALES = frozenset(['ja', 'zh', 'zs'])

# Locales with a dotted / dotless i distinction.
_TURKIC_LOCALES = frozenset(['tr', 'az'])


def base_locale(locale: str) -> str:
    """'pt-BR' -> 'pt'. Unknown or malformed tags fall back to ''."""
    if not isinstance(locale, str):
        return ''
    return locale.strip().replace('_', '-').split('-')[0].lower()


def has_locale_word_based_tokens(locale: str) -> bool:
    """Whether solutions in the given locale use tokens that correspond to words."""
    return base_locale(locale) not in _NON_WORD_BASED_LOCALES


def normalize_string(s: str, remove_extra_spaces: bool = True, remove_diacritics: bool = False) -> str:
    """
    NFC-normalize a string, optionally without diacritics and / or without
    leading, trailing and repeated spaces.
    """
    if not s or not isinstance(s, str):
        return ''
    if remove_diacritics:
        s = strip_marks(s)
    s = unicodedata.normalize('NFC', s)
    if not remove_extra_spaces:
        return s
    return _REPEATED_SPACE_RE.sub(r'\1', s.strip())


def strip_marks(s: str) -> str:
    """Remove combining marks (accents, etc.), returning an NFD string."""
    return ''.join(
        c for c in unicodedata.normalize('NFD', s)
        if not unicodedata.category(c).startswith('M')
    )


def lower_for_locale(s: str, locale: str) -> str:
    """Lower-case a string, honoring the dotted / dotless i of Turkic locales."""
    if base_locale(locale) in _TURKIC_LOCALES:
        s = s.replace('I', 'ı').replace('İ', 'i')
    return s.lower()


def lower_preserving_length(s: str, locale: str) -> str:
    """
    Lower-case a string character by character, leaving alone any character
    whose lower-case form is not a single character (such as 'İ' outside of
    Turkic locales), so that indices stay aligned with the input.
    """
    result = []
    for c in s:
        lowered = lower_for_locale(c, locale)
        result.append(lowered if len(lowered) == 1 else c)
    return ''.join(result)


def is_punctuation_or_space(c: str) -> bool:
    """True for punctuation marks, separators and other whitespace."""
    category = unicodedata.category(c)
    return category[0] in ('P', 'Z') or c.isspace()


def get_string_words(s: str) -> List[str]:
    """The words (sequences of letters and / or numbers) contained in a string."""
    if not s:
        return []
    return _WORD_RE.findall(s)


def get_word_bigram_map(word: str) -> Dict[str, int]:
    """
    Map from the bigrams of a word to their number of occurrences.
    Words of up to 2 characters count as a single bigram equal to themselves.
    """
    bigrams: Dict[str, int] = {}
    if len(word) <= 2:
        bigrams[word] = 1
        return bigrams
    for i in range(len(word) - 1):
        bigram = word[i:i + 2]
        bigrams[bigram] = bigrams.get(bigram, 0) + 1
    return bigrams


@lru_cache(maxsize=8192)
def simplify_token_string(s: str, locale: str) -> str:
    """
    Lower-cased, mark-free, letters-and-numbers-only version of a token value.
    "L'hôtel" -> "lhotel".
    """
    s = strip_marks(lower_for_locale(s, locale))
    s = ''.join(c for c in s if c.isalnum())
    return unicodedata.normalize('NFC', s)


def _numeric_key(s: str) -> Tuple:
    # re.split() puts text at even and digit runs at odd indices,
    # so keys always compare str with str and int with int.
    parts = _DIGITS_RE.split(s)
    return tuple(int(part) if i % 2 else part for i, part in enumerate(parts))


@lru_cache(maxsize=16384)
def collation_key(s: str, locale: str, case_sensitive: bool = False) -> Tuple:
    """
    Sort key ignoring punctuation and spaces, comparing numbers numerically,
    and ordering base letters before accents (and before case, if relevant).
    """
    s = unicodedata.normalize('NFC', s or '')
    text = ''.join(c for c in s if not is_punctuation_or_space(c))
    lowered = lower_for_locale(text, locale)
    primary = _numeric_key(unicodedata.normalize('NFC', strip_marks(lowered)))
    secondary = _numeric_key(lowered)
    if not case_sensitive:
        return (primary, secondary)
    return (primary, secondary, _numeric_key(text))


def compare_strings(x: str, y: str, locale: str) -> int:
    """
    Default collation: case-insensitive, accent-sensitive, punctuation-insensitive, numeric.
    Returns -1 if x comes before y, 1 if x comes after y, 0 if both are equivalent.
    """
    kx = collation_key(x, locale)
    ky = collation_key(y, locale)
    return (kx > ky) - (kx < ky)


def compare_strings_cs(x: str, y: str, locale: str) -> int:
    """Like compare_strings(), but case differences are significant."""
    kx = collation_key(x, locale, True)
    ky = collation_key(y, locale, True)
    return (kx > ky) - (kx < ky)


def clear_caches() -> None:
    """The token comparison caches can get quite big between challenges."""
    collation_key.cache_clear()
    simplify_token_string.cache_clear()
