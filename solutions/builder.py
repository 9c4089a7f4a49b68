"""
Solution builder: compiles raw challenge data into lists of solutions.

Three input forms are supported:
    - solution graphs (lists of vertex groups), see build_from_graph()
    - flat lists of accepted sentences, see build_from_naming_solutions()
    - ordered word-bank tokens, see build_from_word_bank_tokens()

Malformed entries are skipped rather than raising; unusable input yields [].
"""

import logging
import re
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Dict, List, Optional, Sequence, Set, Tuple

from solutions.models import Solution, Token, TokenValue, Vertex
from solutions.strings import (
    Collate,
    base_locale,
    clear_caches,
    compare_strings,
    normalize_string,
    simplify_token_string,
)

logger = logging.getLogger("solutions.builder")

# A run of non-space characters broken by whitespace: an incorrectly expanded
# contraction, such as "im" replaced by "i am" in "him" -> "hi am".
_CONTRACTION_ARTIFACT_RE = re.compile(r'\S\s+\S')

# "&" glued inside a word, as an incorrectly contracted "and".
_GLUED_AMPERSAND_RE = re.compile(r'(^|[^&\s])&([^&\s]|$)')

_TRAILING_NON_WORD_RE = re.compile(r'([\W_]+)$')
_WORD_SPLIT_RE = re.compile(r'([^\W_]+)')

_DOTTED_SMALL_I = 'i\u0307'
_DOTTED_CAPITAL_I = '\u0130'
_DECOMPOSED_DOTTED_CAPITAL_I = 'I\u0307'
_NON_TURKISH_INVALID_I = ('ı', _DOTTED_CAPITAL_I, _DECOMPOSED_DOTTED_CAPITAL_I)


# ---- Token values ----

def get_vertex_token_values(vertex: Vertex, locale: str, collate: Collate = compare_strings) -> List[TokenValue]:
    """
    One or two candidate values for a vertex.

    The original value is only kept apart from the lenient value when both
    differ beyond case and punctuation; the lenient value is then an
    automatic fallback.
    """
    if vertex.orig is not None and vertex.orig != vertex.lenient:
        if collate(vertex.orig, vertex.lenient, locale) != 0:
            return [TokenValue(vertex.orig, False), TokenValue(vertex.lenient, True)]
        return [TokenValue(vertex.orig, vertex.auto)]
    return [TokenValue(vertex.lenient, vertex.auto)]


def _filter_locale_artifacts(values: List[TokenValue], locale: str) -> List[TokenValue]:
    """Drop invalid copies of valid values that are known to occur in some locales."""
    language = base_locale(locale)

    if language == 'en':
        values = [
            v for v in values
            if len(v.value) == 1 or '&' not in v.value or not _GLUED_AMPERSAND_RE.search(v.value)
        ]
    elif language == 'fr':
        # The only French word with the letter "ù" is "où".
        values = [v for v in values if v.value in ('où', 'Où') or 'ù' not in v.value]

    # A combining dot above a lowercase "i" is always invalid.
    dotted = [v for v in values if _DOTTED_SMALL_I in v.value]
    values = [v for v in values if _DOTTED_SMALL_I not in v.value]

    if language != 'tr':
        values = [v for v in values if not any(c in v.value for c in _NON_TURKISH_INVALID_I)]

    if not values and dotted:
        # Only invalid copies remain: repair them rather than losing the token.
        values = [
            TokenValue(
                v.value
                .replace(_DOTTED_SMALL_I, 'i')
                .replace(_DECOMPOSED_DOTTED_CAPITAL_I, 'I')
                .replace(_DOTTED_CAPITAL_I, 'I'),
                v.is_automatic,
            )
            for v in dotted
        ]

    return values


def _sort_and_dedupe(values: List[TokenValue], locale: str, collate: Collate) -> List[TokenValue]:
    def compare(a: TokenValue, b: TokenValue) -> int:
        result = collate(a.value, b.value, locale)
        if result == 0:
            result = int(a.is_automatic) - int(b.is_automatic)
        return result

    result = []
    seen: Set[str] = set()
    for v in sorted(values, key=cmp_to_key(compare)):
        if v.value not in seen:
            seen.add(v.value)
            result.append(v)
    return result


def _drop_simplified_copies(values: List[TokenValue], locale: str, collate: Collate) -> List[TokenValue]:
    """
    Drop values that are simplified copies of other values, such as "lhotel"
    next to "l'hôtel", and collapse values that differ only by case or punctuation.
    """
    groups: Dict[str, List[TokenValue]] = {}
    for v in values:
        groups.setdefault(simplify_token_string(v.value, locale), []).append(v)

    dropped: Set[TokenValue] = set()

    for simplified, group in groups.items():
        if len(group) < 2:
            continue

        # If some versions have accents and others do not, keep the accented ones only.
        remaining = [v for v in group if collate(v.value, simplified, locale) != 0]
        if remaining:
            dropped.update(v for v in group if v not in remaining)
        else:
            remaining = group

        # Among equivalent versions, keep the most complete one.
        clusters: List[List[TokenValue]] = []
        for v in remaining:
            for cluster in clusters:
                if collate(cluster[0].value, v.value, locale) == 0:
                    cluster.append(v)
                    break
            else:
                clusters.append([v])

        for cluster in clusters:
            if len(cluster) > 1:
                best = max(
                    cluster,
                    key=lambda v: (
                        not v.is_automatic,
                        len(v.value),
                        sum(1 for c in v.value if c.isupper()),
                    ),
                )
                dropped.update(v for v in cluster if v is not best)

    return [v for v in values if v not in dropped]


def clean_token_values(
    values: Sequence[TokenValue],
    locale: str,
    is_whitespace_delimited: bool = False,
    collate: Collate = compare_strings,
) -> Tuple[Token, str]:
    """
    Turn the candidate values of a vertex group into a token.

    Returns (alternatives, suffix). The reference value (the first
    non-automatic value, else the first value) comes first. When all the
    alternatives end with the same punctuation, it is moved to the suffix.
    An empty token means that no valid value survived.
    """
    result = list(values)

    if is_whitespace_delimited:
        result = [v for v in result if not _CONTRACTION_ARTIFACT_RE.search(v.value)]

    result = _filter_locale_artifacts(result, locale)

    if len(result) > 1:
        result = _sort_and_dedupe(result, locale, collate)

    if len(result) > 1:
        result = _drop_simplified_copies(result, locale, collate)

    if not result:
        return (), ''

    reference = next((v for v in result if not v.is_automatic), result[0])
    alternatives = [reference.value] + [v.value for v in result if v is not reference]

    suffix = ''
    if len(alternatives) > 1:
        match = _TRAILING_NON_WORD_RE.search(alternatives[0])
        if match and all(a.endswith(match.group(1)) for a in alternatives[1:]):
            suffix = match.group(1)
            # Empty alternatives are kept: they mean that the other choices are optional.
            alternatives = [a[:-len(suffix)] for a in alternatives]

    return tuple(alternatives), suffix


# ---- Graph expansion ----

@dataclass
class _PartialSolution:
    reference: str
    tokens: Tuple[Token, ...]
    is_complex: bool


# Position -> {next position -> (token, suffix)}
_TokenGroups = Dict[Optional[int], Tuple[Token, str]]


class _GraphExpander:
    """
    Expands grouped tokens into all the partial solutions starting at each position.
    Results are memoized per position.
    """

    def __init__(self, groups: List[_TokenGroups]):
        self.groups = groups
        self.terminal = len(groups) - 1
        self._memo: Dict[int, List[_PartialSolution]] = {}
        self._visiting: Set[int] = set()

    def expand(self, start: int) -> List[_PartialSolution]:
        if start in self._memo:
            return self._memo[start]
        if start < 0 or start >= len(self.groups) or not self.groups[start]:
            return []
        if start in self._visiting:
            # Malformed graph with a cycle.
            return []

        self._visiting.add(start)
        partials: List[_PartialSolution] = []

        for next_position, (token, suffix) in self.groups[start].items():
            if not token:
                continue

            head: Tuple[Token, ...] = (token, (suffix,)) if suffix else (token,)
            head_reference = token[0] + suffix
            head_is_complex = len(token) > 1

            sub_partials = self.expand(next_position) if next_position is not None else []

            if sub_partials:
                for sub in sub_partials:
                    partials.append(_PartialSolution(
                        reference=head_reference + sub.reference,
                        tokens=head + sub.tokens,
                        is_complex=head_is_complex or sub.is_complex,
                    ))
            elif next_position is None or next_position == self.terminal:
                partials.append(_PartialSolution(head_reference, head, head_is_complex))

        self._visiting.discard(start)
        self._memo[start] = partials
        return partials


def _is_relevant_vertex(vertex: Vertex, include_automatic: bool) -> bool:
    return not vertex.is_typo and (include_automatic or not vertex.auto)


def group_vertex_tokens(
    vertices: Sequence,
    locale: str,
    include_automatic: bool = False,
    is_whitespace_delimited: bool = False,
    collate: Collate = compare_strings,
) -> List[_TokenGroups]:
    """
    For each position of a graph, map each next position to the token
    built from the vertices leading there.
    """
    groups: List[_TokenGroups] = []

    for position in vertices:
        by_next: Dict[Optional[int], List[TokenValue]] = {}

        for raw in (position if isinstance(position, (list, tuple)) else []):
            vertex = raw if isinstance(raw, Vertex) else Vertex.from_dict(raw)
            if vertex is None or not _is_relevant_vertex(vertex, include_automatic):
                continue
            by_next.setdefault(vertex.to, []).extend(get_vertex_token_values(vertex, locale, collate))

        groups.append({
            next_position: clean_token_values(values, locale, is_whitespace_delimited, collate)
            for next_position, values in by_next.items()
        })

    return groups


def dedupe_solutions(solutions: List[Solution]) -> List[Solution]:
    """
    Eliminate the most obvious duplicates among solutions sharing a reference:
    if any of them is complex, only the complex ones are kept, otherwise only the last one.

    For performance reasons, this does not handle:
        - complex solutions sharing the same tokens
        - duplicate solutions which do not share the same reference
    """
    by_reference: Dict[str, List[Solution]] = {}
    for solution in solutions:
        by_reference.setdefault(solution.reference, []).append(solution)

    result = []
    for similar in by_reference.values():
        if len(similar) <= 1:
            result.extend(similar)
        elif any(s.is_complex for s in similar):
            result.extend(s for s in similar if s.is_complex)
        else:
            result.append(similar[-1])
    return result


def build_from_graph(
    vertices: Sequence,
    locale: str,
    include_automatic: bool = False,
    is_whitespace_delimited: bool = False,
    collate: Collate = compare_strings,
) -> List[Solution]:
    """
    Build all the solutions described by a solution graph.

    vertices[i] holds the vertices available at position i. The sentence
    starts at position 0 and ends either on a vertex with no next position,
    or on the last position of the graph. Typos are always excluded,
    automatically derived vertices unless include_automatic is set.
    Result order is not significant.
    """
    if not isinstance(vertices, (list, tuple)) or not vertices:
        return []

    groups = group_vertex_tokens(vertices, locale, include_automatic, is_whitespace_delimited, collate)
    partials = _GraphExpander(groups).expand(0)

    solutions = dedupe_solutions([
        Solution(
            locale=locale,
            reference=partial.reference,
            tokens=partial.tokens,
            is_complex=partial.is_complex,
        )
        for partial in partials
    ])

    logger.debug(
        "Built %d solution(s) (%d before dedupe) from a %d-position graph",
        len(solutions), len(partials), len(vertices),
    )

    # The token comparison caches could get quite big.
    clear_caches()

    return solutions


def _split_words(sentence: str) -> Tuple[Token, ...]:
    return tuple((part,) for part in _WORD_SPLIT_RE.split(sentence) if part != '')


def build_from_naming_solutions(strings: Sequence, locale: str) -> List[Solution]:
    """One simple solution per accepted string, split into word / non-word tokens."""
    if not isinstance(strings, (list, tuple)):
        return []

    solutions = []
    for s in strings:
        if not isinstance(s, str):
            continue
        reference = normalize_string(s)
        if reference == '':
            continue
        solutions.append(Solution(
            locale=locale,
            reference=reference,
            tokens=_split_words(reference),
            is_complex=False,
        ))
    return solutions


def build_from_word_bank_tokens(words: Sequence, locale: str) -> List[Solution]:
    """
    A single solution made of the given words, separated by spaces.
    No solution is better than a degenerate one.
    """
    if not isinstance(words, (list, tuple)):
        return []

    cleaned = [normalize_string(w) for w in words if isinstance(w, str)]
    cleaned = [w for w in cleaned if w != '']
    reference = ' '.join(cleaned)

    if reference.strip() == '':
        return []

    tokens: List[Token] = []
    for word in cleaned:
        if tokens:
            tokens.append((' ',))
        tokens.append((word,))

    return [Solution(locale=locale, reference=reference, tokens=tuple(tokens), is_complex=False)]
