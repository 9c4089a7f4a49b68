"""Data models for solution graphs, expanded solutions and answer diffs."""

import hashlib
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Tuple, Union


# One position of a sentence: the alternatives that may occupy it.
Token = Tuple[str, ...]


@dataclass
class Vertex:
    """
    One option at a position of a solution graph.

    `to` is the index of the group of vertices that continues the sentence,
    or None when the vertex ends it.
    """
    lenient: str
    to: Optional[int] = None
    orig: Optional[str] = None
    auto: bool = False
    type: Optional[str] = None

    @property
    def is_typo(self) -> bool:
        return self.type == 'typo'

    @classmethod
    def from_dict(cls, data: Dict) -> Optional['Vertex']:
        """
        Build a vertex from raw graph data, or None if the data is unusable.
        """
        if not isinstance(data, dict):
            return None
        lenient = data.get('lenient')
        orig = data.get('orig')
        if not isinstance(orig, str) or orig == '':
            orig = None
        if not isinstance(lenient, str):
            if orig is None:
                return None
            lenient = orig
        to = data.get('to')
        if isinstance(to, bool) or not isinstance(to, (int, float)):
            to = None
        else:
            to = int(to)
        vertex_type = data.get('type')
        return cls(
            lenient=lenient,
            to=to,
            orig=orig,
            auto=bool(data.get('auto', False)),
            type=vertex_type if isinstance(vertex_type, str) else None,
        )


@dataclass(frozen=True)
class TokenValue:
    """A candidate value for a token, remembering whether it was derived automatically."""
    value: str
    is_automatic: bool = False


@dataclass
class Solution:
    """
    A possible solution to a challenge.

    Concatenating one alternative from each token yields a full sentence.
    The first alternative of each token builds up the reference.
    `score` is only set after matching against a user answer, and is not
    part of the identity of the solution.
    """
    locale: str
    reference: str
    tokens: Tuple[Token, ...] = ()
    is_complex: bool = False
    score: Optional[float] = field(default=None, compare=False)

    @property
    def key(self) -> str:
        return make_solution_key(self.reference, self.tokens)

    def to_dict(self) -> Dict:
        d = asdict(self)
        d['tokens'] = [list(token) for token in self.tokens]
        return d

    @classmethod
    def from_dict(cls, data: Dict) -> 'Solution':
        data = dict(data)  # shallow copy
        data['tokens'] = tuple(tuple(token) for token in data.get('tokens') or ())
        known = cls.__dataclass_fields__
        data = {k: v for k, v in data.items() if k in known}
        return cls(**data)


def make_solution_key(reference: str, tokens: Tuple[Token, ...]) -> str:
    """
    Stable identity of a solution, from its reference and tokens.
    SHA-256 truncated to 16 hex chars.
    """
    key = reference + '\x1e' + '\x1e'.join('\x1f'.join(token) for token in tokens)
    return hashlib.sha256(key.encode('utf-8')).hexdigest()[:16]


@dataclass(frozen=True)
class MatchingData:
    """
    Word / character / bigram profile of a string, used for similarity scoring.

    bigram_map must not be mutated once the profile is built (profiles are cached).
    """
    char_count: int = 0
    word_count: int = 0
    bigram_map: Dict[str, int] = field(default_factory=dict)

    @property
    def bigram_count(self) -> int:
        return sum(self.bigram_map.values())


EMPTY_MATCHING_DATA = MatchingData()


@dataclass
class DiffToken:
    """One unit of a character-level diff between two strings."""
    value: str
    count: int
    added: bool = False
    removed: bool = False
    ignorable: bool = False

    @property
    def is_significant(self) -> bool:
        """Whether the token is a change that matters (not only case / punctuation / spacing)."""
        return (self.added or self.removed) and not self.ignorable

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class Equivalent:
    """Diff result: the two strings have no meaningful difference."""


@dataclass
class Diff:
    """Diff result: the tokens of a meaningful difference."""
    tokens: List[DiffToken] = field(default_factory=list)

    @property
    def significant_length(self) -> int:
        return sum(len(t.value) for t in self.tokens if t.is_significant)

    def to_dicts(self) -> List[Dict]:
        return [t.to_dict() for t in self.tokens]


DiffResult = Union[Equivalent, Diff]
