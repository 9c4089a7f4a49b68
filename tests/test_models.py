"""Tests for solution and diff models."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from solutions.models import Diff, DiffToken, Solution, make_solution_key


def test_solution_key_is_stable():
    tokens = (("I ",), ("like", "love"))
    assert make_solution_key("I like", tokens) == make_solution_key("I like", tokens)
    assert len(make_solution_key("I like", tokens)) == 16
    assert make_solution_key("I like", tokens) != make_solution_key("I like", (("I like",),))


def test_score_is_not_part_of_identity():
    a = Solution("en", "Hi", (("Hi",),), score=0.5)
    b = Solution("en", "Hi", (("Hi",),))
    assert a == b
    assert a.key == b.key


def test_solution_dict_round_trip():
    solution = Solution("en", "I like", (("I ",), ("like", "love")), True)
    data = solution.to_dict()
    assert data["tokens"] == [["I "], ["like", "love"]]
    data["unknown"] = "ignored"
    assert Solution.from_dict(data) == solution


def test_diff_significant_length():
    diff = Diff([
        DiffToken("I", 1, removed=True, ignorable=True),
        DiffToken("cat", 3, removed=True),
        DiffToken("dogs", 4, added=True),
        DiffToken("!", 1, added=True, ignorable=True),
        DiffToken(" like ", 6),
    ])
    assert diff.significant_length == 7
    assert [t.is_significant for t in diff.tokens] == [False, True, True, False, False]
