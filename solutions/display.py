"""Reader-friendly representations and orderings of solutions."""

from typing import List, Sequence, Tuple, Union

from solutions.models import Solution
from solutions.strings import compare_strings, has_locale_word_based_tokens


def get_reader_friendly_summary(solution: Solution) -> str:
    """
    A string summarizing all the variations of a solution: "I [like / love] cats".
    Choices get extra spacing when words are not separated by spaces.
    """
    space = '' if has_locale_word_based_tokens(solution.locale) else ' '
    parts = []
    for token in solution.tokens:
        if len(token) == 1:
            parts.append(token[0])
        else:
            parts.append(f"{space}[{space}{' / '.join(token)}{space}]{space}")
    return ''.join(parts)


def get_collapsed_tokens(solution: Solution) -> List[Union[str, List[str]]]:
    """Tokens with adjacent single-alternative tokens merged into plain strings."""
    collapsed: List[Union[str, List[str]]] = []
    for token in solution.tokens:
        if len(token) > 1:
            collapsed.append(list(token))
        elif not collapsed or isinstance(collapsed[-1], list):
            collapsed.append(token[0])
        else:
            collapsed[-1] += token[0]
    return collapsed


def get_summary_tokens(
    solution: Solution,
    choice_separator: str = ' / ',
    choice_left_delimiter: str = '[',
    choice_right_delimiter: str = ']',
) -> List[str]:
    """Flat list of display strings, delimiting each set of choices."""
    result: List[str] = []
    for token in get_collapsed_tokens(solution):
        if isinstance(token, str):
            result.append(token)
            continue
        result.append(choice_left_delimiter)
        for i, choice in enumerate(token):
            if i > 0:
                result.append(choice_separator)
            result.append(choice)
        result.append(choice_right_delimiter)
    return result


def compare_by_reference(x: Solution, y: Solution) -> int:
    """Alphabetical order of references, complex solutions first on ties."""
    result = compare_strings(x.reference, y.reference, x.locale)
    if result == 0:
        result = int(y.is_complex) - int(x.is_complex)
    return result


def compare_by_score(x: Solution, y: Solution) -> int:
    """Higher scores first, then alphabetical order."""
    difference = (y.score or 0) - (x.score or 0)
    if difference != 0:
        return 1 if difference > 0 else -1
    return compare_by_reference(x, y)


def get_i18n_counts(solutions: Sequence[Solution]) -> Tuple[str, int]:
    """
    A displayable count and a number usable for pluralization.
    Complex solutions stand for more than one sentence: "12+".
    """
    plural = len(solutions)
    display = str(plural)
    if any(s.is_complex for s in solutions):
        plural += 1
        display += '+'
    return display, plural
