import re
from typing import Callable, List, Optional, Tuple

from string_analyzer.errors import UnsatisfiableFilter
from string_analyzer.schemas import InterpretedQuery, LengthRange, QueryFilter

_NUM_WORDS = {
    'zero': 0,
    'one': 1,
    'two': 2,
    'three': 3,
    'four': 4,
    'five': 5,
    'six': 6,
    'seven': 7,
    'eight': 8,
    'nine': 9,
    'ten': 10,
    'eleven': 11,
    'twelve': 12,
    'thirteen': 13,
    'fourteen': 14,
    'fifteen': 15,
    'sixteen': 16,
    'seventeen': 17,
    'eighteen': 18,
    'nineteen': 19,
    'twenty': 20,
}

_NUMBER = r'(\d+|[a-z]+)'

Rule = Tuple[re.Pattern[str], Callable[[re.Match[str], QueryFilter], None]]


def _safe_int(val: str) -> Optional[int]:
    """Convert a digit string or a number word to an int, or None."""
    val = val.strip().lower()
    if val.isdigit():
        return int(val)
    return _NUM_WORDS.get(val)


def _length_range(filters: QueryFilter) -> LengthRange:
    if filters.length is None:
        filters.length = LengthRange()
    return filters.length


def _single_word(m: re.Match[str], filters: QueryFilter) -> None:
    filters.word_count = 1


def _palindrome(m: re.Match[str], filters: QueryFilter) -> None:
    filters.is_palindrome = True


def _longer_than(m: re.Match[str], filters: QueryFilter) -> None:
    n = _safe_int(m.group(1))
    if n is not None:
        bounds = _length_range(filters)
        bounds.gte = max(bounds.gte or 0, n + 1)


def _containing_letter(m: re.Match[str], filters: QueryFilter) -> None:
    filters.value_contains = m.group(1)


def _first_vowel(m: re.Match[str], filters: QueryFilter) -> None:
    # Only narrows an existing palindrome query
    if filters.is_palindrome:
        filters.value_contains = 'a'


def _shorter_than(m: re.Match[str], filters: QueryFilter) -> None:
    n = _safe_int(m.group(1))
    if n is not None:
        bounds = _length_range(filters)
        upper = n - 1
        bounds.lte = upper if bounds.lte is None else min(bounds.lte, upper)


def _exact_words(m: re.Match[str], filters: QueryFilter) -> None:
    n = _safe_int(m.group(1))
    if n is not None:
        filters.word_count = n


# Evaluated in order; every matching rule is applied.
RULES: List[Rule] = [
    (re.compile(r'single word'), _single_word),
    (re.compile(r'palindrom(?:ic|e)'), _palindrome),
    (re.compile(r'longer than\s+' + _NUMBER), _longer_than),
    (re.compile(r'containing (?:the )?letter (\w)'), _containing_letter),
    (re.compile(r'first vowel'), _first_vowel),
    (re.compile(r'shorter than\s+' + _NUMBER), _shorter_than),
    (re.compile(r'\b(?:exactly|with)\s+' + _NUMBER + r'\s+words?\b'), _exact_words),
]


def _check_satisfiable(filters: QueryFilter) -> None:
    if filters.word_count is not None and filters.word_count <= 0:
        raise UnsatisfiableFilter("parsed filters conflict: word_count must be positive")


def translate(query: str) -> QueryFilter:
    """Translate a free-text query into structured filter predicates.

    Unrecognized text contributes nothing. Raises UnsatisfiableFilter when the
    query asks for a non-positive word count. An empty length range is left
    as parsed and simply matches nothing.
    """
    if not isinstance(query, str):
        raise TypeError("query must be a string")

    q = query.lower()
    filters = QueryFilter()
    for pattern, build in RULES:
        m = pattern.search(q)
        if m:
            build(m, filters)

    _check_satisfiable(filters)
    return filters


def interpret_nl_query(query: str) -> InterpretedQuery:
    """Translate a query and report it alongside the original text."""
    filters = translate(query)
    return InterpretedQuery(original=query, parsed_filters=filters)
