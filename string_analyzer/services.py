import logging
from typing import Any, Dict, Optional

from string_analyzer.analyzer import analyze
from string_analyzer.errors import (
    InvalidInput,
    NotFound,
    UnparseableQuery,
    UnsatisfiableFilter,
)
from string_analyzer.nlp import interpret_nl_query
from string_analyzer.schemas import AnalyzedString, LengthRange, QueryFilter
from string_analyzer.store import StringStore

logger = logging.getLogger("string_analyzer.services")


def create_string(store: StringStore, value: str) -> AnalyzedString:
    """Analyze a string and persist it. Raises DuplicateKey for a known value."""
    properties = analyze(value)
    record = store.create(value, properties)
    logger.info("Stored string %s (length=%d)", properties.content_hash[:12], properties.length)
    return record


def get_string(store: StringStore, value: str) -> AnalyzedString:
    record = store.find_one(value)
    if record is None:
        raise NotFound()
    return record


def delete_string(store: StringStore, value: str) -> None:
    deleted = store.delete_one(value)
    if deleted is None:
        raise NotFound()
    logger.info("Deleted string %s", deleted.id[:12])


def build_query_filter(
    is_palindrome: Optional[bool] = None,
    min_length: Optional[int] = None,
    max_length: Optional[int] = None,
    word_count: Optional[int] = None,
    contains_character: Optional[str] = None,
) -> QueryFilter:
    """Validate query parameters and turn them into a QueryFilter."""
    query_filter = QueryFilter(is_palindrome=is_palindrome)

    if min_length is not None and min_length < 0:
        raise InvalidInput("min_length must be non-negative")
    if max_length is not None and max_length < 0:
        raise InvalidInput("max_length must be non-negative")
    if min_length is not None and max_length is not None and min_length > max_length:
        raise InvalidInput("min_length cannot be greater than max_length")
    if min_length is not None or max_length is not None:
        query_filter.length = LengthRange(gte=min_length, lte=max_length)

    if word_count is not None:
        if word_count < 0:
            raise InvalidInput("word_count must be non-negative")
        query_filter.word_count = word_count

    if contains_character is not None:
        if contains_character == "":
            raise InvalidInput("contains_character must not be empty")
        query_filter.value_contains = contains_character

    return query_filter


def list_strings(
    store: StringStore,
    is_palindrome: Optional[bool] = None,
    min_length: Optional[int] = None,
    max_length: Optional[int] = None,
    word_count: Optional[int] = None,
    contains_character: Optional[str] = None,
) -> Dict[str, Any]:
    query_filter = build_query_filter(is_palindrome, min_length, max_length, word_count, contains_character)
    records = store.find_many(query_filter)

    supplied = {
        "is_palindrome": is_palindrome,
        "min_length": min_length,
        "max_length": max_length,
        "word_count": word_count,
        "contains_character": contains_character,
    }
    return {
        "data": records,
        "count": len(records),
        "filters_applied": {k: v for k, v in supplied.items() if v is not None},
    }


def filter_by_natural_language(store: StringStore, query: Optional[str]) -> Dict[str, Any]:
    if query is None or not query.strip():
        raise InvalidInput("Missing query")

    try:
        interpreted = interpret_nl_query(query)
    except UnsatisfiableFilter:
        raise
    except Exception as e:
        logger.exception("Failed to interpret natural language query %r", query)
        raise UnparseableQuery() from e

    records = store.find_many(interpreted.parsed_filters)
    return {
        "data": records,
        "count": len(records),
        "interpreted_query": interpreted,
    }
