from typing import Iterator, Optional

from fastapi import APIRouter, Depends, Query, Response

from string_analyzer import services
from string_analyzer.config import settings
from string_analyzer.database import SessionLocal
from string_analyzer.schemas import (
    AnalyzedString,
    NaturalLanguageResponse,
    StringListResponse,
    StringRequest,
)
from string_analyzer.store import MemoryStringStore, SqlStringStore, StringStore

router = APIRouter()

memory_store = MemoryStringStore()


def get_store() -> Iterator[StringStore]:
    """Yield the configured record store for one request."""
    if settings.STORE_BACKEND == "memory":
        yield memory_store
        return

    db = SessionLocal()
    try:
        yield SqlStringStore(db)
    finally:
        db.close()


@router.get("/health")
def health() -> dict:
    """Basic health check endpoint."""
    return {"status": "ok"}


@router.post("/strings", response_model=AnalyzedString, status_code=201)
def create_string_endpoint(payload: StringRequest, store: StringStore = Depends(get_store)):
    """Analyze and store a string. Returns 409 if it already exists."""
    return services.create_string(store, payload.value)


@router.get("/strings/filter-by-natural-language", response_model=NaturalLanguageResponse)
def filter_by_natural_language(
    query: Optional[str] = Query(None, description="Natural language query"),
    store: StringStore = Depends(get_store),
):
    """Filter strings using a natural language query.

    Example: "all single word palindromic strings"
    """
    return services.filter_by_natural_language(store, query)


@router.get("/strings/{string_value}", response_model=AnalyzedString)
def get_string_endpoint(string_value: str, store: StringStore = Depends(get_store)):
    """Get a specific string by its raw value."""
    return services.get_string(store, string_value)


@router.get("/strings", response_model=StringListResponse)
def get_all_strings(
    is_palindrome: Optional[bool] = Query(None),
    min_length: Optional[int] = Query(None),
    max_length: Optional[int] = Query(None),
    word_count: Optional[int] = Query(None),
    contains_character: Optional[str] = Query(None, description="Case-insensitive substring"),
    store: StringStore = Depends(get_store),
):
    """Get all strings with optional filtering."""
    return services.list_strings(
        store,
        is_palindrome=is_palindrome,
        min_length=min_length,
        max_length=max_length,
        word_count=word_count,
        contains_character=contains_character,
    )


@router.delete("/strings/{string_value}", status_code=204)
def delete_string_endpoint(string_value: str, store: StringStore = Depends(get_store)) -> Response:
    """Delete a string by its raw value."""
    services.delete_string(store, string_value)
    return Response(status_code=204)
