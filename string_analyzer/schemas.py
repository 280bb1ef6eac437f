from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class StringRequest(BaseModel):
    """Request schema for creating/analyzing a string."""
    value: str = Field(..., description="String to analyze")


class StructuralProperties(BaseModel):
    """Computed properties of an analyzed string. Derived only from its value."""
    model_config = ConfigDict(frozen=True)

    length: int
    is_palindrome: bool
    unique_characters: int
    word_count: int
    content_hash: str
    character_frequency: Dict[str, int]


class AnalyzedString(BaseModel):
    """A persisted string record."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    value: str
    properties: StructuralProperties
    created_at: datetime


class LengthRange(BaseModel):
    """Inclusive bounds on a string's length."""
    gte: Optional[int] = None
    lte: Optional[int] = None


class QueryFilter(BaseModel):
    """Conjunction of field predicates applied against stored records.

    Unset predicates do not constrain the result.
    """
    is_palindrome: Optional[bool] = None
    length: Optional[LengthRange] = None
    word_count: Optional[int] = None
    value_contains: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class InterpretedQuery(BaseModel):
    """A natural-language query together with the predicates read from it."""
    original: str
    parsed_filters: QueryFilter

    @field_serializer("parsed_filters")
    def _serialize_filters(self, filters: QueryFilter) -> Dict[str, Any]:
        return filters.as_dict()


class StringListResponse(BaseModel):
    data: List[AnalyzedString]
    count: int
    filters_applied: Dict[str, Any] = Field(default_factory=dict)


class NaturalLanguageResponse(BaseModel):
    data: List[AnalyzedString]
    count: int
    interpreted_query: InterpretedQuery
