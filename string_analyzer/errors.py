"""Error taxonomy for the string analyzer service.

Each error carries the HTTP status it is reported with and a message that is
safe to show to the caller. The application maps them to JSON responses in
``string_analyzer.main``.
"""

from typing import Optional


class StringAnalyzerError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(StringAnalyzerError):
    """A request field is missing, has the wrong type, or an invalid value."""

    status_code = 400
    default_message = "Invalid request"


class DuplicateKey(StringAnalyzerError):
    """A record with the same content hash (or value) already exists."""

    status_code = 409
    default_message = "String already exists in the system"


class NotFound(StringAnalyzerError):
    status_code = 404
    default_message = "String does not exist in the system"


class UnsatisfiableFilter(StringAnalyzerError):
    """The natural-language query resolved to predicates no record can satisfy."""

    status_code = 422
    default_message = "Query parsed but resulted in conflicting filters"


class UnparseableQuery(StringAnalyzerError):
    status_code = 400
    default_message = "Unable to parse natural language query"


class StoreFailure(StringAnalyzerError):
    """The record store failed. The message never carries internal detail."""

    status_code = 500
    default_message = "Internal server error"
