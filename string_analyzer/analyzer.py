from hashlib import sha256
from typing import Dict

from string_analyzer.schemas import StructuralProperties


def compute_content_hash(value: str) -> str:
    """Lowercase hex SHA-256 of the UTF-8 encoded value."""
    # surrogatepass keeps lone surrogates (valid in JSON input) hashable
    return sha256(value.encode("utf-8", "surrogatepass")).hexdigest()


def normalize_for_palindrome(value: str) -> str:
    """Lowercase the value and drop every whitespace character."""
    return "".join(value.lower().split())


def is_palindrome(value: str) -> bool:
    normalized = normalize_for_palindrome(value)
    return normalized == normalized[::-1]


def count_words(value: str) -> int:
    """Count maximal runs of non-whitespace characters."""
    return len(value.split())


def character_frequency(value: str) -> Dict[str, int]:
    freq: Dict[str, int] = {}
    for c in value:
        freq[c] = freq.get(c, 0) + 1
    return freq


def analyze(value: str) -> StructuralProperties:
    """Compute the structural properties of a string.

    Pure and total: any string, including the empty one, yields a result.
    """
    freq = character_frequency(value)
    return StructuralProperties(
        length=len(value),
        is_palindrome=is_palindrome(value),
        unique_characters=len(freq),
        word_count=count_words(value),
        content_hash=compute_content_hash(value),
        character_frequency=freq,
    )
