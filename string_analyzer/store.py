"""Record store for analyzed strings.

``StringStore`` is the contract the service layer consumes. Two backends
implement it: ``SqlStringStore`` on SQLAlchemy, and ``MemoryStringStore`` which
keeps records in the current process. Both enforce uniqueness of the content
hash as part of ``create`` so concurrent identical creates cannot both succeed.
"""

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from string_analyzer.analyzer import compute_content_hash
from string_analyzer.errors import DuplicateKey, StoreFailure
from string_analyzer.models import StringRecord
from string_analyzer.schemas import AnalyzedString, QueryFilter, StructuralProperties

logger = logging.getLogger("string_analyzer.store")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StringStore(ABC):
    @abstractmethod
    def find_by_hash(self, content_hash: str) -> Optional[AnalyzedString]:
        ...

    @abstractmethod
    def find_one(self, value: str) -> Optional[AnalyzedString]:
        ...

    @abstractmethod
    def find_many(self, query_filter: QueryFilter) -> List[AnalyzedString]:
        ...

    @abstractmethod
    def create(self, value: str, properties: StructuralProperties) -> AnalyzedString:
        """Persist a new record. Raises DuplicateKey if the hash exists."""

    @abstractmethod
    def delete_one(self, value: str) -> Optional[AnalyzedString]:
        """Delete the record for value and return it, or None if absent."""


def matches_filter(record: AnalyzedString, query_filter: QueryFilter) -> bool:
    props = record.properties

    if query_filter.is_palindrome is not None:
        if props.is_palindrome != query_filter.is_palindrome:
            return False

    bounds = query_filter.length
    if bounds is not None:
        if bounds.gte is not None and props.length < bounds.gte:
            return False
        if bounds.lte is not None and props.length > bounds.lte:
            return False

    if query_filter.word_count is not None:
        if props.word_count != query_filter.word_count:
            return False

    if query_filter.value_contains is not None:
        if query_filter.value_contains.casefold() not in record.value.casefold():
            return False

    return True


# -----------------------------
# SQLAlchemy backend
# -----------------------------
def _to_record(row: StringRecord) -> AnalyzedString:
    created_at = row.created_at
    if created_at.tzinfo is None:
        # SQLite drops the offset; values are always written in UTC
        created_at = created_at.replace(tzinfo=timezone.utc)
    return AnalyzedString(
        id=row.content_hash,
        value=row.value,
        properties=StructuralProperties(
            length=row.length,
            is_palindrome=row.is_palindrome,
            unique_characters=row.unique_characters,
            word_count=row.word_count,
            content_hash=row.content_hash,
            character_frequency=row.character_frequency,
        ),
        created_at=created_at,
    )


class SqlStringStore(StringStore):
    def __init__(self, db: Session):
        self.db = db

    def _fail(self, action: str) -> StoreFailure:
        logger.exception("Store failure while trying to %s", action)
        self.db.rollback()
        return StoreFailure()

    def _get_row(self, value: str) -> Optional[StringRecord]:
        stmt = select(StringRecord).where(
            StringRecord.content_hash == compute_content_hash(value),
            StringRecord.value == value,
        )
        return self.db.scalars(stmt).first()

    def find_by_hash(self, content_hash: str) -> Optional[AnalyzedString]:
        try:
            stmt = select(StringRecord).where(StringRecord.content_hash == content_hash)
            row = self.db.scalars(stmt).first()
        except SQLAlchemyError as e:
            raise self._fail("find by hash") from e
        return _to_record(row) if row else None

    def find_one(self, value: str) -> Optional[AnalyzedString]:
        try:
            row = self._get_row(value)
        except SQLAlchemyError as e:
            raise self._fail("find string") from e
        return _to_record(row) if row else None

    def find_many(self, query_filter: QueryFilter) -> List[AnalyzedString]:
        stmt = select(StringRecord)

        if query_filter.is_palindrome is not None:
            stmt = stmt.where(StringRecord.is_palindrome == query_filter.is_palindrome)

        bounds = query_filter.length
        if bounds is not None:
            if bounds.gte is not None:
                stmt = stmt.where(StringRecord.length >= bounds.gte)
            if bounds.lte is not None:
                stmt = stmt.where(StringRecord.length <= bounds.lte)

        if query_filter.word_count is not None:
            stmt = stmt.where(StringRecord.word_count == query_filter.word_count)

        if query_filter.value_contains is not None:
            operand = query_filter.value_contains.casefold()
            stmt = stmt.where(StringRecord.value_folded.contains(operand, autoescape=True))

        stmt = stmt.order_by(StringRecord.id.asc())
        try:
            rows = self.db.scalars(stmt).all()
        except SQLAlchemyError as e:
            raise self._fail("filter strings") from e
        return [_to_record(row) for row in rows]

    def create(self, value: str, properties: StructuralProperties) -> AnalyzedString:
        row = StringRecord(
            value=value,
            value_folded=value.casefold(),
            content_hash=properties.content_hash,
            length=properties.length,
            is_palindrome=properties.is_palindrome,
            unique_characters=properties.unique_characters,
            word_count=properties.word_count,
            character_frequency=dict(properties.character_frequency),
            created_at=_utcnow(),
        )
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateKey() from e
        except SQLAlchemyError as e:
            raise self._fail("create string") from e
        try:
            self.db.refresh(row)
        except SQLAlchemyError as e:
            raise self._fail("reload created string") from e
        return _to_record(row)

    def delete_one(self, value: str) -> Optional[AnalyzedString]:
        try:
            row = self._get_row(value)
            if row is None:
                return None
            record = _to_record(row)
            self.db.delete(row)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("delete string") from e
        return record


# -----------------------------
# In-process backend
# -----------------------------
class MemoryStringStore(StringStore):
    def __init__(self):
        self._records: Dict[str, AnalyzedString] = {}
        self._lock = threading.Lock()

    def find_by_hash(self, content_hash: str) -> Optional[AnalyzedString]:
        return self._records.get(content_hash)

    def find_one(self, value: str) -> Optional[AnalyzedString]:
        record = self._records.get(compute_content_hash(value))
        if record is None or record.value != value:
            return None
        return record

    def find_many(self, query_filter: QueryFilter) -> List[AnalyzedString]:
        with self._lock:
            records = list(self._records.values())
        return [r for r in records if matches_filter(r, query_filter)]

    def create(self, value: str, properties: StructuralProperties) -> AnalyzedString:
        record = AnalyzedString(
            id=properties.content_hash,
            value=value,
            properties=properties,
            created_at=_utcnow(),
        )
        with self._lock:
            if properties.content_hash in self._records:
                raise DuplicateKey()
            self._records[properties.content_hash] = record
        return record

    def delete_one(self, value: str) -> Optional[AnalyzedString]:
        content_hash = compute_content_hash(value)
        with self._lock:
            record = self._records.get(content_hash)
            if record is None or record.value != value:
                return None
            return self._records.pop(content_hash)
