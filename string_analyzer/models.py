from datetime import datetime
from typing import Dict

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from string_analyzer.database import Base


class StringRecord(Base):
    """An analyzed string. The unique content hash also makes value unique."""
    __tablename__ = "string_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    # casefold() of value, matched by case-insensitive substring filters
    value_folded: Mapped[str] = mapped_column(Text, nullable=False)
    content_hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    length: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    is_palindrome: Mapped[bool] = mapped_column(Boolean, nullable=False)
    unique_characters: Mapped[int] = mapped_column(Integer, nullable=False)
    word_count: Mapped[int] = mapped_column(Integer, nullable=False)
    character_frequency: Mapped[Dict[str, int]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
