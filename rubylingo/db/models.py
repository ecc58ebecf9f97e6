"""
SQLAlchemy ORM models for the RubyLingo dictionary database.

One Entry row per (word, level), with its glosses and part-of-speech
tags in child tables.
"""

from typing import List, Optional

from sqlalchemy import ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class Entry(Base):
    """A dictionary head word in one dictionary level."""
    __tablename__ = "entry"
    __table_args__ = (
        UniqueConstraint("word", "level", name="uq_entry_word_level"),
        Index("ix_entry_level", "level"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    word: Mapped[str] = mapped_column(String, nullable=False)
    level: Mapped[str] = mapped_column(String, nullable=False, default="basic")
    reading: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    translation: Mapped[str] = mapped_column(Text, nullable=False)

    glosses: Mapped[List["Gloss"]] = relationship(
        back_populates="entry", cascade="all, delete-orphan", order_by="Gloss.ord",
    )
    pos_tags: Mapped[List["PosTag"]] = relationship(
        back_populates="entry", cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Entry({self.word!r}, level={self.level!r})>"


class Gloss(Base):
    """One English gloss of an entry, in dictionary order."""
    __tablename__ = "gloss"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    entry_id: Mapped[int] = mapped_column(ForeignKey("entry.id", ondelete="CASCADE"), index=True)
    ord: Mapped[int] = mapped_column(Integer, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)

    entry: Mapped[Entry] = relationship(back_populates="glosses")


class PosTag(Base):
    """A part-of-speech tag of an entry."""
    __tablename__ = "pos_tag"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    entry_id: Mapped[int] = mapped_column(ForeignKey("entry.id", ondelete="CASCADE"), index=True)
    tag: Mapped[str] = mapped_column(String, nullable=False)

    entry: Mapped[Entry] = relationship(back_populates="pos_tags")
