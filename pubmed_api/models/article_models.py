from __future__ import annotations

from typing import Optional

from sqlalchemy import Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from pubmed_api.db.base import Base


class ArticleRow(Base):
    __tablename__ = "articles"

    pmid: Mapped[str] = mapped_column(Text, primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    abstract: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # JSON-encoded list[str]
    authors: Mapped[str] = mapped_column(Text, nullable=False)
    journal: Mapped[str] = mapped_column(Text, nullable=False)
    pub_year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    # JSON-encoded list[str]
    mesh_terms: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    doi: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # title.lower(), computed in Python; SQLite lower() folds ASCII only
    title_lower: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # lower(title + " " + abstract)
    search_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("idx_search_text", "search_text"),
        Index("idx_pub_year", "pub_year"),
        Index("idx_journal", "journal"),
    )
