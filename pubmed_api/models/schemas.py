# pubmed_api/models/schemas.py
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

SORT_RELEVANCE = "relevance"
SORT_YEAR_DESC = "year_desc"
SORT_YEAR_ASC = "year_asc"
VALID_SORTS = frozenset({SORT_RELEVANCE, SORT_YEAR_DESC, SORT_YEAR_ASC})

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50

# Range of a signed 64-bit SQL INTEGER
SQL_INT_MIN = -(2**63)
SQL_INT_MAX = 2**63 - 1


# --- Article record ---
# Stored as-is and replaced wholesale on reload
class Article(BaseModel):
    model_config = ConfigDict(frozen=True)

    pmid: str = Field(min_length=1)
    title: str
    abstract: str
    authors: List[str]
    journal: str
    pub_year: int
    mesh_terms: List[str]
    doi: Optional[str] = None


# --- Search parameters, one per request ---
# year is None when absent so that 0 stays a legitimate value
class SearchFilters(BaseModel):
    query: str = ""
    year: Optional[int] = None
    journal: str = ""
    author: str = ""
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE
    sort: str = SORT_RELEVANCE


class SearchResult(BaseModel):
    items: List[Article] = []
    page: int
    page_size: int
    total: int
    took_ms: int


class JournalCount(BaseModel):
    journal: str
    count: int


class Stats(BaseModel):
    top_journals: List[JournalCount] = []
    year_histogram: Dict[int, int] = {}
