"""
Paging of list endpoints.

Pages are 1-indexed. Besides the JSON envelope, list routes expose the
total count and navigation links as response headers.
"""
import math
from typing import Dict, Generic, List, Type, TypeVar

from fastapi import Query
from pydantic import BaseModel
from sqlalchemy.orm import Query as SQLAlchemyQuery

T = TypeVar("T")

class PageParams:
    """Page number and size taken from the query string."""
    def __init__(
        self,
        page: int = Query(1, ge=1, description="Page number, starting at 1"),
        size: int = Query(20, ge=1, le=100, description="Accounts per page")
    ):
        self.page = page
        self.size = size

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size


class PageResponse(BaseModel, Generic[T]):
    items: List[T]
    total: int
    page: int
    size: int
    pages: int
    has_next: bool
    has_prev: bool


def paginate(query: SQLAlchemyQuery, params: PageParams, schema_class: Type[BaseModel]) -> PageResponse:
    """
    Run `query` for one page and wrap the rows in `schema_class`.

    The query must already carry its ordering.
    """
    total = query.count()
    rows = query.offset(params.offset).limit(params.size).all()
    pages = math.ceil(total / params.size)

    return PageResponse(
        items=[schema_class.model_validate(row) for row in rows],
        total=total,
        page=params.page,
        size=params.size,
        pages=pages,
        has_next=params.page < pages,
        has_prev=params.page > 1,
    )


def pagination_headers(page: PageResponse, path: str) -> Dict[str, str]:
    """
    X-Total-Count and RFC 5988 Link headers for a page served at `path`.
    """
    def link(number: int, rel: str) -> str:
        return f'<{path}?page={number}&size={page.size}>; rel="{rel}"'

    links = []
    if page.has_next:
        links.append(link(page.page + 1, "next"))
    if page.has_prev:
        links.append(link(page.page - 1, "prev"))
    links.append(link(max(page.pages, 1), "last"))
    links.append(link(1, "first"))
    return {"X-Total-Count": str(page.total), "Link": ", ".join(links)}
