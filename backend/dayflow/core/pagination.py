from __future__ import annotations

import math
from typing import Callable, Generic, List, TypeVar

from fastapi import Query
from pydantic import BaseModel
from sqlalchemy.orm import Query as SAQuery

from dayflow.core.config import settings

T = TypeVar("T")


class PageParams(BaseModel):
    page: int = 1
    limit: int = settings.default_page_size

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def page_params(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
) -> PageParams:
    return PageParams(page=page, limit=limit)


class Page(BaseModel, Generic[T]):
    items: List[T]
    total: int
    page: int
    total_pages: int


def paginate(query: SAQuery, params: PageParams, serialize: Callable[[object], T]) -> Page[T]:
    total = query.order_by(None).count()
    rows = query.offset(params.offset).limit(params.limit).all()
    return Page(
        items=[serialize(row) for row in rows],
        total=total,
        page=params.page,
        total_pages=math.ceil(total / params.limit) if total else 0,
    )
