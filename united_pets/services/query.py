"""
Query helpers shared by the listing services: case-insensitive substring
matching, opaque-field equality filters and offset pagination.
"""

import re
from dataclasses import dataclass
from typing import Any, Generic, List, Sequence, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from united_pets.exceptions import ValidationError

T = TypeVar("T")

_FIELD_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,63}$")


def contains_ci(column, term: str):
    """`column ILIKE '%term%'` with LIKE wildcards in `term` matched literally."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return column.ilike(f"%{escaped}%", escape="\\")


def document_field_equals(column, field: str, value: str):
    """Equality on one key of a JSON document column (`details ->> field = value`)."""
    if not _FIELD_NAME.match(field):
        raise ValidationError(message=f"'{field}' is not a filterable field name", field=field)
    return column[field].as_string() == value


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    limit: int = 10

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class PageResult(Generic[T]):
    items: List[T]
    total: int
    skip: int

    @property
    def has_more(self) -> bool:
        return self.skip + len(self.items) < self.total


async def paginate(db: AsyncSession, query: Select, page: PageRequest) -> PageResult[Any]:
    """
    Run `query` for one page and count all matching rows.

    The count ignores ORDER BY; the page query applies OFFSET/LIMIT.
    """
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar_one()

    result = await db.execute(query.offset(page.skip).limit(page.limit))
    items: Sequence[Any] = result.scalars().all()
    return PageResult(items=list(items), total=total, skip=page.skip)
