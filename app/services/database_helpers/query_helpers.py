# /app/services/database_helpers/query_helpers.py

"""
Small query-building helpers shared by every SQL repository.

`live()` is the single place where archived (soft-deleted) rows are filtered
out, so default queries exclude them by construction instead of each caller
remembering to add the filter.
"""

import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple, Type

from sqlalchemy.orm import Query, Session

from app.models.enums import RecordState


def live(db: Session, model: Type[Any]) -> Query:
    """Returns a query over `model` restricted to active (non-archived) rows."""
    return db.query(model).filter(model.state == RecordState.ACTIVE)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalises a datetime to an aware UTC value. SQLite hands timestamps back
    naive, so anything read from the store goes through here before it is
    compared with an aware value.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def paginate(query: Query, page: int, limit: int) -> Tuple[List[Any], Dict[str, Any]]:
    """
    Applies offset/limit paging to an already ordered query and returns the
    page of rows together with the pagination block used by list endpoints.
    """
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    total_pages = math.ceil(total / limit) if limit else 0
    pagination = {
        "current": page,
        "total": total_pages,
        "count": len(items),
        "total_records": total,
        "has_next": page < total_pages,
        "has_prev": page > 1,
    }
    return items, pagination


def settable_fields(model: Type[Any], data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Filters a partial-update payload for `model`. An explicit None aimed at a
    NOT NULL column is dropped as if the field had been omitted; nullable
    columns can still be cleared.
    """
    columns = model.__table__.columns
    return {
        key: value
        for key, value in data.items()
        if value is not None or key not in columns or columns[key].nullable
    }
