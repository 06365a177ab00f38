# /app/db/base_class.py

"""
The declarative base shared by every ORM model, plus the column helpers that
all models reuse (enum storage and the soft-delete lifecycle column).
"""

from enum import Enum as PyEnum
from typing import List, Type

from sqlalchemy import Column, Enum
from sqlalchemy.orm import declarative_base, declared_attr

from app.models.enums import RecordState


class CustomBase:
    # Table names default to the pluralised, lower-cased class name
    # (e.g. `Assignment` -> `assignments`). Models override where needed.
    @declared_attr
    def __tablename__(cls) -> str:
        return f"{cls.__name__.lower()}s"


Base = declarative_base(cls=CustomBase)


def _enum_values(enum_cls: Type[PyEnum]) -> List[str]:
    return [member.value for member in enum_cls]


def enum_column(enum_cls: Type[PyEnum], **kwargs) -> Column:
    """
    Stores a Python `Enum` by its lower-case value in a plain VARCHAR column
    with a CHECK constraint, so the schema is identical on SQLite and PostgreSQL.
    """
    return Column(
        Enum(enum_cls, native_enum=False, values_callable=_enum_values, validate_strings=True, length=32),
        **kwargs,
    )


class SoftDeleteMixin:
    """
    Soft deletion is modelled as an explicit lifecycle state rather than a loose
    boolean. Repositories exclude archived rows through `query_helpers.live()`.
    """
    state = enum_column(RecordState, nullable=False, default=RecordState.ACTIVE, index=True)

    @property
    def is_active(self) -> bool:
        return self.state == RecordState.ACTIVE

    def archive(self) -> None:
        self.state = RecordState.ARCHIVED
