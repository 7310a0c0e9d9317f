"""
Module: bank_kernel.db.base
Responsibility: Declarative base class for all SQLAlchemy ORM models and the
    type annotation map that keeps column types consistent.
Architecture position: Kernel > DB.  This is the lowest-level import target
    within the kernel.  ALL model files import from here.  This module MUST NOT
    import from models/, services/, or domain/.

Invariants enforced:
    - Caller-supplied primary keys: unlike surrogate-key schemas, customers
      and accounts carry business identifiers that are also their primary
      keys, so Base declares no default ``id`` column.
    - int maps to BigInteger, float to Float, date to Date.

Failure modes:
    - IntegrityError if a model attempts to INSERT a duplicate primary key.
"""

from datetime import date
from typing import ClassVar

from sqlalchemy import BigInteger, Date, Float
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Declarative base for all SQLAlchemy models.

    Contract:
        Every ORM model in the system inherits from Base.  Lifecycle hooks
        and storage-boundary field rules are attached to Base with
        ``propagate=True`` so they apply to every mapped subclass.
    """

    type_annotation_map: ClassVar[dict] = {
        int: BigInteger,
        float: Float,
        date: Date,
    }

    # Name used by field rules and audit records; defaults to the class name.
    __entity_type__: ClassVar[str | None] = None

    @classmethod
    def entity_type(cls) -> str:
        return cls.__entity_type__ or cls.__name__

    def primary_key_value(self) -> str:
        """Primary key of this instance rendered as a string (for logs/errors)."""
        from sqlalchemy import inspect

        identity = inspect(type(self)).primary_key_from_instance(self)
        return ",".join(str(part) for part in identity)
