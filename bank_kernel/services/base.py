"""
BaseService -- abstract base for all kernel services.

Responsibility:
    Provides the common constructor and session-handling contract for
    every service in the kernel layer.  All concrete services inherit
    from BaseService, receiving a SQLAlchemy ``Session`` that they use
    via the persistence gateway -- never ``session.commit()``.

Invariants enforced:
    Transaction boundaries: services flush within the caller's
    transaction and never commit or rollback themselves.  The caller
    (BankingFacade, session_scope, or test harness) owns commit/rollback.

    Statelessness: a service holds only its session and gateway; nothing
    is carried from one call to the next.
"""

from abc import ABC
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from bank_kernel.db.base import Base
from bank_kernel.db.gateway import PersistenceGateway

ModelType = TypeVar("ModelType", bound=Base)


class BaseService(ABC, Generic[ModelType]):
    """
    Abstract base class for all kernel services.

    Contract:
        Accepts a SQLAlchemy ``Session`` from the caller and persists
        changes with ``flush()`` inside the active transaction.

    Non-goals:
        - Does NOT manage transaction lifecycle (commit/rollback).
    """

    def __init__(self, session: Session):
        """
        Initialize the service.

        Args:
            session: SQLAlchemy session for database operations.
        """
        self.session = session
        self.gateway = PersistenceGateway(session)
