"""
Open-connection counter.

Tracks how many pooled connections are currently checked out by sessions.
The count lives on a ConnectionCounter instance owned by the engine module,
not in class-level state, and every change happens under a lock.
"""

import threading

from sqlalchemy import event
from sqlalchemy.engine import Engine

from bank_kernel.logging_config import get_logger

logger = get_logger("db.connections")


class ConnectionCounter:
    """Lock-protected count of open (checked-out) connections."""

    def __init__(self):
        self._lock = threading.Lock()
        self._open = 0
        self._peak = 0

    @property
    def open_connections(self) -> int:
        with self._lock:
            return self._open

    @property
    def peak_connections(self) -> int:
        with self._lock:
            return self._peak

    def opened(self) -> int:
        with self._lock:
            self._open += 1
            self._peak = max(self._peak, self._open)
            return self._open

    def closed(self) -> int:
        with self._lock:
            if self._open > 0:
                self._open -= 1
            return self._open

    def attach(self, engine: Engine) -> None:
        """Count checkouts and checkins on ``engine``'s pool."""
        event.listen(engine, "checkout", self._on_checkout)
        event.listen(engine, "checkin", self._on_checkin)

    def _on_checkout(self, dbapi_connection, connection_record, connection_proxy):
        count = self.opened()
        logger.debug("connection_opened", extra={"open_connections": count})

    def _on_checkin(self, dbapi_connection, connection_record):
        count = self.closed()
        logger.debug("connection_closed", extra={"open_connections": count})
