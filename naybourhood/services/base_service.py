"""Session-owning base for services that write buyers."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from naybourhood.core.exceptions import DatabaseError
from naybourhood.database import db as database

logger = logging.getLogger(__name__)


class BaseService:
    """Wraps a SQLAlchemy session.

    A session passed in by the caller is borrowed and left open on exit;
    one created here is closed with the service.
    """

    def __init__(self, db: Session | None = None) -> None:
        self._owns_session = db is None
        self.db = db or database.new_session()

    def commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def persist(self, instance: object, operation: str) -> None:
        """Commit and refresh `instance`, surfacing failures as `DatabaseError`."""
        try:
            self.commit()
            self.db.refresh(instance)
        except SQLAlchemyError as exc:
            logger.error(
                "database.write_failed",
                extra={"event": "database.write_failed", "operation": operation, "error": str(exc)},
            )
            raise DatabaseError(f"{operation} failed: {exc}") from exc

    def rollback(self) -> None:
        self.db.rollback()

    def close(self) -> None:
        if self._owns_session:
            self.db.close()

    def __enter__(self) -> "BaseService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type:
            self.rollback()
        self.close()
