"""
BaseService -- abstract base for kernel services that write.

Responsibility:
    Holds the caller's SQLAlchemy ``Session`` and the one sanctioned way of
    pushing changes to the database: ``_flush``, which turns driver/ORM
    failures into StoreError.

Architecture position:
    Kernel > Services -- imperative shell infrastructure.

Invariants enforced:
    - Services flush within the caller's transaction and never commit or
      roll back themselves.  The caller (``session_scope()``, an
      application service, or a test fixture) owns commit/rollback, so a
      failed write leaves nothing behind once the caller rolls back.

Failure modes:
    - StoreError (chaining the SQLAlchemyError) when a flush fails.
"""

from abc import ABC

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledger_kernel.exceptions import StoreError
from ledger_kernel.logging_config import get_logger

logger = get_logger("services.base")


class BaseService(ABC):
    """
    Abstract base class for kernel services.

    Guarantees:
        - The service never calls ``session.commit()`` or
          ``session.rollback()``.
    """

    def __init__(self, session: Session):
        self.session = session

    def _flush(self, operation: str) -> None:
        """
        Flush pending changes.

        Raises:
            StoreError: If the database rejects the flush.  The session must
                be rolled back by its owner before it is used again.
        """
        try:
            self.session.flush()
        except SQLAlchemyError as exc:
            logger.error(
                "store_write_failed",
                extra={"operation": operation, "error": type(exc).__name__},
            )
            raise StoreError(operation, str(exc)) from exc
