from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class ServiceBase:
    def __init__(self, session: Session):
        self._session = session

    @contextmanager
    def transaction(self, label: str = "operation") -> Iterator[Session]:
        """Run the enclosed writes as one unit: commit on success, roll back on any error."""
        try:
            yield self._session
            self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.error("Storage failure during %s: %s", label, e)
            raise PersistenceError(f"Storage failure during {label}.", code="PERSISTENCE_FAILURE") from e
        except Exception as e:
            self._session.rollback()
            logger.error("Error during %s: %s", label, e)
            raise
