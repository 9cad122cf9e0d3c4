"""
Shared plumbing for state-changing services.
"""

import logging
from contextlib import contextmanager

from django.db import DatabaseError, IntegrityError, transaction

from stockflow.exceptions import DuplicateError, StorageError

logger = logging.getLogger('stockflow')


@contextmanager
def atomic_write(operation: str, duplicate: DuplicateError | None = None):
    """
    Run a write unit under transaction.atomic().

    Database failures surface as StorageError (or `duplicate`, for an
    IntegrityError when the caller knows which unique field is at stake).
    Nothing is retried: a retried ledger write could apply a delta twice.
    """
    try:
        with transaction.atomic():
            yield
    except IntegrityError as exc:
        if duplicate is not None:
            raise duplicate from exc
        logger.error("stockflow.storage.failed", extra={"operation": operation, "error": str(exc)})
        raise StorageError(operation=operation, detail=str(exc)) from exc
    except DatabaseError as exc:
        logger.error("stockflow.storage.failed", extra={"operation": operation, "error": str(exc)})
        raise StorageError(operation=operation, detail=str(exc)) from exc
