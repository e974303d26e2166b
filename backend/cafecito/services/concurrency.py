# Overview: Service-layer operations for concurrency; single-row conditional updates and retry handling.

from __future__ import annotations

import time

from sqlalchemy.exc import OperationalError

from ..extensions import db


def run_with_retry(func, *, attempts: int = 3, backoff_base: float = 0.1):
    """
    Execute a DB operation with retry on concurrency-related failures.

    Retries on OperationalError (deadlocks, "database is locked"), where the
    statement did not take effect.
    """
    last_exc = None
    for attempt in range(attempts):
        try:
            return func()
        except OperationalError as exc:
            db.session.rollback()
            last_exc = exc
            if attempt >= attempts - 1:
                raise
            time.sleep(backoff_base * (2 ** attempt))
    if last_exc:
        raise last_exc


def conditional_update(stmt, *, retry: bool = True) -> bool:
    """
    Execute a single-row ``UPDATE ... WHERE <precondition>`` and commit it.

    The precondition and the mutation are evaluated atomically by the database,
    so no separate read is needed: the statement either matched one row
    (True) or the precondition did not hold (False).

    Each call is its own transaction. Callers that need to undo it later
    must issue the inverse statement themselves.

    retry=False runs the statement exactly once (used for compensating and
    restoring updates, which are never retried automatically).
    """
    def _op() -> bool:
        result = db.session.execute(stmt.execution_options(synchronize_session=False))
        db.session.commit()
        return result.rowcount == 1

    return run_with_retry(_op, attempts=3 if retry else 1)
