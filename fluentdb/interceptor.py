"""Transaction boundaries around a unit of work."""

import functools
import logging
from contextlib import contextmanager

from .transactions import TransactionalConnectionProvider

logger = logging.getLogger(__name__)


class TransactionInterceptor:
    """Start, finish and release a transaction around a unit of work.

    A unit entered while the thread already has a transaction joins it and
    leaves commit/rollback to the outermost unit.

    Args:
        provider: The transactional provider the unit's queries go through.
        rollback_on: Exception types that roll the transaction back.
        ignore: Exception types that commit anyway, even if matched by
            ``rollback_on``. The exception is still re-raised.
    """

    def __init__(
        self,
        provider: TransactionalConnectionProvider,
        rollback_on: tuple = (Exception,),
        ignore: tuple = (),
    ):
        self.provider = provider
        self.rollback_on = rollback_on
        self.ignore = ignore

    @contextmanager
    def transaction(self):
        if self.provider.has_active_transaction():
            yield self.provider
            return

        self.provider.start_new_transaction()
        try:
            yield self.provider
        except Exception as e:
            if self._rolls_back(e):
                logger.debug("Rolling back on %s", type(e).__name__)
                self.provider.rollback_active_transaction()
            else:
                self.provider.commit_active_transaction(ignored_error=e)
            raise
        else:
            self.provider.commit_active_transaction()
        finally:
            self.provider.remove_active_transaction_connection()

    def invoke(self, fn, *args, **kwargs):
        with self.transaction():
            return fn(*args, **kwargs)

    def __call__(self, fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            return self.invoke(fn, *args, **kwargs)
        return wrapper

    def _rolls_back(self, error: Exception) -> bool:
        return isinstance(error, self.rollback_on) and not isinstance(error, self.ignore)


def transactional(provider: TransactionalConnectionProvider, rollback_on: tuple = (Exception,), ignore: tuple = ()):
    """Decorator running the wrapped function in a transaction on ``provider``."""
    return TransactionInterceptor(provider, rollback_on=rollback_on, ignore=ignore)
