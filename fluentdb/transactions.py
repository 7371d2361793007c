"""Thread-local transaction propagation over a connection provider.

Within a transaction every ``provide`` call on the same thread receives the
same connection, so nested operations commit or roll back together. Outside a
transaction each call gets its own connection, closed when the call returns.

The transaction boundary itself (start, commit/rollback, remove) is driven by
``fluentdb.interceptor.TransactionInterceptor``.
"""

import logging
import threading
from typing import Any, Callable, Optional

from .connection import DataSourceConnectionProvider, Receiver, get_connection
from .errors import (
    DB_API_ERRORS,
    FluentDbError,
    NoActiveTransactionError,
    TransactionAlreadyActiveError,
)

logger = logging.getLogger(__name__)


class _TransactionSlot(threading.local):
    connection = None


class TransactionalConnectionProvider:
    """Route connection requests to the thread's transaction, if any.

    Args:
        connection_provider: Object with ``provide(receiver)`` that leaves
            connections open after handing them over. Closing them is the
            job of this class.
        sql_errors: Driver exception classes wrapped into FluentDbError.
    """

    def __init__(self, connection_provider, sql_errors: tuple = DB_API_ERRORS):
        self._connection_provider = connection_provider
        self._sql_errors = sql_errors
        self._slot = _TransactionSlot()

    @classmethod
    def from_data_source(cls, data_source: Callable[[], Any], **kwargs) -> "TransactionalConnectionProvider":
        """Build a provider on a plain connection factory (non transaction-aware)."""
        return cls(DataSourceConnectionProvider(data_source), **kwargs)

    def provide(self, receiver: Receiver):
        """Pass a connection to ``receiver`` and return its result."""
        current = self._slot.connection
        if current is not None:
            # closed by remove_active_transaction_connection()
            return receiver(current)

        connection = self._fetch_new_connection()
        try:
            return receiver(connection)
        finally:
            self._close_quietly(connection)

    def has_active_transaction(self) -> bool:
        return self._slot.connection is not None

    def start_new_transaction(self) -> None:
        if self.has_active_transaction():
            raise TransactionAlreadyActiveError(
                "A transaction is already active on thread %s" % threading.current_thread().name
            )
        try:
            connection = self._fetch_new_connection()
        except FluentDbError as e:
            raise FluentDbError("Error initializing transaction") from e
        try:
            connection.autocommit = False
        except self._sql_errors as e:
            self._close_quietly(connection)
            raise FluentDbError("Error initializing transaction") from e
        self._slot.connection = connection
        logger.debug("Started transaction on thread %s", threading.current_thread().name)

    def commit_active_transaction(self, ignored_error: Optional[BaseException] = None) -> None:
        """Commit the thread's transaction.

        When ``ignored_error`` is given an error is already propagating, so a
        commit failure is logged instead of raised.
        """
        connection = self._active_connection()
        if ignored_error is not None:
            try:
                connection.commit()
            except Exception:
                logger.warning("Error committing transaction while handling %r", ignored_error, exc_info=True)
                return
        else:
            try:
                connection.commit()
            except self._sql_errors as e:
                raise FluentDbError("Error committing transaction") from e
        logger.debug("Committed transaction on thread %s", threading.current_thread().name)

    def rollback_active_transaction(self) -> None:
        connection = self._active_connection()
        try:
            connection.rollback()
        except Exception:
            logger.warning("Error rolling back transaction", exc_info=True)
            return
        logger.debug("Rolled back transaction on thread %s", threading.current_thread().name)

    def remove_active_transaction_connection(self) -> None:
        """Close the transaction connection and clear the slot. Safe to repeat."""
        connection = self._slot.connection
        if connection is None:
            return
        self._slot.connection = None
        self._close_quietly(connection)
        logger.debug("Released transaction connection on thread %s", threading.current_thread().name)

    def _active_connection(self):
        connection = self._slot.connection
        if connection is None:
            raise NoActiveTransactionError(
                "No active transaction on thread %s" % threading.current_thread().name
            )
        return connection

    def _fetch_new_connection(self):
        received = []
        try:
            self._connection_provider.provide(received.append)
        except self._sql_errors as e:
            raise FluentDbError("Error acquiring connection") from e
        if not received:
            raise FluentDbError("Connection provider did not supply a connection")
        return received[0]

    @staticmethod
    def _close_quietly(connection) -> None:
        try:
            connection.close()
        except Exception:
            logger.warning("Error closing connection", exc_info=True)


def connection_provider_from_env() -> TransactionalConnectionProvider:
    """Transactional provider on DATABASE_URL connections."""
    return TransactionalConnectionProvider.from_data_source(get_connection)
