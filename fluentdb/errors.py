"""Exception types raised by the connection and transaction layer."""

import sqlite3

import psycopg2

# Driver exceptions wrapped into FluentDbError by default
DB_API_ERRORS = (psycopg2.Error, sqlite3.Error)


class FluentDbError(RuntimeError):
    """A driver error raised while acquiring, preparing or committing a connection."""


class NoActiveTransactionError(LookupError):
    """Commit or rollback was requested on a thread with no active transaction."""


class TransactionAlreadyActiveError(RuntimeError):
    """A transaction was started on a thread that already has one."""
