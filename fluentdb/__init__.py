"""Thread-local transaction propagation over DB-API connections."""

from .connection import DataSourceConnectionProvider, get_connection
from .errors import (
    DB_API_ERRORS,
    FluentDbError,
    NoActiveTransactionError,
    TransactionAlreadyActiveError,
)
from .interceptor import TransactionInterceptor, transactional
from .transactions import TransactionalConnectionProvider, connection_provider_from_env

__all__ = [
    "DB_API_ERRORS",
    "DataSourceConnectionProvider",
    "FluentDbError",
    "NoActiveTransactionError",
    "TransactionAlreadyActiveError",
    "TransactionInterceptor",
    "TransactionalConnectionProvider",
    "connection_provider_from_env",
    "get_connection",
    "transactional",
]
