"""Connection sources: hand a raw DB-API connection to a receiver callback."""

import os
from typing import Any, Callable

import psycopg2

Receiver = Callable[[Any], Any]


def get_connection():
    """Create database connection from DATABASE_URL."""
    database_url = os.environ.get("DATABASE_URL")
    if not database_url:
        raise ValueError("DATABASE_URL must be set")
    return psycopg2.connect(database_url)


class DataSourceConnectionProvider:
    """Open a connection from a zero-argument factory and pass it on.

    The connection is never closed here; whoever called ``provide`` owns it.
    """

    def __init__(self, data_source: Callable[[], Any]):
        self.data_source = data_source

    def provide(self, receiver: Receiver):
        return receiver(self.data_source())
