"""Shared fixtures: mock DB-API connections and providers built on them."""

from unittest.mock import MagicMock

import pytest

from fluentdb.transactions import TransactionalConnectionProvider


def make_connection(name="conn"):
    """Create a mock DB-API connection."""
    conn = MagicMock(name=name)
    conn.autocommit = True
    return conn


@pytest.fixture
def data_source():
    """Zero-argument connection factory that records every connection it opens."""
    opened = []

    def _connect():
        conn = make_connection(f"conn{len(opened) + 1}")
        opened.append(conn)
        return conn

    factory = MagicMock(side_effect=_connect)
    factory.opened = opened
    return factory


@pytest.fixture
def provider(data_source):
    return TransactionalConnectionProvider.from_data_source(data_source)
