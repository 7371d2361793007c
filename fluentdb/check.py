"""Database connectivity check: run one statement inside a transaction."""

import argparse
import logging
import sys

from psycopg2.extras import RealDictCursor

from .interceptor import TransactionInterceptor
from .log_config import setup_logging
from .transactions import connection_provider_from_env

logger = logging.getLogger(__name__)


def fetch_rows(connection, sql: str) -> list:
    with connection.cursor(cursor_factory=RealDictCursor) as cur:
        cur.execute(sql)
        return cur.fetchall() if cur.description else []


def run_check(sql: str = "SELECT 1 AS ok") -> list:
    """Execute ``sql`` in a transaction on the DATABASE_URL database."""
    provider = connection_provider_from_env()
    with TransactionInterceptor(provider).transaction():
        return provider.provide(lambda conn: fetch_rows(conn, sql))


def main():
    """CLI entry point for the connectivity check."""
    parser = argparse.ArgumentParser(description="Check database connectivity")
    parser.add_argument("--sql", default="SELECT 1 AS ok", help="Statement to execute")
    parser.add_argument("--verbose", action="store_true", help="Log transaction lifecycle")
    args = parser.parse_args()

    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        rows = run_check(args.sql)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    logger.info("Database OK")
    for row in rows:
        print(dict(row))


if __name__ == "__main__":
    main()
