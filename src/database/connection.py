"""
Database connection functions based on Psycopg 3 project.
"""

import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

import psycopg
from psycopg.rows import dict_row

__all__ = ["get_connection", "yield_cursor", "transaction"]


async def get_connection() -> psycopg.AsyncConnection:
    """
    Get a connection to a PostgreSQL database.

    The connection includes a row factory to return database rows as dictionaries
    and a cursor factory that ensures client-side binding. See the
    [documentation](https://www.psycopg.org/psycopg3/docs/basic/from_pg2.html#server-side-binding)
    for details.

    Returns
    -------
    conn : psycopg.AsyncConnection
        A database connection object row and cursor factory settings.
    """
    conn = await psycopg.AsyncConnection.connect(
        conninfo=os.environ["DB_CONNECTION"],
        autocommit=True,
        row_factory=dict_row,
        cursor_factory=psycopg.AsyncClientCursor,
    )
    return conn


async def yield_cursor() -> AsyncIterator[psycopg.AsyncCursor]:
    """
    Yield a PostgreSQL database cursor object to be used for dependency injection.

    Reads on the cursor run in autocommit mode; writes are grouped with
    `transaction`.

    Yields
    ------
    cursor : psycopg.AsyncCursor
        A database cursor object.
    """
    async with await get_connection() as conn:
        async with conn.cursor() as cursor:
            yield cursor


@asynccontextmanager
async def transaction(cursor: psycopg.AsyncCursor) -> AsyncIterator[psycopg.AsyncCursor]:
    """
    Run the enclosed statements in a single database transaction.

    The transaction is committed when the block exits normally and rolled back
    when it exits with any exception, including cancellation of the request.

    Parameters
    ----------
    cursor : psycopg.AsyncCursor
        A database cursor whose connection hosts the transaction.

    Yields
    ------
    cursor : psycopg.AsyncCursor
        The same cursor, now inside the transaction.
    """
    async with cursor.connection.transaction():
        yield cursor
