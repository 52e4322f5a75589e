from __future__ import annotations

import logging
import re

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from pygoose_paginate.utils.exceptions import NotConnected

logger = logging.getLogger(__name__)

_DB_NAME_RE = re.compile(r"^[a-zA-Z0-9_-]+$")

_clients: dict[str, AsyncMongoClient] = {}
_databases: dict[str, AsyncDatabase] = {}


async def connect(uri: str, *, alias: str = "default", **client_kwargs) -> AsyncDatabase:
    """Open a client for ``uri`` and register its database under ``alias``.

    Args:
        uri: MongoDB URI including the database name.
        alias: Registry key, for models that live in another database.
        **client_kwargs: Passed through to ``AsyncMongoClient``.

    Raises:
        ValueError: If the URI carries no usable database name.
    """
    db_name = parse_db_name(uri)
    try:
        client = AsyncMongoClient(uri, **client_kwargs)
    except Exception as e:
        logger.error("Failed to create MongoDB client for alias '%s': %s", alias, e)
        raise

    _clients[alias] = client
    _databases[alias] = client[db_name]
    logger.info("Connected to database '%s' with alias '%s'", db_name, alias)
    return _databases[alias]


async def disconnect(alias: str = "default") -> None:
    """Close and forget the connection registered under ``alias``."""
    client = _clients.pop(alias, None)
    _databases.pop(alias, None)
    if client is not None:
        await client.close()
        logger.info("Disconnected from MongoDB (alias: '%s')", alias)


def get_database(alias: str = "default") -> AsyncDatabase:
    """Return the registered database.

    Raises:
        NotConnected: If nothing is registered under ``alias``.
    """
    try:
        return _databases[alias]
    except KeyError:
        raise NotConnected(
            f"No connection registered for alias '{alias}'. Call connect() first."
        ) from None


def get_client(alias: str = "default") -> AsyncMongoClient:
    try:
        return _clients[alias]
    except KeyError:
        raise NotConnected(
            f"No client registered for alias '{alias}'. Call connect() first."
        ) from None


def parse_db_name(uri: str) -> str:
    """Extract and validate the database name from a MongoDB URI.

    Raises:
        ValueError: If the URI is empty, has no path or the name is invalid.
    """
    if not uri:
        raise ValueError("MongoDB URI cannot be empty")

    _, sep, rest = uri.partition("://")
    if not sep or "/" not in rest:
        raise ValueError(
            "Cannot extract database name from URI. "
            "Expected format: mongodb://host:port/database"
        )

    db_name = rest.split("?", 1)[0].rsplit("/", 1)[-1]
    if not db_name:
        raise ValueError(
            "Cannot extract database name from URI. "
            "Expected format: mongodb://host:port/database"
        )
    if not _DB_NAME_RE.match(db_name):
        raise ValueError(
            f"Invalid database name '{db_name}'. "
            "Database names can only contain letters, numbers, underscores, and hyphens."
        )

    logger.debug("Extracted database name: %s", db_name)
    return db_name
