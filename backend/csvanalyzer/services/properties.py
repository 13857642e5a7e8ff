"""
Contact Property Lookup

Known contact properties (name + type) let the analyzer map CSV columns
onto existing fields. The lookup is advisory: any connectivity,
authorization or query failure degrades to "no known properties" and
analysis carries on.

Sources implement the PropertySource protocol. The PostgreSQL source
resolves the account's pool database through the global `app` table and
reads `contact_meta` from it.
"""

import asyncio
import logging
from typing import List, Optional, Protocol, Sequence

import asyncpg

from ..core.config import DbSettings, settings
from ..core.errors import DatabaseError
from ..models.types import ContactProperty, DataType

logger = logging.getLogger("csvanalyzer.properties")

# Namespace of static contact properties in contact_meta
STATIC_NAMESPACE = 0


class PropertySource(Protocol):
    def fetch_properties(self, account_id: int) -> List[ContactProperty]:
        ...


class StaticPropertySource:
    """In-memory property source, for tests and offline use."""

    def __init__(self, properties: Sequence[ContactProperty] = ()):
        self._properties = list(properties)

    def fetch_properties(self, account_id: int) -> List[ContactProperty]:
        return list(self._properties)


class PostgresPropertySource:
    """Reads contact properties for an account from its pool database."""

    def __init__(self, db: DbSettings, timeout: float = settings.DB_CONNECT_TIMEOUT):
        self.db = db
        self.timeout = timeout

    def fetch_properties(self, account_id: int) -> List[ContactProperty]:
        return asyncio.run(self._fetch(account_id))

    async def _connect(self, host: str, database: str) -> "asyncpg.Connection":
        # statement_cache_size=0 keeps asyncpg usable behind PgBouncer
        return await asyncpg.connect(
            host=host,
            port=self.db.port,
            database=database,
            user=self.db.user,
            password=self.db.password,
            timeout=self.timeout,
            command_timeout=self.timeout,
            statement_cache_size=0,
        )

    async def _fetch(self, account_id: int) -> List[ContactProperty]:
        conn = await self._connect(self.db.host, self.db.database)
        try:
            app = await conn.fetchrow(
                "SELECT pool, ip_rw, db_version FROM app WHERE id = $1", account_id
            )
        finally:
            await conn.close()

        if app is None:
            raise DatabaseError(f"No app row for account {account_id}")
        if app["pool"] is None or app["ip_rw"] is None:
            raise DatabaseError(f"Incomplete pool information for account {account_id}")

        pool_name = f"p{int(app['pool']):07d}"
        logger.debug("Account %s uses pool %s on %s", account_id, pool_name, app["ip_rw"])

        pool_conn = await self._connect(app["ip_rw"], pool_name)
        try:
            rows = await pool_conn.fetch(
                "SELECT name, datatype FROM contact_meta WHERE namespace = $1",
                STATIC_NAMESPACE,
            )
        finally:
            await pool_conn.close()

        properties = []
        for row in rows:
            if row["name"] is None or row["datatype"] is None:
                raise DatabaseError("contact_meta row with NULL name or datatype")
            properties.append(
                ContactProperty(name=row["name"], datatype=DataType.from_code(int(row["datatype"])))
            )
        return properties


def fetch_properties_or_empty(
    source: Optional[PropertySource],
    account_id: Optional[int],
) -> List[ContactProperty]:
    """Fetch properties, turning every failure into an empty list."""
    if source is None or account_id is None:
        return []
    try:
        properties = source.fetch_properties(account_id)
    except Exception as e:
        logger.warning("Contact properties unavailable for account %s: %s", account_id, e)
        return []
    logger.debug("Loaded %d contact properties for account %s", len(properties), account_id)
    return properties


def match_property(header: str, properties: Sequence[ContactProperty]) -> Optional[ContactProperty]:
    """Find the property whose name equals the header, ignoring case."""
    lowered = header.lower()
    return next((p for p in properties if p.name.lower() == lowered), None)
