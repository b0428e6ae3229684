"""Neo4j access for the club roster store."""

import os
from typing import Any, Optional

from neo4j import Driver, GraphDatabase, RoutingControl
from neo4j.exceptions import ClientError

from .logging import get_logger

logger = get_logger(__name__)


# Uniqueness constraints and lookup indexes for the roster graph
SCHEMA = [
    "CREATE CONSTRAINT player_id IF NOT EXISTS FOR (p:Player) REQUIRE p.player_id IS UNIQUE",
    "CREATE CONSTRAINT performance_id IF NOT EXISTS FOR (r:Performance) REQUIRE r.performance_id IS UNIQUE",
    "CREATE CONSTRAINT unavailability_id IF NOT EXISTS FOR (u:Unavailability) REQUIRE u.unavailability_id IS UNIQUE",
    "CREATE INDEX player_last_name IF NOT EXISTS FOR (p:Player) ON (p.last_name)",
    "CREATE INDEX performance_season IF NOT EXISTS FOR (r:Performance) ON (r.season)",
    "CREATE INDEX performance_date IF NOT EXISTS FOR (r:Performance) ON (r.date)",
]


class Neo4jDatabase:
    """Owns the Neo4j driver and runs Cypher for the repository.

    Connection settings default to ``NEO4J_URI``, ``NEO4J_USER``,
    ``NEO4J_PASSWORD`` and ``NEO4J_DATABASE``.
    """

    def __init__(
        self,
        uri: Optional[str] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        database: Optional[str] = None,
    ):
        self.uri = uri or os.getenv("NEO4J_URI", "bolt://localhost:7687")
        self.user = user or os.getenv("NEO4J_USER", "neo4j")
        self.password = password or os.getenv("NEO4J_PASSWORD", "password")
        self.database = database or os.getenv("NEO4J_DATABASE") or None
        self._driver: Optional[Driver] = None

    def connect(self) -> None:
        """Open the driver and check the server answers."""
        if self._driver is not None:
            return
        logger.info("Connecting to Neo4j at {}", self.uri)
        driver = GraphDatabase.driver(self.uri, auth=(self.user, self.password))
        try:
            driver.verify_connectivity()
        except Exception:
            driver.close()
            logger.error("Neo4j at {} is not reachable", self.uri)
            raise
        self._driver = driver

    def close(self) -> None:
        if self._driver:
            self._driver.close()
            self._driver = None

    @property
    def driver(self) -> Driver:
        if self._driver is None:
            self.connect()
        return self._driver  # type: ignore

    def execute_query(
        self, query: str, parameters: Optional[dict[str, Any]] = None
    ) -> list[dict[str, Any]]:
        """Run a read query and return its rows as dicts."""
        records, _, _ = self.driver.execute_query(
            query,
            parameters or {},
            routing_=RoutingControl.READ,
            database_=self.database,
        )
        return [record.data() for record in records]

    def execute_write(
        self, query: str, parameters: Optional[dict[str, Any]] = None
    ) -> None:
        self.driver.execute_query(
            query,
            parameters or {},
            routing_=RoutingControl.WRITE,
            database_=self.database,
        )

    def clear_database(self) -> None:
        """Delete every node and relationship."""
        self.execute_write("MATCH (n) DETACH DELETE n")

    def ensure_schema(self) -> None:
        """Create the roster constraints and indexes if they are missing."""
        for statement in SCHEMA:
            try:
                self.execute_write(statement)
            except ClientError as exc:
                logger.debug("Schema statement skipped ({}): {}", exc.code, statement)
