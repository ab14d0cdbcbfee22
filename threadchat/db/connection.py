"""Database connection and schema management."""

import duckdb
from typing import Optional
from pathlib import Path
from ..utils.logger import get_component_logger


class DatabaseConnection:
    """DuckDB connection manager."""

    def __init__(self, db_path: str = "./data/threadchat.db"):
        """
        Initialize database connection.

        Args:
            db_path: Path to DuckDB database file, or ":memory:"
        """
        self.db_path = db_path
        self.logger = get_component_logger("db")
        self.conn: Optional[duckdb.DuckDBPyConnection] = None

        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self._connect()
        self._init_schema()

    def _connect(self):
        """Connect to DuckDB database."""
        try:
            self.conn = duckdb.connect(self.db_path)
            self.logger.info(f"Connected to DuckDB at {self.db_path}")
        except duckdb.Error as e:
            self.logger.error(f"Failed to connect to DuckDB: {e}")
            raise

    def _init_schema(self):
        """Initialize database schema."""
        try:
            # Messages live inline as a JSON array; the row is saved whole.
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS conversations (
                    id VARCHAR PRIMARY KEY,
                    owner_id VARCHAR NOT NULL,
                    messages JSON NOT NULL,
                    is_active BOOLEAN NOT NULL DEFAULT TRUE,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                )
            """)

            self.conn.execute("CREATE INDEX IF NOT EXISTS idx_conversations_owner ON conversations(owner_id)")

            self.logger.info("Database schema initialized successfully")

        except duckdb.Error as e:
            self.logger.error(f"Failed to initialize database schema: {e}")
            raise

    def close(self):
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.logger.info("Database connection closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
