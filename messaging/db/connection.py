"""Database connection and schema management."""

import duckdb
from contextlib import contextmanager
from typing import Iterator, Optional
from pathlib import Path
from ..utils.logger import get_app_logger


class DatabaseConnection:
    """DuckDB connection manager."""

    def __init__(self, db_path: str = "./data/messaging.db"):
        """
        Initialize database connection.

        Args:
            db_path: Path to DuckDB database file, or ":memory:"
        """
        self.db_path = db_path
        self.logger = get_app_logger()
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
        except Exception as e:
            self.logger.error(f"Failed to connect to DuckDB: {e}")
            raise

    def _init_schema(self):
        """Initialize database schema."""
        try:
            # Read-only to this service; populated by the profile owner
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS user_profiles (
                    user_id VARCHAR PRIMARY KEY,
                    display_name VARCHAR,
                    avatar_url VARCHAR,
                    handle VARCHAR
                )
            """)

            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS conversations (
                    id VARCHAR PRIMARY KEY,
                    type VARCHAR NOT NULL,
                    title VARCHAR,
                    created_by VARCHAR,
                    created_at TIMESTAMP NOT NULL,
                    last_message_at TIMESTAMP NOT NULL,
                    last_message_preview VARCHAR
                )
            """)

            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS conversation_participants (
                    conversation_id VARCHAR NOT NULL,
                    user_id VARCHAR NOT NULL,
                    role VARCHAR NOT NULL,
                    last_read_at TIMESTAMP,
                    joined_at TIMESTAMP NOT NULL,
                    PRIMARY KEY (conversation_id, user_id)
                )
            """)

            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS messages (
                    id VARCHAR PRIMARY KEY,
                    conversation_id VARCHAR NOT NULL,
                    sender_id VARCHAR,
                    content VARCHAR,
                    message_type VARCHAR NOT NULL DEFAULT 'text',
                    media_url VARCHAR,
                    shared_content_id VARCHAR,
                    shared_content_type VARCHAR,
                    is_edited BOOLEAN DEFAULT FALSE,
                    is_deleted BOOLEAN DEFAULT FALSE,
                    created_at TIMESTAMP NOT NULL
                )
            """)

            # Columns that get UPDATEd (last_message_at, last_read_at) stay unindexed
            self.conn.execute("CREATE INDEX IF NOT EXISTS idx_participants_user ON conversation_participants(user_id)")
            self.conn.execute("CREATE INDEX IF NOT EXISTS idx_messages_conversation ON messages(conversation_id)")
            self.conn.execute("CREATE INDEX IF NOT EXISTS idx_messages_conversation_created ON messages(conversation_id, created_at)")

            self.logger.info("Database schema initialized successfully")

        except Exception as e:
            self.logger.error(f"Failed to initialize database schema: {e}")
            raise

    @contextmanager
    def transaction(self) -> Iterator[duckdb.DuckDBPyConnection]:
        """
        Run a block of statements atomically.

        Commits when the block exits normally and rolls back on any
        exception, which is re-raised.
        """
        self.conn.begin()
        try:
            yield self.conn
        except BaseException:
            self.conn.rollback()
            self.logger.debug("Transaction rolled back")
            raise
        else:
            self.conn.commit()

    def close(self):
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.logger.info("Database connection closed")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
