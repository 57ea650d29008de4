"""SQLite connection and schema for the book library."""

import sqlite3
from pathlib import Path


class DatabaseManager:
    """Owns the SQLite connection and the library schema."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        # Calls are dispatched through asyncio.to_thread, one at a time
        self.connection = sqlite3.connect(self.db_path, check_same_thread=False)
        self.connection.row_factory = sqlite3.Row

    def ensure_schema(self) -> None:
        """Create tables and indexes if they do not exist."""
        cur = self.connection.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS library_books (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL DEFAULT 'Unknown',
                author TEXT NOT NULL DEFAULT 'Unknown',
                file_path TEXT NOT NULL UNIQUE,
                cover_ref TEXT,
                date_added REAL NOT NULL,
                last_opened REAL NOT NULL,
                progress REAL NOT NULL DEFAULT 0,
                last_location TEXT
            );
            """
        )
        cur.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_library_books_last_opened
            ON library_books(last_opened);
            """
        )
        self.connection.commit()

    def close(self) -> None:
        self.connection.close()
