"""Data access layer for library book persistence."""

import hashlib
import sqlite3
import time
from pathlib import Path
from typing import Callable, List, Optional

from epilogue.core import BookMetadata, LibraryEntry

from .persistence_backend import PersistenceError


def book_id_for(file_path: Path) -> str:
    """Stable book id: SHA-1 of the canonical file path."""
    canonical = Path(file_path).resolve()
    return hashlib.sha1(str(canonical).encode("utf-8")).hexdigest()


class LibraryRepository:
    """Manages persistence of library books in the database.

    Write operations raise PersistenceError rather than returning None, so a
    returned LibraryEntry always reflects what is stored. Lookups of unknown
    ids return None, and updates or removals of unknown ids are no-ops.
    """

    def __init__(
        self,
        connection: sqlite3.Connection,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize repository with database connection.

        Args:
            connection: SQLite connection with the library schema created.
            clock: Source of Unix timestamps for recency fields.

        Raises:
            PersistenceError: If connection is None.
        """
        if connection is None:
            raise PersistenceError("Database connection required")
        self.connection = connection
        self.connection.row_factory = sqlite3.Row
        self._clock = clock

    def add_book(self, file_path: Path, metadata: BookMetadata) -> LibraryEntry:
        """Add a book to the library or refresh the existing entry.

        file_path is the UNIQUE key. An existing entry keeps its title,
        author and progress; its recency is refreshed and its cover replaced
        when the new metadata carries one.

        Raises:
            PersistenceError: If the database write fails.
        """
        canonical = Path(file_path).resolve()
        book_id = book_id_for(canonical)
        now = self._clock()

        try:
            cur = self.connection.cursor()
            cur.execute(
                """
                INSERT INTO library_books (
                    id, title, author, file_path, cover_ref, date_added, last_opened
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(file_path) DO UPDATE SET
                    cover_ref = COALESCE(excluded.cover_ref, library_books.cover_ref),
                    last_opened = excluded.last_opened
                """,
                (
                    book_id,
                    metadata.title,
                    metadata.author,
                    str(canonical),
                    metadata.cover_ref,
                    now,
                    now,
                ),
            )
            self.connection.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to add book to library: {e}") from e

        entry = self.get_book(book_id)
        if entry is None:
            raise PersistenceError(f"Book missing after insert: {canonical}")
        return entry

    def get_book(self, book_id: str) -> Optional[LibraryEntry]:
        try:
            cur = self.connection.cursor()
            cur.execute(
                """
                SELECT id, title, author, file_path, cover_ref, date_added,
                       last_opened, progress, last_location
                FROM library_books
                WHERE id = ?
                """,
                (book_id,),
            )
            row = cur.fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to retrieve book: {e}") from e
        return self._row_to_entry(row) if row else None

    def list_recent(self, limit: int) -> List[LibraryEntry]:
        """Retrieve up to limit books, most recently opened first."""
        if limit <= 0:
            return []
        try:
            cur = self.connection.cursor()
            cur.execute(
                """
                SELECT id, title, author, file_path, cover_ref, date_added,
                       last_opened, progress, last_location
                FROM library_books
                ORDER BY last_opened DESC, rowid DESC
                LIMIT ?
                """,
                (limit,),
            )
            rows = cur.fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to retrieve books: {e}") from e
        return [self._row_to_entry(row) for row in rows]

    def update_progress(self, book_id: str, fraction: float, token: str) -> None:
        """Store progress and resume token; also refreshes recency."""
        try:
            cur = self.connection.cursor()
            cur.execute(
                """
                UPDATE library_books
                SET progress = ?, last_location = ?, last_opened = ?
                WHERE id = ?
                """,
                (fraction, token, self._clock(), book_id),
            )
            self.connection.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to update progress: {e}") from e

    def get_progress(self, book_id: str) -> Optional[str]:
        entry = self.get_book(book_id)
        return entry.last_location if entry else None

    def remove_book(self, book_id: str) -> None:
        """Remove a book from the library (does NOT delete the file)."""
        try:
            cur = self.connection.cursor()
            cur.execute("DELETE FROM library_books WHERE id = ?", (book_id,))
            self.connection.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to remove book: {e}") from e

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> LibraryEntry:
        """Convert database row to LibraryEntry entity."""
        return LibraryEntry(
            id=row["id"],
            title=row["title"],
            author=row["author"],
            file_path=row["file_path"],
            cover_ref=row["cover_ref"],
            date_added=row["date_added"],
            last_opened=row["last_opened"],
            progress=row["progress"],
            last_location=row["last_location"],
        )
