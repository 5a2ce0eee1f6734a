"""
SQLite-backed storage for user sessions, bookmarks, reading position,
preferences and uploaded-book metadata.
"""
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    session_id TEXT NOT NULL UNIQUE,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS bookmarks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL REFERENCES users(id),
    surah_number INTEGER NOT NULL,
    ayah_number INTEGER NOT NULL,
    surah_name TEXT,
    note TEXT,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_bookmarks_user ON bookmarks(user_id);

CREATE TABLE IF NOT EXISTS reading_position (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL UNIQUE REFERENCES users(id),
    surah_number INTEGER NOT NULL,
    ayah_number INTEGER NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS user_preferences (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL UNIQUE REFERENCES users(id),
    reciter_identifier TEXT NOT NULL,
    theme TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS books (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    author TEXT,
    file_name TEXT NOT NULL,
    file_size INTEGER,
    uploaded_at TEXT NOT NULL
);
"""


class StorageError(Exception):
    """A database operation failed."""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _user(row) -> Dict:
    return {'id': row['id'], 'sessionId': row['session_id'], 'createdAt': row['created_at']}


def _bookmark(row) -> Dict:
    return {
        'id': row['id'],
        'userId': row['user_id'],
        'surahNumber': row['surah_number'],
        'ayahNumber': row['ayah_number'],
        'surahName': row['surah_name'],
        'note': row['note'],
        'createdAt': row['created_at'],
    }


def _position(row) -> Dict:
    return {
        'userId': row['user_id'],
        'surahNumber': row['surah_number'],
        'ayahNumber': row['ayah_number'],
        'updatedAt': row['updated_at'],
    }


def _preferences(row) -> Dict:
    return {
        'userId': row['user_id'],
        'reciterIdentifier': row['reciter_identifier'],
        'theme': row['theme'],
        'updatedAt': row['updated_at'],
    }


def _book(row) -> Dict:
    return {
        'id': row['id'],
        'title': row['title'],
        'author': row['author'],
        'fileName': row['file_name'],
        'fileSize': row['file_size'],
        'uploadedAt': row['uploaded_at'],
    }


class Storage:
    """Small CRUD interface over SQLite. A connection is opened per operation."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    @contextmanager
    def _get_db(self):
        """Get database connection with context manager; commits on success."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"[Storage] Database error: {e}")
            raise StorageError(str(e)) from e
        finally:
            conn.close()

    def _ensure_tables(self):
        with self._get_db() as conn:
            conn.executescript(SCHEMA)
        logger.debug(f"[Storage] Schema ready at {self.db_path}")

    def ping(self) -> bool:
        with self._get_db() as conn:
            conn.execute("SELECT 1").fetchone()
        return True

    # --- Users ---

    def get_user(self, user_id: int) -> Optional[Dict]:
        with self._get_db() as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return _user(row) if row else None

    def get_user_by_session_id(self, session_id: str) -> Optional[Dict]:
        with self._get_db() as conn:
            row = conn.execute("SELECT * FROM users WHERE session_id = ?", (session_id,)).fetchone()
        return _user(row) if row else None

    def create_user(self, session_id: str) -> Dict:
        with self._get_db() as conn:
            cursor = conn.execute(
                "INSERT INTO users (session_id, created_at) VALUES (?, ?)",
                (session_id, _now())
            )
            row = conn.execute("SELECT * FROM users WHERE id = ?", (cursor.lastrowid,)).fetchone()
        return _user(row)

    # --- Bookmarks ---

    def get_bookmarks(self, user_id: int) -> List[Dict]:
        with self._get_db() as conn:
            rows = conn.execute(
                "SELECT * FROM bookmarks WHERE user_id = ? ORDER BY created_at DESC, id DESC",
                (user_id,)
            ).fetchall()
        return [_bookmark(row) for row in rows]

    def create_bookmark(self, user_id: int, surah_number: int, ayah_number: int,
                        surah_name: Optional[str] = None, note: Optional[str] = None) -> Dict:
        with self._get_db() as conn:
            cursor = conn.execute(
                """
                INSERT INTO bookmarks (user_id, surah_number, ayah_number, surah_name, note, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (user_id, surah_number, ayah_number, surah_name, note, _now())
            )
            row = conn.execute("SELECT * FROM bookmarks WHERE id = ?", (cursor.lastrowid,)).fetchone()
        return _bookmark(row)

    def delete_bookmark(self, bookmark_id: int, user_id: int) -> bool:
        with self._get_db() as conn:
            cursor = conn.execute(
                "DELETE FROM bookmarks WHERE id = ? AND user_id = ?", (bookmark_id, user_id)
            )
        return cursor.rowcount > 0

    def bookmark_exists(self, user_id: int, surah_number: int, ayah_number: int) -> bool:
        with self._get_db() as conn:
            row = conn.execute(
                "SELECT 1 FROM bookmarks WHERE user_id = ? AND surah_number = ? AND ayah_number = ?",
                (user_id, surah_number, ayah_number)
            ).fetchone()
        return row is not None

    # --- Reading position ---

    def get_reading_position(self, user_id: int) -> Optional[Dict]:
        with self._get_db() as conn:
            row = conn.execute("SELECT * FROM reading_position WHERE user_id = ?", (user_id,)).fetchone()
        return _position(row) if row else None

    def upsert_reading_position(self, user_id: int, surah_number: int, ayah_number: int) -> Dict:
        with self._get_db() as conn:
            conn.execute(
                """
                INSERT INTO reading_position (user_id, surah_number, ayah_number, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    surah_number = excluded.surah_number,
                    ayah_number = excluded.ayah_number,
                    updated_at = excluded.updated_at
                """,
                (user_id, surah_number, ayah_number, _now())
            )
            row = conn.execute("SELECT * FROM reading_position WHERE user_id = ?", (user_id,)).fetchone()
        return _position(row)

    # --- Preferences ---

    def get_user_preferences(self, user_id: int) -> Optional[Dict]:
        with self._get_db() as conn:
            row = conn.execute("SELECT * FROM user_preferences WHERE user_id = ?", (user_id,)).fetchone()
        return _preferences(row) if row else None

    def upsert_user_preferences(self, user_id: int, reciter_identifier: str, theme: str) -> Dict:
        with self._get_db() as conn:
            conn.execute(
                """
                INSERT INTO user_preferences (user_id, reciter_identifier, theme, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    reciter_identifier = excluded.reciter_identifier,
                    theme = excluded.theme,
                    updated_at = excluded.updated_at
                """,
                (user_id, reciter_identifier, theme, _now())
            )
            row = conn.execute("SELECT * FROM user_preferences WHERE user_id = ?", (user_id,)).fetchone()
        return _preferences(row)

    # --- Books ---

    def get_all_books(self) -> List[Dict]:
        with self._get_db() as conn:
            rows = conn.execute("SELECT * FROM books ORDER BY uploaded_at DESC, id DESC").fetchall()
        return [_book(row) for row in rows]

    def create_book(self, title: str, file_name: str, author: Optional[str] = None,
                    file_size: Optional[int] = None) -> Dict:
        with self._get_db() as conn:
            cursor = conn.execute(
                "INSERT INTO books (title, author, file_name, file_size, uploaded_at) VALUES (?, ?, ?, ?, ?)",
                (title, author, file_name, file_size, _now())
            )
            row = conn.execute("SELECT * FROM books WHERE id = ?", (cursor.lastrowid,)).fetchone()
        return _book(row)
