"""
Base database connection, schema initialization and shared query helpers.

Optimized for SQLite concurrency with WAL mode and busy_timeout.

IMPORTANT: Database instantiation should be done through the app lifespan
(see main.py) and reached through core.dependencies.get_database().
"""
import sqlite3
import logging
from typing import List, Mapping, Optional
from pathlib import Path

from core.config import DATABASE_PATH, DATABASE_BUSY_TIMEOUT
from core.exceptions import InvalidSortError
from models.page import Pageable

logger = logging.getLogger(__name__)


def _casefold(value: Optional[str]) -> Optional[str]:
    return value.casefold() if isinstance(value, str) else value


class Database:
    """
    SQLite database connection manager with concurrency optimizations.

    Features:
    - WAL mode for better concurrent read/write performance
    - Busy timeout to handle lock contention gracefully
    - Foreign key constraints enabled on every connection
    - UNIQUE constraints backing the civil ID and exam name rules

    Usage:
        # Via dependency injection (recommended):
        from core.dependencies import get_database

        # Direct instantiation (for testing):
        db = Database(db_path="/tmp/test.db")
    """

    def __init__(self, db_path: Optional[str] = None, busy_timeout: Optional[int] = None):
        """
        Initialize database connection.

        Args:
            db_path: Path to SQLite database file. Defaults to config DATABASE_PATH.
            busy_timeout: SQLite busy timeout in milliseconds. Defaults to config value.
        """
        self.db_path = db_path or DATABASE_PATH
        self.busy_timeout = busy_timeout if busy_timeout is not None else DATABASE_BUSY_TIMEOUT

        db_dir = Path(self.db_path).parent
        db_dir.mkdir(parents=True, exist_ok=True)

        self._init_db()

    def _configure_connection(self, conn: sqlite3.Connection) -> None:
        """
        Configure connection with optimal settings for concurrency.

        Args:
            conn: SQLite connection to configure.
        """
        # Wait for locks instead of failing immediately
        conn.execute(f"PRAGMA busy_timeout = {self.busy_timeout}")
        conn.execute("PRAGMA foreign_keys = ON")
        # Unicode-aware case folding for case-insensitive filters
        conn.create_function("casefold", 1, _casefold, deterministic=True)

    def _init_db(self) -> None:
        """Initialize database schema and enable WAL mode if not already enabled."""
        conn = sqlite3.connect(self.db_path)
        self._configure_connection(conn)
        cursor = conn.cursor()

        # WAL mode persists in the database file, so this only needs to run once
        cursor.execute("PRAGMA journal_mode = WAL")
        result = cursor.fetchone()
        if result and result[0].lower() == 'wal':
            logger.info(f"SQLite WAL mode enabled for {self.db_path}")
        else:
            logger.warning(f"Failed to enable WAL mode, current mode: {result}")

        # Patients first (referenced by foreign key)
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS patients (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                birth_date TEXT NOT NULL,
                civil_id TEXT NOT NULL UNIQUE COLLATE NOCASE,
                phone TEXT NOT NULL,
                email TEXT
            )
        """)

        # Exams are removed explicitly by the patient service before their
        # patient, so the foreign key has no ON DELETE action
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS exams (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL UNIQUE,
                description TEXT NOT NULL,
                price REAL NOT NULL,
                patient_id INTEGER NOT NULL,
                FOREIGN KEY (patient_id) REFERENCES patients(id)
            )
        """)

        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_exams_patient_id ON exams(patient_id)"
        )

        conn.commit()
        conn.close()

        logger.info(
            f"Database initialized: {self.db_path} "
            f"(busy_timeout={self.busy_timeout}ms)"
        )

    def get_connection(self) -> sqlite3.Connection:
        """
        Get a new database connection with concurrency settings.

        Returns:
            sqlite3.Connection: A new database connection configured for
                concurrent access with foreign keys enabled and busy timeout set.
        """
        conn = sqlite3.connect(self.db_path)
        self._configure_connection(conn)
        return conn


# =============================================================================
# QUERY HELPERS
# =============================================================================

def is_unique_violation(error: sqlite3.IntegrityError) -> bool:
    """Whether an IntegrityError came from a UNIQUE constraint."""
    return "UNIQUE constraint failed" in str(error)


def is_foreign_key_violation(error: sqlite3.IntegrityError) -> bool:
    """Whether an IntegrityError came from a FOREIGN KEY constraint."""
    return "FOREIGN KEY constraint failed" in str(error)


def build_order_by(pageable: Pageable, columns: Mapping[str, str]) -> str:
    """
    Translate the requested sort orders into an ORDER BY clause.

    Args:
        pageable: The page request.
        columns: Allowed sort property -> column name. Only whitelisted
            column names ever reach the SQL text.

    Returns:
        str: e.g. "name DESC, id ASC". The id column is always the final
            tiebreaker so paging is stable.

    Raises:
        InvalidSortError: If a sort property is not in ``columns``.
    """
    terms: List[str] = []
    used = set()
    for order in pageable.sort:
        column = columns.get(order.property)
        if column is None:
            raise InvalidSortError(sort_property=order.property)
        if column in used:
            continue
        used.add(column)
        terms.append(f"{column} {order.direction}")

    if "id" not in used:
        terms.append("id ASC")

    return ", ".join(terms)
