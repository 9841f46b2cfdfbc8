import sqlite3
import os
from pathlib import Path

DATABASE_PATH = os.getenv("DATABASE_PATH", "/data/workouts.db")


def get_db() -> sqlite3.Connection:
    # FastAPI may resolve dependency lifecycle and endpoint execution on different threads.
    # Disable SQLite thread affinity checks for request-scoped connections.
    conn = sqlite3.connect(DATABASE_PATH, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def row_to_dict(row) -> dict:
    return dict(row)


def init_db():
    schema_path = Path(__file__).parent / "schema.sql"
    conn = get_db()
    try:
        with open(schema_path, "r") as f:
            conn.executescript(f.read())
        conn.commit()
    finally:
        conn.close()
