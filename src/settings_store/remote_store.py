"""
SQLite-backed per-account configuration store.
Lives in the same database file as the API users table; one JSON record
per account id.
"""
import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


class AccountConfigStore:
    """Remote mirror of AppConfig records keyed by account id."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _get_conn(self) -> sqlite3.Connection:
        """Get a new connection (sqlite3 connections are not thread-safe)."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self):
        conn = self._get_conn()
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS account_configs (
                    account_id TEXT PRIMARY KEY,
                    record TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()
        finally:
            conn.close()

    def load(self, account_id: str) -> Optional[dict]:
        """
        Returns:
            The stored record, or None when the account has never saved one.
        """
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT record FROM account_configs WHERE account_id = ?",
                (account_id,)
            ).fetchone()
            return json.loads(row["record"]) if row else None
        finally:
            conn.close()

    def updated_at(self, account_id: str) -> Optional[str]:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT updated_at FROM account_configs WHERE account_id = ?",
                (account_id,)
            ).fetchone()
            return row["updated_at"] if row else None
        finally:
            conn.close()

    def save(self, account_id: str, record: dict) -> None:
        """Insert or replace the account's record."""
        conn = self._get_conn()
        try:
            conn.execute(
                """INSERT INTO account_configs (account_id, record, updated_at)
                   VALUES (?, ?, ?)
                   ON CONFLICT(account_id) DO UPDATE SET
                       record = excluded.record,
                       updated_at = excluded.updated_at""",
                (account_id, json.dumps(record), datetime.now(timezone.utc).isoformat())
            )
            conn.commit()
        finally:
            conn.close()
