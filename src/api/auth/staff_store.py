"""
Staff accounts in SQLite, passwords hashed with bcrypt.

The database file is shared with settings_store.remote_store, which keeps
each account's configuration under the same id. Every submitted order is
counted against the clerk who sent it.
"""
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import bcrypt

_PROFILE_COLUMNS = "id, email, full_name, created_at, order_count, last_order_id, last_order_at"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class StaffStore:
    def __init__(self, db_path: str):
        self.db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _get_conn(self) -> sqlite3.Connection:
        """New connection per call (sqlite3 connections are not thread-safe)."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _init_db(self):
        conn = self._get_conn()
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS staff_accounts (
                    id TEXT PRIMARY KEY,
                    email TEXT UNIQUE NOT NULL,
                    password_hash TEXT NOT NULL,
                    full_name TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    order_count INTEGER NOT NULL DEFAULT 0,
                    last_order_id TEXT,
                    last_order_at TEXT,
                    is_active INTEGER NOT NULL DEFAULT 1
                )
            """)
            conn.commit()
        finally:
            conn.close()

    def register(self, email: str, password: str, full_name: str) -> Optional[Dict[str, Any]]:
        """
        Returns:
            The new account's profile, or None if the email is taken.
        """
        staff_id = uuid.uuid4().hex
        password_hash = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")
        conn = self._get_conn()
        try:
            conn.execute(
                "INSERT INTO staff_accounts (id, email, password_hash, full_name, created_at) VALUES (?, ?, ?, ?, ?)",
                (staff_id, _normalize_email(email), password_hash, full_name.strip(), _now()),
            )
            conn.commit()
        except sqlite3.IntegrityError:
            return None
        finally:
            conn.close()
        return self.get(staff_id)

    def authenticate(self, email: str, password: str) -> Optional[Dict[str, Any]]:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT id, password_hash FROM staff_accounts WHERE email = ? AND is_active = 1",
                (_normalize_email(email),),
            ).fetchone()
        finally:
            conn.close()
        if not row or not bcrypt.checkpw(password.encode("utf-8"), row["password_hash"].encode("utf-8")):
            return None
        return self.get(row["id"])

    def get(self, staff_id: str) -> Optional[Dict[str, Any]]:
        """Profile of an active account, or None."""
        conn = self._get_conn()
        try:
            row = conn.execute(
                f"SELECT {_PROFILE_COLUMNS} FROM staff_accounts WHERE id = ? AND is_active = 1",
                (staff_id,),
            ).fetchone()
        finally:
            conn.close()
        return dict(row) if row else None

    def record_order(self, staff_id: str, order_id: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """UPDATE staff_accounts
                   SET order_count = order_count + 1, last_order_id = ?, last_order_at = ?
                   WHERE id = ?""",
                (order_id, _now(), staff_id),
            )
            conn.commit()
        finally:
            conn.close()

