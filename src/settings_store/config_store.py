"""
Configuration Store
===================

Loads and saves the AppConfig record.

- LocalConfigStore: flat JSON file at config.LOCAL_CONFIG_PATH. The shared
  fallback, read whenever an account has no record of its own.
- ConfigStore: local store plus an optional per-account remote store.
  Remote read failures are logged and fall back to the local record;
  account saves never touch the local record.

Loading merges the stored record over the built-in defaults, so a partial
or older record still yields a complete configuration.
"""
import json
import sqlite3
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

import config
from settings_store.app_config import AppConfig
from settings_store.remote_store import AccountConfigStore
from utils.logger import get_logger


class LocalConfigStore:
    """JSON file store for a single AppConfig record."""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or config.LOCAL_CONFIG_PATH)

    def load_record(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                record = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            get_logger().warning(f"Could not read {self.path}: {e}; using defaults", component="ConfigStore")
            return {}
        return record if isinstance(record, dict) else {}

    def load(self) -> AppConfig:
        try:
            return AppConfig.from_record(self.load_record())
        except ValidationError as e:
            get_logger().warning(f"Stored configuration is invalid ({e.error_count()} error(s)); using defaults",
                                 component="ConfigStore")
            return AppConfig()

    def save(self, app_config: AppConfig) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(app_config.to_record(), f, indent=2)
        tmp_path.replace(self.path)


class ConfigStore:
    """
    Local JSON store with an optional per-account remote store.

    Args:
        local: LocalConfigStore (defaults to config.LOCAL_CONFIG_PATH)
        remote: AccountConfigStore, or None for local-only use
    """

    def __init__(self, local: Optional[LocalConfigStore] = None,
                 remote: Optional[AccountConfigStore] = None):
        self.local = local or LocalConfigStore()
        self.remote = remote

    def load(self, account_id: Optional[str] = None) -> AppConfig:
        """Account record when signed in and available, else the local record."""
        if account_id and self.remote is not None:
            try:
                record = self.remote.load(account_id)
                if record is not None:
                    return AppConfig.from_record(record)
            except (sqlite3.Error, ValueError) as e:
                get_logger().warning(f"Remote config load failed for {account_id}: {e}; using local",
                                     component="ConfigStore")
        return self.local.load()

    def account_record_updated_at(self, account_id: str) -> Optional[str]:
        """When the account last saved its own record, or None if it never has."""
        if self.remote is None:
            return None
        try:
            return self.remote.updated_at(account_id)
        except sqlite3.Error as e:
            get_logger().warning(f"Remote config lookup failed for {account_id}: {e}", component="ConfigStore")
            return None

    def save(self, app_config: AppConfig, account_id: Optional[str] = None) -> bool:
        """
        Persist a record.

        With an account id and a remote store, only the account's record is
        written; the shared local record is left alone. Without either, the
        local record is written.

        Returns:
            True if the account record was written, False otherwise

        Raises:
            sqlite3.Error: the account record could not be written
        """
        if account_id and self.remote is not None:
            try:
                self.remote.save(account_id, app_config.to_record())
            except sqlite3.Error as e:
                get_logger().error(f"Remote config save failed for {account_id}: {e}", component="ConfigStore")
                raise
            return True
        self.local.save(app_config)
        return False
