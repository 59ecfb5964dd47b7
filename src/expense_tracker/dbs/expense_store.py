"""
expense_store.py

Client-local persistence for expenses and expense groups.
Each collection is one JSON blob under its own key; every save or delete
reads the full collection, modifies it, and writes it back (last write wins).
"""

import json
import os
import sys
from typing import Dict, List

from expense_tracker.logger import get_logger
from expense_tracker.exception import CustomException
from expense_tracker.models import Expense, ExpenseGroup
from expense_tracker.utils.load_config import load_config_file

logger = get_logger(__name__)

EXPENSES_KEY = "expenses"
GROUPS_KEY = "expense_groups"


class RecordStore:
    """
    List/upsert/delete over the expense and group collections.

    Subclasses only decide where a collection blob lives by implementing
    `_read` and `_write`.
    """

    def _read(self, key: str) -> List[dict]:
        raise NotImplementedError

    def _write(self, key: str, rows: List[dict]) -> None:
        raise NotImplementedError

    # ------------------------------------------------------------------
    def _upsert(self, key: str, record: dict) -> None:
        rows = self._read(key)
        for idx, row in enumerate(rows):
            if row.get("id") == record["id"]:
                rows[idx] = record
                break
        else:
            rows.append(record)
        self._write(key, rows)

    def _delete(self, key: str, record_id: str) -> None:
        rows = self._read(key)
        remaining = [row for row in rows if row.get("id") != record_id]
        if len(remaining) == len(rows):
            logger.debug(f"Nothing to delete for id {record_id} in '{key}'")
            return
        self._write(key, remaining)

    # --- Expenses ------------------------------------------------------
    def list_expenses(self) -> List[Expense]:
        return [Expense.model_validate(row) for row in self._read(EXPENSES_KEY)]

    def upsert_expense(self, expense: Expense) -> None:
        self._upsert(EXPENSES_KEY, expense.to_record())
        logger.info(f"Saved expense {expense.id} ({expense.vendor})")

    def delete_expense(self, expense_id: str) -> None:
        self._delete(EXPENSES_KEY, expense_id)
        logger.info(f"Deleted expense {expense_id}")

    # --- Groups --------------------------------------------------------
    def list_groups(self) -> List[ExpenseGroup]:
        return [ExpenseGroup.model_validate(row) for row in self._read(GROUPS_KEY)]

    def upsert_group(self, group: ExpenseGroup) -> None:
        self._upsert(GROUPS_KEY, group.to_record())
        logger.info(f"Saved group {group.id} ({group.name})")

    def delete_group(self, group_id: str) -> None:
        self._delete(GROUPS_KEY, group_id)
        logger.info(f"Deleted group {group_id}")


class InMemoryStore(RecordStore):
    """Store backed by a dict of JSON-shaped rows. Used by tests and previews."""

    def __init__(self):
        self._blobs: Dict[str, str] = {}

    def _read(self, key: str) -> List[dict]:
        data = self._blobs.get(key)
        return json.loads(data) if data else []

    def _write(self, key: str, rows: List[dict]) -> None:
        self._blobs[key] = json.dumps(rows)


class JsonFileStore(RecordStore):
    """Store keeping each collection in `<data_dir>/<key>.json`."""

    def __init__(self, data_dir: str = None):
        try:
            if data_dir is None:
                config = load_config_file()
                data_dir = config.get("storage", {}).get("data_dir", "data")

            self.data_dir = data_dir
            os.makedirs(self.data_dir, exist_ok=True)
            logger.info(f"Initialized JsonFileStore at {os.path.abspath(self.data_dir)}")
        except Exception as e:
            raise CustomException(e, sys)

    def _path(self, key: str) -> str:
        return os.path.join(self.data_dir, f"{key}.json")

    def _read(self, key: str) -> List[dict]:
        path = self._path(key)
        if not os.path.exists(path):
            return []
        try:
            with open(path, "r", encoding="utf-8") as fh:
                content = fh.read()
            return json.loads(content) if content.strip() else []
        except Exception as e:
            logger.error(f"Failed to read {path}: {e}")
            raise CustomException(e, sys)

    def _write(self, key: str, rows: List[dict]) -> None:
        path = self._path(key)
        tmp_path = f"{path}.tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as fh:
                json.dump(rows, fh, indent=2)
            os.replace(tmp_path, path)
            logger.debug(f"Wrote {len(rows)} rows to {path}")
        except Exception as e:
            logger.error(f"Failed to write {path}: {e}")
            raise CustomException(e, sys)
