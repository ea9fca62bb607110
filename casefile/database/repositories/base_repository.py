"""Shared plumbing for repositories that store a JSON payload per row."""

from abc import ABC, abstractmethod
import json
import sqlite3
import uuid
from typing import Any, Dict, List, Optional


class BaseRepository(ABC):
    """Rows are keyed by a uuid hex id and optionally scoped to an owner."""

    table: str = ""

    def __init__(self, connection: sqlite3.Connection):
        self.conn = connection

    @abstractmethod
    def create_table(self):
        pass

    @staticmethod
    def _new_id() -> str:
        return uuid.uuid4().hex

    @staticmethod
    def _dump(payload: Dict[str, Any]) -> str:
        return json.dumps(payload)

    def _execute(self, query: str, params: tuple = ()) -> sqlite3.Cursor:
        return self.conn.execute(query, params)

    def _fetchone(self, query: str, params: tuple = ()) -> Optional[sqlite3.Row]:
        return self._execute(query, params).fetchone()

    def _fetchall(self, query: str, params: tuple = ()) -> List[sqlite3.Row]:
        return self._execute(query, params).fetchall()

    def _fetch_by_id(self, row_id: str, owner: Optional[str] = None) -> Optional[sqlite3.Row]:
        """A row by id; with ``owner`` set, rows of other owners are not found."""
        if owner is None:
            return self._fetchone(f"SELECT * FROM {self.table} WHERE id = ?", (row_id,))
        return self._fetchone(
            f"SELECT * FROM {self.table} WHERE id = ? AND owner = ?", (row_id, owner)
        )

    def delete(self, row_id: str):
        self._execute(f"DELETE FROM {self.table} WHERE id = ?", (row_id,))
        self._commit()

    def _commit(self):
        self.conn.commit()
