"""Repository for stored worlds."""

from typing import Any, Dict, List, Optional

from casefile.models.records import WorldRecord
from .base_repository import BaseRepository


class WorldRepository(BaseRepository):
    table = "worlds"

    def create_table(self):
        self._execute(
            """CREATE TABLE IF NOT EXISTS worlds (
                id TEXT PRIMARY KEY,
                owner TEXT NOT NULL,
                title TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                payload TEXT NOT NULL,
                created_at TEXT DEFAULT CURRENT_TIMESTAMP
            )"""
        )
        self._commit()

    @staticmethod
    def _to_record(row) -> WorldRecord:
        return WorldRecord(
            id=row["id"],
            owner=row["owner"],
            title=row["title"],
            description=row["description"],
            payload=row["payload"],
            created_at=row["created_at"],
        )

    def create(
        self, owner: str, payload: Dict[str, Any], world_id: Optional[str] = None
    ) -> WorldRecord:
        """Stores a world payload; title and description come from its mystery."""
        mystery = payload.get("mystery", {})
        description = mystery.get("shortDescription") or mystery.get("description", "")
        world_id = world_id or self._new_id()
        self._execute(
            "INSERT INTO worlds (id, owner, title, description, payload) VALUES (?, ?, ?, ?, ?)",
            (world_id, owner, mystery.get("title", ""), description, self._dump(payload)),
        )
        self._commit()
        return self.get(world_id)

    def get(self, world_id: str, owner: Optional[str] = None) -> Optional[WorldRecord]:
        row = self._fetch_by_id(world_id, owner)
        return self._to_record(row) if row else None

    def list_by_owner(self, owner: str) -> List[WorldRecord]:
        rows = self._fetchall(
            "SELECT * FROM worlds WHERE owner = ? ORDER BY created_at, id", (owner,)
        )
        return [self._to_record(row) for row in rows]

    def update(self, world_id: str, payload: Dict[str, Any]) -> Optional[WorldRecord]:
        mystery = payload.get("mystery", {})
        description = mystery.get("shortDescription") or mystery.get("description", "")
        self._execute(
            "UPDATE worlds SET title = ?, description = ?, payload = ? WHERE id = ?",
            (mystery.get("title", ""), description, self._dump(payload), world_id),
        )
        self._commit()
        return self.get(world_id)
