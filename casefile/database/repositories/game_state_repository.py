"""Repository for game state operations."""

from typing import Any, Dict, List, Optional

from casefile.models.records import GameStateRecord
from .base_repository import BaseRepository


class GameStateRepository(BaseRepository):
    """Handles all game state related database operations."""

    table = "game_states"

    def create_table(self):
        self._execute(
            """CREATE TABLE IF NOT EXISTS game_states (
                id TEXT PRIMARY KEY,
                owner TEXT NOT NULL,
                world_id TEXT NOT NULL REFERENCES worlds(id) ON DELETE CASCADE,
                payload TEXT NOT NULL,
                updated_at TEXT DEFAULT CURRENT_TIMESTAMP
            )"""
        )
        self._commit()

    @staticmethod
    def _to_record(row) -> GameStateRecord:
        return GameStateRecord(
            id=row["id"],
            owner=row["owner"],
            world_id=row["world_id"],
            payload=row["payload"],
            updated_at=row["updated_at"],
        )

    def create(
        self,
        owner: str,
        world_id: str,
        payload: Dict[str, Any],
        state_id: Optional[str] = None,
    ) -> GameStateRecord:
        state_id = state_id or self._new_id()
        self._execute(
            "INSERT INTO game_states (id, owner, world_id, payload) VALUES (?, ?, ?, ?)",
            (state_id, owner, world_id, self._dump(payload)),
        )
        self._commit()
        return self.get(state_id)

    def get(self, state_id: str, owner: Optional[str] = None) -> Optional[GameStateRecord]:
        row = self._fetch_by_id(state_id, owner)
        return self._to_record(row) if row else None

    def list_for_world(self, world_id: str, owner: str) -> List[GameStateRecord]:
        rows = self._fetchall(
            """SELECT * FROM game_states WHERE world_id = ? AND owner = ?
               ORDER BY updated_at, id""",
            (world_id, owner),
        )
        return [self._to_record(row) for row in rows]

    def update(self, state_id: str, payload: Dict[str, Any]) -> Optional[GameStateRecord]:
        self._execute(
            """UPDATE game_states
               SET payload = ?, updated_at = CURRENT_TIMESTAMP
               WHERE id = ?""",
            (self._dump(payload), state_id),
        )
        self._commit()
        return self.get(state_id)
