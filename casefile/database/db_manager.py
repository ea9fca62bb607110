import sqlite3
from typing import Optional

from casefile.database.repositories import GameStateRepository, WorldRepository


class DBManager:
    """
    Database connection manager with repository-based access.

    Usage:
        with DBManager("casefile.db") as db:
            record = db.worlds.get(world_id)
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.conn = None

        # Repositories (initialized in __enter__)
        self.worlds: Optional[WorldRepository] = None
        self.game_states: Optional[GameStateRepository] = None

    def __enter__(self):
        # Threads wait on a locked database rather than failing immediately.
        self.conn = sqlite3.connect(self.db_path, timeout=30.0, isolation_level=None)
        self.conn.execute("PRAGMA journal_mode=WAL;")
        self.conn.execute("PRAGMA foreign_keys=ON;")
        self.conn.row_factory = sqlite3.Row

        self.worlds = WorldRepository(self.conn)
        self.game_states = GameStateRepository(self.conn)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.conn:
            self.conn.close()

    def create_tables(self):
        """Initialize all database tables."""
        if not self.conn:
            with self as db:
                db._create_all_tables()
        else:
            self._create_all_tables()

    def _create_all_tables(self):
        # worlds first: game_states references it.
        for repo in (self.worlds, self.game_states):
            repo.create_table()
        self.conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_game_states_world_id ON game_states(world_id);"
        )
