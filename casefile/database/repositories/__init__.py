from .base_repository import BaseRepository
from .game_state_repository import GameStateRepository
from .world_repository import WorldRepository

__all__ = [
    "BaseRepository",
    "GameStateRepository",
    "WorldRepository",
]
