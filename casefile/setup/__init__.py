from casefile.setup.world_validator import validate_world
from casefile.setup.world_gen_service import WorldGenService

__all__ = ["validate_world", "WorldGenService"]
