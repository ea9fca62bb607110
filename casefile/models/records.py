import json
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class WorldRecord:
    id: str
    owner: str
    title: str
    description: str
    payload: str
    created_at: Optional[str] = None

    def payload_dict(self) -> Dict[str, Any]:
        return json.loads(self.payload)


@dataclass
class GameStateRecord:
    id: str
    owner: str
    world_id: str
    payload: str
    updated_at: Optional[str] = None

    def payload_dict(self) -> Dict[str, Any]:
        return json.loads(self.payload)
