from enum import Enum
from typing import Optional

from pydantic import BaseModel


class AdmissionStatus(str, Enum):
    ADMITTED = "admitted"
    REUSED = "reused"
    ROOM_FULL = "room-full"
    ROOM_NOT_FOUND = "room-not-found"


class AdmissionResult(BaseModel):
    status: AdmissionStatus
    room_id: str
    token: Optional[str] = None

    @property
    def granted(self) -> bool:
        return self.status in (AdmissionStatus.ADMITTED, AdmissionStatus.REUSED)

class AuthContext(BaseModel):
    room_id: str
    token: str
