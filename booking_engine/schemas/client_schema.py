"""Client data models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ClientStatus(str, Enum):
    """Trust classification deciding auto-confirmation."""

    ACTIVE = "active"
    UNKNOWN = "unknown"
    OTHER = "other"

    @classmethod
    def from_raw(cls, raw: Optional[str]) -> "ClientStatus":
        normalized = (raw or "").strip().lower()
        if normalized == cls.ACTIVE.value:
            return cls.ACTIVE
        if normalized in ("", cls.UNKNOWN.value):
            return cls.UNKNOWN
        return cls.OTHER


class ClientRecord(BaseModel):
    """Client record as held by the record store."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    name: str = ""
    email: str = ""
    status: ClientStatus = ClientStatus.UNKNOWN
    status_raw: str = "unknown"

    @property
    def is_trusted(self) -> bool:
        return self.status == ClientStatus.ACTIVE
