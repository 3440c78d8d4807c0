import time
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


def now_ms() -> int:
    return int(time.time() * 1000)


def ms_to_iso(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).isoformat().replace("+00:00", "Z")


class BaseEntity(BaseModel):
    """
    Base entity for in-memory records.
    Keeps a creation timestamp in epoch ms plus its ISO rendering.
    """
    created_at: Optional[int] = None
    created_at_iso: Optional[str] = None

    model_config = ConfigDict(
        extra="allow",      # unknown fields are kept, not rejected
        use_enum_values=True,
    )

    def stamp_created(self) -> None:
        if self.created_at is None:
            self.created_at = now_ms()
        self.created_at_iso = ms_to_iso(self.created_at)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
