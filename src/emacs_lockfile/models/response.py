"""Status-coded results returned by the lock operations."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from pydantic import BaseModel


class LockStatus(IntEnum):
    """Closed set of outcomes of a lock operation.

    Values follow the HTTP-like codes used by other lock-file tools.
    """

    OK = 200
    NOT_MODIFIED = 304
    BAD_REQUEST = 400
    CONFLICT = 409
    PRECONDITION_FAILED = 412
    INTERNAL_ERROR = 500


@dataclass(frozen=True)
class LockResponse:
    """Result of a lock operation.

    Attributes:
        status: Outcome code.
        message: Human-readable description.
        data: Optional payload (LockQueryResult for get, bool for locked).
    """

    status: LockStatus
    message: str
    data: Any = None

    @property
    def ok(self) -> bool:
        """True unless the operation failed or was refused."""
        return self.status in (LockStatus.OK, LockStatus.NOT_MODIFIED)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        data = self.data.model_dump() if isinstance(self.data, BaseModel) else self.data
        result: dict[str, Any] = {
            "status": int(self.status),
            "status_name": self.status.name,
            "message": self.message,
        }
        if data is not None:
            result["data"] = data
        return result
