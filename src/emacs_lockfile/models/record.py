"""Lock owner records.

A marker's content identifies the Emacs (or other) process holding the
lock. Records are never mutated: taking over a lock writes a new one.
"""

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class LockRecord(BaseModel):
    """Decoded identity of a lock holder.

    Attributes:
        user: Login name of the owner.
        host: Name of the machine the owner runs on.
        pid: Process ID of the owner.
        boot: Boot timestamp of the owner's host, used to tell apart
            reused PIDs across reboots. None when unavailable.
    """

    model_config = ConfigDict(frozen=True)

    user: str = Field(min_length=1, description="Owning account name")
    host: str = Field(min_length=1, description="Owning machine name")
    pid: int = Field(gt=0, description="Owning process ID")
    boot: int | None = Field(default=None, ge=0, description="Host boot time, if known")

    @field_validator("host")
    @classmethod
    def host_has_no_separator(cls, v: str) -> str:
        """Reject hosts containing '@'; decoding splits user from host on the last one."""
        if "@" in v:
            raise ValueError("host must not contain '@'")
        return v


class LockQueryResult(BaseModel):
    """Outcome of reading the marker of a target file.

    Attributes:
        exists: Whether a marker is present.
        path: Marker path derived from the target.
        record: Decoded owner, present only when the marker exists and parsed.
        error: Read or decode failure message.
    """

    exists: bool = False
    path: str
    record: LockRecord | None = None
    error: str | None = None

    @model_validator(mode="after")
    def validate_record_consistency(self) -> Self:
        """Ensure a record only accompanies an existing, error-free marker."""
        if self.record is not None and not self.exists:
            raise ValueError("record given for a lock file that does not exist")
        if self.record is not None and self.error is not None:
            raise ValueError("record and error are mutually exclusive")
        return self
