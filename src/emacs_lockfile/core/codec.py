"""Encoding and decoding of lock marker content.

Marker content has the form ``user@host.pid`` or ``user@host.pid:boot``,
optionally followed by a newline. User and host are matched greedily, so a
user name may itself contain ``@`` or ``.``; only the final separators
delimit the fields.
"""

import re

from pydantic import ValidationError

from ..errors import LockSyntaxError
from ..models import LockRecord

_CONTENT_PATTERN = re.compile(r"(.+)@(.+)\.([0-9]+)(?::([0-9]+))?(?:\r?\n)?", re.DOTALL)


def encode_record(record: LockRecord) -> str:
    """Render a record as marker content."""
    content = f"{record.user}@{record.host}.{record.pid}"
    if record.boot is not None:
        content += f":{record.boot}"
    return content


def decode_record(content: str) -> LockRecord:
    """Parse marker content into a record.

    Args:
        content: Symlink target or file content of a marker

    Returns:
        Decoded lock owner

    Raises:
        LockSyntaxError: If content does not match ``user@host.pid[:boot]``
    """
    match = _CONTENT_PATTERN.fullmatch(content)
    if match is None:
        raise LockSyntaxError(content)

    user, host, pid, boot = match.groups()
    try:
        return LockRecord(
            user=user,
            host=host,
            pid=int(pid),
            boot=int(boot) if boot is not None else None,
        )
    except ValidationError:
        # e.g. pid 0
        raise LockSyntaxError(content) from None
