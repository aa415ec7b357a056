"""Lock file path derivation."""

import os

from ..constants import MARKER_PREFIX

_SEPARATORS = {sep for sep in ("/", os.sep, os.altsep) if sep}


def lockfile_path(target_path: str | os.PathLike[str]) -> str:
    """Get the marker path for a target file.

    The marker lives next to the target, named by prefixing the target's
    file name with ``.#``: ``dir/name.ext`` -> ``dir/.#name.ext`` and
    ``name.ext`` -> ``.#name.ext``. Pure string transformation; the
    filesystem is not consulted.

    Args:
        target_path: Path of the file being locked

    Returns:
        Path of its lock marker
    """
    target = os.fspath(target_path)
    split_at = max(target.rfind(sep) for sep in _SEPARATORS)
    if split_at < 0:
        return MARKER_PREFIX + target
    return target[: split_at + 1] + MARKER_PREFIX + target[split_at + 1 :]
