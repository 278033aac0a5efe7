import os
import re

from .errors import ArchiveIOError

_SEPARATORS = re.compile(r"[/\\]")


def ensure_parent_dirs(path: str, mode: int = 0o755) -> None:
    """Make sure every directory leading up to the last segment of `path` exists.

    Both '/' and '\\' count as separators; intermediate paths are rebuilt
    with '/'. Existing directories are fine. The first component that is
    not a directory after the attempt raises ArchiveIOError.
    """
    parts = _SEPARATORS.split(path)[:-1]
    current = ""
    for i, part in enumerate(parts):
        current = part if i == 0 else f"{current}/{part}"
        # leading separator or doubled separators
        if not part:
            continue
        try:
            os.mkdir(current, mode)
        except FileExistsError:
            pass
        except OSError as exc:
            if not os.path.isdir(current):
                raise ArchiveIOError(f"could not create directory '{current}': {exc.strerror}", current) from exc
        if not os.path.isdir(current):
            raise ArchiveIOError(f"'{current}' exists and is not a directory", current)
