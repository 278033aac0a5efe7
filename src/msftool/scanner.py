from __future__ import annotations

import os
from pathlib import Path
from typing import List

from .errors import ArchiveIOError, NameTooLong
from .format import MAX_NAME_LEN, Entry
from .logging_utils import get_logger

logger = get_logger(__name__)


def _make_name(rel_path: str, name_policy: str) -> bytes:
    name = os.fsencode(rel_path)
    if len(name) <= MAX_NAME_LEN:
        return name
    if name_policy != "truncate":
        raise NameTooLong(name, MAX_NAME_LEN)
    cut = MAX_NAME_LEN
    # back off to the start of a split UTF-8 sequence
    while cut > 0 and (name[cut] & 0xC0) == 0x80:
        cut -= 1
    logger.warning("Name of '%s' is %d bytes, truncating to %d", rel_path, len(name), cut)
    return name[:cut]


def _walk(dirpath: Path, prefix: str, entries: List[Entry], sort_entries: bool, name_policy: str) -> None:
    try:
        with os.scandir(dirpath) as it:
            children = list(it)
    except OSError as exc:
        raise ArchiveIOError(f"could not open directory '{dirpath}': {exc.strerror}", str(dirpath)) from exc

    if sort_entries:
        children.sort(key=lambda d: d.name)

    for child in children:
        # hidden files; scandir never yields '.' or '..'
        if child.name.startswith("."):
            continue
        rel_path = f"{prefix}{child.name}"
        try:
            is_dir = child.is_dir(follow_symlinks=False)
            is_file = not is_dir and child.is_file(follow_symlinks=False)
            size = child.stat(follow_symlinks=False).st_size if is_file else 0
        except OSError as exc:
            raise ArchiveIOError(f"couldn't stat '{child.path}': {exc.strerror}", child.path) from exc

        if is_dir:
            _walk(Path(child.path), f"{rel_path}/", entries, sort_entries, name_policy)
        elif is_file:
            entries.append(Entry(name=_make_name(rel_path, name_policy), length=size, source=Path(child.path)))
        else:
            logger.debug("Skipping '%s': not a regular file or directory", child.path)


def scan_directory(root: str | os.PathLike, sort_entries: bool = False, name_policy: str = "error") -> List[Entry]:
    """Depth-first list of every regular file under `root`.

    Names are relative to `root` and '/' separated. Without `sort_entries`
    each directory is visited in the order the filesystem lists it, so the
    result is not reproducible across machines.
    """
    root_path = Path(root)
    if not root_path.is_dir():
        raise ArchiveIOError(f"could not open directory '{root_path}'", str(root_path))
    entries: List[Entry] = []
    _walk(root_path, "", entries, sort_entries, name_policy)
    if name_policy == "truncate":
        seen = set()
        for entry in entries:
            if entry.name in seen:
                logger.warning("Truncated name '%s' is used by more than one file, the last one wins on unpack", entry.path)
            seen.add(entry.name)
    logger.info("Scanned %d files under '%s'", len(entries), root_path)
    return entries
