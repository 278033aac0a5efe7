from __future__ import annotations

import os
from typing import BinaryIO, List, Optional

from .config import MsfConfig
from .errors import ArchiveIOError, FormatError
from .format import Entry, copy_bytes, read_header, read_table
from .logging_utils import get_logger
from .paths import ensure_parent_dirs

logger = get_logger(__name__)


def _stream_size(stream: BinaryIO) -> Optional[int]:
    try:
        here = stream.tell()
        size = stream.seek(0, os.SEEK_END)
        stream.seek(here)
    except (OSError, ValueError):
        return None
    return size


def read_archive_table(stream: BinaryIO) -> List[Entry]:
    """Check the magic and read the whole table; the stream is left at the data region."""
    num_files = read_header(stream)
    return read_table(stream, num_files, _stream_size(stream))


def _check_name(entry: Entry) -> None:
    parts = entry.path.replace("\\", "/").split("/")
    if not entry.name or entry.path.startswith(("/", "\\")) or ".." in parts or "" in parts:
        raise FormatError(f"refusing to extract unsafe name '{entry.path}'")


def _check_bounds(entry: Entry, size: Optional[int]) -> None:
    if size is not None and entry.end > size:
        raise FormatError(
            f"entry '{entry.path}' spans {entry.offset}..{entry.end} but the archive is only {size} bytes"
        )


def unpack_from_stream(stream: BinaryIO, dest_dir: str | os.PathLike, config: Optional[MsfConfig] = None) -> List[Entry]:
    config = config or MsfConfig()
    entries = read_archive_table(stream)
    size = _stream_size(stream)
    for entry in entries:
        _check_bounds(entry, size)
        if b"\x00" in entry.name:
            raise FormatError(f"entry name {entry.name!r} contains a NUL byte")
        if not config.allow_unsafe_paths:
            _check_name(entry)

    dest = os.fspath(dest_dir)
    logger.info("Unpacking %d files into '%s'", len(entries), dest)
    for entry in entries:
        logger.debug("... %s", entry.path)
        path = f"{dest}/{entry.path}"
        ensure_parent_dirs(path)
        stream.seek(entry.offset)
        try:
            out = open(path, "wb")
        except (OSError, ValueError) as exc:
            raise ArchiveIOError(f"could not open '{path}' for writing: {exc}", path) from exc
        with out:
            copied = copy_bytes(stream, out, entry.length, config.chunk_size)
        if copied != entry.length:
            raise FormatError(f"unexpected end of archive in '{entry.path}' ({copied} of {entry.length} bytes)")
    return entries


def unpack(archive_path: str | os.PathLike, dest_dir: str | os.PathLike, config: Optional[MsfConfig] = None) -> List[Entry]:
    """Extract every entry of `archive_path` under `dest_dir`, overwriting existing files."""
    try:
        archive = open(archive_path, "rb")
    except OSError as exc:
        raise ArchiveIOError(f"could not open '{archive_path}': {exc.strerror}", os.fspath(archive_path)) from exc
    with archive:
        return unpack_from_stream(archive, dest_dir, config)


def list_entries(archive_path: str | os.PathLike) -> List[Entry]:
    try:
        with open(archive_path, "rb") as archive:
            return read_archive_table(archive)
    except OSError as exc:
        raise ArchiveIOError(f"could not open '{archive_path}': {exc.strerror}", os.fspath(archive_path)) from exc


def read_member(archive_path: str | os.PathLike, name: str) -> Optional[bytes]:
    """Return the contents of the entry called `name`, or None if the archive has no such entry."""
    try:
        with open(archive_path, "rb") as archive:
            for entry in read_archive_table(archive):
                if entry.path != name:
                    continue
                archive.seek(entry.offset)
                data = archive.read(entry.length)
                if len(data) != entry.length:
                    raise FormatError(f"unexpected end of archive in '{entry.path}'")
                return data
    except OSError as exc:
        raise ArchiveIOError(f"could not read '{archive_path}': {exc.strerror}", os.fspath(archive_path)) from exc
    logger.warning("'%s' not found in %s", name, archive_path)
    return None
