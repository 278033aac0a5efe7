from __future__ import annotations

import os
from typing import BinaryIO, List, Optional, Sequence

from .config import MsfConfig
from .errors import ArchiveError, ArchiveIOError
from .format import Entry, assign_offsets, copy_bytes, encode_entry, encode_header
from .logging_utils import get_logger
from .scanner import scan_directory

logger = get_logger(__name__)


def pack_to_stream(entries: Sequence[Entry], stream: BinaryIO, chunk_size: int = 1024 * 1024) -> int:
    """Write header, table and file data for `entries` to `stream`.

    Offsets are assigned here, in table order, and the data is appended in
    that same order so no seeking is needed. Returns the bytes written.
    """
    total = assign_offsets(entries)
    stream.write(encode_header(len(entries)))
    for entry in entries:
        stream.write(encode_entry(entry))

    for entry in entries:
        logger.debug("... %s", entry.path)
        if entry.source is None:
            raise ArchiveError(f"entry '{entry.path}' has no source file")
        try:
            with open(entry.source, "rb") as src:
                copied = copy_bytes(src, stream, entry.length, chunk_size)
                grew = bool(src.read(1))
        except OSError as exc:
            raise ArchiveIOError(f"could not read '{entry.source}': {exc.strerror}", str(entry.source)) from exc
        if copied != entry.length or grew:
            raise ArchiveIOError(
                f"'{entry.source}' changed size while packing (expected {entry.length} bytes)", str(entry.source)
            )
    return total


def pack(archive_path: str | os.PathLike, source_dir: str | os.PathLike, config: Optional[MsfConfig] = None) -> List[Entry]:
    """Pack every regular file under `source_dir` into `archive_path`.

    The tree is scanned before the archive is opened, so a failed scan
    leaves no file behind. A failure while writing may leave a partial
    archive.
    """
    config = config or MsfConfig()
    logger.info("Scanning directory '%s'", source_dir)
    entries = scan_directory(source_dir, sort_entries=config.sort_entries, name_policy=config.name_policy)
    if not entries:
        if not config.allow_empty:
            raise ArchiveError(f"nothing to pack in '{source_dir}'")
        logger.warning("No files under '%s', writing an empty archive", source_dir)

    logger.info("Writing %s", archive_path)
    try:
        with open(archive_path, "wb") as out:
            total = pack_to_stream(entries, out, config.chunk_size)
    except OSError as exc:
        raise ArchiveIOError(f"could not write '{archive_path}': {exc.strerror}", os.fspath(archive_path)) from exc
    logger.info("Packed %d files into %s (%d bytes)", len(entries), archive_path, total)
    return entries
