import os
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, List, Optional, Sequence

from .errors import ArchiveError, FormatError, NameTooLong, ResourceExhaustion

"""
.msf File Structure (all integers big endian):
magic       8 bytes         00 00 03 E7 00 00 00 02
num_files   uint32          number of table entries

then num_files entries:
offset      uint32          absolute position of the file data in the archive
length      uint32          size of the file data
name_length uint8           size of the name, 0..255
name        name_length     relative path, '/' separated, not null-terminated

The data region follows the last entry. Each entry's bytes live at its
offset; a freshly packed archive stores them back to back in table order.
"""

MAGIC = b"\x00\x00\x03\xE7\x00\x00\x00\x02"
HEADER_FMT = ">8sI"
HEADER_SIZE = struct.calcsize(HEADER_FMT)
ENTRY_FMT = ">IIB"
ENTRY_FIXED_SIZE = struct.calcsize(ENTRY_FMT)
MAX_NAME_LEN = 255  # the length field is one byte
MAX_U32 = 0xFFFFFFFF


@dataclass
class Entry:
    name: bytes
    length: int
    offset: int = 0
    source: Optional[Path] = None

    @property
    def path(self) -> str:
        return os.fsdecode(self.name)

    @property
    def end(self) -> int:
        return self.offset + self.length


def entry_table_size(entry: Entry) -> int:
    return ENTRY_FIXED_SIZE + len(entry.name)


def data_region_start(entries: Sequence[Entry]) -> int:
    return HEADER_SIZE + sum(entry_table_size(e) for e in entries)


def assign_offsets(entries: Sequence[Entry]) -> int:
    """Lay the entries out back to back after the table.

    Returns the total archive size. Raises ArchiveError if any offset or
    length does not fit the 32-bit fields.
    """
    cursor = data_region_start(entries)
    for entry in entries:
        if entry.length > MAX_U32 or cursor > MAX_U32:
            raise ArchiveError(f"'{entry.path}' does not fit in a 32-bit archive (offset {cursor}, length {entry.length})")
        entry.offset = cursor
        cursor += entry.length
    return cursor


def encode_header(num_files: int) -> bytes:
    if num_files > MAX_U32:
        raise ArchiveError(f"too many files for one archive: {num_files}")
    return struct.pack(HEADER_FMT, MAGIC, num_files)


def encode_entry(entry: Entry) -> bytes:
    if len(entry.name) > MAX_NAME_LEN:
        raise NameTooLong(entry.name, MAX_NAME_LEN)
    return struct.pack(ENTRY_FMT, entry.offset, entry.length, len(entry.name)) + entry.name


def _read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise FormatError(f"unexpected end of archive while reading {what} ({len(data)} of {size} bytes)")
    return data


def read_header(stream: BinaryIO) -> int:
    """Validate the magic and return num_files."""
    raw = stream.read(HEADER_SIZE)
    if len(raw) < len(MAGIC) or raw[:len(MAGIC)] != MAGIC:
        raise FormatError("invalid MSF magic")
    if len(raw) != HEADER_SIZE:
        raise FormatError("unexpected end of archive while reading header")
    _, num_files = struct.unpack(HEADER_FMT, raw)
    return num_files


def read_table(stream: BinaryIO, num_files: int, stream_size: Optional[int] = None) -> List[Entry]:
    """Read every table entry in a single forward pass, before any file data."""
    if stream_size is not None:
        remaining = stream_size - stream.tell()
        if num_files * ENTRY_FIXED_SIZE > remaining:
            raise FormatError(f"table of {num_files} entries cannot fit in the remaining {remaining} bytes")
    try:
        entries: List[Entry] = []
        for i in range(num_files):
            offset, length, name_len = struct.unpack(ENTRY_FMT, _read_exact(stream, ENTRY_FIXED_SIZE, f"entry {i}"))
            name = _read_exact(stream, name_len, f"name of entry {i}")
            entries.append(Entry(name=name, length=length, offset=offset))
    except MemoryError as exc:
        raise ResourceExhaustion(f"out of memory allocating a table of {num_files} entries") from exc
    return entries


def copy_bytes(src: BinaryIO, dst: BinaryIO, length: int, chunk_size: int) -> int:
    """Copy up to `length` bytes from src to dst. Returns how many were copied."""
    buf = bytearray(min(chunk_size, length))
    view = memoryview(buf)
    copied = 0
    while copied < length:
        want = min(len(buf), length - copied)
        got = src.readinto(view[:want])
        if not got:
            break
        dst.write(view[:got])
        copied += got
    return copied
