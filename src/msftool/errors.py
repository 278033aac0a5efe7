from typing import Optional


class MsfError(Exception):
    """Base class for every failure raised while packing or unpacking."""


class FormatError(MsfError):
    """The archive is not an MSF stream, or its table is corrupt."""


class ArchiveError(MsfError):
    """The request cannot be satisfied: empty tree, 32-bit overflow, bad setting."""


class ResourceExhaustion(MsfError):
    """Memory ran out while allocating the table or a copy buffer."""


class NameTooLong(MsfError):
    def __init__(self, name: bytes, limit: int) -> None:
        super().__init__(f"entry name is {len(name)} bytes, limit is {limit}: {name[:64]!r}...")
        self.name = name
        self.limit = limit


class ArchiveIOError(MsfError):
    """A file or directory could not be opened, read or written.

    The originating ``OSError`` is chained as ``__cause__`` by the raiser.
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path
