from .config import MsfConfig, load_config
from .errors import ArchiveError, ArchiveIOError, FormatError, MsfError, NameTooLong, ResourceExhaustion
from .format import MAGIC, Entry
from .reader import list_entries, read_member, unpack
from .scanner import scan_directory
from .writer import pack

__all__ = [
    "MAGIC",
    "ArchiveError",
    "ArchiveIOError",
    "Entry",
    "FormatError",
    "MsfConfig",
    "MsfError",
    "NameTooLong",
    "ResourceExhaustion",
    "list_entries",
    "load_config",
    "pack",
    "read_member",
    "scan_directory",
    "unpack",
]
