import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

from .errors import ArchiveError

NAME_POLICIES = ("error", "truncate")
_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class MsfConfig:
    allow_empty: bool = False
    sort_entries: bool = False
    name_policy: str = "error"
    allow_unsafe_paths: bool = False
    chunk_size: int = 1024 * 1024

    def __post_init__(self) -> None:
        if self.name_policy not in NAME_POLICIES:
            raise ArchiveError(f"unknown name policy {self.name_policy!r}, expected one of {NAME_POLICIES}")
        if self.chunk_size <= 0:
            raise ArchiveError(f"chunk size must be positive, got {self.chunk_size}")


def _env_flag(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    value = value.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ArchiveError(f"{key} must be a boolean, got {value!r}")


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ArchiveError(f"{key} must be an integer, got {value!r}") from exc


def load_config() -> MsfConfig:
    """Build the settings from the environment, reading a ``.env`` file from the working directory first if present."""
    load_dotenv(find_dotenv(usecwd=True))
    return MsfConfig(
        allow_empty=_env_flag("MSF_ALLOW_EMPTY", False),
        sort_entries=_env_flag("MSF_SORT_ENTRIES", False),
        name_policy=os.getenv("MSF_NAME_POLICY", "error").strip().lower(),
        allow_unsafe_paths=_env_flag("MSF_ALLOW_UNSAFE_PATHS", False),
        chunk_size=_env_int("MSF_CHUNK_SIZE", 1024 * 1024),
    )
