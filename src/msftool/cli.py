import sys
from typing import List, Optional

from .config import load_config
from .errors import MsfError
from .logging_utils import get_logger
from .reader import unpack
from .writer import pack

logger = get_logger("msftool")


def usage(prog: str) -> None:
    print("msftool - pack a directory tree into an .msf archive and back.", file=sys.stderr)
    print("\nUsage:", file=sys.stderr)
    print(f"  {prog} pack <msf> <source_dir>", file=sys.stderr)
    print(f"  {prog} unpack <msf> <dest_dir>", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> None:
    """Command-line interface handler."""
    args = sys.argv if argv is None else argv
    prog = args[0] if args else "msftool"
    if len(args) != 4 or args[1] not in ("pack", "unpack"):
        usage(prog)
        sys.exit(1)

    command, msf_path, directory = args[1], args[2], args[3]
    try:
        config = load_config()
        if command == "pack":
            pack(msf_path, directory, config)
        else:
            unpack(msf_path, directory, config)
    except MsfError as exc:
        logger.error("%s failed: %s", command, exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
