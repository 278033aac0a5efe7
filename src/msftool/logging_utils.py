import logging
import os

from dotenv import find_dotenv, load_dotenv

ROOT_LOGGER = "msftool"


def configure(force: bool = False) -> logging.Logger:
    """Attach the handler to the msftool logger, at the MSF_LOG level.

    MSF_LOG may come from the environment or from a ``.env`` file in the
    working directory. With `force`, an existing handler is replaced.
    """
    root = logging.getLogger(ROOT_LOGGER)
    if root.handlers and not force:
        return root
    for old in list(root.handlers):
        root.removeHandler(old)
    load_dotenv(find_dotenv(usecwd=True))
    level = getattr(logging, os.getenv("MSF_LOG", "INFO").upper(), logging.INFO)
    root.setLevel(level)
    handler = logging.StreamHandler()
    handler.setLevel(level)
    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    root.addHandler(handler)
    return root


def get_logger(name: str) -> logging.Logger:
    """Logger for `name`, writing through the single handler on the msftool logger.

    Module names outside the package are nested under it so every message
    shares one handler and one level.
    """
    root = configure()
    if name == ROOT_LOGGER:
        return root
    if not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
