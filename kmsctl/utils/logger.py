"""Logging for kmsctl.

Records are written to *stderr* with a coloured ``[level]`` tag; command
output proper goes to *stdout* through the output formatter, so the two
never interleave in a pipe.

Usage::

    from kmsctl.utils.logger import get_logger

    log = get_logger(__name__)
    log.warning("Skipping special file: %s", path)
    log.debug("ListObjectsV2 bucket=%s prefix=%r", bucket, prefix)  # --verbose
"""
import logging
import sys

from colorama import Fore, Style

__all__ = ["get_logger", "setup_logging"]

ROOT_LOGGER = "kmsctl"

# level -> (tag, colour)
_TAGS = {
    logging.DEBUG: ("debug", Fore.WHITE),
    logging.INFO: ("info", Fore.CYAN),
    logging.WARNING: ("warning", Fore.YELLOW),
    logging.ERROR: ("error", Fore.RED),
    logging.CRITICAL: ("critical", Fore.RED + Style.BRIGHT),
}


class ColouredFormatter(logging.Formatter):
    """Prefixes each message with its coloured level tag."""

    def format(self, record: logging.LogRecord) -> str:
        tag, colour = _TAGS.get(record.levelno, (record.levelname.lower(), ""))
        return f"{colour}[{tag}]{Style.RESET_ALL} {super().format(record)}"


def _level_for(verbose: bool, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    return logging.DEBUG if verbose else logging.INFO


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure the *kmsctl* logger from the ``--verbose``/``--quiet`` flags.

    Safe to call more than once; the stderr handler is installed on the
    first call and only its level changes afterwards.

    Args:
        verbose: Log at ``DEBUG``, tracing every provider call.
        quiet: Log errors only (wins over *verbose*).
    """
    level = _level_for(verbose, quiet)
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)

    if root.handlers:
        for existing in root.handlers:
            existing.setLevel(level)
        return

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(ColouredFormatter("%(message)s"))
    root.addHandler(stderr_handler)


def get_logger(name: str) -> logging.Logger:
    """Return a logger below the *kmsctl* root logger.

    The root logger gets its default configuration the first time a
    module asks for a logger.

    Args:
        name: Usually the calling module's ``__name__``.
    """
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        setup_logging()

    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return root.getChild(name)
