"""
Display and UI utilities for kmsctl
"""
import sys
from colorama import Fore, Style


def print_error(message, stream=None):
    """
    Print an ``[error]`` line to stderr.

    Args:
        message: Error text (without the prefix)
        stream: Optional stream override, used by tests
    """
    stream = stream if stream is not None else sys.stderr
    print(f"{Fore.RED}[error] {message}{Style.RESET_ALL}", file=stream)


def format_timestamp(value):
    """
    Format a datetime in the RFC 822 style used by listings.

    Args:
        value: datetime or None

    Returns:
        Formatted string, or an empty string when *value* is missing

    Example:
        >>> from datetime import datetime, timezone
        >>> format_timestamp(datetime(2016, 3, 1, 12, 30, tzinfo=timezone.utc))
        '01 Mar 16 12:30 UTC'
    """
    if value is None:
        return ""
    tz = value.strftime('%Z') or 'UTC'
    return f"{value.strftime('%d %b %y %H:%M')} {tz}"
