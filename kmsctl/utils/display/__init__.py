"""Display utilities sub-package.

Contains the command output formatter and console helpers.
"""
from .display_utils import (
    print_error,
    format_timestamp,
)
from .formatter import OutputFormatter, SUPPORTED_FORMATS

__all__ = [
    'print_error',
    'format_timestamp',
    'OutputFormatter',
    'SUPPORTED_FORMATS',
]
