"""Utility modules for kmsctl.

Sub-packages:
- aws/ — boto3 session and client construction
- display/ — output formatter and console helpers
"""

from .config_loader import ConfigLoader, handle_config_update
from .file_utils import ensure_dir, write_file, read_file, expand_files, parse_perms
from .logger import get_logger, setup_logging

__all__ = [
    'ConfigLoader',
    'handle_config_update',
    'ensure_dir',
    'write_file',
    'read_file',
    'expand_files',
    'parse_perms',
    'get_logger',
    'setup_logging',
]
