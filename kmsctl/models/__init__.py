"""
Data models for kmsctl
"""

from .key_alias import KeyAlias, normalize_alias_name, ALIAS_PREFIX
from .bucket import Bucket
from .object_entry import ObjectEntry, PATH_SEPARATOR
from .transfer import TransferRequest

__all__ = [
    'KeyAlias',
    'normalize_alias_name',
    'ALIAS_PREFIX',
    'Bucket',
    'ObjectEntry',
    'PATH_SEPARATOR',
    'TransferRequest',
]
