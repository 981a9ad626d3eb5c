"""Command handlers for the kmsctl CLI.

Subcommand handlers:
  - KmsListHandler / KmsCreateHandler / KmsDeleteHandler  → kmsctl kms
  - BucketsListHandler / BucketsCreateHandler / BucketsDeleteHandler → kmsctl buckets
  - ListHandler  → kmsctl list
  - GetHandler   → kmsctl get
  - CatHandler   → kmsctl cat
  - PutHandler   → kmsctl put
  - EditHandler  → kmsctl edit
"""
from .base_handler import ModeHandler
from .kms_handler import KmsListHandler, KmsCreateHandler, KmsDeleteHandler
from .buckets_handler import BucketsListHandler, BucketsCreateHandler, BucketsDeleteHandler
from .list_handler import ListHandler
from .get_handler import GetHandler
from .cat_handler import CatHandler
from .put_handler import PutHandler
from .edit_handler import EditHandler

__all__ = [
    'ModeHandler',
    'KmsListHandler',
    'KmsCreateHandler',
    'KmsDeleteHandler',
    'BucketsListHandler',
    'BucketsCreateHandler',
    'BucketsDeleteHandler',
    'ListHandler',
    'GetHandler',
    'CatHandler',
    'PutHandler',
    'EditHandler',
]
