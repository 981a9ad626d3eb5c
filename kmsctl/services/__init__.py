"""
Services for kmsctl.

- :mod:`aws` — S3 and KMS provider operations
- :mod:`traversal` — object listing filters
- :mod:`transfer` — downloads, uploads and inline edits
"""
from .aws import S3Operations, KmsOperations
from .transfer import TransferOrchestrator

__all__ = [
    'S3Operations',
    'KmsOperations',
    'TransferOrchestrator',
]
