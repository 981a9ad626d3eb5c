"""
AWS service package.

- :mod:`operations` — S3 bucket and object primitives
- :mod:`kms_operations` — KMS alias resolution and key lifecycle
"""
from .operations import S3Operations
from .kms_operations import KmsOperations

__all__ = [
    'S3Operations',
    'KmsOperations',
]
