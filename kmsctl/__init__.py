"""
kmsctl: KMS-encrypted secrets in S3.

Provides a CLI for managing KMS keys and aliases, S3 buckets, and
the server-side encrypted secret files stored inside them.
"""

__version__ = "0.2.0"
__author__ = "kmsctl contributors"
