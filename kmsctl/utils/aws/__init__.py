"""AWS utilities sub-package.

Contains boto3 session and client construction.
"""
from .aws_utils import (
    create_boto3_session,
    build_clients,
)

__all__ = [
    'create_boto3_session',
    'build_clients',
]
