"""AWS utilities for session management.

Builds the boto3 session and the S3/KMS clients from the region and
credential settings resolved by the CLI.
"""
import os
from typing import Optional

import boto3
import botocore.session

from ...exceptions import ConfigurationError
from ..logger import get_logger

log = get_logger(__name__)


def create_boto3_session(
    region_name: Optional[str],
    profile_name: Optional[str] = None,
    credentials_file: Optional[str] = None,
    access_key: Optional[str] = None,
    secret_key: Optional[str] = None,
    session_token: Optional[str] = None,
):
    """Create a boto3 session for the given region and credentials.

    Static credentials win over a named profile. With neither, the
    default boto3 credential chain applies.

    Args:
        region_name: AWS region the resources reside in
        profile_name: Named profile from the shared credentials file
        credentials_file: Path to the shared credentials file
        access_key: Static access key id
        secret_key: Static secret access key
        session_token: Optional session token for static credentials

    Returns:
        boto3.Session object

    Raises:
        ConfigurationError: If the region is missing or the static
            credentials are incomplete

    Example:
        >>> session = create_boto3_session('eu-west-1', profile_name='secrets')
        >>> s3 = session.client('s3')
    """
    if not region_name:
        raise ConfigurationError("you have not specified the aws region the resources reside")

    if access_key or secret_key:
        if not secret_key:
            raise ConfigurationError("you have specified an access key without a secret key")
        if not access_key:
            raise ConfigurationError("you have specified a secret key without an access key")
        log.debug("Using static credentials for region %s", region_name)
        return boto3.Session(
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            aws_session_token=session_token or None,
            region_name=region_name,
        )

    if profile_name:
        core_session = botocore.session.Session()
        if credentials_file:
            core_session.set_config_variable(
                'credentials_file', os.path.expanduser(credentials_file)
            )
        log.debug("Using profile %s from %s", profile_name, credentials_file or "default path")
        return boto3.Session(
            botocore_session=core_session,
            profile_name=profile_name,
            region_name=region_name,
        )

    log.debug("Using default credential chain for region %s", region_name)
    return boto3.Session(region_name=region_name)


def build_clients(session):
    """Create the S3 and KMS clients from a session.

    Args:
        session: boto3.Session

    Returns:
        Tuple of (s3_client, kms_client)
    """
    return session.client('s3'), session.client('kms')
