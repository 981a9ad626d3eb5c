"""Shared fixtures for the kmsctl test suite.

boto3 clients are replaced by MagicMock objects; paginators return the
pages handed to the helper fixtures so tests read like the listing
responses S3 and KMS would produce.
"""
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from kmsctl.services.aws.kms_operations import KmsOperations
from kmsctl.services.aws.operations import S3Operations


def client_error(code="AccessDenied", operation="ListBuckets", message="denied"):
    """Build a real botocore ClientError."""
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


def s3_object(key, size=10, owner="ops"):
    """A ListObjectsV2 content entry."""
    return {
        "Key": key,
        "Size": size,
        "StorageClass": "STANDARD",
        "ETag": '"d41d8cd98f00b204e9800998ecf8427e"',
        "Owner": {"DisplayName": owner, "ID": "abc123"},
        "LastModified": datetime(2016, 3, 1, 12, 30, tzinfo=timezone.utc),
    }


class FakeBody:
    """Stand-in for a StreamingBody."""

    def __init__(self, content):
        self.content = content
        self.closed = False

    def read(self):
        return self.content

    def close(self):
        self.closed = True


@pytest.fixture
def s3_client():
    client = MagicMock()
    client.list_buckets.return_value = {"Buckets": []}
    client.get_paginator.return_value.paginate.return_value = [{}]
    return client


@pytest.fixture
def kms_client():
    client = MagicMock()
    client.get_paginator.return_value.paginate.return_value = [{"Aliases": []}]
    return client


@pytest.fixture
def set_buckets(s3_client):
    """Set the buckets returned by ListBuckets."""
    def _set(*names):
        s3_client.list_buckets.return_value = {
            "Buckets": [
                {"Name": n, "CreationDate": datetime(2016, 1, 1, tzinfo=timezone.utc)}
                for n in names
            ]
        }
    return _set


@pytest.fixture
def set_objects(s3_client):
    """Set the pages returned by the list_objects_v2 paginator."""
    def _set(*pages):
        s3_client.get_paginator.return_value.paginate.return_value = [
            {"Contents": [s3_object(k) for k in keys]} if keys else {} for keys in pages
        ]
    return _set


@pytest.fixture
def set_contents(s3_client):
    """Serve object bodies from a dict of key -> bytes."""
    def _set(contents, kms_key_id="arn:aws:kms:eu-west-1:111:key/current"):
        def get_object(Bucket, Key):
            return {"Body": FakeBody(contents[Key]), "SSEKMSKeyId": kms_key_id}
        s3_client.get_object.side_effect = get_object
    return _set


@pytest.fixture
def set_aliases(kms_client):
    """Set the aliases returned by the list_aliases paginator."""
    def _set(*entries):
        kms_client.get_paginator.return_value.paginate.return_value = [
            {"Aliases": list(entries)}
        ]
    return _set


@pytest.fixture
def s3_ops(s3_client):
    return S3Operations(s3_client, region="eu-west-1")


@pytest.fixture
def kms_ops(kms_client):
    return KmsOperations(kms_client)
