"""
Low-level S3 primitive operations.

Provides the bucket and object primitives every higher-level command
builds on: listing, existence checks, fetching, encrypted uploads and
deletion.
"""
from typing import List, Optional

from ...exceptions import (
    AlreadyExistsError,
    BucketNotEmptyError,
    BucketNotFoundError,
    provider_errors,
)
from ...models.bucket import Bucket
from ...models.object_entry import ObjectEntry, PATH_SEPARATOR
from ...utils.logger import get_logger

log = get_logger(__name__)

# CreateBucket rejects a LocationConstraint for the default region
DEFAULT_BUCKET_REGION = "us-east-1"

SSE_KMS = "aws:kms"


class S3Operations:
    """Primitive S3 operations over an injected boto3 S3 client.

    Args:
        s3_client: boto3 S3 client
        region: Region used when creating buckets
    """

    def __init__(self, s3_client, region: Optional[str] = None):
        self.s3_client = s3_client
        self.region = region

    # ── Buckets ────────────────────────────────────────────────────────

    def list_buckets(self) -> List[Bucket]:
        """List every bucket owned by the caller.

        Returns:
            List of Bucket
        """
        log.debug("ListBuckets")
        with provider_errors("list buckets"):
            resp = self.s3_client.list_buckets()
        return [Bucket.from_dict(b) for b in resp.get('Buckets', [])]

    def has_bucket(self, bucket: str) -> bool:
        """Check if the bucket exists.

        Args:
            bucket: Bucket name

        Returns:
            True if a bucket with that name is listed
        """
        return any(b.name == bucket for b in self.list_buckets())

    def create_bucket(self, bucket: str) -> None:
        """Create a bucket in the configured region.

        Args:
            bucket: Bucket name

        Raises:
            AlreadyExistsError: If the bucket already exists
        """
        if self.has_bucket(bucket):
            raise AlreadyExistsError("bucket", bucket)

        params = {'Bucket': bucket}
        if self.region and self.region != DEFAULT_BUCKET_REGION:
            params['CreateBucketConfiguration'] = {'LocationConstraint': self.region}

        log.debug("CreateBucket %s", params)
        with provider_errors(f"create bucket {bucket}"):
            self.s3_client.create_bucket(**params)

    def delete_bucket(self, bucket: str, force: bool = False) -> int:
        """Delete a bucket, optionally emptying it first.

        Objects are removed one at a time before the bucket itself; a
        failure part way leaves the bucket partially emptied.

        Args:
            bucket: Bucket name
            force: Delete contained objects instead of refusing

        Returns:
            Number of objects deleted

        Raises:
            BucketNotFoundError: If the bucket does not exist
            BucketNotEmptyError: If objects remain and force is not set
        """
        if not self.has_bucket(bucket):
            raise BucketNotFoundError(bucket)

        entries = self.list_objects(bucket, "", include_markers=True)
        if entries and not force:
            raise BucketNotEmptyError(bucket, len(entries))

        for entry in entries:
            self.delete_object(bucket, entry.key)

        log.debug("DeleteBucket %s", bucket)
        with provider_errors(f"delete bucket {bucket}"):
            self.s3_client.delete_bucket(Bucket=bucket)

        return len(entries)

    # ── Objects ────────────────────────────────────────────────────────

    def list_objects(self, bucket: str, prefix: str = "",
                     include_markers: bool = False) -> List[ObjectEntry]:
        """List the objects under a prefix.

        Follows every page of the listing. Directory markers (keys
        ending in the path separator) are dropped unless
        *include_markers* is set.

        Args:
            bucket: Bucket name
            prefix: Key prefix to scope the listing
            include_markers: Keep directory markers (used when emptying a bucket)

        Returns:
            List of ObjectEntry
        """
        entries = []

        log.debug("ListObjectsV2 bucket=%s prefix=%r", bucket, prefix)
        with provider_errors(f"list objects in {bucket}"):
            paginator = self.s3_client.get_paginator('list_objects_v2')
            pages = paginator.paginate(Bucket=bucket, Prefix=prefix, FetchOwner=True)

            for page in pages:
                for obj in page.get('Contents', []):
                    entry = ObjectEntry.from_dict(obj)

                    if entry.is_directory_marker() and not include_markers:
                        continue

                    entries.append(entry)

        return entries

    def count_objects(self, bucket: str) -> int:
        """Count the files held in a bucket."""
        return len(self.list_objects(bucket, ""))

    def has_key(self, bucket: str, key: str) -> bool:
        """Check if a key exists in the bucket.

        Args:
            bucket: Bucket name
            key: Full object key

        Returns:
            True if an object with exactly this key is listed
        """
        parent = key.rsplit(PATH_SEPARATOR, 1)[0] + PATH_SEPARATOR if PATH_SEPARATOR in key else ""
        return any(entry.key == key for entry in self.list_objects(bucket, parent))

    def get_object(self, bucket: str, key: str):
        """Fetch an object's content and encryption metadata.

        Args:
            bucket: Bucket name
            key: Object key

        Returns:
            Tuple of (content_bytes, sse_kms_key_id or None)
        """
        log.debug("GetObject s3://%s/%s", bucket, key)
        with provider_errors(f"get s3://{bucket}/{key}"):
            resp = self.s3_client.get_object(Bucket=bucket, Key=key)
            body = resp['Body']
            try:
                content = body.read()
            finally:
                body.close()
        return content, resp.get('SSEKMSKeyId')

    def get_object_content(self, bucket: str, key: str) -> bytes:
        """Fetch an object's decrypted content."""
        content, _ = self.get_object(bucket, key)
        return content

    def put_object(self, bucket: str, key: str, content: bytes, kms_key_id: str) -> None:
        """Upload content encrypted server side with a KMS key.

        Args:
            bucket: Bucket name
            key: Object key
            content: Raw bytes to store
            kms_key_id: KMS key id, ARN or alias to encrypt with
        """
        log.debug("PutObject s3://%s/%s kms=%s", bucket, key, kms_key_id)
        with provider_errors(f"put s3://{bucket}/{key}"):
            self.s3_client.put_object(
                Bucket=bucket,
                Key=key,
                Body=content,
                ServerSideEncryption=SSE_KMS,
                SSEKMSKeyId=kms_key_id,
            )

    def delete_object(self, bucket: str, key: str) -> None:
        """Delete a single object."""
        log.debug("DeleteObject s3://%s/%s", bucket, key)
        with provider_errors(f"remove the file: {key} from bucket {bucket}"):
            self.s3_client.delete_object(Bucket=bucket, Key=key)
