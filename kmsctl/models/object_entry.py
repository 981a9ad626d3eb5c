"""
ObjectEntry model for objects stored in a bucket
"""
from datetime import datetime
from typing import Optional

PATH_SEPARATOR = "/"


class ObjectEntry:
    """
    Represents a logical file in a bucket.

    Keys ending in the path separator are pseudo-directory markers
    created by consoles and tools; they never hold file content.
    """

    def __init__(self, key: str, size: int = 0, storage_class: Optional[str] = None,
                 owner: Optional[str] = None, last_modified: Optional[datetime] = None,
                 etag: Optional[str] = None):
        """
        Initialize an ObjectEntry.

        Args:
            key: Full object key (path within the bucket)
            size: Content length in bytes
            storage_class: S3 storage class, if reported
            owner: Owner display name, if reported
            last_modified: Last modification time
            etag: Entity tag of the object
        """
        self.key = key
        self.size = size
        self.storage_class = storage_class
        self.owner = owner
        self.last_modified = last_modified
        self.etag = etag

    def is_directory_marker(self) -> bool:
        """Check if the key is a directory placeholder."""
        return self.key.endswith(PATH_SEPARATOR)

    def to_dict(self):
        """Serialize to dictionary"""
        return {
            "key": self.key,
            "size": self.size,
            "class": self.storage_class,
            "etag": self.etag,
            "owner": self.owner,
            "last-modified": self.last_modified,
        }

    @classmethod
    def from_dict(cls, data):
        """Deserialize from a ``ListObjectsV2`` content entry"""
        owner = data.get("Owner") or {}
        etag = data.get("ETag")
        return cls(
            key=data.get("Key", ""),
            size=data.get("Size", 0),
            storage_class=data.get("StorageClass"),
            owner=owner.get("DisplayName") or owner.get("ID"),
            last_modified=data.get("LastModified"),
            etag=etag.strip('"') if etag else None,
        )

    def __repr__(self):
        return f"ObjectEntry({self.key!r}, size={self.size})"
