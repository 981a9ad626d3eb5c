"""
TransferRequest model describing one get/put invocation
"""
from typing import List, Optional

from .object_entry import PATH_SEPARATOR


class TransferRequest:
    """
    Parameters of a single download or upload.

    Built per invocation from the command line and never persisted.
    """

    def __init__(self, bucket: str, paths: Optional[List[str]] = None,
                 recursive: bool = False, flatten: bool = False,
                 filter_pattern: str = ".*", output_dir: str = "./secrets",
                 kms_key_id: Optional[str] = None, perms: int = 0o744):
        """
        Initialize a TransferRequest.

        Args:
            bucket: Bucket name
            paths: Key prefixes (download) or local paths (upload)
            recursive: Traverse below the first level of each prefix
            flatten: Drop directory structure from destination names
            filter_pattern: Regular expression applied to object keys
            output_dir: Local directory downloads are written to
            kms_key_id: KMS key id, ARN or alias used to encrypt uploads
            perms: Permission bits applied to downloaded files
        """
        self.bucket = bucket
        self.paths = list(paths or [])
        self.recursive = recursive
        self.flatten = flatten
        self.filter_pattern = filter_pattern
        self.output_dir = output_dir
        self.kms_key_id = kms_key_id
        self.perms = perms

    def prefixes(self) -> List[str]:
        """
        Key prefixes to process, with a leading separator removed.

        Returns:
            ``[""]`` (the bucket root) when no paths were given
        """
        if not self.paths:
            return [""]
        return [p[1:] if p.startswith(PATH_SEPARATOR) else p for p in self.paths]
