"""
Defines project-specific exception classes.

Every error raised by the core derives from :class:`KmsctlError` so the
CLI boundary can report it with a single ``[error]`` line and exit.
"""
from contextlib import contextmanager
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError


class KmsctlError(Exception):
    """Base class for all kmsctl errors."""
    pass


class ConfigurationError(KmsctlError):
    """Raised when region, credentials, output format or config are invalid."""
    pass


class NotFoundError(KmsctlError):
    """Raised when a KMS alias does not exist."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"kms alias does not exist: {name}")


class BucketNotFoundError(KmsctlError):
    """Raised when the referenced bucket does not exist."""

    def __init__(self, bucket: str):
        self.bucket = bucket
        super().__init__(f"the bucket: {bucket} does not exist")


class BucketNotEmptyError(KmsctlError):
    """Raised when deleting a bucket which still holds objects without force."""

    def __init__(self, bucket: str, count: int):
        self.bucket = bucket
        self.count = count
        super().__init__(
            f"the bucket: {bucket} is not empty ({count} object(s)), "
            "either force (--force) deletion or empty the bucket"
        )


class AlreadyExistsError(KmsctlError):
    """Raised when creating an alias or bucket which already exists."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"a {kind} already exists with this name: {name}")


class InvalidFilterError(KmsctlError):
    """Raised when a filter is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        super().__init__(f"the filter: {pattern} is invalid, message: {reason}")


class NoInputError(KmsctlError):
    """Raised when an upload is requested without any files."""

    def __init__(self):
        super().__init__("you have not specified any files to upload")


class EditorError(KmsctlError):
    """Raised when the external editor cannot be run or exits non-zero."""
    pass


class ProviderError(KmsctlError):
    """
    Raised when S3 or KMS reports a failure. Wraps the botocore
    exception and keeps its error code when one is available.
    """

    def __init__(self,
                 action: str,
                 orig_exc: Exception,
                 code: Optional[str] = None):
        self.action = action
        self.orig_exc = orig_exc
        self.code = code

        full_msg = f"{action} failed"
        if code:
            full_msg += f" ({code})"
        full_msg += f": {orig_exc}"
        super().__init__(full_msg)


@contextmanager
def provider_errors(action: str):
    """Translate botocore exceptions raised in the block into ProviderError.

    Args:
        action: Short description of the provider call, used in the message
    """
    try:
        yield
    except ClientError as e:
        code = e.response.get("Error", {}).get("Code")
        raise ProviderError(action, e, code=code) from e
    except BotoCoreError as e:
        raise ProviderError(action, e) from e


class LocalFileError(KmsctlError):
    """Raised when reading or writing a local file or directory fails."""

    def __init__(self, action: str, orig_exc: OSError):
        self.action = action
        self.orig_exc = orig_exc
        super().__init__(f"{action}, error: {orig_exc}")


@contextmanager
def local_file_errors(action: str):
    """Translate OSError raised in the block into LocalFileError.

    Args:
        action: Short description of the file operation, used in the message
    """
    try:
        yield
    except OSError as e:
        raise LocalFileError(action, e) from e
