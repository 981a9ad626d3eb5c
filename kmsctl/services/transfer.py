"""
Transfer orchestration between a bucket and the local file system.

Downloads mirror (or flatten) object keys under an output directory,
uploads expand local paths into files and push each one encrypted
with a KMS key, and inline edits round-trip an object through the
user's editor.
"""
import os
import shlex
import subprocess
import tempfile
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from ..exceptions import (
    BucketNotFoundError,
    ConfigurationError,
    EditorError,
    KmsctlError,
    NoInputError,
    local_file_errors,
)
from ..models.object_entry import PATH_SEPARATOR
from ..models.transfer import TransferRequest
from ..utils.file_utils import ensure_dir, expand_files, read_file, write_file
from ..utils.logger import get_logger
from .aws.operations import S3Operations
from .traversal import compile_filter, select_objects

log = get_logger(__name__)

DEFAULT_EDITOR = "vim"


def destination_path(output_dir: str, key: str, flatten: bool) -> str:
    """Compute where an object is written locally.

    Args:
        output_dir: Base output directory
        key: Object key
        flatten: Collapse the key to its base name

    Returns:
        Local file path

    Raises:
        KmsctlError: If the key would resolve to or outside *output_dir*
    """
    if flatten and PATH_SEPARATOR in key:
        relative = key.rsplit(PATH_SEPARATOR, 1)[1]
    else:
        relative = key

    path = os.path.join(output_dir, *relative.split(PATH_SEPARATOR))

    base = os.path.abspath(output_dir)
    resolved = os.path.abspath(path)
    if resolved == base or os.path.commonpath([base, resolved]) != base:
        raise KmsctlError(
            f"refusing to write key: {key}, it does not resolve to a file under {output_dir}"
        )
    return path


def remote_key(path: str, flatten: bool) -> str:
    """Compute the object key for a local file.

    The path is normalized to forward slashes with any leading ``./``,
    ``../`` or ``/`` segments removed.

    Args:
        path: Local file path as expanded from the arguments
        flatten: Use only the base name

    Returns:
        Object key
    """
    if flatten:
        return os.path.basename(path)

    segments = os.path.normpath(path).replace(os.sep, PATH_SEPARATOR).split(PATH_SEPARATOR)
    while segments and segments[0] in ("", ".", ".."):
        segments.pop(0)
    return PATH_SEPARATOR.join(segments)


def run_editor(editor: str, path: str) -> None:
    """Run the editor against a file, inheriting the terminal.

    Args:
        editor: Editor command, may include arguments (e.g. ``code -w``)
        path: File to edit

    Raises:
        EditorError: If the editor is missing or exits non-zero
    """
    cmd = shlex.split(editor or DEFAULT_EDITOR) + [path]
    log.debug("Running editor: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd)
    except OSError as e:
        raise EditorError(f"unable to run the editor: {editor}, error: {e}") from e

    if result.returncode != 0:
        raise EditorError(f"the editor: {editor} exited with status {result.returncode}")


class TransferOrchestrator:
    """Moves secrets between a bucket and the local file system.

    Args:
        s3_ops: S3Operations used for every provider call
        editor_runner: Callable ``(editor, path)`` invoking the editor
    """

    def __init__(self, s3_ops: S3Operations,
                 editor_runner: Callable[[str, str], None] = run_editor):
        self.s3 = s3_ops
        self.editor_runner = editor_runner

    # ── Download ───────────────────────────────────────────────────────

    def materialize_objects(self, request: TransferRequest,
                            callback: Optional[Callable[[str, str, bytes], None]] = None
                            ) -> List[Tuple[str, str]]:
        """Download the selected objects into the output directory.

        Existing files are overwritten. A failure part way leaves the
        files already written in place.

        Args:
            request: Transfer parameters
            callback: Called with (key, destination, content) per file written

        Returns:
            List of (key, destination) pairs in the order written

        Raises:
            InvalidFilterError: If the filter does not compile
            LocalFileError: If the output directory or a file cannot be written
        """
        pattern = compile_filter(request.filter_pattern)
        with local_file_errors(f"failed to create the output directory: {request.output_dir}"):
            ensure_dir(request.output_dir)

        written = []
        for prefix in request.prefixes():
            entries = self.s3.list_objects(request.bucket, prefix)
            for entry in select_objects(entries, prefix, request.recursive, pattern):
                content = self.s3.get_object_content(request.bucket, entry.key)
                destination = destination_path(request.output_dir, entry.key, request.flatten)
                with local_file_errors(f"failed to write the file: {destination}"):
                    write_file(destination, content, request.perms)

                written.append((entry.key, destination))
                if callback:
                    callback(entry.key, destination, content)

        return written

    # ── Display ────────────────────────────────────────────────────────

    def read_objects(self, bucket: str, keys: Iterable[str]) -> Iterator[Tuple[str, bytes]]:
        """Yield (key, content) for each named object in turn."""
        for key in keys:
            yield key, self.s3.get_object_content(bucket, key)

    # ── Upload ─────────────────────────────────────────────────────────

    def push_files(self, request: TransferRequest,
                   callback: Optional[Callable[[str, str], None]] = None
                   ) -> List[Tuple[str, str]]:
        """Upload local files into the bucket, encrypted with a KMS key.

        The first failure aborts the remaining uploads; objects already
        uploaded are left in place.

        Args:
            request: Transfer parameters (``paths`` are local paths)
            callback: Called with (path, key) per file uploaded

        Returns:
            List of (path, key) pairs in the order uploaded

        Raises:
            BucketNotFoundError: If the bucket does not exist
            NoInputError: If no paths were given
            LocalFileError: If a local path cannot be read
        """
        if not self.s3.has_bucket(request.bucket):
            raise BucketNotFoundError(request.bucket)

        if not request.paths:
            raise NoInputError()

        if not request.kms_key_id:
            raise ConfigurationError("a kms key id is required to upload files")

        uploaded = []
        for path in request.paths:
            with local_file_errors(f"failed to process path: {path}"):
                files = expand_files(path)

            for filename in files:
                key = remote_key(filename, request.flatten)
                with local_file_errors(f"failed to read the file: {filename}"):
                    content = read_file(filename)
                self.s3.put_object(request.bucket, key, content, request.kms_key_id)

                uploaded.append((filename, key))
                if callback:
                    callback(filename, key)

        return uploaded

    # ── Inline edit ────────────────────────────────────────────────────

    def edit_remote_file(self, bucket: str, key: str, editor: str = DEFAULT_EDITOR,
                         kms_key_id: Optional[str] = None) -> bool:
        """Edit an object in place through a temporary local copy.

        The temporary file is always removed. Changed content is
        uploaded back encrypted with *kms_key_id*, or with the key the
        object is currently encrypted with.

        Args:
            bucket: Bucket name
            key: Object key
            editor: Editor command
            kms_key_id: Optional KMS key override for the upload

        Returns:
            True if the content changed and was uploaded
        """
        content, current_kms_key = self.s3.get_object(bucket, key)

        basename = os.path.basename(key) or "secret"
        with local_file_errors(f"failed to create a temporary copy of: {key}"):
            fd, tmp_path = tempfile.mkstemp(prefix=f"{basename}.")
        try:
            with local_file_errors(f"failed to write the temporary file: {tmp_path}"):
                with os.fdopen(fd, 'wb') as f:
                    f.write(content)
            self.editor_runner(editor, tmp_path)
            with local_file_errors(f"failed to read back the edited file: {tmp_path}"):
                edited = read_file(tmp_path)
        finally:
            with local_file_errors(f"failed to remove the temporary file: {tmp_path}"):
                os.remove(tmp_path)

        if edited == content:
            log.info("No changes made to s3://%s/%s", bucket, key)
            return False

        encrypt_with = kms_key_id or current_kms_key
        if not encrypt_with:
            raise ConfigurationError(
                f"unable to determine the kms key for: {key}, specify one with --kms"
            )

        self.s3.put_object(bucket, key, edited, encrypt_with)
        return True

    def edit_local_file(self, path: str, editor: str = DEFAULT_EDITOR) -> None:
        """Open a local file in the editor."""
        if not os.path.isfile(path):
            raise KmsctlError(f"the file: {path} does not exist")
        self.editor_runner(editor, path)
