"""
File system utilities
"""
import os
import stat

from .logger import get_logger

log = get_logger(__name__)


def ensure_dir(directory):
    """
    Ensure directory exists, create if it doesn't.

    Args:
        directory: Directory path (empty string means the current directory)
    """
    if directory:
        os.makedirs(directory, exist_ok=True)


def parse_perms(perms):
    """
    Parse an octal permission string such as ``"0744"``.

    Args:
        perms: Octal string or integer mode

    Returns:
        Integer file mode

    Raises:
        ValueError: If the string is not a valid octal mode
    """
    if isinstance(perms, int):
        return perms
    mode = int(str(perms), 8)
    if mode < 0 or mode > 0o7777:
        raise ValueError(f"file mode out of range: {perms}")
    return mode


def write_file(filepath, content, mode=0o644):
    """
    Write bytes to a file, creating parent directories and truncating
    any existing content.

    Args:
        filepath: Destination path
        content: Bytes to write
        mode: Permission bits applied to the file
    """
    ensure_dir(os.path.dirname(filepath))
    with open(filepath, 'wb') as f:
        f.write(content)
    os.chmod(filepath, mode)


def read_file(filepath):
    """Read a file's raw bytes."""
    with open(filepath, 'rb') as f:
        return f.read()


def expand_files(path):
    """
    Expand a path into the flat list of regular files beneath it.

    Directories are walked without descending into symlinked
    directories. Symlinks to regular files are followed. Symlinked
    directories, broken links and special files (FIFOs, sockets,
    devices) are skipped with a warning, wherever they appear.

    Args:
        path: File or directory path

    Returns:
        Sorted list of file paths

    Raises:
        FileNotFoundError: If the path does not exist
    """
    if not os.path.lexists(path):
        raise FileNotFoundError(f"no such file or directory: {path}")

    if os.path.isdir(path) and not os.path.islink(path):
        files = []
        for root, dirs, filenames in os.walk(path):
            for name in [d for d in dirs if os.path.islink(os.path.join(root, d))]:
                log.warning("Skipping symlinked directory: %s", os.path.join(root, name))
                dirs.remove(name)
            dirs.sort()
            for filename in sorted(filenames):
                candidate = os.path.join(root, filename)
                if _is_regular_file(candidate):
                    files.append(candidate)
        return files

    if _is_regular_file(path):
        return [path]
    return []


def _is_regular_file(path):
    """Check a path resolves to a regular file, logging why it is skipped."""
    try:
        st = os.stat(path)
    except OSError:
        log.warning("Skipping broken link: %s", path)
        return False

    if stat.S_ISREG(st.st_mode):
        return True
    if stat.S_ISDIR(st.st_mode):
        log.warning("Skipping symlinked directory: %s", path)
    else:
        log.warning("Skipping special file: %s", path)
    return False
