# site_deploy/utils/file_utils.py
"""File operation utilities"""

import fnmatch
import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..constants import ALWAYS_EXCLUDED_DIRS


def to_posix(relative_path: Union[str, Path]) -> str:
    """Relative path with forward slashes"""
    return str(relative_path).replace(os.sep, '/')


def match_pattern(relative_path: str, pattern: str) -> bool:
    """
    Glob match of a relative POSIX path

    A leading ``**/`` also matches at the top level, and a pattern without a
    slash matches against the file name as well as the full path.

    Args:
        relative_path: Path relative to the scanned directory
        pattern: Glob pattern

    Returns:
        True if the path matches
    """
    pattern = pattern.replace('\\', '/')
    if fnmatch.fnmatch(relative_path, pattern):
        return True
    if pattern.startswith('**/') and fnmatch.fnmatch(relative_path, pattern[3:]):
        return True
    if pattern.endswith('/**') and (relative_path + '/').startswith(pattern[:-2]):
        return True
    if '/' not in pattern and fnmatch.fnmatch(relative_path.rsplit('/', 1)[-1], pattern):
        return True
    return False


def scan_directory(directory: Path,
                   include: Optional[Iterable[str]] = None,
                   exclude: Optional[Iterable[str]] = None) -> List[Path]:
    """
    Scan directory for files to ship

    Files inside hidden directories or ``node_modules`` are always skipped.
    Hidden files at any level (``.nojekyll``, ``.htaccess``) are kept.

    Args:
        directory: Directory to scan
        include: Patterns a file must match (all files if empty)
        exclude: Patterns to exclude

    Returns:
        Sorted list of file paths
    """
    include = list(include or [])
    exclude = list(exclude or [])
    files = []

    for root, dirs, names in os.walk(directory):
        # Prune in place so os.walk never descends into skipped directories
        dirs[:] = sorted(d for d in dirs
                         if not d.startswith('.') and d not in ALWAYS_EXCLUDED_DIRS)

        for name in names:
            path = Path(root) / name
            relative_path = to_posix(path.relative_to(directory))

            if include and not any(match_pattern(relative_path, p) for p in include):
                continue
            if any(match_pattern(relative_path, p) for p in exclude):
                continue

            files.append(path)

    return sorted(files)


def is_empty_dir(directory: Path) -> bool:
    """True if the directory has no entries at all"""
    with os.scandir(directory) as entries:
        return next(entries, None) is None


def ensure_parent_dir(file_path: Path) -> Path:
    """
    Ensure parent directory exists

    Args:
        file_path: File path

    Returns:
        Parent directory path
    """
    parent = file_path.parent
    parent.mkdir(parents=True, exist_ok=True)
    return parent


def remote_parent_dirs(remote_files: Iterable[str], root: str) -> List[str]:
    """
    Every remote directory that must exist before uploading ``remote_files``

    Args:
        remote_files: Absolute POSIX paths of the uploaded files
        root: Remote root that already exists

    Returns:
        Sorted, de-duplicated list of directories below ``root``
    """
    root = root.rstrip('/') or '/'
    dirs = set()

    for remote_file in remote_files:
        parent = remote_file.rsplit('/', 1)[0]
        while parent and parent != root and parent.startswith(root):
            dirs.add(parent)
            parent = parent.rsplit('/', 1)[0]

    # Parents sort before their children
    return sorted(dirs)


def join_remote(remote_root: str, relative_path: str) -> str:
    """Join a remote POSIX root and a relative path"""
    if not remote_root or remote_root == '/':
        return '/' + relative_path.lstrip('/')
    return remote_root.rstrip('/') + '/' + relative_path.lstrip('/')


def atomic_write(file_path: Path,
                 content: Union[str, bytes],
                 mode: str = 'w') -> None:
    """
    Write file atomically

    Args:
        file_path: Target file path
        content: Content to write
        mode: Write mode
    """
    ensure_parent_dir(file_path)

    # Write to temporary file first
    temp_fd, temp_path = tempfile.mkstemp(dir=file_path.parent, prefix=f".{file_path.name}.")

    try:
        with os.fdopen(temp_fd, mode, **({'encoding': 'utf-8'} if 'b' not in mode else {})) as f:
            f.write(content)

        # Atomic rename
        os.replace(temp_path, file_path)

    except BaseException:
        # Clean up temp file on error
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise
