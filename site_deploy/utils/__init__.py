# site_deploy/utils/__init__.py
"""Utility functions for site-deploy"""

from .async_utils import (
    AsyncPool,
    maybe_await,
    run_async,
    run_blocking,
)

from .file_utils import (
    atomic_write,
    ensure_parent_dir,
    is_empty_dir,
    join_remote,
    match_pattern,
    remote_parent_dirs,
    scan_directory,
    to_posix,
)

from .formatting import (
    format_duration,
    format_size,
    strip_ansi,
)

from .process_utils import stream_command

__all__ = [
    # Async utilities
    "AsyncPool",
    "maybe_await",
    "run_async",
    "run_blocking",

    # File utilities
    "atomic_write",
    "ensure_parent_dir",
    "is_empty_dir",
    "join_remote",
    "match_pattern",
    "remote_parent_dirs",
    "scan_directory",
    "to_posix",

    # Formatting
    "format_duration",
    "format_size",
    "strip_ansi",

    # Processes
    "stream_command",
]
