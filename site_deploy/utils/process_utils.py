"""External process helpers"""

import asyncio
import logging
import os
import re
import shutil
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .formatting import strip_ansi

logger = logging.getLogger(__name__)

# Largest single output line; asyncio's default is 64 KiB
STREAM_LIMIT = 4 * 1024 * 1024

# user:password@ inside URLs
URL_CREDENTIALS_PATTERN = re.compile(r"(://[^/\s:@]+:)[^/\s@]+@")


def redact_args(args: Sequence[str]) -> str:
    """Join arguments for display with URL credentials masked"""
    return " ".join(URL_CREDENTIALS_PATTERN.sub(r"\1***@", arg) for arg in args)


async def stream_command(command: str,
                         args: Sequence[str] = (),
                         cwd: Optional[Path] = None,
                         env: Optional[Dict[str, str]] = None,
                         on_stdout: Optional[Callable[[str], None]] = None,
                         on_stderr: Optional[Callable[[str], None]] = None,
                         should_stop: Optional[Callable[[], bool]] = None) -> Tuple[int, str, str]:
    """
    Run a command and deliver its output line by line

    Stdout and stderr are read concurrently. Lines are passed to the
    handlers with color codes stripped; blank lines are not delivered.

    Args:
        command: Executable name or path
        args: Arguments
        cwd: Working directory
        env: Variables added to the current environment
        on_stdout: Stdout line handler
        on_stderr: Stderr line handler
        should_stop: Polled after every line; the process is terminated once it returns True

    The child is killed if the awaiting task is cancelled (e.g. by a timeout).

    Returns:
        Tuple of (exit code, stdout, stderr)

    Raises:
        FileNotFoundError: If the executable does not exist
    """
    executable = shutil.which(command) or command
    process_env = dict(os.environ)
    if env:
        process_env.update(env)

    logger.debug("Running %s %s", command, redact_args(args))
    process = await asyncio.create_subprocess_exec(
        executable, *args,
        cwd=str(cwd) if cwd else None,
        env=process_env,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        limit=STREAM_LIMIT,
    )

    stdout_lines: List[str] = []
    stderr_lines: List[str] = []

    async def pump(stream: asyncio.StreamReader, sink: List[str],
                   handler: Optional[Callable[[str], None]]) -> None:
        while True:
            raw = await stream.readline()
            if not raw:
                break
            line = strip_ansi(raw.decode("utf-8", errors="replace")).rstrip("\r\n")
            sink.append(line)
            if handler and line.strip():
                handler(line.strip())
            if should_stop and should_stop() and process.returncode is None:
                try:
                    process.terminate()
                except ProcessLookupError:
                    pass

    try:
        await asyncio.gather(
            pump(process.stdout, stdout_lines, on_stdout),
            pump(process.stderr, stderr_lines, on_stderr),
        )
        code = await process.wait()
    except asyncio.CancelledError:
        if process.returncode is None:
            logger.debug("Killing %s (pid %s)", command, process.pid)
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()
        raise

    logger.debug("%s exited with %s", command, code)

    return code, "\n".join(stdout_lines), "\n".join(stderr_lines)
