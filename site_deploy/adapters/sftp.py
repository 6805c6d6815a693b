"""SFTP adapter"""

import errno
import stat
from typing import Any, Dict, List, Set

from ..api.exceptions import TransferError
from ..constants import DeployLogLevel, DeployPhase, DeployPlatform
from ..models.deploy_config import SFTPDeployConfig
from ..models.result import DeployResult
from ..utils.async_utils import run_blocking
from ..utils.file_utils import join_remote
from .base import UploadFile
from .remote import RemoteServerAdapter


def sftp_makedirs(sftp, remote_dir: str, known: Set[str]) -> None:
    """``mkdir -p`` over SFTP, remembering directories already seen"""
    if not remote_dir or remote_dir == "/" or remote_dir in known:
        return

    parent = remote_dir.rsplit("/", 1)[0]
    sftp_makedirs(sftp, parent, known)

    try:
        sftp.stat(remote_dir)
    except IOError:
        sftp.mkdir(remote_dir)
    known.add(remote_dir)


def sftp_clean(sftp, remote_dir: str) -> int:
    """Remove everything below ``remote_dir``; returns the number of entries removed"""
    try:
        entries = sftp.listdir_attr(remote_dir)
    except IOError as e:
        if e.errno == errno.ENOENT:
            return 0
        raise

    removed = 0
    for entry in entries:
        path = join_remote(remote_dir, entry.filename)
        if stat.S_ISDIR(entry.st_mode):
            removed += sftp_clean(sftp, path)
            sftp.rmdir(path)
        else:
            sftp.remove(path)
        removed += 1
    return removed


class SFTPAdapter(RemoteServerAdapter):
    """Upload file by file over SFTP"""

    platform = DeployPlatform.SFTP.value
    display_name = "SFTP"
    icon = "🔐"
    description = "Upload to a server over SFTP"

    async def _do_deploy(self, config: SFTPDeployConfig) -> DeployResult:
        settings = self.resolve_settings(config)
        files = self.prepare_files(config, include=config.include, exclude=config.exclude)
        remote_root = self.remote_root(settings)

        self.raise_if_cancelled()
        self.log(DeployLogLevel.INFO, f"Connecting to {self.describe_target(settings)}",
                 DeployPhase.UPLOAD)
        self.update_progress(DeployPhase.UPLOAD, 50, 0, "Connecting to SFTP server...")

        client = await run_blocking(self.open_client, settings)
        try:
            sftp = await run_blocking(client.open_sftp)
            try:
                self.log(DeployLogLevel.SUCCESS, "Connected", DeployPhase.UPLOAD)
                return await self._upload(sftp, config, settings, files, remote_root)
            finally:
                sftp.close()
        finally:
            client.close()

    async def _upload(self, sftp, config: SFTPDeployConfig, settings: Dict[str, Any],
                      files: List[UploadFile], remote_root: str) -> DeployResult:
        known_dirs: Set[str] = set()

        if settings.get("clean_remote"):
            self.log(DeployLogLevel.INFO, f"Cleaning remote directory: {remote_root}",
                     DeployPhase.UPLOAD)
            await run_blocking(sftp_clean, sftp, remote_root)

        await run_blocking(sftp_makedirs, sftp, remote_root, known_dirs)

        uploaded = 0
        total = len(files)
        for upload in files:
            self.raise_if_cancelled()

            remote_file = join_remote(remote_root, upload.relative_path)
            try:
                await run_blocking(sftp_makedirs, sftp, remote_file.rsplit("/", 1)[0], known_dirs)
                await run_blocking(sftp.put, str(upload.absolute_path), remote_file)
            except (IOError, OSError) as e:
                self.log(DeployLogLevel.ERROR, f"Upload failed: {upload.relative_path}: {e}",
                         DeployPhase.UPLOAD)
                raise TransferError(
                    f"Failed to upload {upload.relative_path} after {uploaded} of {total} files: {e}"
                ) from e

            uploaded += 1
            percent = round(uploaded / total * 100) if total else 100
            self.update_progress(
                DeployPhase.UPLOAD, 50 + percent * 0.4, percent,
                f"Uploaded {upload.relative_path}",
                files_uploaded=uploaded, total_files=total,
            )

        self.log(DeployLogLevel.SUCCESS, f"Uploaded {uploaded} files", DeployPhase.UPLOAD)
        self.update_progress(DeployPhase.PROCESS, 95, 100, "Upload complete")

        return self.create_success_result(
            None,
            platform_info={
                "host": settings.get("host"),
                "remote_path": remote_root,
                "files_uploaded": uploaded,
                "files_failed": 0,
            },
        )
