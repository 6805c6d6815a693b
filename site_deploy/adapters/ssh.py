"""SSH adapter with remote commands and parallel uploads"""

import asyncio
import shlex
from dataclasses import dataclass
from typing import Any, Dict, List

from ..constants import DEFAULT_SSH_CONCURRENCY, DeployLogLevel, DeployPhase, DeployPlatform
from ..models.deploy_config import SSHDeployConfig
from ..models.result import DeployResult
from ..utils.async_utils import AsyncPool, run_blocking
from ..utils.file_utils import join_remote, remote_parent_dirs
from .base import UploadFile
from .remote import RemoteServerAdapter

# Directories per `mkdir -p` invocation
MKDIR_BATCH_SIZE = 50


@dataclass
class UploadTally:
    """Per-file outcome counts of one bulk upload"""
    total: int
    uploaded: int = 0
    failed: int = 0
    skipped: int = 0

    @property
    def done(self) -> int:
        return self.uploaded + self.failed + self.skipped


class SSHAdapter(RemoteServerAdapter):
    """Deploy over SSH: pre-commands, upload, post-commands"""

    platform = DeployPlatform.SSH.value
    display_name = "SSH"
    icon = "🖥️"
    description = "Deploy to a server over SSH with optional remote commands"

    async def _do_deploy(self, config: SSHDeployConfig) -> DeployResult:
        settings = self.resolve_settings(config)
        files = self.prepare_files(config, exclude=config.exclude)
        remote_root = self.remote_root(settings)

        self.raise_if_cancelled()
        self.log(DeployLogLevel.INFO, f"Connecting to {self.describe_target(settings)}",
                 DeployPhase.UPLOAD)
        self.update_progress(DeployPhase.UPLOAD, 50, 0, "Connecting to SSH server...")

        client = await run_blocking(self.open_client, settings)
        try:
            self.log(DeployLogLevel.SUCCESS, "SSH connection established", DeployPhase.UPLOAD)
            return await self._deploy_with_client(client, config, settings, files, remote_root)
        finally:
            client.close()

    async def _run_commands(self, client, commands: List[str], cwd: str,
                            phase: DeployPhase) -> None:
        for command in commands:
            self.raise_if_cancelled()
            self.log(DeployLogLevel.INFO, f"Running: {command}", phase)
            status, out, err = await run_blocking(self.run_remote, client, command, cwd)
            self.log_remote_output(status, out, err, phase)

    async def _deploy_with_client(self, client, config: SSHDeployConfig, settings: Dict[str, Any],
                                  files: List[UploadFile], remote_root: str) -> DeployResult:
        if config.pre_commands:
            self.log(DeployLogLevel.INFO, "Running pre-deploy commands...", DeployPhase.UPLOAD)
            await self._run_commands(client, config.pre_commands, remote_root, DeployPhase.UPLOAD)

        quoted_root = shlex.quote(remote_root)
        if settings.get("clean_remote"):
            self.log(DeployLogLevel.INFO, f"Cleaning remote directory: {remote_root}",
                     DeployPhase.UPLOAD)
            await run_blocking(self.run_remote, client, f"rm -rf {quoted_root}/*")

        await run_blocking(self.run_remote, client, f"mkdir -p {quoted_root}")

        remote_files = [join_remote(remote_root, f.relative_path) for f in files]
        dirs = remote_parent_dirs(remote_files, remote_root)
        for i in range(0, len(dirs), MKDIR_BATCH_SIZE):
            batch = " ".join(shlex.quote(d) for d in dirs[i:i + MKDIR_BATCH_SIZE])
            await run_blocking(self.run_remote, client, f"mkdir -p {batch}")

        concurrency = int(settings.get("concurrency") or DEFAULT_SSH_CONCURRENCY)
        self.log(DeployLogLevel.INFO, f"Uploading {len(files)} files ({concurrency} at a time)...",
                 DeployPhase.UPLOAD)
        tally = await self._upload_files(client, files, remote_files, concurrency)

        platform_info = {
            "host": settings.get("host"),
            "remote_path": remote_root,
            "files_uploaded": tally.uploaded,
            "files_failed": tally.failed,
            "files_skipped": tally.skipped,
        }

        if self.is_cancelled:
            self.log(DeployLogLevel.WARN,
                     f"Cancelled after {tally.uploaded} of {tally.total} files", DeployPhase.UPLOAD)
            return self.create_cancelled_result(platform_info=platform_info)

        if tally.failed:
            self.log(DeployLogLevel.WARN, f"{tally.failed} files failed to upload", DeployPhase.UPLOAD)
        self.log(DeployLogLevel.SUCCESS, f"Uploaded {tally.uploaded} files", DeployPhase.UPLOAD)

        if config.post_commands:
            self.log(DeployLogLevel.INFO, "Running post-deploy commands...", DeployPhase.PROCESS)
            self.update_progress(DeployPhase.PROCESS, 92, 0, "Running post-deploy commands...")
            await self._run_commands(client, config.post_commands, remote_root, DeployPhase.PROCESS)

        self.update_progress(DeployPhase.PROCESS, 95, 100, "Deployment finished")
        return self.create_success_result(None, platform_info=platform_info)

    async def _upload_files(self, client, files: List[UploadFile], remote_files: List[str],
                            concurrency: int) -> UploadTally:
        """Upload through a pool of SFTP channels; every file is counted exactly once"""
        tally = UploadTally(total=len(files))
        if not files:
            return tally

        channel_count = max(1, min(concurrency, len(files)))
        channels: asyncio.Queue = asyncio.Queue()
        for _ in range(channel_count):
            channels.put_nowait(await run_blocking(client.open_sftp))

        async def upload_one(upload: UploadFile, remote_file: str) -> None:
            if self.is_cancelled:
                tally.skipped += 1
                return

            sftp = await channels.get()
            try:
                await run_blocking(sftp.put, str(upload.absolute_path), remote_file)
            except Exception as e:
                tally.failed += 1
                self.log(DeployLogLevel.ERROR, f"Upload failed: {upload.relative_path}: {e}",
                         DeployPhase.UPLOAD)
            else:
                tally.uploaded += 1
            finally:
                channels.put_nowait(sftp)

            percent = round(tally.done / tally.total * 100)
            self.update_progress(
                DeployPhase.UPLOAD, 50 + percent * 0.4, percent,
                f"Uploaded {upload.relative_path}",
                files_uploaded=tally.uploaded, total_files=tally.total,
            )

        try:
            async with AsyncPool(max_workers=channel_count) as pool:
                for upload, remote_file in zip(files, remote_files):
                    await pool.submit(upload_one(upload, remote_file))
        finally:
            while not channels.empty():
                channels.get_nowait().close()

        return tally
