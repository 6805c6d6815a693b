"""FTP adapter"""

import ftplib
from typing import Any, Dict, List, Set

from ..api.exceptions import TransferError
from ..constants import DEFAULT_FTP_PORT, DeployLogLevel, DeployPhase, DeployPlatform
from ..models.deploy_config import FTPDeployConfig
from ..models.result import DeployResult
from ..utils.async_utils import run_blocking
from ..utils.file_utils import join_remote
from .base import UploadFile
from .remote import RemoteServerAdapter


def ftp_makedirs(ftp: ftplib.FTP, remote_dir: str, known: Set[str]) -> None:
    """``mkdir -p`` over FTP, remembering directories already created"""
    if not remote_dir or remote_dir == "/" or remote_dir in known:
        return

    ftp_makedirs(ftp, remote_dir.rsplit("/", 1)[0], known)
    try:
        ftp.mkd(remote_dir)
    except ftplib.error_perm as e:
        # 550 when it already exists
        if not str(e).startswith("550"):
            raise
    known.add(remote_dir)


def ftp_clean(ftp: ftplib.FTP, remote_dir: str) -> None:
    """Remove everything below ``remote_dir``; a missing directory is left alone"""
    try:
        names = ftp.nlst(remote_dir)
    except ftplib.error_perm as e:
        if str(e).startswith("550"):
            return
        raise

    for name in names:
        base = name.rsplit("/", 1)[-1]
        if base in (".", ".."):
            continue
        path = name if name.startswith("/") else join_remote(remote_dir, name)
        try:
            ftp.delete(path)
        except ftplib.error_perm:
            # Not a file, so treat it as a directory
            ftp_clean(ftp, path)
            ftp.rmd(path)


class FTPAdapter(RemoteServerAdapter):
    """Upload file by file over FTP or FTPS"""

    platform = DeployPlatform.FTP.value
    display_name = "FTP"
    icon = "📂"
    description = "Upload to a server over FTP"
    key_auth = False

    def describe_target(self, settings: Dict[str, Any]) -> str:
        return f"{settings.get('host')}:{settings.get('port') or DEFAULT_FTP_PORT}"

    def open_client(self, settings: Dict[str, Any]) -> ftplib.FTP:
        """Connect and log in (blocking)"""
        ftp = ftplib.FTP_TLS() if settings.get("secure") else ftplib.FTP()
        ftp.connect(settings["host"], int(settings.get("port") or DEFAULT_FTP_PORT), timeout=30)
        ftp.login(settings["username"], settings.get("password") or "")
        if settings.get("secure"):
            ftp.prot_p()
        ftp.set_pasv(bool(settings.get("passive", True)))
        return ftp

    async def _do_deploy(self, config: FTPDeployConfig) -> DeployResult:
        settings = self.resolve_settings(config)
        files = self.prepare_files(config, include=config.include, exclude=config.exclude)
        remote_root = self.remote_root(settings)

        self.raise_if_cancelled()
        self.log(DeployLogLevel.INFO, f"Connecting to {self.describe_target(settings)}",
                 DeployPhase.UPLOAD)
        self.update_progress(DeployPhase.UPLOAD, 50, 0, "Connecting to FTP server...")

        ftp = await run_blocking(self.open_client, settings)
        try:
            self.log(DeployLogLevel.SUCCESS, "Connected", DeployPhase.UPLOAD)
            return await self._upload(ftp, settings, files, remote_root)
        finally:
            try:
                await run_blocking(ftp.quit)
            except ftplib.all_errors:
                ftp.close()

    async def _upload(self, ftp: ftplib.FTP, settings: Dict[str, Any],
                      files: List[UploadFile], remote_root: str) -> DeployResult:
        known_dirs: Set[str] = set()

        if settings.get("clean_remote"):
            self.log(DeployLogLevel.INFO, f"Cleaning remote directory: {remote_root}",
                     DeployPhase.UPLOAD)
            await run_blocking(ftp_clean, ftp, remote_root)

        await run_blocking(ftp_makedirs, ftp, remote_root, known_dirs)

        def store(upload: UploadFile, remote_file: str) -> None:
            with open(upload.absolute_path, "rb") as fh:
                ftp.storbinary(f"STOR {remote_file}", fh)

        uploaded = 0
        total = len(files)
        for upload in files:
            self.raise_if_cancelled()

            remote_file = join_remote(remote_root, upload.relative_path)
            try:
                await run_blocking(ftp_makedirs, ftp, remote_file.rsplit("/", 1)[0], known_dirs)
                await run_blocking(store, upload, remote_file)
            except ftplib.all_errors as e:
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
