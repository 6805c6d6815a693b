"""Tests for the FTP, SFTP and SSH adapters."""

import asyncio
import errno
import ftplib
from unittest.mock import MagicMock

import pytest

from site_deploy.adapters.base import DeployCallbacks
from site_deploy.adapters.ftp import FTPAdapter
from site_deploy.adapters.sftp import SFTPAdapter
from site_deploy.adapters.ssh import SSHAdapter
from site_deploy.models.deploy_config import FTPDeployConfig, SFTPDeployConfig, SSHDeployConfig

REMOTE_ROOT = "/srv/site"


def _server_config(cls, dist_dir, **overrides):
    values = dict(
        dist_dir=str(dist_dir),
        host="example.com",
        username="deploy",
        password="pw",
        remote_path=REMOTE_ROOT,
    )
    values.update(overrides)
    return cls(**values)


class TestRemoteValidation:
    """Test connection settings validation."""

    @pytest.mark.asyncio
    async def test_missing_host(self, dist_dir):
        config = _server_config(SSHDeployConfig, dist_dir, host=None)

        result = await SSHAdapter(environ={}).validate_config(config)

        assert not result.is_valid
        assert any("(host)" in error for error in result.errors)

    @pytest.mark.asyncio
    async def test_host_from_environment(self, dist_dir):
        config = _server_config(SSHDeployConfig, dist_dir, host=None)

        result = await SSHAdapter(environ={"SSH_HOST": "env.example.com"}).validate_config(config)

        assert result.is_valid

    @pytest.mark.asyncio
    async def test_password_or_key_required(self, dist_dir):
        config = _server_config(SFTPDeployConfig, dist_dir, password=None)

        result = await SFTPAdapter(environ={}).validate_config(config)

        assert result.errors == ["Either password or private_key is required"]

    @pytest.mark.asyncio
    async def test_private_key_must_exist(self, dist_dir, tmp_path):
        config = _server_config(SFTPDeployConfig, dist_dir, password=None,
                                private_key=str(tmp_path / "id_missing"))

        result = await SFTPAdapter(environ={}).validate_config(config)

        assert any("does not exist" in error for error in result.errors)

    @pytest.mark.asyncio
    async def test_existing_private_key(self, dist_dir, tmp_path):
        key = tmp_path / "id_ed25519"
        key.write_text("key")
        config = _server_config(SFTPDeployConfig, dist_dir, password=None, private_key=str(key))

        result = await SFTPAdapter(environ={}).validate_config(config)

        assert result.is_valid

    @pytest.mark.asyncio
    async def test_ftp_requires_password(self, dist_dir):
        config = _server_config(FTPDeployConfig, dist_dir, password=None)

        result = await FTPAdapter(environ={}).validate_config(config)

        assert any("(password)" in error for error in result.errors)

    @pytest.mark.asyncio
    async def test_invalid_port(self, dist_dir):
        config = _server_config(SSHDeployConfig, dist_dir, port="twenty-two")

        result = await SSHAdapter(environ={}).validate_config(config)

        assert "Port (port) must be a number" in result.errors


class TestSFTPAdapter:
    """Test file-by-file SFTP uploads."""

    def _adapter(self, sftp):
        client = MagicMock()
        client.open_sftp.return_value = sftp
        adapter = SFTPAdapter(environ={})
        adapter.open_client = MagicMock(return_value=client)
        return adapter, client

    @pytest.mark.asyncio
    async def test_uploads_every_file(self, dist_dir):
        sftp = MagicMock()
        sftp.stat.side_effect = IOError("no such file")
        adapter, client = self._adapter(sftp)

        result = await adapter.deploy(_server_config(SFTPDeployConfig, dist_dir))

        assert result.success
        assert result.platform_info["files_uploaded"] == 5
        remote_files = [c.args[1] for c in sftp.put.call_args_list]
        assert f"{REMOTE_ROOT}/assets/js/app.js" in remote_files
        sftp.mkdir.assert_any_call(f"{REMOTE_ROOT}/assets/js")
        client.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_settings_passed_to_client(self, dist_dir):
        adapter, _ = self._adapter(MagicMock())

        await adapter.deploy(_server_config(SFTPDeployConfig, dist_dir, port="2222"))

        settings = adapter.open_client.call_args.args[0]
        assert settings["host"] == "example.com"
        assert settings["port"] == 2222

    @pytest.mark.asyncio
    async def test_first_failure_aborts(self, dist_dir):
        sftp = MagicMock()
        sftp.put.side_effect = [None, IOError("permission denied"), None, None, None]
        adapter, client = self._adapter(sftp)

        result = await adapter.deploy(_server_config(SFTPDeployConfig, dist_dir))

        assert not result.success
        assert "after 1 of 5 files" in result.error
        assert sftp.put.call_count == 2
        client.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_stops_when_cancelled(self, dist_dir):
        sftp = MagicMock()
        adapter, client = self._adapter(sftp)

        def on_progress(progress):
            if progress.files_uploaded == 2:
                asyncio.ensure_future(adapter.cancel())

        result = await adapter.deploy(_server_config(SFTPDeployConfig, dist_dir),
                                      DeployCallbacks(on_progress=on_progress))

        assert result.cancelled
        assert sftp.put.call_count < 5
        client.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_clean_skips_missing_remote_dir(self, dist_dir):
        sftp = MagicMock()
        sftp.listdir_attr.side_effect = IOError(errno.ENOENT, "No such file")
        adapter, _ = self._adapter(sftp)

        result = await adapter.deploy(_server_config(SFTPDeployConfig, dist_dir, clean_remote=True))

        assert result.success, result.error
        assert sftp.put.call_count == 5
        sftp.remove.assert_not_called()

    @pytest.mark.asyncio
    async def test_clean_permission_error_fails(self, dist_dir):
        sftp = MagicMock()
        sftp.listdir_attr.side_effect = IOError(errno.EACCES, "Permission denied")
        adapter, _ = self._adapter(sftp)

        result = await adapter.deploy(_server_config(SFTPDeployConfig, dist_dir, clean_remote=True))

        assert not result.success
        sftp.put.assert_not_called()

    @pytest.mark.asyncio
    async def test_connection_failure(self, dist_dir):
        adapter = SFTPAdapter(environ={})
        adapter.open_client = MagicMock(side_effect=OSError("Connection refused"))

        result = await adapter.deploy(_server_config(SFTPDeployConfig, dist_dir))

        assert not result.success
        assert "Connection refused" in result.error


class TestSSHAdapter:
    """Test the SSH adapter with parallel uploads."""

    def _adapter(self, sftp):
        client = MagicMock()
        client.open_sftp.return_value = sftp
        adapter = SSHAdapter(environ={})
        adapter.open_client = MagicMock(return_value=client)
        adapter.run_remote = MagicMock(return_value=(0, "", ""))
        return adapter, client

    def _commands(self, adapter):
        return [c.args[1] for c in adapter.run_remote.call_args_list]

    @pytest.mark.asyncio
    async def test_runs_commands_and_uploads(self, dist_dir):
        sftp = MagicMock()
        adapter, client = self._adapter(sftp)
        config = _server_config(SSHDeployConfig, dist_dir,
                                pre_commands=["systemctl stop site"],
                                post_commands=["systemctl start site"])

        result = await adapter.deploy(config)

        assert result.success
        commands = self._commands(adapter)
        assert commands[0] == "systemctl stop site"
        assert commands[-1] == "systemctl start site"
        assert f"mkdir -p {REMOTE_ROOT}/assets {REMOTE_ROOT}/assets/js" in commands
        assert sftp.put.call_count == 5
        client.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_failed_files_counted_once(self, dist_dir):
        def put(local, remote):
            if remote.endswith("app.js"):
                raise IOError("disk quota exceeded")

        sftp = MagicMock()
        sftp.put.side_effect = put
        adapter, _ = self._adapter(sftp)

        result = await adapter.deploy(_server_config(SSHDeployConfig, dist_dir, concurrency=2))

        info = result.platform_info
        assert result.success
        assert info["files_uploaded"] == 4
        assert info["files_failed"] == 1
        assert info["files_uploaded"] + info["files_failed"] + info["files_skipped"] == 5

    @pytest.mark.asyncio
    async def test_clean_remote(self, dist_dir):
        adapter, _ = self._adapter(MagicMock())

        await adapter.deploy(_server_config(SSHDeployConfig, dist_dir, clean_remote=True))

        assert f"rm -rf {REMOTE_ROOT}/*" in self._commands(adapter)

    @pytest.mark.asyncio
    async def test_channels_closed(self, dist_dir):
        sftp = MagicMock()
        adapter, client = self._adapter(sftp)

        await adapter.deploy(_server_config(SSHDeployConfig, dist_dir, concurrency=3))

        assert client.open_sftp.call_count == 3
        assert sftp.close.call_count == 3


class TestFTPAdapter:
    """Test FTP uploads."""

    @pytest.mark.asyncio
    async def test_uploads_every_file(self, dist_dir):
        ftp = MagicMock()
        adapter = FTPAdapter(environ={})
        adapter.open_client = MagicMock(return_value=ftp)

        result = await adapter.deploy(_server_config(FTPDeployConfig, dist_dir))

        assert result.success
        stored = [c.args[0] for c in ftp.storbinary.call_args_list]
        assert f"STOR {REMOTE_ROOT}/index.html" in stored
        assert len(stored) == 5
        ftp.mkd.assert_any_call(f"{REMOTE_ROOT}/assets")
        ftp.quit.assert_called_once()

    @pytest.mark.asyncio
    async def test_clean_skips_missing_remote_dir(self, dist_dir):
        ftp = MagicMock()
        ftp.nlst.side_effect = ftplib.error_perm("550 No such file or directory")
        adapter = FTPAdapter(environ={})
        adapter.open_client = MagicMock(return_value=ftp)

        result = await adapter.deploy(_server_config(FTPDeployConfig, dist_dir, clean_remote=True))

        assert result.success, result.error
        assert ftp.storbinary.call_count == 5
        ftp.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_clean_other_errors_fail(self, dist_dir):
        ftp = MagicMock()
        ftp.nlst.side_effect = ftplib.error_perm("530 Not logged in")
        adapter = FTPAdapter(environ={})
        adapter.open_client = MagicMock(return_value=ftp)

        result = await adapter.deploy(_server_config(FTPDeployConfig, dist_dir, clean_remote=True))

        assert not result.success
        assert "530" in result.error
        ftp.storbinary.assert_not_called()
