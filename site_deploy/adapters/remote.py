# site_deploy/adapters/remote.py
"""Shared behavior of adapters that upload to a server"""

import shlex
from pathlib import Path
from typing import Any, Dict, Tuple

from ..constants import DEFAULT_SSH_PORT, DeployLogLevel, DeployPhase
from ..core.validation_engine import ConfigFieldValidator, ValidationResult
from ..models.deploy_config import DeployConfig
from .base import DeployAdapter


class RemoteServerAdapter(DeployAdapter):
    """Base for FTP, SFTP and SSH adapters"""

    requires_build = True

    # Accepts a private key as an alternative to the password
    key_auth = True

    def resolve_settings(self, config: DeployConfig) -> Dict[str, Any]:
        """Config values with environment fallbacks and defaults applied"""
        validator = ConfigFieldValidator(self.environ)
        return validator.apply_defaults(self.config_fields, config.to_dict())

    def _validate_extra(self, config: DeployConfig, result: ValidationResult) -> None:
        if not self.key_auth:
            return

        settings = self.resolve_settings(config)
        if not settings.get("password") and not settings.get("private_key"):
            result.add_error("Either password or private_key is required")

        private_key = settings.get("private_key")
        if private_key and isinstance(private_key, str):
            if not Path(private_key).expanduser().is_file():
                result.add_error(f"Private key file does not exist: {private_key}")

    def remote_root(self, settings: Dict[str, Any]) -> str:
        remote_path = settings.get("remote_path") or "/"
        return remote_path.rstrip("/") or "/"

    def describe_target(self, settings: Dict[str, Any]) -> str:
        return f"{settings.get('host')}:{settings.get('port') or DEFAULT_SSH_PORT}"

    def open_client(self, settings: Dict[str, Any]):
        """
        Connect and authenticate an SSH client (blocking)

        Args:
            settings: Resolved connection settings

        Returns:
            Connected paramiko.SSHClient
        """
        import paramiko

        client = paramiko.SSHClient()
        client.load_system_host_keys()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

        connect_kwargs = {
            "hostname": settings["host"],
            "port": int(settings.get("port") or DEFAULT_SSH_PORT),
            "username": settings["username"],
            "timeout": 30,
            "allow_agent": True,
            "look_for_keys": not settings.get("password"),
        }
        if settings.get("password"):
            connect_kwargs["password"] = settings["password"]
        if settings.get("private_key"):
            connect_kwargs["key_filename"] = str(Path(settings["private_key"]).expanduser())
            if settings.get("passphrase"):
                connect_kwargs["passphrase"] = settings["passphrase"]

        client.connect(**connect_kwargs)
        return client

    def run_remote(self, client, command: str, cwd: str = None) -> Tuple[int, str, str]:
        """
        Run a shell command over SSH (blocking)

        Returns:
            Tuple of (exit status, stdout, stderr)
        """
        if cwd:
            command = f"cd {shlex.quote(cwd)} && {command}"
        _, stdout, stderr = client.exec_command(command)
        out = stdout.read().decode("utf-8", errors="replace")
        err = stderr.read().decode("utf-8", errors="replace")
        status = stdout.channel.recv_exit_status()
        return status, out, err

    def log_remote_output(self, status: int, stdout: str, stderr: str,
                          phase: DeployPhase) -> None:
        if stdout.strip():
            self.log(DeployLogLevel.INFO, stdout.strip(), phase)
        if stderr.strip():
            self.log(DeployLogLevel.WARN, stderr.strip(), phase)
        if status != 0:
            self.log(DeployLogLevel.WARN, f"Command exited with status {status}", phase)
