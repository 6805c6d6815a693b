"""Tests for the synchronous Deployer API."""

import io
import sys

import pytest
from rich.console import Console

from site_deploy import Deployer, deploy
from site_deploy.api.exceptions import ConfigError
from site_deploy.cli.utils.progress import DeployProgressDisplay
from site_deploy.constants import DeployLogLevel, DeployPhase
from site_deploy.models.deploy_config import NetlifyDeployConfig, SSHDeployConfig
from site_deploy.models.result import DeployLogEntry, DeployProgress


def _write_settings(project_root, content):
    (project_root / ".site-deploy.yaml").write_text(content)


class TestResolveConfig:
    """Test assembling a deploy config from its sources."""

    def test_from_settings_file(self, project_root):
        _write_settings(project_root, "deploy:\n  platform: ssh\n  host: example.com\n")

        config = Deployer(project_root).resolve_config()

        assert isinstance(config, SSHDeployConfig)
        assert config.host == "example.com"
        assert config.dist_dir == "dist"

    def test_overrides_win(self, project_root):
        _write_settings(project_root, "deploy:\n  platform: ssh\n  host: example.com\n")

        config = Deployer(project_root).resolve_config(host="other.example.com", port=None)

        assert config.host == "other.example.com"
        assert config.port is None

    def test_other_platform_drops_settings(self, project_root):
        _write_settings(project_root, "deploy:\n  platform: ssh\n  host: example.com\n")

        config = Deployer(project_root).resolve_config("netlify", site_id="abc")

        assert isinstance(config, NetlifyDeployConfig)
        assert config.site_id == "abc"

    def test_saved_config(self, project_root):
        deployer = Deployer(project_root)
        deployer.config_store.save_config("prod", "netlify", {"auth_token": "secret", "prod": True})

        config = deployer.resolve_config(saved="prod")

        assert config.auth_token == "secret"
        assert config.prod is True

    def test_missing_saved_config(self, project_root):
        with pytest.raises(ConfigError, match="not found"):
            Deployer(project_root).resolve_config(saved="ghost")

    def test_no_platform(self, project_root):
        with pytest.raises(ConfigError):
            Deployer(project_root).resolve_config()

    def test_settings_dist_dir_default(self, project_root):
        _write_settings(project_root, "settings:\n  dist_dir: public\ndeploy:\n  platform: surge\n")

        assert Deployer(project_root).resolve_config().dist_dir == "public"


class TestDeploy:
    """Test blocking deployment helpers."""

    def test_deploy_function(self, project_root, dist_dir):
        result = deploy(
            "custom",
            project_root=project_root,
            command=sys.executable,
            args=["-c", "print('https://api.example.com')"],
            build_before_deploy=False,
        )

        assert result.success
        assert result.url == "https://api.example.com"
        assert len(Deployer(project_root).history()) == 1

    def test_validate(self, project_root):
        deployer = Deployer(project_root)
        assert not deployer.validate({"platform": "netlify"}).is_valid

    def test_platforms(self, project_root):
        assert len(Deployer(project_root).platforms()) == 9


class TestProgressDisplay:
    """Test the terminal progress renderer."""

    def test_logs_filtered_and_escaped(self):
        output = io.StringIO()
        console = Console(file=output, width=120)

        with DeployProgressDisplay(console, min_level=DeployLogLevel.INFO) as display:
            callbacks = display.callbacks()
            callbacks.progress(DeployProgress(phase=DeployPhase.UPLOAD, progress=60, message="Uploading"))
            callbacks.log(DeployLogEntry(level=DeployLogLevel.DEBUG, message="hidden detail"))
            callbacks.log(DeployLogEntry(level=DeployLogLevel.WARN, message="[vite] slow chunk",
                                         phase=DeployPhase.BUILD))

        text = output.getvalue()
        assert "hidden detail" not in text
        assert "[vite] slow chunk" in text
