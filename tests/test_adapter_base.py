"""Tests for the adapter base class."""

import sys

import pytest

from site_deploy.adapters.base import DeployAdapter, DeployCallbacks
from site_deploy.api.exceptions import DistDirError, TransferError
from site_deploy.constants import DeployLogLevel, DeployPhase
from site_deploy.models.deploy_config import DeployConfig


class RecordingAdapter(DeployAdapter):
    """Adapter whose transfer step is supplied by the test."""

    platform = "recording"
    display_name = "Recording"

    def __init__(self, action=None):
        super().__init__(environ={})
        self.action = action

    async def _do_deploy(self, config):
        files = self.prepare_files(config)
        if self.action:
            return await self.action(self, files)
        return self.create_success_result("https://example.com", platform_info={"files": len(files)})


def _config(dist_dir):
    return DeployConfig(platform="recording", dist_dir=str(dist_dir))


class TestDistDir:
    """Test artifact directory checks."""

    def test_missing(self, tmp_path):
        with pytest.raises(DistDirError, match="does not exist"):
            DeployAdapter.validate_dist_dir(tmp_path / "missing")

    def test_not_a_directory(self, tmp_path):
        path = tmp_path / "file"
        path.write_text("x")
        with pytest.raises(DistDirError, match="not a directory"):
            DeployAdapter.validate_dist_dir(path)

    def test_empty(self, tmp_path):
        with pytest.raises(DistDirError, match="empty"):
            DeployAdapter.validate_dist_dir(tmp_path)

    def test_relative_dir_resolved_against_cwd(self, tmp_path):
        resolved = DeployAdapter.resolve_dist_dir(DeployConfig(platform="x", dist_dir="out"), tmp_path)
        assert resolved == tmp_path / "out"

    def test_files_to_upload(self, dist_dir):
        files = DeployAdapter.get_files_to_upload(dist_dir)

        assert [f.relative_path for f in files] == [
            ".nojekyll", "about.html", "assets/js/app.js", "assets/style.css", "index.html",
        ]
        assert DeployAdapter.calculate_total_size(files) == sum(f.size for f in files)


class TestDeploy:
    """Test the deploy template method."""

    @pytest.mark.asyncio
    async def test_success_reports_progress_and_logs(self, dist_dir):
        progress, logs = [], []
        callbacks = DeployCallbacks(on_progress=progress.append, on_log=logs.append)

        result = await RecordingAdapter().deploy(_config(dist_dir), callbacks)

        assert result.success
        assert result.url == "https://example.com"
        assert result.platform_info == {"files": 5}
        assert result.duration is not None
        assert progress[0].phase == DeployPhase.PREPARE
        assert any("5 files" in entry.message for entry in logs)

    @pytest.mark.asyncio
    async def test_missing_dist_dir_is_failed_result(self, tmp_path):
        result = await RecordingAdapter().deploy(_config(tmp_path / "missing"))

        assert not result.success
        assert "does not exist" in result.error

    @pytest.mark.asyncio
    async def test_domain_error_is_failed_result(self, dist_dir):
        async def fail(adapter, files):
            raise TransferError("connection reset")

        logs = []
        result = await RecordingAdapter(fail).deploy(_config(dist_dir), DeployCallbacks(on_log=logs.append))

        assert not result.success
        assert result.error == "connection reset"
        assert result.error_details
        assert logs[-1].level == DeployLogLevel.ERROR

    @pytest.mark.asyncio
    async def test_unexpected_error_is_failed_result(self, dist_dir):
        async def fail(adapter, files):
            raise KeyError("host")

        result = await RecordingAdapter(fail).deploy(_config(dist_dir))

        assert not result.success
        assert not result.cancelled

    @pytest.mark.asyncio
    async def test_cancel_during_deploy(self, dist_dir):
        async def cancel_then_continue(adapter, files):
            await adapter.cancel()
            adapter.raise_if_cancelled()
            return adapter.create_success_result()

        result = await RecordingAdapter(cancel_then_continue).deploy(_config(dist_dir))

        assert result.cancelled
        assert not result.success

    @pytest.mark.asyncio
    async def test_cancel_flag_reset_between_deploys(self, dist_dir):
        adapter = RecordingAdapter()
        await adapter.cancel()

        result = await adapter.deploy(_config(dist_dir))

        assert result.success


class TestExecCommand:
    """Test external command execution."""

    @pytest.mark.asyncio
    async def test_streams_lines(self, tmp_path):
        lines = []
        result = await RecordingAdapter().exec_command(
            sys.executable, ["-c", "print('one'); print(''); print('two')"],
            cwd=tmp_path, on_stdout=lines.append,
        )

        assert result.ok
        assert lines == ["one", "two"]

    @pytest.mark.asyncio
    async def test_env_is_added(self, tmp_path):
        result = await RecordingAdapter().exec_command(
            sys.executable, ["-c", "import os; print(os.environ['SITE_DEPLOY_PROBE'])"],
            env={"SITE_DEPLOY_PROBE": "42"},
        )
        assert result.stdout.strip() == "42"

    @pytest.mark.asyncio
    async def test_non_zero_exit(self):
        result = await RecordingAdapter().exec_command(sys.executable, ["-c", "raise SystemExit(4)"])

        assert not result.ok
        assert result.code == 4

    def test_check_dependencies(self):
        adapter = RecordingAdapter()
        adapter.required_tools = ("definitely-not-installed-tool",)

        [warning] = adapter.check_dependencies()

        assert "definitely-not-installed-tool" in warning

    def test_env_value(self):
        adapter = RecordingAdapter()
        adapter._environ = {"B": "from-env"}

        assert adapter.env_value("explicit", "B") == "explicit"
        assert adapter.env_value(None, "A", "B") == "from-env"
        assert adapter.env_value(None, "A") is None
