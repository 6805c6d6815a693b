"""Tests for the build step."""

import shlex
import sys

import pytest

from site_deploy.api.exceptions import BuildError
from site_deploy.constants import DeployLogLevel
from site_deploy.core.build_runner import BuildRunner, build_progress


def _script(tmp_path, body):
    script = tmp_path / "build.py"
    script.write_text(body)
    return f"{shlex.quote(sys.executable)} {shlex.quote(str(script))}"


class TestBuildProgress:
    """Test bundler output markers."""

    def test_markers(self):
        assert build_progress("transforming (42) src/main.ts") == 30
        assert build_progress("rendering chunks...") == 60
        assert build_progress("✓ built in 1.21s") == 90

    def test_unrelated_line(self):
        assert build_progress("vite v5.0.0 building for production") is None


class TestBuildRunner:
    """Test running the build command."""

    @pytest.mark.asyncio
    async def test_successful_build_streams_output(self, tmp_path):
        command = _script(tmp_path, "print('transforming modules')\nprint('built in 1s')\n")
        logs, progress = [], []

        await BuildRunner(command, tmp_path).run(
            on_log=lambda level, line: logs.append((level, line)),
            on_progress=lambda overall, bp, message: progress.append((overall, bp)),
        )

        assert (DeployLogLevel.INFO, "transforming modules") in logs
        assert progress == [(22.5, 30), (37.5, 90)]

    @pytest.mark.asyncio
    async def test_stderr_levels(self, tmp_path):
        command = _script(
            tmp_path,
            "import sys\n"
            "sys.stderr.write('deprecated option\\n')\n"
            "sys.stderr.write('Error in plugin\\n')\n",
        )
        logs = []

        await BuildRunner(command, tmp_path).run(on_log=lambda level, line: logs.append((level, line)))

        assert (DeployLogLevel.WARN, "deprecated option") in logs
        assert (DeployLogLevel.ERROR, "Error in plugin") in logs

    @pytest.mark.asyncio
    async def test_non_zero_exit(self, tmp_path):
        command = _script(tmp_path, "import sys\nsys.stderr.write('missing module\\n')\nsys.exit(3)\n")

        with pytest.raises(BuildError) as exc_info:
            await BuildRunner(command, tmp_path).run()

        assert exc_info.value.exit_code == 3
        assert "missing module" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_missing_executable(self, tmp_path):
        with pytest.raises(BuildError, match="Failed to start"):
            await BuildRunner("definitely-not-a-real-build-tool --prod", tmp_path).run()

    @pytest.mark.asyncio
    async def test_empty_command(self, tmp_path):
        with pytest.raises(BuildError, match="empty"):
            await BuildRunner("  ", tmp_path).run()
