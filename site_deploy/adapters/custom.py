"""Custom command adapter"""

import re
import shlex
from pathlib import Path
from typing import List, Tuple

from ..constants import URL_PATTERN, DeployLogLevel, DeployPhase, DeployPlatform
from ..models.deploy_config import CustomDeployConfig
from ..models.result import DeployResult
from ..utils.process_utils import redact_args
from .base import DeployAdapter

PERCENT_PATTERN = re.compile(r"(\d{1,3})%")

# Package managers whose bare script names need `run`
SCRIPT_RUNNERS = ("npm", "pnpm", "yarn")


def parse_command(command: str, args: List[str]) -> Tuple[str, List[str]]:
    """
    Split a configured command into executable and arguments

    Args:
        command: Command string, or the bare executable when ``args`` is set
        args: Explicit arguments

    Returns:
        Tuple of (executable, arguments)
    """
    if args:
        executable, arguments = command, list(args)
    else:
        parts = shlex.split(command)
        executable, arguments = parts[0], parts[1:]

    if executable in SCRIPT_RUNNERS and arguments and arguments[0] != "run":
        arguments = ["run"] + arguments
    return executable, arguments


class CustomAdapter(DeployAdapter):
    """Run a user supplied deploy command"""

    platform = DeployPlatform.CUSTOM.value
    display_name = "Custom command"
    icon = "⚙️"
    description = "Deploy with a command of your own"

    async def _do_deploy(self, config: CustomDeployConfig) -> DeployResult:
        dist_dir = self.resolve_dist_dir(config)
        self.validate_dist_dir(dist_dir)

        self.log(DeployLogLevel.INFO, "Preparing custom deploy command...", DeployPhase.PREPARE)
        self.update_progress(DeployPhase.PREPARE, 45, 0, "Preparing deploy command...")

        cwd = Path(config.cwd).expanduser() if config.cwd else Path.cwd()
        if not cwd.is_absolute():
            cwd = Path.cwd() / cwd

        executable, arguments = parse_command(config.command, config.args)
        self.log(DeployLogLevel.INFO, f"Running: {redact_args([executable] + arguments)}", DeployPhase.UPLOAD)
        self.log(DeployLogLevel.INFO, f"Working directory: {cwd}", DeployPhase.UPLOAD)
        self.update_progress(DeployPhase.UPLOAD, 50, 0, "Running deploy command...")

        has_output = False

        def on_stdout(line: str) -> None:
            nonlocal has_output
            has_output = True
            self.log(DeployLogLevel.INFO, line, DeployPhase.UPLOAD)

            match = PERCENT_PATTERN.search(line)
            if match:
                percent = min(int(match.group(1)), 100)
                self.update_progress(DeployPhase.UPLOAD, 50 + percent * 0.4, percent, line[:100])

        def on_stderr(line: str) -> None:
            level = DeployLogLevel.ERROR if "error" in line.lower() else DeployLogLevel.WARN
            self.log(level, line, DeployPhase.UPLOAD)

        result = await self.exec_command(
            executable, arguments,
            cwd=cwd,
            env={k: str(v) for k, v in config.env.items()},
            on_stdout=on_stdout,
            on_stderr=on_stderr,
            cancellable=False,
        )

        if not result.ok:
            return self.create_failed_result(
                f"Deploy command exited with code {result.code}",
                result.stderr or result.stdout,
            )

        self.update_progress(DeployPhase.PROCESS, 95, 100, "Deploy command finished")

        # The last URL printed is usually the deployed address
        urls = URL_PATTERN.findall(result.stdout)
        return self.create_success_result(
            urls[-1] if urls else None,
            platform_info={
                "command": config.command,
                "has_output": has_output,
            },
        )
